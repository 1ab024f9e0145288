"""Photo data models."""

from dataclasses import dataclass, field
from typing import List, Optional


# Accepted image mime types and the Converse API format name for each
IMAGE_FORMATS = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class Annotation:
    """
    A user-placed marker on a photo.

    Attributes:
        x: Horizontal position of the marker
        y: Vertical position of the marker
        label: Optional short description of the marked area
    """
    x: float
    y: float
    label: Optional[str] = None


@dataclass
class Photo:
    """
    A decoded photo ready to be attached to a model request.

    Photos live only for the duration of the call that created them and are
    never written to disk or logged.

    Attributes:
        data: Decoded image bytes
        mime_type: One of the accepted image mime types
        annotations: Markers placed by the user, in order
    """
    data: bytes
    mime_type: str
    annotations: List[Annotation] = field(default_factory=list)

    @property
    def format(self) -> str:
        return IMAGE_FORMATS[self.mime_type]
