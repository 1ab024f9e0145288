"""Photo payload decoding and validation."""

import base64
import binascii
import logging
import re
from typing import List, Dict, Any, Optional, Sequence, Union

from ..models.photo import Annotation, Photo, IMAGE_FORMATS
from .errors import MalformedInput, UnsupportedMediaType, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = list(IMAGE_FORMATS)
DEFAULT_MIME_TYPE = "image/jpeg"

# Recognizable formats the vision model does not accept
UNSUPPORTED_SIGNATURES = (
    (b"GIF8", "image/gif"),
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"%PDF", "application/pdf"),
)

PhotoInput = Union[str, Dict[str, Any]]


def normalize_photos(photos: Sequence[PhotoInput], max_photos: int = 5) -> List[Photo]:
    """
    Decode 1..max_photos photo inputs into Photo objects.

    Each input is either a string (bare base64 or a data URI) or a mapping
    with "data", optional "mimeType" and optional "annotations".

    Args:
        photos: Photo inputs in request order
        max_photos: Maximum number of photos accepted

    Returns:
        Decoded photos, in the same order

    Raises:
        ValidationError: If the photo count is out of range
        MalformedInput: If a payload cannot be taken apart or decoded
        UnsupportedMediaType: If a resolved mime type is not an accepted image type
    """
    if not photos or len(photos) > max_photos:
        raise ValidationError.invalid(
            f"Between 1 and {max_photos} photos are required, got {len(photos or [])}",
            errors=[{"field": "photos", "message": "photo count out of range"}]
        )

    normalized = [normalize_photo(photo, index) for index, photo in enumerate(photos)]
    logger.debug(f"Normalized {len(normalized)} photo(s)")
    return normalized


def normalize_photo(photo: PhotoInput, index: int = 0) -> Photo:
    """
    Decode a single photo input.

    A data URI's declared mime type wins over an explicit mimeType; a bare
    base64 string without one is identified from its magic bytes.

    Args:
        photo: String or mapping photo input
        index: Position of the photo in the request, for error messages

    Returns:
        Decoded Photo
    """
    if isinstance(photo, str):
        data, declared_mime, annotations = photo, None, []
    elif isinstance(photo, dict):
        data = photo.get("data")
        if not isinstance(data, str):
            raise MalformedInput.photo(index, "missing string 'data' field")
        declared_mime = photo.get("mimeType")
        annotations = _parse_annotations(photo.get("annotations") or [], index)
    else:
        raise MalformedInput.photo(index, f"unsupported payload type {type(photo).__name__}")

    if data.startswith("data:"):
        header, separator, payload = data.partition(",")
        if not separator or not payload:
            raise MalformedInput.photo(index, "data URI has no payload")
        declared_mime = header[len("data:"):].split(";")[0] or declared_mime
    else:
        payload = data

    if declared_mime:
        mime_type = _check_mime_type(declared_mime, index)
        image_bytes = _decode(payload, index)
    else:
        image_bytes = _decode(payload, index)
        mime_type = _check_mime_type(detect_mime_type(image_bytes), index)

    return Photo(data=image_bytes, mime_type=mime_type, annotations=annotations)


def detect_mime_type(image_bytes: bytes) -> str:
    """
    Detect image mime type from magic bytes.

    Args:
        image_bytes: Raw image bytes

    Returns:
        Mime type string, image/jpeg when the signature is not known at all
    """
    for signature, mime_type in UNSUPPORTED_SIGNATURES:
        if image_bytes.startswith(signature):
            return mime_type

    if image_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif image_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    elif image_bytes.startswith(b'RIFF') and image_bytes[8:12] == b'WEBP':
        return "image/webp"
    else:
        logger.debug("Unknown image signature, defaulting to image/jpeg")
        return DEFAULT_MIME_TYPE


def _check_mime_type(mime_type: str, index: int) -> str:
    resolved = mime_type.strip().lower()
    if resolved not in IMAGE_FORMATS:
        raise UnsupportedMediaType.for_mime_type(resolved, ALLOWED_MIME_TYPES, index=index)
    return resolved


def _decode(payload: str, index: int) -> bytes:
    try:
        image_bytes = base64.b64decode(re.sub(r'\s+', '', payload), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInput.photo(index, f"invalid base64 payload ({str(e)})")

    if not image_bytes:
        raise MalformedInput.photo(index, "empty image payload")
    return image_bytes


def _parse_annotations(raw: List[Any], index: int) -> List[Annotation]:
    annotations = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise MalformedInput.photo(index, "annotation must be an object")
        try:
            label: Optional[str] = entry.get("label")
            annotations.append(Annotation(x=float(entry["x"]), y=float(entry["y"]), label=label))
        except (KeyError, TypeError, ValueError):
            raise MalformedInput.photo(index, "annotation needs numeric 'x' and 'y'")
    return annotations
