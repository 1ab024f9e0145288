"""UI widget resources rendered by the host application."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Dict, Optional

from .utils.config import ResourcesConfig
from .utils.errors import ResourceNotFound

logger = logging.getLogger(__name__)

RESOURCE_MIME_TYPE = "text/html+skybridge"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    {styles}
  </head>
  <body>
    <div id="{root_id}"></div>
    <script type="module">{script}</script>
  </body>
</html>"""


@dataclass(frozen=True)
class UIResource:
    """
    A widget template the host renders a tool result with.

    Attributes:
        key: Short name ("diagnosis", "steps")
        uri: Opaque resource identifier handed to the host
        bundle: Compiled widget script inside the client dist directory
        root_id: DOM element the widget mounts into
    """
    key: str
    uri: str
    bundle: str
    root_id: str


class ResourceRegistry:
    """Serves the widget HTML shells for the diagnosis and steps views."""

    def __init__(self, config: ResourcesConfig):
        """
        Initialize resource registry.

        Args:
            config: Resource URIs and client dist directory
        """
        self.dist_dir = Path(config.client_dist_dir)
        self.resources: Dict[str, UIResource] = {
            "diagnosis": UIResource("diagnosis", config.diagnosis_uri, "diagnosis-widget.js", "diagnosis-root"),
            "steps": UIResource("steps", config.steps_uri, "steps-widget.js", "steps-root"),
        }
        logger.info(f"Initialized ResourceRegistry: dist_dir={self.dist_dir}")

    def uri_for(self, key: str) -> str:
        return self._get(key).uri

    def manifest(self) -> List[Dict[str, str]]:
        return [
            {"key": resource.key, "uri": resource.uri, "mimeType": RESOURCE_MIME_TYPE}
            for resource in self.resources.values()
        ]

    def read(self, key_or_uri: str) -> Dict[str, str]:
        """
        Render a widget's HTML shell.

        Args:
            key_or_uri: Resource key or its URI

        Returns:
            Dictionary with uri, mimeType and text

        Raises:
            ResourceNotFound: If the resource is unknown or its bundle is not built
        """
        resource = self._get(key_or_uri)
        bundle_path = self.dist_dir / resource.bundle

        if not bundle_path.is_file():
            raise ResourceNotFound.missing_bundle(str(bundle_path))

        styles = self._load_styles()
        text = HTML_TEMPLATE.format(
            styles=f"<style>{styles}</style>" if styles else "",
            root_id=resource.root_id,
            script=bundle_path.read_text(encoding="utf-8")
        )
        return {"uri": resource.uri, "mimeType": RESOURCE_MIME_TYPE, "text": text}

    def _get(self, key_or_uri: str) -> UIResource:
        resource: Optional[UIResource] = self.resources.get(key_or_uri)
        if resource is None:
            resource = next((r for r in self.resources.values() if r.uri == key_or_uri), None)
        if resource is None:
            raise ResourceNotFound.unknown(key_or_uri)
        return resource

    def _load_styles(self) -> str:
        styles_path = self.dist_dir / "styles.css"
        if styles_path.is_file():
            return styles_path.read_text(encoding="utf-8")
        return ""
