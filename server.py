"""FastAPI transport for the Home Repair Diagnosis tool server."""

from __future__ import annotations

import base64
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from homefix import __version__
from homefix.bootstrap import Application, build_application
from homefix.utils.errors import (
    ErrorType,
    HomeRepairError,
    UnsupportedMediaType,
    ValidationError,
)
from homefix.utils.photo_input import ALLOWED_MIME_TYPES

logger = logging.getLogger(__name__)

APP_TITLE = "Home Repair Diagnosis"
APP_DESCRIPTION = "AI-powered home repair diagnosis with structured UI components"

STATUS_CODES = {
    ErrorType.VALIDATION_FAILED: 400,
    ErrorType.MALFORMED_INPUT: 400,
    ErrorType.UNSUPPORTED_MEDIA_TYPE: 415,
    ErrorType.UPSTREAM_RATE_LIMIT: 502,
    ErrorType.UPSTREAM_TIMEOUT: 502,
    ErrorType.UPSTREAM_AUTH_ERROR: 502,
    ErrorType.UPSTREAM_MODEL_ERROR: 502,
    ErrorType.UPSTREAM_INVALID_REQUEST: 502,
    ErrorType.UPSTREAM_SERVICE_ERROR: 502,
    ErrorType.UPSTREAM_UNREACHABLE: 502,
    ErrorType.UPSTREAM_PARSE_FAILED: 502,
    ErrorType.CONFIRMATION_REQUIRED: 409,
    ErrorType.RESOURCE_NOT_FOUND: 404,
    ErrorType.CONFIG_MISSING: 500,
    ErrorType.CONFIG_INVALID: 500,
}


def _error_payload(error: HomeRepairError) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": error.error_type.value,
        "message": error.context.message,
    }
    if isinstance(error, ValidationError):
        payload["errors"] = (error.context.details or {}).get("errors", [])
    return payload


async def _read_photo(file: UploadFile, index: int, max_bytes: int) -> Dict[str, str]:
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedMediaType.for_mime_type(content_type or "unknown", ALLOWED_MIME_TYPES, index=index)

    data = await file.read()
    if not data:
        raise ValidationError.invalid(f"{file.filename or 'upload'} is empty.")
    if len(data) > max_bytes:
        raise ValidationError.invalid(
            f"{file.filename or 'upload'} exceeds the per-file limit of {max_bytes // (1024 * 1024)} MB."
        )

    return {"data": base64.b64encode(data).decode("ascii"), "mimeType": content_type}


def create_app(application: Optional[Application] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        application: Pre-built components; built from configuration if omitted

    Returns:
        FastAPI app exposing the tool surface over HTTP
    """
    application = application or build_application()
    app = FastAPI(title=APP_TITLE, version=__version__, description=APP_DESCRIPTION)
    app.state.application = application

    @app.exception_handler(HomeRepairError)
    async def handle_tool_error(request: Request, error: HomeRepairError) -> JSONResponse:
        status_code = STATUS_CODES.get(error.error_type, 500)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {str(error)}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {str(error)}")
        return JSONResponse(status_code=status_code, content=_error_payload(error))

    @app.get("/health")
    async def healthcheck() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "model": application.bedrock_client.describe(),
        }

    @app.get("/mcp/manifest")
    async def manifest() -> Dict[str, Any]:
        return {
            "name": APP_TITLE,
            "version": __version__,
            "description": APP_DESCRIPTION,
            "tools": application.tools.manifest(),
        }

    @app.get("/mcp/resources")
    async def list_resources() -> Dict[str, Any]:
        return {"resources": application.resources.manifest()}

    @app.get("/mcp/resources/{key}")
    async def read_resource(key: str) -> Dict[str, Any]:
        return {"contents": [application.resources.read(key)]}

    @app.post("/mcp/tools/{name}")
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)) -> Dict[str, Any]:
        return await application.tools.call(name, arguments or {})

    @app.post("/api/analyze")
    async def analyze_upload(
        description: str = Form(...),
        photos: List[UploadFile] = File(...),
    ) -> Dict[str, Any]:
        limits = application.config.limits
        if len(photos) > limits.max_photos:
            raise ValidationError.invalid(f"Too many photos. Max {limits.max_photos} allowed.")

        max_bytes = limits.max_upload_mb * 1024 * 1024
        payloads = [await _read_photo(file, index, max_bytes) for index, file in enumerate(photos)]

        return await application.tools.call(
            "analyze_issue",
            {"description": description, "photos": payloads}
        )

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )
