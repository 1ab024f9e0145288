"""Error handling utilities for the home repair tool server."""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorType(Enum):
    """Enumeration of error types in the home repair tool server."""

    # Input Errors
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"

    # Upstream Model Errors
    UPSTREAM_RATE_LIMIT = "UPSTREAM_RATE_LIMIT"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"
    UPSTREAM_AUTH_ERROR = "UPSTREAM_AUTH_ERROR"
    UPSTREAM_MODEL_ERROR = "UPSTREAM_MODEL_ERROR"
    UPSTREAM_INVALID_REQUEST = "UPSTREAM_INVALID_REQUEST"
    UPSTREAM_SERVICE_ERROR = "UPSTREAM_SERVICE_ERROR"
    UPSTREAM_UNREACHABLE = "UPSTREAM_UNREACHABLE"
    UPSTREAM_PARSE_FAILED = "UPSTREAM_PARSE_FAILED"

    # Tool Flow
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"


@dataclass
class ErrorContext:
    """
    Context information for errors raised by tools and their collaborators.

    Attributes:
        error_type: Type of error from ErrorType enum
        message: Human-readable error message
        recoverable: Whether the caller can act on the error and try again
        details: Optional additional error details
        original_exception: Optional original exception that caused this error
    """

    error_type: ErrorType
    message: str
    recoverable: bool
    details: Optional[Dict[str, Any]] = None
    original_exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary for logging/serialization.

        Returns:
            Dictionary representation of error context
        """
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details or {},
            "original_exception": str(self.original_exception) if self.original_exception else None
        }


class HomeRepairError(Exception):
    """
    Base exception for all tool server errors.

    Every error surfaces to the tool caller with a human-readable message;
    the attached ErrorContext carries the machine-readable type and details.

    Attributes:
        context: ErrorContext with detailed error information
    """

    def __init__(self, context: ErrorContext):
        """
        Initialize tool server error.

        Args:
            context: ErrorContext with error details
        """
        self.context = context
        super().__init__(context.message)

    def __str__(self) -> str:
        """String representation of the error."""
        return f"{self.context.error_type.value}: {self.context.message}"

    @property
    def error_type(self) -> ErrorType:
        return self.context.error_type

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of error
        """
        return self.context.to_dict()


class ValidationError(HomeRepairError):
    """Malformed or out-of-range tool input. Rejected synchronously."""

    @classmethod
    def invalid(
        cls,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None
    ) -> "ValidationError":
        """
        Create a validation error.

        Args:
            message: Summary of what was rejected
            errors: Optional per-field error entries

        Returns:
            ValidationError instance
        """
        context = ErrorContext(
            error_type=ErrorType.VALIDATION_FAILED,
            message=message,
            recoverable=True,
            details={"errors": errors or []}
        )
        return cls(context)


class MalformedInput(ValidationError):
    """Photo payload that cannot be taken apart (bad data URI, missing data field)."""

    @classmethod
    def photo(cls, index: int, reason: str) -> "MalformedInput":
        context = ErrorContext(
            error_type=ErrorType.MALFORMED_INPUT,
            message=f"Photo {index + 1} is malformed: {reason}",
            recoverable=True,
            details={"photo_index": index}
        )
        return cls(context)


class UnsupportedMediaType(HomeRepairError):
    """Photo whose resolved mime type is not an accepted image type."""

    @classmethod
    def for_mime_type(
        cls,
        mime_type: str,
        allowed: List[str],
        index: Optional[int] = None
    ) -> "UnsupportedMediaType":
        """
        Create error for a rejected mime type.

        Args:
            mime_type: The resolved mime type
            allowed: Accepted mime types
            index: Optional position of the photo in the request

        Returns:
            UnsupportedMediaType instance
        """
        where = f"Photo {index + 1}" if index is not None else "Upload"
        context = ErrorContext(
            error_type=ErrorType.UNSUPPORTED_MEDIA_TYPE,
            message=(
                f"{where} has unsupported type '{mime_type}'. "
                f"Allowed types: {', '.join(allowed)}"
            ),
            recoverable=True,
            details={"mime_type": mime_type, "photo_index": index}
        )
        return cls(context)


class UpstreamCallError(HomeRepairError):
    """Exception for failed calls to the external vision-language model."""

    @classmethod
    def from_client_error(
        cls,
        error: Exception,
        operation: str
    ) -> "UpstreamCallError":
        """
        Create UpstreamCallError from boto3 ClientError.

        Args:
            error: Original boto3 ClientError
            operation: Description of operation that failed

        Returns:
            UpstreamCallError instance
        """
        # Extract error details from boto3 ClientError
        error_code = "Unknown"
        error_message = str(error)

        if hasattr(error, 'response'):
            error_info = error.response.get("Error", {})
            error_code = error_info.get("Code", "Unknown")
            error_message = error_info.get("Message", str(error))

        # Map error codes to error types
        error_type_map = {
            "ThrottlingException": ErrorType.UPSTREAM_RATE_LIMIT,
            "TooManyRequestsException": ErrorType.UPSTREAM_RATE_LIMIT,
            "ServiceQuotaExceededException": ErrorType.UPSTREAM_RATE_LIMIT,
            "RequestTimeout": ErrorType.UPSTREAM_TIMEOUT,
            "RequestTimeoutException": ErrorType.UPSTREAM_TIMEOUT,
            "ModelTimeoutException": ErrorType.UPSTREAM_TIMEOUT,
            "UnauthorizedException": ErrorType.UPSTREAM_AUTH_ERROR,
            "AccessDeniedException": ErrorType.UPSTREAM_AUTH_ERROR,
            "UnrecognizedClientException": ErrorType.UPSTREAM_AUTH_ERROR,
            "ValidationException": ErrorType.UPSTREAM_INVALID_REQUEST,
            "ModelNotReadyException": ErrorType.UPSTREAM_MODEL_ERROR,
            "ModelErrorException": ErrorType.UPSTREAM_MODEL_ERROR,
            "ServiceUnavailableException": ErrorType.UPSTREAM_SERVICE_ERROR,
            "InternalServerException": ErrorType.UPSTREAM_SERVICE_ERROR,
        }

        error_type = error_type_map.get(error_code, ErrorType.UPSTREAM_SERVICE_ERROR)

        context = ErrorContext(
            error_type=error_type,
            message=f"Vision model error during {operation}: {error_message}",
            recoverable=False,
            details={
                "error_code": error_code,
                "operation": operation
            },
            original_exception=error
        )

        return cls(context)

    @classmethod
    def unreachable(cls, error: Exception, operation: str) -> "UpstreamCallError":
        """Create error for transport-level failures (connection, read timeout, credentials)."""
        context = ErrorContext(
            error_type=ErrorType.UPSTREAM_UNREACHABLE,
            message=f"Vision model unreachable during {operation}: {str(error)}",
            recoverable=False,
            details={"operation": operation},
            original_exception=error
        )
        return cls(context)


class UpstreamParseError(HomeRepairError):
    """The model replied, but not with the structure the tool requires."""

    @classmethod
    def invalid_reply(
        cls,
        operation: str,
        reason: str,
        reply_preview: str = ""
    ) -> "UpstreamParseError":
        """
        Create error for an unparseable or mis-shaped model reply.

        Args:
            operation: Operation whose reply was rejected
            reason: What was wrong with the reply
            reply_preview: First characters of the reply, for logs

        Returns:
            UpstreamParseError instance
        """
        context = ErrorContext(
            error_type=ErrorType.UPSTREAM_PARSE_FAILED,
            message=f"Vision model returned an invalid reply for {operation}: {reason}",
            recoverable=False,
            details={"operation": operation, "reply_preview": reply_preview[:200]}
        )
        return cls(context)


class ConfirmationRequired(HomeRepairError):
    """
    Soft rejection: the user has not confirmed contractor outreach.

    The dispatcher converts this into a structured tool result carrying
    confirmation_needed=True instead of failing the call.
    """

    @classmethod
    def for_quotes(cls) -> "ConfirmationRequired":
        context = ErrorContext(
            error_type=ErrorType.CONFIRMATION_REQUIRED,
            message="You must confirm before we contact contractors on your behalf.",
            recoverable=True,
            details={"confirmation_needed": True}
        )
        return cls(context)

    def to_result(self) -> Dict[str, Any]:
        """Structured payload returned to the tool caller."""
        return {
            "success": False,
            "error": "User confirmation required",
            "message": self.context.message,
            "confirmation_needed": True
        }


class ConfigError(HomeRepairError):
    """Exception for missing or invalid configuration."""

    @classmethod
    def missing(cls, path: str) -> "ConfigError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_MISSING,
            message=f"Configuration file not found at '{path}'",
            recoverable=False,
            details={"path": path}
        )
        return cls(context)

    @classmethod
    def invalid(cls, key: str, error: Exception) -> "ConfigError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_INVALID,
            message=f"Invalid configuration value for '{key}': {str(error)}",
            recoverable=False,
            details={"key": key},
            original_exception=error
        )
        return cls(context)


class ResourceNotFound(HomeRepairError):
    """Exception for unknown UI resources or missing widget bundles."""

    @classmethod
    def missing_bundle(cls, bundle_path: str) -> "ResourceNotFound":
        context = ErrorContext(
            error_type=ErrorType.RESOURCE_NOT_FOUND,
            message=(
                f"Missing UI bundle: {bundle_path}. "
                f"Build the client widgets before serving resources."
            ),
            recoverable=False,
            details={"bundle_path": bundle_path}
        )
        return cls(context)

    @classmethod
    def unknown(cls, key: str) -> "ResourceNotFound":
        context = ErrorContext(
            error_type=ErrorType.RESOURCE_NOT_FOUND,
            message=f"Unknown UI resource '{key}'",
            recoverable=False,
            details={"key": key}
        )
        return cls(context)

    @classmethod
    def unknown_tool(cls, name: str) -> "ResourceNotFound":
        context = ErrorContext(
            error_type=ErrorType.RESOURCE_NOT_FOUND,
            message=f"Unknown tool '{name}'",
            recoverable=False,
            details={"tool": name}
        )
        return cls(context)
