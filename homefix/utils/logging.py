"""Structured logging setup for the home repair tool server."""

import logging
from contextvars import ContextVar
from typing import Optional, Dict, Any
from pathlib import Path


_DEFAULT_CONTEXT: Dict[str, Any] = {"tool": "-"}
_log_context: ContextVar[Dict[str, Any]] = ContextVar("homefix_log_context", default=_DEFAULT_CONTEXT)

# Keys whose values never reach a log line
SENSITIVE_KEYS = ('photos', 'photo', 'after_photos', 'image', 'buffer', 'email', 'phone', 'address', 'zip')


class ContextFilter(logging.Filter):
    """Add per-call context information to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context fields to log record."""
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


# Global context filter instance
_context_filter = ContextFilter()


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up structured logging with optional file output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string for log messages
        log_file: Optional path to log file

    Returns:
        Configured root logger
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_context_filter)
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_context_filter)
        root_logger.addHandler(file_handler)

    return root_logger


def set_context(**kwargs):
    """
    Set context fields for all subsequent log messages in the current task.

    Example:
        set_context(tool="analyze_issue")
        logger.info("Starting issue analysis")  # record carries tool=analyze_issue

    Args:
        **kwargs: Context key-value pairs
    """
    context = dict(_log_context.get())
    context.update(kwargs)
    _log_context.set(context)


def clear_context():
    """Reset context fields to their defaults."""
    _log_context.set(_DEFAULT_CONTEXT)


def redact_sensitive(meta: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of meta with personal data and photo payloads masked.

    Lists are replaced by their length so photo counts stay visible.
    """
    redacted = dict(meta)

    for key in SENSITIVE_KEYS:
        if key in redacted and redacted[key] is not None:
            if isinstance(redacted[key], (list, tuple)):
                redacted[key] = f"[REDACTED: {len(redacted[key])} items]"
            else:
                redacted[key] = "[REDACTED]"

    return redacted


def mask_zip(zip_code: str) -> str:
    """Keep only the last two digits of a ZIP code."""
    return "***" + (zip_code or "")[-2:]
