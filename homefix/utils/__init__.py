"""Utility modules for configuration, logging, and AWS integration."""

from .response_formatter import ResponseFormatter
from .validation import sanitize_input
from .photo_input import normalize_photos

__all__ = [
    'ResponseFormatter',
    'sanitize_input',
    'normalize_photos'
]
