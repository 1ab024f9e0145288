"""Free-text input sanitization."""

import re

MAX_INPUT_CHARS = 10000

_SCRIPT_PATTERN = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
_TAG_PATTERN = re.compile(r'<[^>]+>')


def sanitize_input(text: str, max_chars: int = MAX_INPUT_CHARS) -> str:
    """
    Strip HTML from user text and cap its length.

    Script elements are removed with their content, remaining tags are
    removed, and the result is trimmed and truncated to max_chars.

    Args:
        text: Raw user text
        max_chars: Maximum length of the result

    Returns:
        Sanitized text ("" for non-string input)
    """
    if not isinstance(text, str):
        return ""

    cleaned = _SCRIPT_PATTERN.sub('', text)
    cleaned = _TAG_PATTERN.sub('', cleaned)
    return cleaned.strip()[:max_chars]
