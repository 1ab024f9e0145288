"""JSON extraction from model replies."""

import json
import logging
import re
from typing import Dict, Any, Optional

from .errors import UpstreamParseError

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """
    Utility class for pulling JSON objects out of model replies.

    Models asked for "ONLY the JSON object" still wrap it in markdown fences
    or a sentence of preamble now and then, so several extraction methods are
    tried before the reply is rejected.
    """

    FENCE_PATTERNS = (
        r'```json\s*\n?(.*?)\n?```',
        r'```\s*\n?(.*?)\n?```'
    )

    @staticmethod
    def extract_json_from_response(response_text: str) -> Optional[Any]:
        """
        Extract JSON from various response formats.

        Tries multiple extraction methods in order:
        1. Markdown code blocks (```json ... ```)
        2. Raw JSON (entire response)
        3. JSON embedded in text (first balanced {...} object)

        Args:
            response_text: Raw response text that may contain JSON

        Returns:
            Parsed JSON value, or None if no valid JSON found
        """
        if not response_text or not response_text.strip():
            logger.warning("Empty response text provided")
            return None

        text = response_text.strip()

        json_data = ResponseFormatter._extract_markdown_json(text)
        if json_data is not None:
            logger.debug("Extracted JSON from markdown code block")
            return json_data

        json_data = ResponseFormatter._extract_raw_json(text)
        if json_data is not None:
            logger.debug("Extracted raw JSON")
            return json_data

        json_data = ResponseFormatter._extract_embedded_json(text)
        if json_data is not None:
            logger.debug("Extracted embedded JSON")
            return json_data

        logger.warning(f"Failed to extract JSON from response: {text[:200]}...")
        return None

    @staticmethod
    def parse_json_object(response_text: str, operation: str) -> Dict[str, Any]:
        """
        Extract a JSON object from a reply that must contain one.

        Args:
            response_text: Raw model reply
            operation: Calling operation, used in the error message

        Returns:
            Parsed JSON object

        Raises:
            UpstreamParseError: If no JSON object can be extracted
        """
        data = ResponseFormatter.extract_json_from_response(response_text)

        if data is None:
            raise UpstreamParseError.invalid_reply(
                operation=operation,
                reason="reply is not valid JSON",
                reply_preview=response_text or ""
            )
        if not isinstance(data, dict):
            raise UpstreamParseError.invalid_reply(
                operation=operation,
                reason=f"expected a JSON object, got {type(data).__name__}",
                reply_preview=response_text
            )

        return data

    @staticmethod
    def _extract_markdown_json(text: str) -> Optional[Any]:
        for pattern in ResponseFormatter.FENCE_PATTERNS:
            match = re.search(pattern, text, re.DOTALL)
            if match:
                try:
                    return json.loads(match.group(1).strip())
                except json.JSONDecodeError:
                    continue
        return None

    @staticmethod
    def _extract_raw_json(text: str) -> Optional[Any]:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return None

    @staticmethod
    def _extract_embedded_json(text: str) -> Optional[Dict[str, Any]]:
        """
        Find and extract a JSON object embedded in text using brace counting.

        Args:
            text: Response text

        Returns:
            Parsed JSON dict or None
        """
        start_idx = text.find('{')

        while start_idx != -1:
            brace_count = 0
            in_string = False
            escape_next = False
            end_idx = -1

            for i in range(start_idx, len(text)):
                char = text[i]

                if escape_next:
                    escape_next = False
                    continue
                if char == '\\' and in_string:
                    escape_next = True
                    continue
                if char == '"':
                    in_string = not in_string
                    continue

                if not in_string:
                    if char == '{':
                        brace_count += 1
                    elif char == '}':
                        brace_count -= 1
                        if brace_count == 0:
                            end_idx = i
                            break

            if end_idx == -1:
                return None

            try:
                return json.loads(text[start_idx:end_idx + 1])
            except json.JSONDecodeError:
                # Try the next object
                start_idx = text.find('{', end_idx + 1)

        return None
