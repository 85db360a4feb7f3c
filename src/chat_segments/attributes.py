"""Decoding of `<details>` tag attribute values."""

import html
import json
import logging
import math
from typing import Any

logger = logging.getLogger("chat_segments")


def unescape_attribute(value: str) -> str:
    """Decode HTML entities in an attribute value (&quot;, &#39;, &lt;, ...)."""
    return html.unescape(value)


def decode_attribute(value: str | None) -> Any:
    """Decode an attribute as JSON, falling back to the unescaped string.

    Returns None for missing or empty values.
    """
    if not value:
        return None
    unescaped = unescape_attribute(value)
    try:
        return json.loads(unescaped)
    except (ValueError, RecursionError):
        logger.debug("Attribute is not JSON, keeping raw string: %.60r", unescaped)
        return unescaped


def decode_files(value: str | None) -> list[Any] | None:
    """Decode a `files` attribute; anything other than a JSON array is dropped."""
    decoded = decode_attribute(value)
    return decoded if isinstance(decoded, list) else None


def parse_bool(value: str | None) -> bool:
    return value == "true"


def parse_duration(value: str | None) -> int:
    """Parse a duration in seconds. Missing, non-numeric or negative -> 0."""
    if not value:
        return 0
    try:
        seconds = float(value.strip())
    except ValueError:
        return 0
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return 0
    return int(seconds)
