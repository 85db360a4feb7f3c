"""Plain-text narration of a parsed message for text-to-speech."""

import re
from collections.abc import Iterable

from .models import Segment, TextSegment

# Applied in order; later rules assume earlier ones already ran.
_SPEECH_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```"), " "),
    (re.compile(r"`"), ""),
    (re.compile(r"!\[(.*?)\]\((.*?)\)"), r"\1"),
    (re.compile(r"\[(.*?)\]\((.*?)\)"), r"\1"),
    (re.compile(r"\*\*"), ""),
    (re.compile(r"__"), ""),
    (re.compile(r"\*"), ""),
    (re.compile(r"_"), ""),
    (re.compile(r"~"), ""),
    (re.compile(r"^[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^>\s?", re.MULTILINE), ""),
]

_ENTITIES = [
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
]

_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]{2,}")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def sanitize_for_speech(text: str) -> str:
    """Strip markdown syntax so the text reads naturally when spoken."""
    if not text:
        return ""
    for pattern, replacement in _SPEECH_RULES:
        text = pattern.sub(replacement, text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def build_speech_text(segments: Iterable[Segment], fallback: str) -> str:
    """Join the sanitized text segments with blank lines.

    Reasoning and tool-call segments are not narrated. When no text is left
    (e.g. a message made only of tool calls) the fallback string is
    sanitized instead.
    """
    parts = []
    for segment in segments:
        if not isinstance(segment, TextSegment):
            continue
        sanitized = sanitize_for_speech(segment.text)
        if sanitized:
            parts.append(sanitized)

    result = "\n\n".join(parts).strip()
    if not result:
        return sanitize_for_speech(fallback)
    return result
