"""chat-segments: split streaming chat messages into renderable segments."""

from .cache import SegmentCache
from .models import (
    ParsedMessage,
    ParserConfig,
    ReasoningEntry,
    ReasoningSegment,
    Segment,
    SegmentKind,
    TextSegment,
    ToolCallEntry,
    ToolCallSegment,
)
from .parser import parse_message, parse_segments
from .renderer import render_json, render_summary
from .speech import build_speech_text, sanitize_for_speech

__all__ = [
    "ParsedMessage",
    "ParserConfig",
    "ReasoningEntry",
    "ReasoningSegment",
    "Segment",
    "SegmentCache",
    "SegmentKind",
    "TextSegment",
    "ToolCallEntry",
    "ToolCallSegment",
    "build_speech_text",
    "parse_message",
    "parse_segments",
    "render_json",
    "render_summary",
    "sanitize_for_speech",
]
