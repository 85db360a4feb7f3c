"""Domain models for chat-segments."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

THINKING_PLACEHOLDER = "Thinking…"
TYPING_INDICATOR = "[TYPING_INDICATOR]"
SEARCH_BANNER = "🔍 Searching the web..."

DEFAULT_REASONING_TAG_PAIRS: tuple[tuple[str, str], ...] = (
    ("<think>", "</think>"),
    ("<reasoning>", "</reasoning>"),
)


class SegmentKind(str, Enum):
    """Kinds of renderable message segments."""

    TEXT = "text"
    REASONING = "reasoning"
    TOOL_CALL = "tool_call"


def format_duration(seconds: int) -> str:
    """Format a reasoning duration for display."""
    if seconds <= 0:
        return "instant"
    if seconds < 60:
        return f"{seconds} second{'' if seconds == 1 else 's'}"

    minutes, remaining = divmod(seconds, 60)
    if remaining == 0:
        return f"{minutes} minute{'' if minutes == 1 else 's'}"
    return f"{minutes} min {remaining}s"


class ReasoningEntry(BaseModel):
    """One completed reasoning block."""

    model_config = ConfigDict(frozen=True)

    summary: str = THINKING_PLACEHOLDER
    duration_seconds: int = 0
    cleaned_reasoning: str = ""
    done: bool = True

    @property
    def has_custom_summary(self) -> bool:
        return self.summary != THINKING_PLACEHOLDER

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration_seconds)


class ToolCallEntry(BaseModel):
    """One completed tool-call block."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = "tool"
    done: bool = False
    arguments: Any = None  # decoded JSON, or the raw string when it doesn't parse
    result: Any = None  # same as arguments
    files: list[Any] | None = None


class TextSegment(BaseModel):
    """A run of markdown prose."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SegmentKind.TEXT] = SegmentKind.TEXT
    text: str
    start: int = 0  # offsets into the normalized content
    end: int = 0


class ReasoningSegment(BaseModel):
    """A reasoning tile."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SegmentKind.REASONING] = SegmentKind.REASONING
    entry: ReasoningEntry
    start: int = 0
    end: int = 0


class ToolCallSegment(BaseModel):
    """A tool-call tile."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SegmentKind.TOOL_CALL] = SegmentKind.TOOL_CALL
    entry: ToolCallEntry
    start: int = 0
    end: int = 0


Segment = Annotated[
    Union[TextSegment, ReasoningSegment, ToolCallSegment],
    Field(discriminator="kind"),
]


class ParserConfig(BaseModel):
    """Knobs for the segment parser.

    The defaults match what the chat server emits; most callers never need
    to build one.
    """

    model_config = ConfigDict(frozen=True)

    typing_indicator: str = TYPING_INDICATOR
    search_banner: str = SEARCH_BANNER
    strip_sentinels: bool = True
    # Bare tag pairs (e.g. <think>...</think>) treated as reasoning blocks in
    # outer text. Empty disables detection.
    raw_reasoning_tags: tuple[tuple[str, str], ...] = ()
    lenient_tool_calls: bool = True


class ParsedMessage(BaseModel):
    """Result of parsing one message's current content."""

    model_config = ConfigDict(frozen=True)

    content: str  # content after sentinel stripping
    segments: list[Segment]
    speech_text: str = ""
    truncated_at: int | None = None  # start of a trailing incomplete block

    @property
    def text(self) -> str:
        """Concatenated text segments."""
        return "".join(s.text for s in self.segments if isinstance(s, TextSegment))

    @property
    def tool_calls(self) -> list[ToolCallEntry]:
        return [s.entry for s in self.segments if isinstance(s, ToolCallSegment)]

    @property
    def reasoning(self) -> list[ReasoningEntry]:
        return [s.entry for s in self.segments if isinstance(s, ReasoningSegment)]
