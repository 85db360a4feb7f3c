"""Split chat message content into ordered text, reasoning and tool-call segments.

The server embeds structured content in the message body as `<details>`
blocks:

    <details type="reasoning" summary="..." duration="3">...</details>
    <details type="tool_calls" id="..." name="..." done="true"
             arguments="..." result="..." files="..."></details>

Parsing is a pure function of the full current content. While a message is
streaming the content is re-parsed after every delta; a block only becomes a
segment once its closing tag has arrived, and everything from an unfinished
block onwards is held back.
"""

import logging
import re
from collections.abc import Callable

from .attributes import (
    decode_attribute,
    decode_files,
    parse_bool,
    parse_duration,
    unescape_attribute,
)
from .models import (
    THINKING_PLACEHOLDER,
    ParsedMessage,
    ParserConfig,
    ReasoningEntry,
    ReasoningSegment,
    Segment,
    TextSegment,
    ToolCallEntry,
    ToolCallSegment,
)
from .scanner import DetailsBlock, has_tool_call_marker, scan_blocks
from .speech import build_speech_text

logger = logging.getLogger("chat_segments")

DEFAULT_CONFIG = ParserConfig()

_LEADING_SUMMARY_RE = re.compile(r"^\s*<summary>(.*?)</summary>", re.DOTALL)
_REASONING_TAGS_RE = re.compile(r"</?(?:think|reasoning)>")
_PLACEHOLDER_SUMMARIES = {"thinking…", "thinking..."}


def strip_sentinels(content: str, config: ParserConfig | None = None) -> str:
    """Remove the typing-indicator marker and search banner from the start."""
    config = config or DEFAULT_CONFIG
    if not config.strip_sentinels:
        return content
    if config.typing_indicator and content.startswith(config.typing_indicator):
        content = content[len(config.typing_indicator) :]
    if config.search_banner and content.startswith(config.search_banner):
        content = content[len(config.search_banner) :]
    return content


# -- reasoning ---------------------------------------------------------------


def clean_reasoning(inner: str) -> str:
    """Strip markup from a reasoning block body.

    Removes a leading <summary> element, <think>/<reasoning> tags (keeping
    their text) and the "> " quote marker the server puts on each line.
    """
    text = _LEADING_SUMMARY_RE.sub("", inner, count=1)
    text = _REASONING_TAGS_RE.sub("", text)
    lines = [line[1:].strip() if line.startswith(">") else line for line in text.split("\n")]
    return "\n".join(lines).strip()


def resolve_summary(attributes: dict[str, str], inner: str = "") -> str:
    """Summary from the `summary` attribute or a leading <summary> element."""
    summary = unescape_attribute(attributes.get("summary", "")).strip()
    if not summary:
        m = _LEADING_SUMMARY_RE.match(inner)
        if m:
            summary = m.group(1).strip()
    if not summary or summary.lower() in _PLACEHOLDER_SUMMARIES:
        return THINKING_PLACEHOLDER
    return summary


def build_reasoning_entry(block: DetailsBlock) -> ReasoningEntry:
    attrs = block.attributes
    return ReasoningEntry(
        summary=resolve_summary(attrs, block.inner),
        duration_seconds=parse_duration(attrs.get("duration")),
        cleaned_reasoning=clean_reasoning(block.inner),
        done=attrs.get("done", "true") == "true",
    )


def _reasoning_segment(block: DetailsBlock, offset: int) -> ReasoningSegment:
    return ReasoningSegment(
        entry=build_reasoning_entry(block),
        start=offset + block.start,
        end=offset + block.end,
    )


# -- tool calls --------------------------------------------------------------


def build_tool_call_entry(block: DetailsBlock, offset: int = 0) -> ToolCallEntry:
    """Build a tool call from a block's attributes.

    Args:
        block: Complete tool_calls block
        offset: Position of the scanned text within the whole message, used
            for the fallback id when the tag has none
    """
    attrs = block.attributes
    name = unescape_attribute(attrs.get("name", "")) or "tool"
    call_id = unescape_attribute(attrs.get("id", "")) or f"{name}_{offset + block.start}"
    return ToolCallEntry(
        id=call_id,
        name=name,
        done=parse_bool(attrs.get("done")),
        arguments=decode_attribute(attrs.get("arguments")),
        result=decode_attribute(attrs.get("result")),
        files=decode_files(attrs.get("files")),
    )


def _tool_call_segment(block: DetailsBlock, offset: int) -> ToolCallSegment:
    return ToolCallSegment(
        entry=build_tool_call_entry(block, offset),
        start=offset + block.start,
        end=offset + block.end,
    )


# -- passes ------------------------------------------------------------------


def _append_text(segments: list[Segment], text: str, start: int, end: int, offset: int) -> None:
    chunk = text[start:end]
    if chunk.strip():
        segments.append(TextSegment(text=chunk, start=offset + start, end=offset + end))


def _split_blocks(
    text: str,
    block_type: str,
    build: Callable[[DetailsBlock, int], Segment],
    offset: int = 0,
    lenient: bool = False,
) -> tuple[list[Segment], int | None]:
    """Split text around complete blocks of one type.

    Returns the segments and the absolute offset where an incomplete block
    cut the text short, if any.
    """
    scan = scan_blocks(text, block_type, lenient=lenient)
    limit = len(text) if scan.incomplete_at is None else scan.incomplete_at

    segments: list[Segment] = []
    pos = 0
    for block in scan.blocks:
        _append_text(segments, text, pos, block.start, offset)
        segments.append(build(block, offset))
        pos = block.end
    _append_text(segments, text, pos, limit, offset)

    if scan.incomplete_at is None:
        return segments, None
    logger.debug("Holding back incomplete <details> block at offset %d", offset + limit)
    return segments, offset + limit


def _split_raw_tags(
    text: str, offset: int, tag_pairs: tuple[tuple[str, str], ...]
) -> tuple[list[Segment], int | None]:
    """Split out bare tag pairs such as <think>...</think> as reasoning."""
    segments: list[Segment] = []
    pos = 0
    while True:
        found = []
        for open_tag, close_tag in tag_pairs:
            index = text.find(open_tag, pos) if open_tag and close_tag else -1
            if index != -1:
                found.append((index, open_tag, close_tag))
        if not found:
            break
        start, open_tag, close_tag = min(found)
        close = text.find(close_tag, start + len(open_tag))
        if close == -1:
            _append_text(segments, text, pos, start, offset)
            logger.debug("Holding back unclosed %s at offset %d", open_tag, offset + start)
            return segments, offset + start

        end = close + len(close_tag)
        _append_text(segments, text, pos, start, offset)
        inner = text[start + len(open_tag) : close]
        entry = ReasoningEntry(cleaned_reasoning=clean_reasoning(inner))
        segments.append(ReasoningSegment(entry=entry, start=offset + start, end=offset + end))
        pos = end

    _append_text(segments, text, pos, len(text), offset)
    return segments, None


def split_reasoning(
    text: str, config: ParserConfig | None = None
) -> tuple[list[Segment], int | None]:
    """Reasoning pass: reasoning segments plus the outer text between them.

    Everything from an incomplete block onwards is dropped, whatever its type.
    """
    config = config or DEFAULT_CONFIG
    segments, incomplete_at = _split_blocks(text, "reasoning", _reasoning_segment)
    if not config.raw_reasoning_tags:
        return segments, incomplete_at

    out: list[Segment] = []
    for seg in segments:
        if not isinstance(seg, TextSegment):
            out.append(seg)
            continue
        parts, cut = _split_raw_tags(seg.text, seg.start, config.raw_reasoning_tags)
        out.extend(parts)
        if cut is not None:
            return out, cut
    return out, incomplete_at


def _split_tool_calls(
    text: str, offset: int, config: ParserConfig
) -> tuple[list[Segment], int | None]:
    segments, cut = _split_blocks(text, "tool_calls", _tool_call_segment, offset)
    if any(isinstance(s, ToolCallSegment) for s in segments):
        return segments, cut
    if not (config.lenient_tool_calls and has_tool_call_marker(text)):
        return segments, cut

    logger.debug("Rescanning tool_calls markup leniently at offset %d", offset)
    recovered, recovered_cut = _split_blocks(
        text, "tool_calls", _tool_call_segment, offset, lenient=True
    )
    if recovered_cut is not None or any(isinstance(s, ToolCallSegment) for s in recovered):
        return recovered, recovered_cut
    return segments, cut


def split_tool_calls(
    text: str, offset: int = 0, config: ParserConfig | None = None
) -> list[Segment]:
    """Tool-call pass over one chunk of outer text.

    When the regular grammar finds nothing but the chunk clearly holds
    tool_calls markup (e.g. unescaped quotes in a JSON attribute), the chunk
    is rescanned with the quote-balanced grammar.
    """
    segments, _ = _split_tool_calls(text, offset, config or DEFAULT_CONFIG)
    return segments


def assemble_segments(
    text: str, config: ParserConfig | None = None
) -> tuple[list[Segment], int | None]:
    """Run both passes and flatten them into one ordered segment list.

    Returns the segments and the offset where incomplete content was cut.
    Never returns an empty list: a message with nothing to show becomes a
    single text segment holding whatever visible text there is.
    """
    config = config or DEFAULT_CONFIG
    chunks, truncated_at = split_reasoning(text, config)

    segments: list[Segment] = []
    for chunk in chunks:
        if not isinstance(chunk, TextSegment):
            segments.append(chunk)
            continue
        parts, cut = _split_tool_calls(chunk.text, chunk.start, config)
        segments.extend(parts)
        if cut is not None:
            truncated_at = cut
            break

    if not segments:
        visible = text if truncated_at is None else text[:truncated_at]
        segments.append(TextSegment(text=visible, start=0, end=len(visible)))
    return segments, truncated_at


def parse_segments(content: str, config: ParserConfig | None = None) -> list[Segment]:
    """Main entry point: message content -> ordered segments."""
    return parse_message(content, config).segments


def parse_message(content: str, config: ParserConfig | None = None) -> ParsedMessage:
    """Parse message content into segments and the matching speech text."""
    config = config or DEFAULT_CONFIG
    text = strip_sentinels(content, config)
    segments, truncated_at = assemble_segments(text, config)
    return ParsedMessage(
        content=text,
        segments=segments,
        speech_text=build_speech_text(segments, text),
        truncated_at=truncated_at,
    )
