"""Locate `<details>` blocks in streaming message text.

Blocks are found at the top level only: a `<details>` nested inside another
block belongs to that block's inner content. The scan stops at the first
opener that has no matching `</details>` yet (or whose opening tag is itself
still arriving); everything from that offset on is reported as incomplete
so callers can drop it until the stream delivers the rest.
"""

import re
from dataclasses import dataclass, field

# An opener is `<details` followed by whitespace, `>` or the end of the text.
_OPENER_RE = re.compile(r"<details(?=[\s>]|\Z)")
_NESTING_RE = re.compile(r"<details(?=[\s>]|\Z)|</details\s*>")

# Well-formed opening tag: double-quoted values, or bare attribute names.
_STRICT_TAG_RE = re.compile(r'<details((?:\s+[\w:.-]+(?:\s*=\s*"[^"]*")?)*)\s*>')
# An opening tag that is still streaming: a valid prefix running to the end.
_PARTIAL_TAG_RE = re.compile(r'<details(?:\s+[\w:.-]+(?:\s*=\s*(?:"[^"]*"?)?)?)*\s*\Z')
# Quote-balanced opening tag, tolerating raw quotes inside values. A raw
# "<" outside quotes means the text is not a tag.
_LENIENT_TAG_RE = re.compile(r'<details((?:[^<>"]|"[^"]*")*)>')

_STRICT_ATTR_RE = re.compile(r'([\w:.-]+)(?:\s*=\s*"([^"]*)")?')
_LENIENT_ATTR_RE = re.compile(
    r'([\w:.-]+)\s*=\s*"(.*?)"(?=\s+[\w:.-]+\s*=\s*"|\s*/?\s*\Z)', re.DOTALL
)

_TOOL_CALL_MARKERS = ('type="tool_calls"', "type=&quot;tool_calls&quot;")


@dataclass(frozen=True)
class DetailsBlock:
    """A complete `<details ...>...</details>` region."""

    start: int
    end: int
    attributes: dict[str, str]
    inner: str

    @property
    def block_type(self) -> str:
        return self.attributes.get("type", "")


@dataclass(frozen=True)
class ScanResult:
    blocks: list[DetailsBlock] = field(default_factory=list)
    incomplete_at: int | None = None


def parse_attributes(raw: str, lenient: bool = False) -> dict[str, str]:
    """Parse the attribute section of an opening tag into raw string values.

    Values are returned as written; entity decoding and JSON are left to
    the caller.
    """
    attrs: dict[str, str] = {}
    if lenient:
        for m in _LENIENT_ATTR_RE.finditer(raw.strip()):
            attrs[m.group(1)] = m.group(2)
        return attrs
    for m in _STRICT_ATTR_RE.finditer(raw):
        attrs[m.group(1)] = m.group(2) or ""
    return attrs


def _match_tag(text: str, pos: int, lenient: bool) -> re.Match[str] | None:
    return (_LENIENT_TAG_RE if lenient else _STRICT_TAG_RE).match(text, pos)


def _find_close(text: str, pos: int, lenient: bool = False) -> tuple[int, int] | None:
    """Find the `</details>` balancing an opener whose tag ends at `pos`.

    Nested openers count toward the depth only when they parse as a tag;
    anything else, such as prose mentioning "<details", is content.
    """
    depth = 1
    while True:
        m = _NESTING_RE.search(text, pos)
        if m is None:
            return None
        if m.group().startswith("</"):
            depth -= 1
            if depth == 0:
                return m.start(), m.end()
            pos = m.end()
            continue

        tag = _match_tag(text, m.start(), lenient)
        if tag is not None:
            depth += 1
            pos = tag.end()
        elif _PARTIAL_TAG_RE.match(text, m.start()):
            # A nested opening tag is still arriving.
            return None
        else:
            pos = m.end()


def scan_blocks(text: str, block_type: str | None = None, lenient: bool = False) -> ScanResult:
    """Find complete top-level `<details>` blocks of `block_type`.

    Args:
        text: Message text to scan
        block_type: Value of the `type` attribute to keep, or None for all
        lenient: Use the quote-balanced tag grammar for malformed markup

    Returns:
        ScanResult with matching blocks in order and the offset of a trailing
        incomplete block of any type, if there is one
    """
    blocks: list[DetailsBlock] = []
    pos = 0

    while True:
        opener = _OPENER_RE.search(text, pos)
        if opener is None:
            return ScanResult(blocks=blocks)
        start = opener.start()

        tag = _match_tag(text, start, lenient)
        if tag is None:
            if lenient or _PARTIAL_TAG_RE.match(text, start):
                # The opening tag itself is still arriving.
                return ScanResult(blocks=blocks, incomplete_at=start)
            # Not a tag we understand; leave it in the text.
            pos = opener.end()
            continue

        tag_end = tag.end()
        close = _find_close(text, tag_end, lenient)
        if close is None:
            return ScanResult(blocks=blocks, incomplete_at=start)
        close_start, end = close

        attributes = parse_attributes(tag.group(1), lenient=lenient)
        if block_type is None or attributes.get("type") == block_type:
            blocks.append(
                DetailsBlock(
                    start=start,
                    end=end,
                    attributes=attributes,
                    inner=text[tag_end:close_start],
                )
            )
        pos = end


def truncate_incomplete(text: str) -> tuple[str, int | None]:
    """Drop a trailing incomplete `<details>` block and everything after it."""
    incomplete_at = scan_blocks(text).incomplete_at
    if incomplete_at is None:
        return text, None
    return text[:incomplete_at], incomplete_at


def has_tool_call_marker(text: str) -> bool:
    """Check for `type="tool_calls"` telltales, escaped or not."""
    return any(marker in text for marker in _TOOL_CALL_MARKERS)
