"""Bounded LRU cache of parse results, keyed by message id."""

from collections import OrderedDict

from .models import ParsedMessage, ParserConfig
from .parser import parse_message


class SegmentCache:
    """Reuse the last parse of a message while its content is unchanged.

    A chat view re-renders far more often than a message's content changes;
    the cache lets it skip re-parsing in between. Each view owns its own
    instance.
    """

    def __init__(self, max_size: int = 256, config: ParserConfig | None = None) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self.config = config
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, ParsedMessage] = OrderedDict()
        self._sources: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._entries

    def get(self, message_id: str) -> ParsedMessage | None:
        """Return the cached parse without touching recency or counters."""
        return self._entries.get(message_id)

    def get_or_parse(self, message_id: str, content: str) -> ParsedMessage:
        """Return the parse of `content`, reusing the cached one if it matches."""
        if self._sources.get(message_id) == content:
            self.hits += 1
            self._entries.move_to_end(message_id)
            return self._entries[message_id]

        self.misses += 1
        parsed = parse_message(content, self.config)
        self._entries[message_id] = parsed
        self._entries.move_to_end(message_id)
        self._sources[message_id] = content

        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            del self._sources[evicted]
        return parsed

    def invalidate(self, message_id: str) -> None:
        self._entries.pop(message_id, None)
        self._sources.pop(message_id, None)

    def clear(self) -> None:
        self._entries.clear()
        self._sources.clear()
