"""Bounded translation cache with insertion-order (FIFO) eviction."""

from collections import OrderedDict

import structlog

logger = structlog.get_logger(__name__)

CacheKey = tuple[str, str, str]


class TranslationCache:
    """Maps ``(source, target, exact_text)`` to translated text.

    When full, the oldest inserted entry is evicted first. Reads do not
    refresh an entry's position, so this is FIFO rather than LRU.
    """

    def __init__(self, max_size: int = 2000) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._entries: OrderedDict[CacheKey, str] = OrderedDict()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, source: str, target: str, text: str) -> str | None:
        return self._entries.get((source, target, text))

    def put(self, source: str, target: str, text: str, translated: str) -> None:
        key = (source, target, text)
        if key in self._entries:
            self._entries[key] = translated
            return
        if len(self._entries) >= self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("translation_cache_evicted", source=evicted[0], target=evicted[1])
        self._entries[key] = translated

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
