"""Session-scoped cache for search outcomes."""

import threading
from collections import OrderedDict
from collections.abc import Awaitable, Callable

from models.lookout import CacheEntry, SearchOutcome
from utils.logger import get_logger

logger = get_logger(__name__)

CacheKey = tuple[str, bool]


def normalize_query(query: str) -> str:
    """Lowercase and trim; inner whitespace is kept."""
    return (query or "").strip().lower()


class SessionResultCache:
    """
    Thread-safe in-memory cache of SearchOutcome keyed by (normalized query, flag).

    Lives for the process (one session); nothing is persisted and there is no
    time-based expiry. Fallback outcomes are cached like any other outcome.
    When ``max_entries`` is set the oldest entry is evicted first.
    """

    def __init__(self, max_entries: int | None = None):
        """
        Initialize an empty cache.

        Args:
            max_entries: Optional size bound (None = unbounded)
        """
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()  # FastAPI may call from worker threads
        self._max_entries = max_entries if max_entries and max_entries > 0 else None
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(query: str, prioritize_videos: bool) -> CacheKey:
        return normalize_query(query), bool(prioritize_videos)

    def get(self, query: str, prioritize_videos: bool) -> SearchOutcome | None:
        key = self.make_key(query, prioritize_videos)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.outcome

    def set(self, query: str, prioritize_videos: bool, outcome: SearchOutcome):
        key = self.make_key(query, prioritize_videos)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(outcome=outcome)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug(
                        "Cache entry evicted",
                        extra={"extra_fields": {"query": evicted[0][:120], "prioritize_videos": evicted[1]}},
                    )

    async def get_or_compute(
        self,
        query: str,
        prioritize_videos: bool,
        compute: Callable[[], Awaitable[SearchOutcome]],
        refresh: bool = False,
    ) -> SearchOutcome:
        """
        Return the cached outcome or compute, store and return it.

        ``refresh`` skips the lookup and overwrites the stored entry.

        If the awaiting task is cancelled while ``compute`` runs, the
        CancelledError propagates and nothing is stored.
        """
        cached = None if refresh else self.get(query, prioritize_videos)
        if cached is not None:
            logger.info(
                "Search cache hit",
                extra={"extra_fields": {"query": query[:120], "prioritize_videos": prioritize_videos}},
            )
            return cached

        outcome = await compute()
        self.set(query, prioritize_videos, outcome)
        return outcome

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self._max_entries,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return self.make_key(*key) in self._entries
