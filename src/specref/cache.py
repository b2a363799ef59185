"""In-memory fetch cache for parsed external spec pages.

One instance is owned by each ``ExternalRefValidator`` and lives as long
as it does. Entries expire by age, checked at read time; nothing is ever
evicted otherwise. Only successful fetches are stored.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from specref.models.live import FetchCacheEntry, LiveTermEntry

log = structlog.get_logger()


class FetchCache:
    """URL → parsed terms, with a fixed timeout."""

    def __init__(
        self,
        timeout_ms: int,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout_seconds = timeout_ms / 1000
        self._clock = clock
        self._entries: dict[str, FetchCacheEntry] = {}

    def get(self, url: str) -> dict[str, LiveTermEntry] | None:
        """Return cached terms for ``url``, or ``None`` on miss or expiry."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        age = self._clock() - entry.timestamp
        if age >= self._timeout_seconds:
            log.debug("fetch_cache_expired", url=url, age_seconds=round(age, 3))
            return None
        return entry.data

    def set(self, url: str, data: dict[str, LiveTermEntry]) -> None:
        self._entries[url] = FetchCacheEntry(timestamp=self._clock(), data=data)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)
