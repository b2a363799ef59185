from __future__ import annotations

from pydantic import BaseModel


class LiveTermEntry(BaseModel):
    """A term definition extracted from a live external spec page."""

    content: str  # Plain text, used for display
    raw_content: str  # Concatenated <dd> markup, used for comparison
    term_id: str  # Full element id, e.g. "term:other-spec:some-term"


class FetchCacheEntry(BaseModel):
    """Parsed terms of one external spec page, keyed in the cache by URL."""

    timestamp: float  # time.monotonic() at store time, in seconds
    data: dict[str, LiveTermEntry]
