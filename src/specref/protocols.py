"""Protocol interfaces for swappable components.

The validator references these protocols, not the concrete
implementations, so tests can use lightweight in-memory fakes instead of
an HTTP client.
"""

from __future__ import annotations

from typing import Protocol


class FetcherProtocol(Protocol):
    """Interface for the raw HTML page fetcher."""

    async def fetch(self, url: str) -> str: ...

