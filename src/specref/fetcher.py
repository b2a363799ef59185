"""HTTP fetcher for live external specification pages.

All network I/O goes through a ``Fetcher`` built around a shared
``httpx.AsyncClient``; the caller owns the client lifecycle. ``Fetcher``
raises ``SpecRefError`` on failure. ``LiveSpecFetcher`` sits on top of it,
adds the fetch cache and term parsing, and turns every failure into a
``None`` result so that one unreachable spec never aborts a pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from specref.errors import ErrorCode, SpecRefError
from specref.parser import extract_terms_from_html

if TYPE_CHECKING:
    from specref.cache import FetchCache
    from specref.config import FetcherSettings
    from specref.models.live import LiveTermEntry
    from specref.protocols import FetcherProtocol

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once per run."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.request_timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=max(1, settings.max_connections // 2),
        ),
    )


class Fetcher:
    """Plain HTML page fetcher implementing FetcherProtocol."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str) -> str:
        """Fetch a page and return its body text.

        Raises SpecRefError on network errors and non-2xx responses.
        """
        try:
            response = await self._client.get(url, headers={"Accept": "text/html"})
        except httpx.HTTPError as exc:
            raise SpecRefError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"Network error fetching {url}: {exc}",
                suggestion="The external specification may be temporarily unavailable.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            if response.status_code == 404:
                raise SpecRefError(
                    code=ErrorCode.PAGE_NOT_FOUND,
                    message=f"HTTP 404 fetching {url}",
                    suggestion="Check the ghPageUrl of the external specification.",
                    recoverable=False,
                )
            raise SpecRefError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"HTTP {response.status_code} fetching {url}",
                suggestion="The external specification may be temporarily unavailable.",
                recoverable=True,
            )

        log.debug(
            "fetch_complete",
            url=url,
            status_code=response.status_code,
            content_length=len(response.text),
        )
        return response.text


class LiveSpecFetcher:
    """Fetches external spec pages and parses them into term mappings."""

    def __init__(self, fetcher: FetcherProtocol, cache: FetchCache) -> None:
        self._fetcher = fetcher
        self._cache = cache

    async def fetch_external_spec(
        self, url: str, spec_name: str
    ) -> dict[str, LiveTermEntry] | None:
        """Return the live term mapping for ``url``.

        A fresh cache hit returns without touching the network. Returns
        ``None`` if the page could not be fetched or parsed; failures are
        not cached, so a later pass retries.
        """
        cached = self._cache.get(url)
        if cached is not None:
            log.debug("fetch_cache_hit", url=url, spec=spec_name)
            return cached

        try:
            page_html = await self._fetcher.fetch(url)
        except SpecRefError as exc:
            log.warning(
                "external_spec_fetch_failed",
                spec=spec_name,
                url=url,
                code=exc.code,
                message=exc.message,
            )
            return None

        try:
            terms = extract_terms_from_html(page_html)
        except Exception:
            log.warning("external_spec_parse_failed", spec=spec_name, url=url, exc_info=True)
            return None

        self._cache.set(url, terms)
        log.info("external_spec_fetched", spec=spec_name, url=url, terms=len(terms))
        return terms
