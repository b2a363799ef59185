"""Unit tests for specref.cache."""

from __future__ import annotations

from specref.cache import FetchCache
from specref.models.live import LiveTermEntry

URL = "https://example.github.io/spec/"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _terms() -> dict[str, LiveTermEntry]:
    return {"t": LiveTermEntry(content="Def", raw_content="<dd>Def</dd>", term_id="term:s:t")}


class TestFetchCache:
    def test_miss_returns_none(self) -> None:
        assert FetchCache(300_000).get(URL) is None

    def test_fresh_hit(self) -> None:
        clock = FakeClock()
        cache = FetchCache(300_000, clock=clock)
        cache.set(URL, _terms())
        clock.now += 299.9
        assert cache.get(URL) == _terms()

    def test_expired_entry_returns_none(self) -> None:
        clock = FakeClock()
        cache = FetchCache(300_000, clock=clock)
        cache.set(URL, _terms())
        clock.now += 300
        assert cache.get(URL) is None
        # Expiry is a read-time check, the entry itself stays until overwritten
        assert URL in cache

    def test_set_refreshes_timestamp(self) -> None:
        clock = FakeClock()
        cache = FetchCache(1000, clock=clock)
        cache.set(URL, {})
        clock.now += 5
        cache.set(URL, _terms())
        assert cache.get(URL) == _terms()

    def test_instances_are_independent(self) -> None:
        first, second = FetchCache(300_000), FetchCache(300_000)
        first.set(URL, _terms())
        assert second.get(URL) is None
        assert len(first) == 1
        assert len(second) == 0
