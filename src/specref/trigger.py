"""Run a validation pass once the page's trefs are in place.

tref elements only exist after transcluded content has been inserted, so
the pass waits for a "trefs inserted" signal and then a short settle
delay. If the signal never comes it runs anyway after a fallback
timeout. Either way the pass runs exactly once per trigger.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog

if TYPE_CHECKING:
    from specref.config import TriggerSettings

log = structlog.get_logger()

T = TypeVar("T")


class ValidationTrigger(Generic[T]):
    """Wait for ``trefs_inserted`` or the fallback timeout, then run once."""

    def __init__(self, run: Callable[[], Awaitable[T]], settings: TriggerSettings) -> None:
        self._run = run
        self._settings = settings
        self._has_run = False
        self.trefs_inserted = asyncio.Event()

    @property
    def has_run(self) -> bool:
        return self._has_run

    def signal_trefs_inserted(self) -> None:
        self.trefs_inserted.set()

    async def run(self) -> T | None:
        """Run the pass, or return None if this trigger already ran it."""
        fallback_seconds = self._settings.fallback_timeout_ms / 1000
        try:
            await asyncio.wait_for(self.trefs_inserted.wait(), timeout=fallback_seconds)
            await asyncio.sleep(self._settings.settle_delay_ms / 1000)
        except TimeoutError:
            log.warning(
                "trefs_inserted_not_received",
                fallback_timeout_ms=self._settings.fallback_timeout_ms,
            )

        if self._has_run:
            log.debug("validation_already_ran")
            return None
        self._has_run = True
        return await self._run()
