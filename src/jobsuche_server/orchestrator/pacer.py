"""Minimum-interval pacing of outbound upstream calls."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings

logger = structlog.get_logger()


class CallClass(StrEnum):
    """Classes of outbound calls, each paced independently."""

    DETAIL_FETCH = "detail_fetch"
    INTER_SEARCH = "inter_search"


class Pacer:
    """Enforce a minimum gap between successive calls of the same class.

    Shared by every orchestration path in the process. A lock per class
    is held across the wait, so concurrent waiters are admitted one at a
    time and never closer together than the class interval.
    """

    def __init__(
        self,
        intervals: dict[CallClass, float],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize with per-class intervals in seconds."""
        self._intervals = dict(intervals)
        self._clock = clock
        self._sleep = sleep
        self._locks: dict[CallClass, asyncio.Lock] = {c: asyncio.Lock() for c in CallClass}
        self._last_permitted: dict[CallClass, float] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> Pacer:
        """Build a pacer from the configured millisecond intervals."""
        return cls(
            {
                CallClass.DETAIL_FETCH: settings.detail_interval_ms / 1000,
                CallClass.INTER_SEARCH: settings.search_interval_ms / 1000,
            }
        )

    def min_interval(self, call_class: CallClass) -> float:
        """Configured minimum gap in seconds for a call class."""
        return self._intervals.get(call_class, 0.0)

    def last_permitted(self, call_class: CallClass) -> float | None:
        """Clock reading of the last permitted call, or None if none yet."""
        return self._last_permitted.get(call_class)

    async def wait(self, call_class: CallClass) -> None:
        """Suspend until the class interval has elapsed, then record the call."""
        interval = self.min_interval(call_class)
        async with self._locks[call_class]:
            last = self._last_permitted.get(call_class)
            if last is not None:
                # Loop: the event loop may wake a sleeper slightly early
                remaining = last + interval - self._clock()
                while remaining > 0:
                    logger.debug("pacer_wait", call_class=call_class, delay_seconds=remaining)
                    await self._sleep(remaining)
                    remaining = last + interval - self._clock()
            self._last_permitted[call_class] = self._clock()

    async def mark(self, call_class: CallClass) -> None:
        """Record a permitted call now without waiting."""
        async with self._locks[call_class]:
            self._last_permitted[call_class] = self._clock()
