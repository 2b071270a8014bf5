"""Sliding-window admission control for outbound remote calls."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from logging import getLogger
from typing import TYPE_CHECKING

from contentsync.domain.errors import AdmissionTimeout

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from contentsync.config.sync import AdmissionConfig

log = getLogger(__name__)

type Clock = Callable[[], float]
type Sleep = Callable[[float], Awaitable[None]]


class AdmissionController:
    """Admit at most ``limit`` calls in any rolling ``period``.

    Admitted calls are remembered by timestamp and expired lazily on every check.
    A caller that finds the window full sleeps ``retry_delay`` and checks again,
    holding the lock meanwhile so waiters are admitted in arrival order and the
    prune/compare/record sequence never interleaves with another caller.
    """

    def __init__(
        self,
        *,
        limit: int,
        period: float,
        retry_delay: float,
        max_wait: float | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if limit <= 0:
            raise ValueError("Admission limit must be positive")
        if period <= 0 or retry_delay <= 0:
            raise ValueError("Admission period and retry delay must be positive")
        self.limit = limit
        self.period = period
        self.retry_delay = retry_delay
        self.max_wait = max_wait
        self._clock = clock
        self._sleep = sleep
        self._admitted: deque[float] = deque()
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: AdmissionConfig) -> AdmissionController:
        return cls(
            limit=config.limit,
            period=config.period_seconds,
            retry_delay=config.retry_delay_seconds,
            max_wait=config.max_wait_seconds,
        )

    @property
    def in_window(self) -> int:
        self._prune(self._clock())
        return len(self._admitted)

    async def admit(self) -> None:
        async with self._lock:
            started = self._clock()
            while True:
                now = self._clock()
                self._prune(now)
                if len(self._admitted) < self.limit:
                    self._admitted.append(now)
                    return
                delay = self.retry_delay
                if self.max_wait is not None:
                    remaining = self.max_wait - (now - started)
                    if remaining <= 0:
                        raise AdmissionTimeout(
                            f"No admission slot freed up within {self.max_wait:.1f}s"
                        )
                    delay = min(delay, remaining)
                log.debug(
                    "Rate limit of %s calls per %.1fs reached, retrying in %.1fs",
                    self.limit,
                    self.period,
                    delay,
                )
                await self._sleep(delay)

    def _prune(self, now: float) -> None:
        while self._admitted and now - self._admitted[0] >= self.period:
            self._admitted.popleft()
