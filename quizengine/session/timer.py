"""
Quiz countdown.

Countdown holds the remaining seconds and is advanced one tick at a time,
which keeps the session logic synchronous and testable. AsyncTicker drives
a Countdown on a fixed interval for hosts running an event loop.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from loguru import logger

CRITICAL_SECONDS = 60
WARNING_SECONDS = 300


class Countdown:
    """Whole-second countdown that can be cancelled."""

    def __init__(self, total_seconds: int):
        self.total_seconds = max(0, int(total_seconds))
        self.remaining = self.total_seconds
        self.cancelled = False

    @classmethod
    def from_minutes(cls, minutes: float) -> "Countdown":
        return cls(int(minutes * 60))

    @property
    def expired(self) -> bool:
        return self.remaining <= 0

    @property
    def running(self) -> bool:
        return not self.cancelled and not self.expired

    def tick(self) -> bool:
        """Advance one second. Returns True on the tick that reaches zero."""
        if not self.running:
            return False
        self.remaining -= 1
        return self.remaining <= 0

    def cancel(self) -> None:
        self.cancelled = True

    def format_remaining(self) -> str:
        minutes, seconds = divmod(max(0, self.remaining), 60)
        return f"{minutes:02d}:{seconds:02d}"

    def urgency(self) -> str:
        """'critical' in the last minute, 'warning' in the last five, else 'normal'."""
        if self.remaining <= CRITICAL_SECONDS:
            return "critical"
        if self.remaining <= WARNING_SECONDS:
            return "warning"
        return "normal"


class AsyncTicker:
    """
    Calls on_tick every interval until the countdown is cancelled or expired.

    A countdown that starts expired still gets one tick so its owner sees it.
    """

    def __init__(
        self,
        countdown: Countdown,
        on_tick: Callable[[], object],
        interval: float = 1.0,
    ):
        self.countdown = countdown
        self.on_tick = on_tick
        self.interval = interval
        self._task: asyncio.Task | None = None

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        while not self.countdown.cancelled:
            await asyncio.sleep(self.interval)
            if self.countdown.cancelled:
                break
            self.on_tick()
            if self.countdown.expired:
                break
        logger.debug("Countdown ticker stopped")

    def stop(self) -> None:
        self.countdown.cancel()
        if self._task is None or self._task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # Stopped from inside on_tick: the loop exits on its own
        if self._task is not current:
            self._task.cancel()

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()
