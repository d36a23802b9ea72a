"""Countdown Timer - cooperative per-second countdown for timed attempts."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.logger import get_logger

logger = get_logger("timer")


def format_time(seconds: int) -> str:
    """``75`` -> ``1:15``."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


class CountdownTimer:
    """Countdown owned by one attempt session.

    ``tick()`` is the logical one-second step and can be driven directly
    (tests, simulations). ``run()`` schedules an asyncio task that calls
    a callback once per interval until the countdown reaches zero or
    ``cancel()`` is called.

    Example:
        >>> timer = CountdownTimer(60)
        >>> timer.run(session.tick, interval=1.0)
        >>> timer.cancel()
    """

    def __init__(self, total_seconds: int):
        if total_seconds < 0:
            raise ValueError("total_seconds must be >= 0")
        self.total_seconds = total_seconds
        self.remaining = total_seconds
        self._task: asyncio.Task | None = None

    @property
    def expired(self) -> bool:
        return self.remaining == 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> bool:
        """Decrement one second.

        Returns:
            True only on the tick that reaches zero; later ticks are no-ops
        """
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return self.remaining == 0

    def run(
        self,
        on_tick: Callable[[], Awaitable[Any]],
        interval: float = 1.0,
    ) -> asyncio.Task:
        """Schedule the periodic callback on the running event loop."""
        if self.running:
            raise RuntimeError("Timer already running")
        self._task = asyncio.get_running_loop().create_task(self._loop(on_tick, interval))
        return self._task

    async def _loop(self, on_tick: Callable[[], Awaitable[Any]], interval: float) -> None:
        while self.remaining > 0:
            await asyncio.sleep(interval)
            try:
                await on_tick()
            except Exception:
                logger.exception("Countdown callback failed", remaining=self.remaining)
                return

    def cancel(self) -> None:
        """Release the scheduled task.

        When called from inside the task itself (the callback submitting on
        expiry) the task is only detached: cancelling it would abort the
        submission that is running on it. The loop exits on its own once
        the countdown is at zero or the callback returns.
        """
        task, self._task = self._task, None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()
        logger.debug("Countdown cancelled", remaining=self.remaining)
