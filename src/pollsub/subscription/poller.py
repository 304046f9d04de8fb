"""The scheduled task that repeatedly pulls a subscription."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PollLoop:
    """
    Runs pull cycles one after another on a single asyncio task.

    A cycle is never started while blocked() is true; the loop then goes
    dormant and is re-armed with wake(). Between cycles it sleeps for
    interval seconds. Only one task exists at a time, so at most one pull
    is ever in flight.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[None]],
        interval: float,
        blocked: Callable[[], bool],
        name: str = "pollsub-poll-loop",
    ):
        self._cycle = cycle
        self.interval = interval
        self._blocked = blocked
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self._cancelled: Optional[asyncio.Task] = None
        self._sleeping = False
        self.cycles = 0

    @property
    def running(self) -> bool:
        """True while a cycle is in flight or the loop is waiting for the next one."""
        return self._task is not None and not self._task.done()

    @property
    def sleeping(self) -> bool:
        return self._sleeping

    def wake(self) -> bool:
        """
        Start the loop now if it is dormant and not blocked.

        Must be called from within the running event loop.

        Returns:
            True if a new task was started
        """
        if self.running or self._blocked():
            return False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        return True

    def cancel_timer(self) -> bool:
        """
        Cancel the loop if it is waiting between cycles.

        An in-flight cycle is left to complete; it notices the blocked state
        on its own. The cancelled task is detached at once, so a wake() in
        the same tick starts a fresh one.

        Returns:
            True if a pending wait was cancelled
        """
        if self._task is None or not self._sleeping:
            return False
        self._task.cancel()
        self._cancelled, self._task = self._task, None
        self._sleeping = False
        return True

    async def join(self) -> None:
        """Wait until the loop has gone dormant."""
        for task in (self._cancelled, self._task):
            if task is None:
                continue
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    async def _run(self) -> None:
        current = asyncio.current_task()
        try:
            while not self._blocked():
                self.cycles += 1
                await self._cycle()
                if self._blocked():
                    break
                self._sleeping = True
                try:
                    await asyncio.sleep(self.interval)
                finally:
                    if self._task is current:
                        self._sleeping = False
        except asyncio.CancelledError:
            logger.debug("Poll loop %s cancelled", self._name)
            raise
        finally:
            if self._task is current:
                self._task = None
            if self._cancelled is current:
                self._cancelled = None
