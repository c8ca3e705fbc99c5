"""
Deferred task scheduler.

Runs coroutines after a delay as asyncio tasks and keeps a reference to each
one until it finishes, so pending work can be awaited (tests, shutdown) or
cancelled.

Dependencies: asyncio
System role: Fire-and-forget post-processing
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Track delayed background tasks."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that have not finished."""
        return len(self._tasks)

    def schedule(
        self,
        delay_seconds: float,
        factory: Callable[[], Awaitable[object]],
        name: str,
    ) -> asyncio.Task:
        """
        Run factory() after delay_seconds.

        Args:
            delay_seconds: Delay before the coroutine is created
            factory: Zero-argument callable returning the awaitable to run
            name: Task name used in logs

        Returns:
            asyncio.Task: The tracked task
        """
        task = asyncio.create_task(self._run_later(delay_seconds, factory, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"{__name__}:schedule - {name} in {delay_seconds}s")
        return task

    async def _run_later(
        self,
        delay_seconds: float,
        factory: Callable[[], Awaitable[object]],
        name: str,
    ) -> None:
        await asyncio.sleep(delay_seconds)
        try:
            await factory()
        except Exception:
            # Nothing awaits a deferred task; the failure must at least be logged
            logger.exception(f"{__name__}:_run_later - {name} failed")

    async def drain(self) -> None:
        """Wait until every scheduled task (including ones they schedule) finishes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel pending tasks and wait for them to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
