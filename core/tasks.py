import asyncio
import logging
from typing import Awaitable, Callable, Set

logger = logging.getLogger(__name__)


class DetachedTasks:
    """
    Fire-and-forget jobs on the running event loop.

    Callers never await a scheduled job. Strong references are held until
    each task finishes, and any failure is logged here instead of surfacing.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, job: Callable[[], Awaitable[None]], delay: float = 0.0, name: str = "detached") -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._run(job, delay, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, job: Callable[[], Awaitable[None]], delay: float, name: str) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            await job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Background job {name} failed: {e}")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every outstanding job (shutdown and tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
