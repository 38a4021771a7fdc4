import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from core.models import Article

logger = logging.getLogger(__name__)


class IncrementalPoller:
    """
    Injects fresh single-feed articles into an already displayed list.

    An article is prepended only when no displayed article has exactly the
    same title (case and whitespace sensitive).
    """

    def __init__(
        self,
        fetch_one: Callable[[], Awaitable[Optional[Article]]],
        displayed: List[Article],
        interval: float = 10.0,
    ):
        self.fetch_one = fetch_one
        self.displayed = displayed
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    async def tick(self) -> bool:
        try:
            article = await self.fetch_one()
        except Exception as e:
            logger.error(f"Poll fetch failed: {e}")
            return False

        if article is None:
            return False
        if any(existing.title == article.title for existing in self.displayed):
            logger.debug(f"Duplicate skipped: {article.title}")
            return False

        self.displayed.insert(0, article)
        logger.info(f"New article from {article.source}: {article.title}")
        return True

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self._run(), name="news-poller")
        return self._task

    async def stop(self):
        """Cancels the timer so no orphaned fetches outlive the view."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
