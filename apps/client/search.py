import asyncio
import logging
import httpx
from typing import Callable, List, Optional
from apps.client.api import WatchlistAPI
from apps.client.errors import ApiError
from apps.core.schemas import SearchResultItem

logger = logging.getLogger(__name__)

QUIET_INTERVAL = 0.3

class DebouncedSearch:
    """
    Search-as-you-type. Each keystroke restarts a quiet-interval timer and
    cancels whatever search was still running, so only the latest text ever
    reaches `results`.
    """

    def __init__(
        self,
        api: WatchlistAPI,
        delay: float = QUIET_INTERVAL,
        on_results: Optional[Callable[[List[SearchResultItem]], None]] = None,
    ):
        self.api = api
        self.delay = delay
        self.on_results = on_results
        self.query = ""
        self.results: List[SearchResultItem] = []
        self.loading = False
        self._task: Optional[asyncio.Task] = None

    def submit(self, text: str) -> Optional[asyncio.Task]:
        self.query = text
        self.cancel()
        if not text.strip():
            self._publish([])
            return None
        self._task = asyncio.get_running_loop().create_task(self._run(text))
        return self._task

    def cancel(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None
        self.loading = False

    async def wait(self) -> None:
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _publish(self, results: List[SearchResultItem]) -> None:
        self.results = results
        if self.on_results:
            self.on_results(results)

    async def _run(self, text: str) -> None:
        await asyncio.sleep(self.delay)
        self.loading = True
        try:
            results = await self.api.search(text)
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Search failed for %r: %s", text, e)
            results = []
        finally:
            # A superseded search must not clear the newer one's spinner
            if asyncio.current_task() is self._task:
                self.loading = False
        self._publish(results)
