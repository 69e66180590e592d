import asyncio
import logging
import httpx
from typing import Awaitable, Callable, List, Sequence
from apps.client.api import WatchlistAPI
from apps.client.entries import Entry, parse_entries
from apps.client.errors import ApiError, FetchFailed
from apps.client.notifications import Notifier

logger = logging.getLogger(__name__)

# Waits between attempts: three attempts in total
RETRY_DELAYS = (1, 2)

class RemoteListFetcher:
    def __init__(
        self,
        api: WatchlistAPI,
        notifier: Notifier,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        retry_delays: Sequence[float] = RETRY_DELAYS,
    ):
        self.api = api
        self.notifier = notifier
        self.sleep = sleep
        self.retry_delays = tuple(retry_delays)

    async def fetch_all(self) -> List[Entry]:
        """
        Reads the whole watchlist, retrying transient failures with backoff.
        Raises FetchFailed once every attempt has failed.
        """
        attempt = 0
        while True:
            try:
                items = await self.api.list_entries()
                return parse_entries(items)
            except (ApiError, httpx.HTTPError, ValueError) as e:
                logger.warning("Failed to fetch watchlist (attempt %d): %s", attempt + 1, e)
                if attempt >= len(self.retry_delays):
                    self.notifier.error("Failed to load watchlist. Please refresh the page.")
                    raise FetchFailed(str(e)) from e

                delay = self.retry_delays[attempt]
                self.notifier.error(f"Loading failed, retrying in {delay:g}s...")
                await self.sleep(delay)
                attempt += 1

    async def load(self) -> List[Entry]:
        """fetch_all, but once retries run out the result is an empty list, never stale data."""
        try:
            return await self.fetch_all()
        except FetchFailed:
            return []
