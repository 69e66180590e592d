import logging
from typing import List, Optional
from apps.client.api import WatchlistAPI
from apps.client.coordinator import MutationCoordinator
from apps.client.entries import Entry, Snapshot
from apps.client.fetcher import RemoteListFetcher
from apps.client.filters import FilterController, visible_rows
from apps.client.notifications import Notifier
from apps.client.surface import ordered_columns, cell_mode, CellMode
from apps.client.view import Pagination, SortSpec, next_sort, paginate, sort_rows

logger = logging.getLogger(__name__)

class WatchlistTable:
    """
    View model of the watchlist table: one snapshot, the filters, sort and
    pager over it, and the coordinator that mutates it.
    """

    def __init__(
        self,
        api: WatchlistAPI,
        notifier: Optional[Notifier] = None,
        is_admin: bool = False,
        fetcher: Optional[RemoteListFetcher] = None,
    ):
        self.api = api
        self.notifier = notifier or Notifier()
        self.snapshot = Snapshot()
        self.pagination = Pagination()
        self.filters = FilterController(self.pagination)
        self.sort: Optional[SortSpec] = None
        self.fetcher = fetcher or RemoteListFetcher(api, self.notifier)
        self.coordinator = MutationCoordinator(api, self.snapshot, self.notifier, is_admin=is_admin)
        self.loading = False
        self.closed = False
        self._generation = 0

    @property
    def is_admin(self) -> bool:
        return self.coordinator.is_admin

    def set_admin(self, is_admin: bool) -> None:
        self.coordinator.is_admin = bool(is_admin)

    async def refresh(self) -> bool:
        """
        Reloads the snapshot. A result that arrives after close() or after a
        newer refresh started is dropped.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            entries = await self.fetcher.load()
        finally:
            if generation == self._generation:
                self.loading = False

        if self.closed or generation != self._generation:
            logger.debug("Dropping stale watchlist load (generation %d)", generation)
            return False
        self.snapshot.replace_all(entries)
        return True

    def close(self) -> None:
        self.closed = True

    def toggle_sort(self, column: str) -> Optional[SortSpec]:
        self.sort = next_sort(self.sort, column)
        return self.sort

    def filtered_rows(self) -> List[Entry]:
        return sort_rows(visible_rows(self.snapshot, self.filters.state), self.sort)

    def filtered_count(self) -> int:
        return len(visible_rows(self.snapshot, self.filters.state))

    def page_rows(self) -> List[Entry]:
        rows = self.filtered_rows()
        self.pagination.clamp(len(rows))
        return paginate(rows, self.pagination)

    def columns(self) -> List[str]:
        return ordered_columns(self.is_admin, self.filters.state.tab)

    def cell_mode(self, column: str) -> CellMode:
        return cell_mode(column, self.is_admin)
