"""Cursor arithmetic for paging through the archive in both directions.

The archive only answers "messages older than offset_id, shifted by
add_offset". Paging toward older messages moves the anchor to the oldest
item seen. Paging toward newer messages (after a jump to the oldest page)
anchors on the newest item seen and asks for a negative add_offset of one
page plus the anchor itself, which returns the page immediately newer than
the anchor.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List

from savedmsgs.config import TOTAL_MAX_AGE_SEC
from savedmsgs.core.archive_fetcher import ArchiveFetcher, FetchResult, clamp_page_size
from savedmsgs.core.errors import InvalidInput
from savedmsgs.core.grouping import group
from savedmsgs.core.session import HistorySession
from savedmsgs.models.cursor import FetchState, TraversalOrder
from savedmsgs.models.message import DisplayRecord, RawItem

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """Records appended by one page request."""
    records: List[DisplayRecord] = field(default_factory=list)
    total: int = 0
    exhausted: bool = False
    busy: bool = False  # request dropped, another fetch is in flight
    order: TraversalOrder = TraversalOrder.NEWEST_FIRST


class PaginationController:
    """Drives a HistorySession through the archive.

    Every method returns a Page. A request made while the session is
    fetching is dropped and returns a busy page. A failed or cancelled
    fetch leaves the cursor where it was.
    """

    def __init__(
        self,
        fetcher: ArchiveFetcher,
        total_max_age: float = TOTAL_MAX_AGE_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._total_max_age = total_max_age
        self._clock = clock

    async def next_page(self, session: HistorySession) -> Page:
        """Load the next page in the session's traversal order."""
        if session.busy:
            logger.debug("Session %s: fetch in flight, dropping page request", session.id)
            return self._busy_page(session)
        if session.exhausted:
            return self._page(session, [])
        return await self._load_page(session)

    async def jump_to_newest(self, session: HistorySession) -> Page:
        if session.busy:
            return self._busy_page(session)
        session.reset(TraversalOrder.NEWEST_FIRST)
        return await self._load_page(session)

    async def jump_to_oldest(self, session: HistorySession) -> Page:
        """Seek to the oldest page using the archive total as an offset.

        The total is an estimate, so the first page may start a few items
        short of or past the true oldest message.
        """
        if session.busy:
            return self._busy_page(session)
        if self._total_is_stale(session):
            logger.info("Session %s: probing archive total", session.id)
            await self._fetch(session, 0, 0, 1)
        skip = max(0, session.cursor.known_total - session.page_size)
        session.reset(TraversalOrder.OLDEST_FIRST, skip=skip)
        return await self._load_page(session)

    async def change_page_size(self, session: HistorySession, page_size: int) -> Page:
        """Apply a new page size and restart from the newest page."""
        if page_size < 0:
            raise InvalidInput(f"invalid limit: {page_size}")
        if session.busy:
            return self._busy_page(session)
        session.page_size = clamp_page_size(page_size)
        session.reset(TraversalOrder.NEWEST_FIRST)
        return await self._load_page(session)

    async def _load_page(self, session: HistorySession) -> Page:
        cursor = session.cursor
        result = await self._fetch(session, cursor.anchor_id, cursor.skip, session.page_size)
        items = self._unseen(session, result.items)
        if cursor.order is TraversalOrder.OLDEST_FIRST:
            items.reverse()
        if not items:
            logger.info("Session %s: no more messages", session.id)
            session.state = FetchState.EXHAUSTED
            return self._page(session, [])

        records = group(items)
        session.records.extend(records)
        cursor.anchor_id = items[-1].id
        if cursor.order is TraversalOrder.OLDEST_FIRST:
            # The shifted window still covers the anchor; reach one past it
            cursor.skip = -(session.page_size + 1)
        else:
            cursor.skip = 0
        logger.info("Session %s: loaded %d messages", session.id, len(items))
        return self._page(session, records)

    async def _fetch(
        self, session: HistorySession, anchor_id: int, skip: int, page_size: int
    ) -> FetchResult:
        previous = session.state
        session.state = FetchState.FETCHING
        try:
            result = await self._fetcher.fetch(anchor_id, skip, page_size)
        except BaseException:
            session.state = previous
            raise
        session.state = previous
        if result.items or result.total:
            session.cursor.known_total = result.total
            session.cursor.total_refreshed_at = self._clock()
        return result

    def _unseen(self, session: HistorySession, items: List[RawItem]) -> List[RawItem]:
        """Drop items on the already-visited side of the anchor."""
        cursor = session.cursor
        if not cursor.anchor_id:
            return list(items)
        if cursor.order is TraversalOrder.OLDEST_FIRST:
            return [item for item in items if item.id > cursor.anchor_id]
        return [item for item in items if item.id < cursor.anchor_id]

    def _total_is_stale(self, session: HistorySession) -> bool:
        cursor = session.cursor
        if cursor.known_total <= 0:
            return True
        return self._clock() - cursor.total_refreshed_at > self._total_max_age

    def _page(self, session: HistorySession, records: List[DisplayRecord]) -> Page:
        return Page(
            records=records,
            total=session.cursor.known_total,
            exhausted=session.exhausted,
            order=session.cursor.order,
        )

    def _busy_page(self, session: HistorySession) -> Page:
        page = self._page(session, [])
        page.busy = True
        return page
