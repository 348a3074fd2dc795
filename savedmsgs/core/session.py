"""Per-client browsing state: cursor, visible records and selection."""
import uuid
from typing import List, Optional, Set

from savedmsgs.config import DEFAULT_PAGE_SIZE
from savedmsgs.core.archive_fetcher import clamp_page_size
from savedmsgs.models.cursor import CursorState, FetchState, TraversalOrder
from savedmsgs.models.message import DisplayRecord


class HistorySession:
    """One independent traversal of the archive.

    Nothing here is shared between sessions; the controller and the
    selection helpers receive the session they act on explicitly.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE, session_id: Optional[str] = None) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.page_size = clamp_page_size(page_size)
        self.cursor = CursorState()
        self.state = FetchState.IDLE
        self.records: List[DisplayRecord] = []
        self.selection: Set[int] = set()

    @property
    def exhausted(self) -> bool:
        return self.state is FetchState.EXHAUSTED

    @property
    def busy(self) -> bool:
        return self.state is FetchState.FETCHING

    def reset(self, order: TraversalOrder = TraversalOrder.NEWEST_FIRST, skip: int = 0) -> None:
        """Start a fresh traversal; keeps the last known total."""
        self.cursor = CursorState(
            anchor_id=0,
            skip=skip,
            order=order,
            known_total=self.cursor.known_total,
            total_refreshed_at=self.cursor.total_refreshed_at,
        )
        self.state = FetchState.IDLE
        self.records.clear()
        self.selection.clear()

    def find_record(self, primary_id: int) -> Optional[DisplayRecord]:
        for record in self.records:
            if record.primary_id == primary_id:
                return record
        return None
