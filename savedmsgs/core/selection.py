"""Selection of visible records and batched deletion."""
import logging
from typing import Iterable

from savedmsgs.core.archive_fetcher import ArchiveTransport
from savedmsgs.core.session import HistorySession

logger = logging.getLogger(__name__)


def toggle(session: HistorySession, ids: Iterable[int], selected: bool) -> None:
    """Add or remove message IDs from the selection. Idempotent."""
    if selected:
        session.selection.update(ids)
    else:
        session.selection.difference_update(ids)


def select_empty(session: HistorySession) -> int:
    """Select every visible record without text; returns how many were newly selected."""
    added = 0
    for record in session.records:
        if not record.is_empty:
            continue
        if session.selection.issuperset(record.member_ids):
            continue
        session.selection.update(record.member_ids)
        added += 1
    return added


async def delete_selected(session: HistorySession, transport: ArchiveTransport) -> int:
    """Delete the whole selection in one request and drop the deleted records.

    The archive reports success for the batch only, so every selected ID is
    assumed deleted. A record is removed when its primary ID was selected.
    On failure the selection and records are left untouched.
    """
    if not session.selection:
        return 0
    ids = sorted(session.selection, reverse=True)
    logger.info("Deleting %d messages", len(ids))
    await transport.delete_messages(ids)

    deleted = set(ids)
    session.records[:] = [r for r in session.records if r.primary_id not in deleted]
    # IDs toggled while the request was in flight stay selected
    session.selection.difference_update(deleted)
    logger.info("Successfully deleted %d messages", len(ids))
    return len(ids)
