"""Browsing sessions: paging cursor, jumps, selection and deletion."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from savedmsgs.api.errors import http_error, require_archive
from savedmsgs.api.routes.messages import record_to_dict
from savedmsgs.api.state import AppState
from savedmsgs.config import DEFAULT_PAGE_SIZE
from savedmsgs.core import selection
from savedmsgs.core.errors import ArchiveError
from savedmsgs.core.pagination import Page
from savedmsgs.core.session import HistorySession

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateSessionBody(BaseModel):
    limit: int = DEFAULT_PAGE_SIZE


class LimitBody(BaseModel):
    limit: int


class SelectionBody(BaseModel):
    """Either explicit message IDs or the primary ID of a visible record."""
    ids: Optional[List[int]] = None
    record_id: Optional[int] = None
    selected: bool = True


def _page_to_dict(page: Page) -> dict:
    return {
        "messages": [record_to_dict(r) for r in page.records],
        "total": page.total,
        "exhausted": page.exhausted,
        "busy": page.busy,
        "order": page.order.value,
    }


def _session_to_dict(session: HistorySession) -> dict:
    cursor = session.cursor
    return {
        "session_id": session.id,
        "limit": session.page_size,
        "state": session.state.value,
        "order": cursor.order.value,
        "anchor_id": cursor.anchor_id,
        "skip": cursor.skip,
        "total": cursor.known_total,
        "selected": sorted(session.selection, reverse=True),
        "messages": [record_to_dict(r) for r in session.records],
    }


def _get_session(session_id: str, state: AppState) -> HistorySession:
    session = state.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/")
async def create_session(
    body: CreateSessionBody | None = Body(None),
    state: AppState = Depends(require_archive),
):
    """Create a session positioned at the newest message; nothing is fetched yet."""
    limit = body.limit if body else DEFAULT_PAGE_SIZE
    if limit < 0:
        raise HTTPException(status_code=400, detail="Invalid limit")
    session = state.create_session(page_size=limit)
    return _session_to_dict(session)


@router.get("/{session_id}")
async def get_session(session_id: str, state: AppState = Depends(require_archive)):
    return _session_to_dict(_get_session(session_id, state))


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, state: AppState = Depends(require_archive)):
    if not state.drop_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("/{session_id}/next")
async def next_page(session_id: str, state: AppState = Depends(require_archive)):
    """Load the next page (older, or newer after a jump to the oldest)."""
    session = _get_session(session_id, state)
    try:
        page = await state.pagination.next_page(session)
    except ArchiveError as e:
        logger.warning("Error fetching messages: %s", e)
        raise http_error(e) from e
    return _page_to_dict(page)


@router.post("/{session_id}/newest")
async def jump_to_newest(session_id: str, state: AppState = Depends(require_archive)):
    session = _get_session(session_id, state)
    try:
        page = await state.pagination.jump_to_newest(session)
    except ArchiveError as e:
        logger.warning("Error fetching newest messages: %s", e)
        raise http_error(e) from e
    return _page_to_dict(page)


@router.post("/{session_id}/oldest")
async def jump_to_oldest(session_id: str, state: AppState = Depends(require_archive)):
    session = _get_session(session_id, state)
    try:
        page = await state.pagination.jump_to_oldest(session)
    except ArchiveError as e:
        logger.warning("Error fetching oldest messages: %s", e)
        raise http_error(e) from e
    return _page_to_dict(page)


@router.put("/{session_id}/limit")
async def change_limit(session_id: str, body: LimitBody, state: AppState = Depends(require_archive)):
    """Change the page size; clears the view and selection and reloads from the newest."""
    session = _get_session(session_id, state)
    try:
        page = await state.pagination.change_page_size(session, body.limit)
    except ArchiveError as e:
        raise http_error(e) from e
    return _page_to_dict(page)


@router.post("/{session_id}/selection")
async def toggle_selection(session_id: str, body: SelectionBody, state: AppState = Depends(require_archive)):
    """Select or unselect message IDs. A record_id expands to all messages of that record."""
    session = _get_session(session_id, state)
    ids = list(body.ids or [])
    if body.record_id is not None:
        record = session.find_record(body.record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Record not visible in session")
        ids.extend(record.member_ids)
    selection.toggle(session, ids, body.selected)
    return {"selected": len(session.selection)}


@router.post("/{session_id}/selection/empty")
async def select_empty(session_id: str, state: AppState = Depends(require_archive)):
    """Select every visible message without text."""
    session = _get_session(session_id, state)
    added = selection.select_empty(session)
    return {"added": added, "selected": len(session.selection)}


@router.post("/{session_id}/delete")
async def delete_selected(session_id: str, state: AppState = Depends(require_archive)):
    session = _get_session(session_id, state)
    try:
        deleted = await selection.delete_selected(session, state.archive)
    except ArchiveError as e:
        logger.warning("Error deleting messages: %s", e)
        raise http_error(e) from e
    return {"ok": True, "deleted": deleted, "remaining": len(session.records)}
