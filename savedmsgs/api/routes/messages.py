"""Stateless history pages, batch delete and media download."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from savedmsgs.api.errors import http_error, require_archive
from savedmsgs.api.state import AppState
from savedmsgs.config import DEFAULT_PAGE_SIZE
from savedmsgs.core.errors import ArchiveError
from savedmsgs.core.grouping import group
from savedmsgs.models.message import DisplayRecord

logger = logging.getLogger(__name__)

router = APIRouter()


def record_to_dict(r: DisplayRecord) -> dict:
    out = {
        "id": r.primary_id,
        "ids": list(r.member_ids),
        "date": r.date,
        "message": r.text,
        "attachments": [{"id": a.id, "type": a.type} for a in r.attachments],
    }
    if r.media_type:
        out["media_type"] = r.media_type
    if r.grouped_id:
        out["grouped_id"] = r.grouped_id
    if r.web_preview is not None:
        out["web_preview"] = {
            "site_name": r.web_preview.site_name,
            "title": r.web_preview.title,
            "description": r.web_preview.description,
            "url": r.web_preview.url,
        }
    return out


@router.get("/messages")
async def get_messages(
    offset_id: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
    add_offset: int = 0,
    state: AppState = Depends(require_archive),
):
    """One grouped page of Saved Messages older than offset_id."""
    if limit < 0:
        raise HTTPException(status_code=400, detail="Invalid limit")
    try:
        result = await state.fetcher.fetch(offset_id, add_offset, limit)
    except ArchiveError as e:
        logger.warning("Error fetching messages: %s", e)
        raise http_error(e) from e
    return {
        "messages": [record_to_dict(r) for r in group(result.items)],
        "total": result.total,
    }


class DeleteBody(BaseModel):
    ids: List[int]


@router.post("/delete")
async def delete_messages(body: DeleteBody, state: AppState = Depends(require_archive)):
    """Delete messages by ID (revoked for all devices)."""
    logger.info("Deleting %d messages", len(body.ids))
    try:
        await state.archive.delete_messages(body.ids)
    except ArchiveError as e:
        logger.warning("Error deleting messages: %s", e)
        raise http_error(e) from e
    return {"ok": True, "deleted": len(body.ids)}


@router.get("/media")
async def get_media(id: int = Query(...), state: AppState = Depends(require_archive)):
    """Raw bytes of a message's photo, document or link-preview image."""
    try:
        data, content_type = await state.media.resolve(id)
    except ArchiveError as e:
        logger.warning("Error fetching media for %d: %s", id, e)
        raise http_error(e) from e
    return Response(content=data, media_type=content_type)
