"""Cursor-bounded history fetches against the archive transport."""
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from savedmsgs.config import MAX_PAGE_SIZE, MIN_PAGE_SIZE
from savedmsgs.core.errors import InvalidInput
from savedmsgs.models.message import MediaRef, RawItem

logger = logging.getLogger(__name__)


class ArchiveTransport(Protocol):
    """Remote archive operations the core depends on."""

    async def get_history(
        self, offset_id: int, add_offset: int, limit: int
    ) -> Tuple[List[RawItem], int]:
        """Return up to ``limit`` items older than ``offset_id`` shifted by ``add_offset``, and the total."""
        ...

    async def get_media(self, message_id: int) -> Optional[MediaRef]:
        """Return the media of a message, or None if the message or its media is gone."""
        ...

    async def download(self, ref: MediaRef, size_type: str = "") -> bytes:
        ...

    async def delete_messages(self, ids: Sequence[int]) -> None:
        ...


@dataclass
class FetchResult:
    items: List[RawItem]
    total: int


def clamp_page_size(page_size: int) -> int:
    """Clamp a page size into [MIN_PAGE_SIZE, MAX_PAGE_SIZE]."""
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, int(page_size)))


class ArchiveFetcher:
    """Issues one history request per call; never retries or caches."""

    def __init__(self, transport: ArchiveTransport) -> None:
        self._transport = transport

    async def fetch(self, anchor_id: int, skip: int, page_size: int) -> FetchResult:
        """Fetch one batch in archive order (newest first).

        An empty ``items`` list means the archive is exhausted in that direction.
        Raises TransportError on remote failure and InvalidInput for a negative anchor.
        """
        if anchor_id < 0:
            raise InvalidInput(f"invalid anchor id: {anchor_id}")
        limit = clamp_page_size(page_size)
        logger.info(
            "Fetching messages (limit: %d, offset: %d, add_offset: %d)", limit, anchor_id, skip
        )
        items, total = await self._transport.get_history(anchor_id, skip, limit)
        logger.debug("Got %d items, total %d", len(items), total)
        return FetchResult(items=list(items), total=total)
