"""Resolve a message's media to bytes and a content type."""
import logging
from typing import Optional, Sequence, Tuple

from savedmsgs.core.archive_fetcher import ArchiveTransport
from savedmsgs.core.errors import NotFound, TransportError
from savedmsgs.models.message import DOCUMENT, PHOTO, WEB_LINK, SizeDescriptor

logger = logging.getLogger(__name__)

JPEG_MIME = "image/jpeg"
DEFAULT_MIME = "application/octet-stream"

LARGE = "large"
MEDIUM = "medium"

# Telegram photo size types by tier; other types (s, m, i, ...) are thumbnails
SIZE_TIERS = {
    "w": LARGE,
    "y": LARGE,
    "x": MEDIUM,
}


def size_tier(descriptor: SizeDescriptor) -> str:
    """Tier of a size descriptor; unknown types are their own tier name."""
    return SIZE_TIERS.get(descriptor.type, descriptor.type)


def select_size(sizes: Sequence[SizeDescriptor]) -> SizeDescriptor:
    """Pick the rendition to download.

    First large size wins; otherwise the first medium one; otherwise the
    last listed size. Raises NotFound when there are no sizes.
    """
    if not sizes:
        raise NotFound("no photo sizes available")
    medium: Optional[SizeDescriptor] = None
    for descriptor in sizes:
        tier = size_tier(descriptor)
        if tier == LARGE:
            return descriptor
        if tier == MEDIUM and medium is None:
            medium = descriptor
    if medium is not None:
        return medium
    return sizes[-1]


class MediaResolver:
    """Looks up a message's media and downloads the best rendition."""

    def __init__(self, transport: ArchiveTransport) -> None:
        self._transport = transport

    async def resolve(self, message_id: int) -> Tuple[bytes, str]:
        """Return (data, mime_type) for the media of ``message_id``.

        Link previews resolve to the preview photo of the host message.
        """
        logger.info("Fetching media for message %d", message_id)
        ref = await self._transport.get_media(message_id)
        if ref is None:
            raise NotFound(f"message {message_id} has no media")

        if ref.kind in (PHOTO, WEB_LINK):
            size = select_size(ref.sizes)
            logger.debug("Selected size '%s' for message %d", size.type, message_id)
            data = await self._transport.download(ref, size.type)
            mime_type = JPEG_MIME
        elif ref.kind == DOCUMENT:
            data = await self._transport.download(ref)
            mime_type = ref.mime_type or DEFAULT_MIME
        else:
            raise NotFound(f"unsupported media type {ref.kind!r} for message {message_id}")

        if not data:
            raise TransportError(f"downloaded 0 bytes for message {message_id}")
        return data, mime_type
