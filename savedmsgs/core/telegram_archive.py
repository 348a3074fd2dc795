"""Telegram "Saved Messages" archive via Telethon; uses a persisted session file."""
import asyncio
import logging
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

from telethon import TelegramClient
from telethon.errors import MessageIdInvalidError, RPCError
from telethon.tl.functions.messages import GetHistoryRequest
from telethon.tl.types import (
    Document,
    InputPeerSelf,
    Message,
    MessageMediaDocument,
    MessageMediaPhoto,
    MessageMediaWebPage,
    Photo,
    PhotoSize,
    PhotoSizeProgressive,
    WebPage,
)

from savedmsgs.config import SESSION_PATH, TG_APP_HASH, TG_APP_ID
from savedmsgs.core.errors import NotFound, TransportError
from savedmsgs.models.message import (
    DOCUMENT,
    MEDIA,
    PHOTO,
    WEB_LINK,
    MediaRef,
    RawItem,
    SizeDescriptor,
    WebPreview,
)

logger = logging.getLogger(__name__)

SELF = "me"


@contextmanager
def _remote_call(action: str):
    """Translate Telethon and network failures into TransportError."""
    try:
        yield
    except MessageIdInvalidError as e:
        raise NotFound(f"{action}: {e}") from e
    except (RPCError, ConnectionError, OSError, asyncio.TimeoutError) as e:
        raise TransportError(f"{action} failed: {e}") from e


def credentials_configured() -> bool:
    return bool(TG_APP_ID and TG_APP_HASH)


def media_kind(media) -> str:
    """Classify a Telethon message media."""
    if media is None:
        return ""
    if isinstance(media, MessageMediaPhoto):
        return PHOTO
    if isinstance(media, MessageMediaDocument):
        return DOCUMENT
    if isinstance(media, MessageMediaWebPage):
        return WEB_LINK
    return MEDIA


def web_preview(media) -> Optional[WebPreview]:
    if not isinstance(media, MessageMediaWebPage) or not isinstance(media.webpage, WebPage):
        return None
    wp = media.webpage
    return WebPreview(
        site_name=wp.site_name or "",
        title=wp.title or "",
        description=wp.description or "",
        url=wp.url or "",
    )


def to_raw_item(message: Message) -> RawItem:
    return RawItem(
        id=message.id,
        date=int(message.date.timestamp()) if message.date else 0,
        text=message.message or "",
        media_kind=media_kind(message.media),
        grouped_id=message.grouped_id or 0,
        web_preview=web_preview(message.media),
    )


def photo_sizes(photo: Photo) -> tuple:
    """Size descriptors of a photo in the order Telegram lists them."""
    return tuple(
        SizeDescriptor(type=s.type, width=s.w, height=s.h)
        for s in photo.sizes
        if isinstance(s, (PhotoSize, PhotoSizeProgressive))
    )


def to_media_ref(message: Message) -> Optional[MediaRef]:
    """Media of a message as a downloadable reference, or None if nothing can be downloaded."""
    media = message.media
    if isinstance(media, MessageMediaPhoto) and isinstance(media.photo, Photo):
        return MediaRef(message.id, PHOTO, sizes=photo_sizes(media.photo), handle=media.photo)
    if isinstance(media, MessageMediaDocument) and isinstance(media.document, Document):
        doc = media.document
        return MediaRef(message.id, DOCUMENT, mime_type=doc.mime_type or "", handle=doc)
    if isinstance(media, MessageMediaWebPage):
        wp = media.webpage
        # Pending or empty previews have no photo yet
        if isinstance(wp, WebPage) and isinstance(wp.photo, Photo):
            return MediaRef(message.id, WEB_LINK, sizes=photo_sizes(wp.photo), handle=wp.photo)
    return None


class TelegramArchive:
    """ArchiveTransport over the signed-in user's Saved Messages."""

    def __init__(self, client: Optional[TelegramClient] = None) -> None:
        self._client = client

    async def start(self) -> None:
        """Connect and sign in; prompts for phone, code and 2FA password on first run."""
        if self._client is None:
            self._client = TelegramClient(str(SESSION_PATH), int(TG_APP_ID), TG_APP_HASH)
        await self._client.start()
        me = await self._client.get_me()
        logger.info(
            "Logged in as %s %s (@%s)", me.first_name or "", me.last_name or "", me.username or ""
        )

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.disconnect()

    @property
    def client(self) -> TelegramClient:
        if self._client is None:
            raise TransportError("Telegram client not initialized")
        return self._client

    async def get_history(
        self, offset_id: int, add_offset: int, limit: int
    ) -> Tuple[List[RawItem], int]:
        with _remote_call("get history"):
            history = await self.client(
                GetHistoryRequest(
                    peer=InputPeerSelf(),
                    offset_id=offset_id,
                    offset_date=None,
                    add_offset=add_offset,
                    limit=limit,
                    max_id=0,
                    min_id=0,
                    hash=0,
                )
            )
        messages = getattr(history, "messages", None) or []
        # messages.Messages carries no count: the whole history fit in the response
        total = getattr(history, "count", None)
        if total is None:
            total = len(messages)
        logger.debug("Got %s. Count: %d, Len: %d", type(history).__name__, total, len(messages))
        items = [to_raw_item(m) for m in messages if isinstance(m, Message)]
        return items, total

    async def get_media(self, message_id: int) -> Optional[MediaRef]:
        with _remote_call(f"get message {message_id}"):
            message = await self.client.get_messages(SELF, ids=message_id)
        if not isinstance(message, Message):
            return None
        return to_media_ref(message)

    async def download(self, ref: MediaRef, size_type: str = "") -> bytes:
        with _remote_call(f"download media of message {ref.message_id}"):
            data = await self.client.download_media(ref.handle, file=bytes, thumb=size_type or None)
        return data or b""

    async def delete_messages(self, ids: Sequence[int]) -> None:
        if not ids:
            return
        with _remote_call("delete messages"):
            await self.client.delete_messages(SELF, list(ids), revoke=True)
