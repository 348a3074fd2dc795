"""Archive items as fetched and the display records built from them."""
from dataclasses import dataclass, field
from typing import Any, List, Optional

# Media kinds as reported for a raw item
PHOTO = "Photo"
DOCUMENT = "Document"
WEB_LINK = "WebLink"
MEDIA = "Media"

# Kinds that render as attachments
RENDERABLE_KINDS = (PHOTO, DOCUMENT)


@dataclass(frozen=True)
class WebPreview:
    """Link preview attached to a message."""
    site_name: str
    title: str
    description: str
    url: str


@dataclass(frozen=True)
class RawItem:
    """One message as returned by the archive (newest first, IDs descending)."""
    id: int
    date: int  # unix seconds
    text: str = ""
    media_kind: str = ""  # "" | PHOTO | DOCUMENT | WEB_LINK | MEDIA
    grouped_id: int = 0  # album key, 0 = not part of an album
    web_preview: Optional[WebPreview] = None


@dataclass(frozen=True)
class Attachment:
    id: int
    type: str


@dataclass
class DisplayRecord:
    """User-facing aggregate of one or more raw items (an album folds into one)."""
    primary_id: int
    member_ids: List[int]
    date: int
    text: str = ""
    media_type: str = ""
    attachments: List[Attachment] = field(default_factory=list)
    grouped_id: int = 0
    web_preview: Optional[WebPreview] = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class SizeDescriptor:
    """One available rendition of a photo."""
    type: str  # Telegram size type, e.g. "s", "m", "x", "y", "w"
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class MediaRef:
    """Downloadable media of a message.

    ``handle`` is the transport's own object (e.g. a Telethon Photo) and is
    passed back to the transport unchanged when downloading.
    """
    message_id: int
    kind: str  # PHOTO | DOCUMENT | WEB_LINK
    sizes: tuple = ()
    mime_type: str = ""
    handle: Any = None
