"""Data models for archive items, display records and cursors."""
from savedmsgs.models.cursor import CursorState, FetchState, TraversalOrder
from savedmsgs.models.message import (
    Attachment,
    DisplayRecord,
    MediaRef,
    RawItem,
    SizeDescriptor,
    WebPreview,
)

__all__ = [
    "Attachment",
    "CursorState",
    "DisplayRecord",
    "FetchState",
    "MediaRef",
    "RawItem",
    "SizeDescriptor",
    "TraversalOrder",
    "WebPreview",
]
