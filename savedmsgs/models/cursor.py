"""Cursor and traversal state for a history session."""
from dataclasses import dataclass
from enum import Enum


class TraversalOrder(str, Enum):
    NEWEST_FIRST = "newest-first"
    OLDEST_FIRST = "oldest-first"


class FetchState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"


@dataclass
class CursorState:
    """Where the next page starts.

    ``skip`` is the archive's add_offset: negative values step toward newer
    messages from ``anchor_id``.
    """
    anchor_id: int = 0
    skip: int = 0
    order: TraversalOrder = TraversalOrder.NEWEST_FIRST
    known_total: int = 0
    total_refreshed_at: float = 0.0  # time.monotonic() of last total update
