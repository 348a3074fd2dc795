from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from savedmsgs.core.errors import TransportError
from savedmsgs.models.message import MediaRef, RawItem


class FakeArchive:
    """In-memory archive with Telegram's offset_id/add_offset window semantics."""

    def __init__(self, items: list[RawItem] | None = None, total_override: int | None = None) -> None:
        # Newest first, like the real history
        self.items = sorted(items or [], key=lambda i: i.id, reverse=True)
        self.total_override = total_override
        self.history_calls: list[tuple[int, int, int]] = []
        self.deleted: list[list[int]] = []
        self.media: dict[int, MediaRef] = {}
        self.blobs: dict[tuple[int, str], bytes] = {}
        self.download_calls: list[tuple[int, str]] = []
        self.fail_history = False
        self.fail_delete = False
        self.gate: asyncio.Event | None = None
        self.delete_gate: asyncio.Event | None = None

    async def get_history(self, offset_id: int, add_offset: int, limit: int):
        self.history_calls.append((offset_id, add_offset, limit))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_history:
            raise TransportError("history unavailable")
        if offset_id == 0:
            pos = 0
        else:
            pos = next((n for n, i in enumerate(self.items) if i.id < offset_id), len(self.items))
        start = pos + add_offset
        window = self.items[max(0, start):max(0, start + limit)]
        total = self.total_override if self.total_override is not None else len(self.items)
        return list(window), total

    async def get_media(self, message_id: int):
        return self.media.get(message_id)

    async def download(self, ref: MediaRef, size_type: str = "") -> bytes:
        self.download_calls.append((ref.message_id, size_type))
        return self.blobs.get((ref.message_id, size_type), b"")

    async def delete_messages(self, ids) -> None:
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if self.fail_delete:
            raise TransportError("delete failed")
        self.deleted.append(list(ids))
        gone = set(ids)
        self.items = [i for i in self.items if i.id not in gone]


def _items(first: int, last: int) -> list[RawItem]:
    """Plain text items with IDs first..last inclusive."""
    return [RawItem(id=n, date=1_700_000_000 + n, text=f"note {n}") for n in range(first, last + 1)]


@pytest.fixture
def make_archive() -> Callable[..., FakeArchive]:
    return FakeArchive


@pytest.fixture
def archive() -> FakeArchive:
    return FakeArchive(_items(101, 110))


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def make_items() -> Callable[[int, int], list[RawItem]]:
    return _items
