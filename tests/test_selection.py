from __future__ import annotations

import asyncio

import pytest

from savedmsgs.core import selection
from savedmsgs.core.errors import TransportError
from savedmsgs.core.grouping import group
from savedmsgs.core.session import HistorySession
from savedmsgs.models.message import PHOTO, RawItem


@pytest.fixture
def session() -> HistorySession:
    s = HistorySession(page_size=10)
    s.records.extend(group([
        RawItem(id=105, date=5, text="hi"),
        RawItem(id=104, date=4, media_kind=PHOTO, grouped_id=7),
        RawItem(id=103, date=4, media_kind=PHOTO, grouped_id=7),
        RawItem(id=102, date=2, text="   "),
        RawItem(id=101, date=1, text="bye"),
    ]))
    return s


def _primary_ids(session: HistorySession) -> list[int]:
    return [r.primary_id for r in session.records]


def test_toggle_is_idempotent(session) -> None:
    selection.toggle(session, [104, 103], True)
    selection.toggle(session, [104, 103], True)
    assert session.selection == {104, 103}

    selection.toggle(session, [103], False)
    selection.toggle(session, [103], False)
    assert session.selection == {104}


def test_delete_whole_record_removes_it_and_clears_selection(session, archive, run) -> None:
    selection.toggle(session, [104, 103], True)

    deleted = run(selection.delete_selected(session, archive))

    assert deleted == 2
    assert archive.deleted == [[104, 103]]
    assert _primary_ids(session) == [105, 102, 101]
    assert session.selection == set()


def test_failed_delete_leaves_state_untouched(session, archive, run) -> None:
    archive.fail_delete = True
    selection.toggle(session, [104, 103], True)

    with pytest.raises(TransportError):
        run(selection.delete_selected(session, archive))

    assert session.selection == {104, 103}
    assert _primary_ids(session) == [105, 104, 102, 101]


def test_deleting_only_non_anchor_member_keeps_record(session, archive, run) -> None:
    selection.toggle(session, [103], True)

    run(selection.delete_selected(session, archive))

    assert _primary_ids(session) == [105, 104, 102, 101]
    assert session.selection == set()


def test_empty_selection_sends_nothing(session, archive, run) -> None:
    assert run(selection.delete_selected(session, archive)) == 0
    assert archive.deleted == []


def test_select_empty_picks_records_without_text(session) -> None:
    added = selection.select_empty(session)

    assert added == 2
    assert session.selection == {104, 103, 102}
    assert selection.select_empty(session) == 0


def test_toggle_during_delete_survives_completion(session, archive) -> None:
    selection.toggle(session, [105], True)

    async def scenario():
        archive.delete_gate = asyncio.Event()
        task = asyncio.ensure_future(selection.delete_selected(session, archive))
        await asyncio.sleep(0)
        selection.toggle(session, [101], True)
        archive.delete_gate.set()
        return await task

    deleted = asyncio.run(scenario())

    assert deleted == 1
    assert archive.deleted == [[105]]
    assert session.selection == {101}
    assert _primary_ids(session) == [104, 102, 101]
