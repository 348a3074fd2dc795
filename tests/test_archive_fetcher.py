from __future__ import annotations

import pytest

from savedmsgs.core.archive_fetcher import ArchiveFetcher, clamp_page_size
from savedmsgs.core.errors import InvalidInput, TransportError


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 1), (1, 1), (20, 20), (100, 100), (250, 100), (-5, 1)],
)
def test_clamp_page_size(value: int, expected: int) -> None:
    assert clamp_page_size(value) == expected


def test_fetch_newest_page(archive, run) -> None:
    result = run(ArchiveFetcher(archive).fetch(0, 0, 3))

    assert [i.id for i in result.items] == [110, 109, 108]
    assert result.total == 10


def test_fetch_clamps_limit_and_passes_negative_skip(archive, run) -> None:
    fetcher = ArchiveFetcher(archive)

    run(fetcher.fetch(105, -3, 500))

    assert archive.history_calls == [(105, -3, 100)]


def test_fetch_past_oldest_is_empty_not_error(archive, run) -> None:
    result = run(ArchiveFetcher(archive).fetch(101, 0, 20))

    assert result.items == []


def test_fetch_rejects_negative_anchor(archive, run) -> None:
    with pytest.raises(InvalidInput):
        run(ArchiveFetcher(archive).fetch(-1, 0, 20))
    assert archive.history_calls == []


def test_fetch_propagates_transport_error(archive, run) -> None:
    archive.fail_history = True

    with pytest.raises(TransportError):
        run(ArchiveFetcher(archive).fetch(0, 0, 20))
