from __future__ import annotations

from savedmsgs.core.grouping import group
from savedmsgs.models.message import DOCUMENT, MEDIA, PHOTO, WEB_LINK, Attachment, RawItem, WebPreview


def test_single_ungrouped_item_yields_one_record() -> None:
    records = group([RawItem(id=42, date=1, text="solo")])

    assert len(records) == 1
    assert records[0].primary_id == 42
    assert records[0].member_ids == [42]
    assert records[0].text == "solo"


def test_album_scenario_groups_into_three_records() -> None:
    batch = [
        RawItem(id=105, date=5, text="hi"),
        RawItem(id=104, date=4, media_kind=PHOTO, grouped_id=7),
        RawItem(id=103, date=4, text="caption", grouped_id=7),
        RawItem(id=102, date=2, text="bye"),
    ]

    records = group(batch)

    assert [r.primary_id for r in records] == [105, 104, 102]
    assert [r.member_ids for r in records] == [[105], [104, 103], [102]]
    album = records[1]
    assert album.text == "caption"
    assert album.attachments == [Attachment(id=104, type=PHOTO)]


def test_contiguous_albums_one_record_per_key_in_encounter_order() -> None:
    batch = [
        RawItem(id=20, date=1, media_kind=PHOTO, grouped_id=1),
        RawItem(id=19, date=1, media_kind=PHOTO, grouped_id=1),
        RawItem(id=18, date=1, media_kind=DOCUMENT, grouped_id=1),
        RawItem(id=17, date=1, media_kind=PHOTO, grouped_id=2),
        RawItem(id=16, date=1, media_kind=PHOTO, grouped_id=2),
    ]

    records = group(batch)

    assert [r.member_ids for r in records] == [[20, 19, 18], [17, 16]]
    assert [a.type for a in records[0].attachments] == [PHOTO, PHOTO, DOCUMENT]


def test_same_key_separated_by_other_item_is_not_merged() -> None:
    batch = [
        RawItem(id=3, date=1, media_kind=PHOTO, grouped_id=9),
        RawItem(id=2, date=1, text="between"),
        RawItem(id=1, date=1, media_kind=PHOTO, grouped_id=9),
    ]

    records = group(batch)

    assert [r.member_ids for r in records] == [[3], [2], [1]]


def test_first_caption_is_kept() -> None:
    batch = [
        RawItem(id=3, date=1, text="first", grouped_id=4),
        RawItem(id=2, date=1, text="second", grouped_id=4),
    ]

    assert group(batch)[0].text == "first"


def test_non_renderable_media_is_not_an_attachment() -> None:
    preview = WebPreview(site_name="Site", title="T", description="D", url="https://example.org")
    batch = [
        RawItem(id=8, date=1, text="https://example.org", media_kind=WEB_LINK, web_preview=preview),
        RawItem(id=7, date=1, media_kind=MEDIA),
    ]

    records = group(batch)

    assert records[0].attachments == []
    assert records[0].media_type == WEB_LINK
    assert records[0].web_preview == preview
    assert records[1].attachments == []
    assert records[1].media_type == MEDIA


def test_link_preview_of_merged_item_is_dropped() -> None:
    preview = WebPreview(site_name="", title="", description="", url="https://example.org")
    batch = [
        RawItem(id=2, date=1, media_kind=PHOTO, grouped_id=5),
        RawItem(id=1, date=1, media_kind=WEB_LINK, grouped_id=5, web_preview=preview),
    ]

    records = group(batch)

    assert len(records) == 1
    assert records[0].web_preview is None


def test_empty_batch() -> None:
    assert group([]) == []
