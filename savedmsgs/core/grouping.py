"""Fold a raw history batch into display records.

Albums arrive from the archive as contiguous runs of messages sharing a
``grouped_id``. A single forward pass merges each item into the record
directly before it when both carry the same non-zero key. Only that one
record is eligible, so an album split by another message, or by a page
boundary, yields separate records.
"""
from typing import Iterable, List

from savedmsgs.models.message import RENDERABLE_KINDS, Attachment, DisplayRecord, RawItem


def _new_record(item: RawItem) -> DisplayRecord:
    record = DisplayRecord(
        primary_id=item.id,
        member_ids=[item.id],
        date=item.date,
        text=item.text,
        media_type=item.media_kind,
        grouped_id=item.grouped_id,
        web_preview=item.web_preview,
    )
    if item.media_kind in RENDERABLE_KINDS:
        record.attachments.append(Attachment(id=item.id, type=item.media_kind))
    return record


def _merge(record: DisplayRecord, item: RawItem) -> None:
    record.member_ids.append(item.id)
    # Album captions usually sit on a single part
    if not record.text and item.text:
        record.text = item.text
    if item.media_kind in RENDERABLE_KINDS:
        record.attachments.append(Attachment(id=item.id, type=item.media_kind))


def group(items: Iterable[RawItem]) -> List[DisplayRecord]:
    """Return display records in first-occurrence order for one batch."""
    records: List[DisplayRecord] = []
    for item in items:
        if item.grouped_id and records and records[-1].grouped_id == item.grouped_id:
            _merge(records[-1], item)
        else:
            records.append(_new_record(item))
    return records
