"""Trade annotation and tagging edits.

Every function takes a trade and returns an edited copy.

Saving a chart annotation also writes through to the trade: its text is
added to the note field of its category as ``"[Chart] <text>"``, and an
attached tag (setup / mistake / success / mindset) is applied to the
trade's tag fields.
"""

from __future__ import annotations

from edgelog.core.enums import NoteCategory, TagCategory, TagType
from edgelog.core.errors import TradeNotFoundError
from edgelog.core.models import Annotation, Trade, TradeNotes

CHART_NOTE_PREFIX = "[Chart] "

_TAG_FIELDS = {
    TagType.MISTAKE: TagCategory.MISTAKES.value,
    TagType.SUCCESS: TagCategory.SUCCESSES.value,
    TagType.MINDSET: TagCategory.MINDSETS.value,
}


def _chart_note(text: str) -> str:
    return f"{CHART_NOTE_PREFIX}{text}"


def _append_line(note: str, line: str) -> str:
    return f"{note}\n{line}" if note else line


def _with_note(notes: TradeNotes, category: NoteCategory, value: str) -> TradeNotes:
    return notes.model_copy(update={category.value: value})


def _find_annotation(trade: Trade, annotation_id: str | int) -> Annotation | None:
    return next((a for a in trade.annotations if a.id == annotation_id), None)


def _apply_tag(trade: Trade, tag_type: TagType, value: str) -> dict:
    if tag_type == TagType.SETUP:
        return {"setup": value}
    field_name = _TAG_FIELDS[tag_type]
    current = getattr(trade, field_name)
    if value in current:
        return {}
    return {field_name: [*current, value]}


def save_annotation(trade: Trade, annotation: Annotation) -> Trade:
    """Add *annotation*, or replace the existing one with the same id."""
    previous = _find_annotation(trade, annotation.id)
    category = annotation.category
    note = getattr(trade.notes, category.value)
    new_line = _chart_note(annotation.text)

    if previous is None:
        annotations = [*trade.annotations, annotation]
        note = _append_line(note, new_line)
    else:
        annotations = [annotation if a.id == annotation.id else a for a in trade.annotations]
        if previous.text != annotation.text:
            old_line = _chart_note(previous.text)
            if old_line in note:
                note = note.replace(old_line, new_line, 1)
            else:
                note = _append_line(note, new_line)

    update: dict = {
        "annotations": annotations,
        "notes": _with_note(trade.notes, category, note),
    }
    if annotation.applies_tag:
        update.update(_apply_tag(trade, annotation.tag_type, annotation.tag_value))
    return trade.model_copy(update=update)


def delete_annotation(trade: Trade, annotation_id: str | int) -> Trade:
    """Remove an annotation.  Notes and tags it produced are kept."""
    if _find_annotation(trade, annotation_id) is None:
        return trade
    return trade.model_copy(update={
        "annotations": [a for a in trade.annotations if a.id != annotation_id],
    })


def move_annotation(trade: Trade, annotation_id: str | int, x: float, y: float) -> Trade:
    """Reposition an annotation, clamping to the 0-100 chart area."""
    x = max(0.0, min(100.0, x))
    y = max(0.0, min(100.0, y))
    return trade.model_copy(update={
        "annotations": [
            a.model_copy(update={"x": x, "y": y}) if a.id == annotation_id else a
            for a in trade.annotations
        ],
    })


def toggle_tag(trade: Trade, category: TagCategory | str, value: str) -> Trade:
    """Add *value* to a tag field if absent, otherwise remove it."""
    field_name = TagCategory(category).value
    current = getattr(trade, field_name)
    if value in current:
        updated = [t for t in current if t != value]
    else:
        updated = [*current, value]
    return trade.model_copy(update={field_name: updated})


def set_setup(trade: Trade, setup: str) -> Trade:
    return trade.model_copy(update={"setup": setup})


def update_note(trade: Trade, category: NoteCategory | str, text: str) -> Trade:
    return trade.model_copy(update={
        "notes": _with_note(trade.notes, NoteCategory(category), text),
    })


def set_chart_image(trade: Trade, reference: str) -> Trade:
    return trade.model_copy(update={"chart_image": reference})


def clear_chart_image(trade: Trade) -> Trade:
    """Drop the chart and every annotation anchored to it."""
    return trade.model_copy(update={"chart_image": None, "annotations": []})


def edit_trade(trades: list[Trade], trade_id: str, edit, *args, **kwargs) -> list[Trade]:
    """Apply ``edit(trade, *args, **kwargs)`` to one trade of a collection."""
    if not any(t.id == trade_id for t in trades):
        raise TradeNotFoundError(trade_id)
    return [edit(t, *args, **kwargs) if t.id == trade_id else t for t in trades]
