"""Manual column mapping for exports the detector cannot classify.

The user picks, for each canonical field, which source column holds it.
The resolver then reshapes every data row into a
:class:`CompletedTradeRow`, which feeds the normal completed-trade path.

Usage::

    mapping = ColumnMapping.from_dict({
        "instrument": "Symbol",
        "entry_price": "Avg Open",
        "entry_time": "Opened",
    })
    rows = resolve_mapping(headers, raw_rows, mapping)
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping

from edgelog.core.errors import MappingError

from .detect import CompletedTradeRow

REQUIRED_FIELDS = ("instrument", "entry_price", "entry_time")
DEFAULT_SIZE = "1"

# Accept the camelCase spellings used by the import wizard.
_FIELD_ALIASES = {
    "entryPrice": "entry_price",
    "exitPrice": "exit_price",
    "qty": "quantity",
    "size": "quantity",
    "entryTime": "entry_time",
    "exitTime": "exit_time",
}


@dataclass(frozen=True)
class ColumnMapping:
    """Canonical field -> source column name (``None`` when unmapped)."""

    instrument: str | None = None
    direction: str | None = None
    entry_price: str | None = None
    exit_price: str | None = None
    quantity: str | None = None
    entry_time: str | None = None
    exit_time: str | None = None
    pnl: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, str | None]) -> ColumnMapping:
        known = {f.name for f in fields(cls)}
        values: dict[str, str | None] = {}
        unknown: list[str] = []
        for key, column in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            values[name] = column or None
        if unknown:
            raise MappingError([], unknown_fields=unknown)
        return cls(**values)

    def validate(self, headers: list[str]) -> None:
        """Raise :class:`MappingError` unless the mapping is usable."""
        missing = [name for name in REQUIRED_FIELDS if not getattr(self, name)]
        unknown = [
            column
            for f in fields(self)
            if (column := getattr(self, f.name)) and column not in headers
        ]
        if missing or unknown:
            raise MappingError(missing, unknown_columns=unknown)


def resolve_mapping(
    headers: list[str],
    rows: list[list[str]],
    mapping: ColumnMapping,
) -> list[CompletedTradeRow]:
    """Reshape *rows* into completed-trade rows according to *mapping*."""
    mapping.validate(headers)
    index = {h: i for i, h in reversed(list(enumerate(headers)))}

    def cell(cols: list[str], column: str | None) -> str | None:
        if column is None:
            return None
        i = index[column]
        return cols[i] if i < len(cols) else None

    # Unmapped size means one unit per row; unmapped exit time collapses
    # the round trip onto its entry instant.
    exit_column = mapping.exit_time or mapping.entry_time
    return [
        CompletedTradeRow(
            contract_name=cell(cols, mapping.instrument),
            type=cell(cols, mapping.direction),
            size=cell(cols, mapping.quantity) if mapping.quantity else DEFAULT_SIZE,
            entry_price=cell(cols, mapping.entry_price),
            exit_price=cell(cols, mapping.exit_price),
            entered_at=cell(cols, mapping.entry_time),
            exited_at=cell(cols, exit_column),
            pnl=cell(cols, mapping.pnl),
        )
        for cols in rows
    ]
