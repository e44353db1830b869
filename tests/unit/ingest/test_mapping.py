"""Tests for manual column mapping."""

import pytest

from edgelog.core.errors import MappingError
from edgelog.ingest.detect import CompletedTradeRow
from edgelog.ingest.mapping import DEFAULT_SIZE, ColumnMapping, resolve_mapping

HEADERS = ["Symbol", "Side", "Open", "Close", "Opened", "Closed", "Qty", "Profit"]
ROW = ["NQ", "Long", "15000", "15010", "2024-03-04 09:30", "2024-03-04 09:40", "2", "1000"]


class TestColumnMapping:
    def test_from_dict_accepts_camel_case(self):
        mapping = ColumnMapping.from_dict({
            "instrument": "Symbol", "entryPrice": "Open", "entryTime": "Opened", "qty": "Qty",
        })
        assert mapping.entry_price == "Open"
        assert mapping.entry_time == "Opened"
        assert mapping.quantity == "Qty"

    def test_blank_column_is_unmapped(self):
        mapping = ColumnMapping.from_dict({"instrument": "Symbol", "pnl": ""})
        assert mapping.pnl is None

    def test_unknown_field_rejected(self):
        with pytest.raises(MappingError) as exc_info:
            ColumnMapping.from_dict({"instrument": "Symbol", "fees": "Commission"})
        assert exc_info.value.unknown_fields == ["fees"]

    def test_missing_required_fields(self):
        mapping = ColumnMapping(instrument="Symbol")
        with pytest.raises(MappingError) as exc_info:
            mapping.validate(HEADERS)
        assert exc_info.value.missing_fields == ["entry_price", "entry_time"]
        assert "entry_price" in str(exc_info.value)

    def test_unknown_column_rejected(self):
        mapping = ColumnMapping(instrument="Ticker", entry_price="Open", entry_time="Opened")
        with pytest.raises(MappingError) as exc_info:
            mapping.validate(HEADERS)
        assert exc_info.value.missing_fields == []
        assert exc_info.value.unknown_columns == ["Ticker"]


class TestResolveMapping:
    def test_full_mapping(self):
        mapping = ColumnMapping(
            instrument="Symbol", direction="Side", entry_price="Open", exit_price="Close",
            quantity="Qty", entry_time="Opened", exit_time="Closed", pnl="Profit",
        )
        assert resolve_mapping(HEADERS, [ROW], mapping) == [CompletedTradeRow(
            contract_name="NQ", type="Long", size="2", entry_price="15000",
            exit_price="15010", entered_at="2024-03-04 09:30",
            exited_at="2024-03-04 09:40", pnl="1000",
        )]

    def test_defaults_for_unmapped_size_and_exit_time(self):
        mapping = ColumnMapping(instrument="Symbol", entry_price="Open", entry_time="Opened")
        [row] = resolve_mapping(HEADERS, [ROW], mapping)
        assert row.size == DEFAULT_SIZE
        assert row.exited_at == row.entered_at == "2024-03-04 09:30"
        assert row.pnl is None
        assert row.type is None

    def test_short_row_gives_none_cells(self):
        mapping = ColumnMapping(instrument="Symbol", entry_price="Open", entry_time="Opened", pnl="Profit")
        [row] = resolve_mapping(HEADERS, [["ES", "Short", "4500"]], mapping)
        assert row.contract_name == "ES"
        assert row.entered_at is None
        assert row.pnl is None

    def test_invalid_mapping_raises_before_resolving(self):
        with pytest.raises(MappingError):
            resolve_mapping(HEADERS, [ROW], ColumnMapping())
