"""Tests for format detection."""

from edgelog.core.enums import FormatKind
from edgelog.ingest.detect import (
    CompletedTradeFormat,
    CompletedTradeRow,
    RawExecutionFormat,
    UnresolvedFormat,
    detect_format,
    looks_like_execution,
)

COMPLETED_HEADER = "ContractName,Type,Size,EntryPrice,ExitPrice,EnteredAt,ExitedAt,PnL"
RAW_HEADER = "Instrument,Side,Time,Price,Qty"


class TestCompletedTradeDetection:
    def test_detects_by_contract_and_pnl_columns(self):
        text = f"{COMPLETED_HEADER}\nES,Long,1,4500,4490,2024-03-04 09:30,2024-03-04 09:45,-500"
        detected = detect_format(text)
        assert isinstance(detected, CompletedTradeFormat)
        assert detected.kind == FormatKind.COMPLETED_TRADE
        assert detected.rows == [CompletedTradeRow(
            contract_name="ES", type="Long", size="1", entry_price="4500",
            exit_price="4490", entered_at="2024-03-04 09:30",
            exited_at="2024-03-04 09:45", pnl="-500",
        )]

    def test_short_rows_skipped(self):
        text = (
            f"{COMPLETED_HEADER}\n"
            "ES,Long,1,4500,4490,2024-03-04 09:30,2024-03-04 09:45,-500\n"
            "NQ,Long,1"
        )
        detected = detect_format(text)
        assert len(detected.rows) == 1

    def test_column_order_does_not_matter(self):
        text = "PnL,ContractName\n250,NQ"
        detected = detect_format(text)
        assert isinstance(detected, CompletedTradeFormat)
        assert detected.rows[0].contract_name == "NQ"
        assert detected.rows[0].pnl == "250"
        assert detected.rows[0].size is None


class TestRawExecutionDetection:
    def test_time_header(self):
        text = (
            f"{RAW_HEADER}\n"
            "NQ,Buy,2024-03-04 09:30:00,15000,1\n"
            "NQ,Sell,2024-03-04 09:35:00,15020,1"
        )
        detected = detect_format(text)
        assert isinstance(detected, RawExecutionFormat)
        assert detected.kind == FormatKind.RAW_EXECUTION
        assert [r.side for r in detected.rows] == ["Buy", "Sell"]
        assert detected.rows[0].price == "15000"

    def test_headerless_file(self):
        text = "NQ,Buy,2024-03-04 09:30:00,15000,1\nNQ,Sell,2024-03-04 09:35:00,15020,1"
        detected = detect_format(text)
        assert isinstance(detected, RawExecutionFormat)
        assert len(detected.rows) == 2

    def test_extra_columns_ignored(self):
        text = f"{RAW_HEADER},Account\nNQ,Buy,2024-03-04 09:30:00,15000,1,SIM1"
        detected = detect_format(text)
        assert detected.rows[0].quantity == "1"

    def test_unparsable_lines_excluded(self):
        text = (
            f"{RAW_HEADER}\n"
            "NQ,Buy,2024-03-04 09:30:00,15000,1\n"
            "NQ,Sell,whenever,15020,1"
        )
        detected = detect_format(text)
        assert len(detected.rows) == 1

    def test_no_valid_lines_is_unresolved(self):
        text = f"{RAW_HEADER}\nNQ,Buy,garbage,x,1"
        assert isinstance(detect_format(text), UnresolvedFormat)

    def test_looks_like_execution(self):
        assert looks_like_execution(["NQ", "Buy", "2024-03-04 09:30", "15000", "1"])
        assert not looks_like_execution(["NQ", "Buy", "2024-03-04 09:30", "15000"])
        assert not looks_like_execution(["NQ", "Buy", "2024-03-04 09:30", "abc", "1"])


class TestUnresolved:
    def test_unknown_shape_keeps_table(self):
        detected = detect_format("Symbol,Qty,Price\nNQ,1,15000")
        assert isinstance(detected, UnresolvedFormat)
        assert detected.kind == FormatKind.UNRESOLVED
        assert detected.headers == ["Symbol", "Qty", "Price"]
        assert detected.rows == [["NQ", "1", "15000"]]

    def test_empty_text(self):
        detected = detect_format("")
        assert isinstance(detected, UnresolvedFormat)
        assert detected.headers == []
