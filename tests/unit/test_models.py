"""Tests for the core domain models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from edgelog.core.enums import ExecutionRole, Side, TagType
from edgelog.core.models import AtomicExecution, Annotation, ExecutionRecord, Trade

from tests.conftest import make_execution, make_trade


class TestAtomicExecution:
    def test_signed_quantity(self):
        assert make_execution(side="Buy", quantity=2).signed_quantity == Decimal("2")
        assert make_execution(side="Sell", quantity=2).signed_quantity == Decimal("-2")

    def test_naive_timestamp_becomes_utc(self):
        ex = AtomicExecution(
            instrument="NQ", side=Side.BUY, price=Decimal("1"), quantity=Decimal("1"),
            timestamp=datetime(2024, 3, 4, 9, 30),
        )
        assert ex.timestamp.tzinfo == timezone.utc

    @pytest.mark.parametrize("price,qty", [("-1", "1"), ("1", "0"), ("1", "-2")])
    def test_rejects_invalid_numbers(self, price, qty):
        with pytest.raises(ValidationError):
            AtomicExecution(
                instrument="NQ", side=Side.BUY, price=Decimal(price), quantity=Decimal(qty),
                timestamp=datetime(2024, 3, 4, tzinfo=timezone.utc),
            )

    def test_frozen(self):
        ex = make_execution()
        with pytest.raises(ValidationError):
            ex.price = Decimal("2")

    def test_legacy_aliases(self):
        rec = ExecutionRecord.model_validate({
            "time": "2024-03-04T09:30:00Z", "side": "Sell", "qty": 3, "price": 10,
            "role": "Trim", "posAfter": 1,
        })
        assert rec.quantity == Decimal("3")
        assert rec.role == ExecutionRole.TRIM
        assert rec.position_after == Decimal("1")
        assert rec.instrument == ""


class TestTrade:
    def test_tags_deduplicated(self):
        trade = make_trade(mistakes=["FOMO", "FOMO", "Chasing"])
        assert trade.mistakes == ["FOMO", "Chasing"]

    def test_null_setup_is_blank(self):
        trade = Trade.model_validate({
            "instrument": "NQ", "direction": "Long", "time": 1709562600000,
            "endTime": 1709562600000, "setup": None,
        })
        assert trade.setup == ""
        assert trade.realized_pnl == Decimal("0")

    def test_is_win(self):
        assert make_trade(pnl=1).is_win
        assert not make_trade(pnl=0).is_win


class TestAnnotation:
    def test_bounds(self):
        with pytest.raises(ValidationError):
            Annotation(x=101, y=0)

    def test_blank_tag_is_none(self):
        note = Annotation(x=1, y=1, tagType="", tagValue="")
        assert note.tag_type is None
        assert not note.applies_tag

    def test_applies_tag(self):
        note = Annotation(x=1, y=1, tag_type=TagType.MINDSET, tag_value="Flow")
        assert note.applies_tag
        assert note.id
