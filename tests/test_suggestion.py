"""Tests for analyzer suggestions."""

import json
from datetime import date
from decimal import Decimal

import pytest

from frotafin.domain.entities import FuelRecord, TransactionType
from frotafin.domain.errors import AnalysisError
from frotafin.domain.suggestion import (
    EntrySuggestion,
    ReplyAnalyzer,
    confirm_suggestion,
    parse_suggestion,
)


def test_parse_fuel_reply():
    """Test a complete fuel reply."""
    suggestion = parse_suggestion(
        '{"isComplete": true, "type": "fuel", "truckPlate": "ABC-1234", '
        '"mileage": 120500, "liters": 300, "pricePerLiter": 5.89, "date": "2024-03-10"}'
    )

    assert suggestion.is_complete is True
    assert suggestion.type == "fuel"
    assert suggestion.liters == Decimal("300")
    assert suggestion.price_per_liter == Decimal("5.89")
    assert suggestion.date == date(2024, 3, 10)
    assert suggestion.amount is None


def test_parse_incomplete_reply_keeps_feedback():
    """Test incomplete replies carry the follow-up question."""
    suggestion = parse_suggestion({"isComplete": False, "aiFeedback": "Qual caminhão?"})
    assert suggestion.is_complete is False
    assert suggestion.ai_feedback == "Qual caminhão?"


def test_general_type_alias():
    """Test the legacy "general" type."""
    assert parse_suggestion({"isComplete": True, "type": "General"}).type == "expense"


@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        "[1, 2]",
        {"type": "fuel"},
        {"isComplete": "yes"},
        {"isComplete": True, "type": "loan"},
        {"isComplete": True, "amount": "100"},
        {"isComplete": True, "amount": -5},
        {"isComplete": True, "liters": True},
        {"isComplete": True, "truckPlate": 1234},
        {"isComplete": True, "date": "sometime"},
    ],
)
def test_parse_rejects_malformed_replies(reply):
    """Test replies outside the schema raise AnalysisError."""
    with pytest.raises(AnalysisError):
        parse_suggestion(reply)


def test_confirm_fuel_suggestion(store):
    """Test fuel suggestions become fuel records with computed cost."""
    suggestion = EntrySuggestion(
        is_complete=True,
        type="fuel",
        truck_plate="abc 1234",
        mileage=Decimal("120500"),
        liters=Decimal("300"),
        price_per_liter=Decimal("5.5"),
        date=date(2024, 3, 10),
    )

    record = confirm_suggestion(store, suggestion)

    assert isinstance(record, FuelRecord)
    assert record.truck_id == "t1"
    assert record.cost == Decimal("1650.0")
    assert record.date == date(2024, 3, 10)
    assert store.snapshot.transactions[0].fuel_record_id == record.id


def test_confirm_freight_suggestion(store):
    """Test freight suggestions become paid revenue in the freight category."""
    suggestion = EntrySuggestion(
        is_complete=True,
        type="freight",
        amount=Decimal("3200"),
        truck_plate="XYZ-9999",
        client="Pedreira Sul",
        cargo_type_name="brita 1",
        start_km=Decimal("100"),
        end_km=Decimal("180"),
        weight=Decimal("32"),
        date=date(2024, 3, 12),
    )

    txn = confirm_suggestion(store, suggestion)

    assert txn.type == TransactionType.REVENUE
    assert txn.category_id == "1"
    assert txn.description == "Frete: Pedreira Sul"
    assert txn.truck_id == "t2"
    assert txn.cargo_type_id == "c3"
    assert txn.cargo_type_label == "Brita 1"
    assert txn.date == date(2024, 3, 15)
    assert txn.execution_date == date(2024, 3, 12)
    assert txn.is_paid is True


def test_confirm_expense_uses_named_category(store):
    """Test a named category decides the transaction type."""
    txn = confirm_suggestion(
        store,
        EntrySuggestion(
            is_complete=True, type="expense", amount=Decimal("900"), category_name="seguro"
        ),
    )
    assert txn.category_id == "2"
    assert txn.type == TransactionType.FIXED_COST
    assert txn.description == "Lançamento IA"


def test_confirm_revenue_without_category(store):
    """Test unnamed revenue falls back to the first category."""
    txn = confirm_suggestion(
        store, EntrySuggestion(is_complete=True, type="revenue", amount=Decimal("50"))
    )
    assert txn.category_id == "1"
    assert txn.type == TransactionType.REVENUE


def test_confirm_incomplete_suggestion(store):
    """Test incomplete suggestions are not recorded."""
    with pytest.raises(AnalysisError, match="Qual o valor"):
        confirm_suggestion(store, EntrySuggestion(is_complete=False, ai_feedback="Qual o valor?"))
    assert store.snapshot.transactions == ()


def test_confirm_unknown_plate(store):
    """Test plates outside the fleet are rejected."""
    suggestion = EntrySuggestion(
        is_complete=True, type="expense", amount=Decimal("10"), truck_plate="ZZZ-0000"
    )
    with pytest.raises(AnalysisError, match="ZZZ-0000"):
        confirm_suggestion(store, suggestion)


def test_confirm_fuel_without_truck(store):
    """Test fuel entries need a plate."""
    suggestion = EntrySuggestion(is_complete=True, type="fuel", liters=Decimal("10"))
    with pytest.raises(AnalysisError, match="truck plate"):
        confirm_suggestion(store, suggestion)


def test_reply_analyzer_parses_first_reply(store):
    """Test a reply without history is parsed as is."""
    suggestion = ReplyAnalyzer().analyze(
        json.dumps({"isComplete": False, "type": "fuel", "aiFeedback": "Quantos litros?"}),
        store.snapshot,
    )
    assert suggestion == EntrySuggestion(is_complete=False, type="fuel", ai_feedback="Quantos litros?")


def test_reply_analyzer_merges_follow_up(store):
    """Test a follow-up answer completes the earlier suggestion."""
    previous = EntrySuggestion(
        is_complete=False,
        type="fuel",
        ai_feedback="Quantos litros?",
        truck_plate="ABC-1234",
        mileage=Decimal("2000"),
    )
    follow_up = json.dumps({"isComplete": True, "liters": 100, "pricePerLiter": 6})

    suggestion = ReplyAnalyzer().analyze(follow_up, store.snapshot, previous=previous)

    assert suggestion.is_complete is True
    assert suggestion.ai_feedback is None
    assert suggestion.type == "fuel"
    assert suggestion.truck_plate == "ABC-1234"
    assert suggestion.mileage == Decimal("2000")
    assert suggestion.liters == Decimal("100")
    record = confirm_suggestion(store, suggestion)
    assert record.cost == Decimal("600.00")


def test_reply_analyzer_rejects_invalid_reply(store):
    """Test malformed follow-ups raise AnalysisError."""
    with pytest.raises(AnalysisError):
        ReplyAnalyzer().analyze("[]", store.snapshot, previous=EntrySuggestion(is_complete=False))
