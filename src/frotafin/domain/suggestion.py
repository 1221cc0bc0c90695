"""Structured entry suggestions produced from free text.

A text analyzer (for instance a language model) turns "abasteci o
ABC-1234 com 300 litros" into an EntrySuggestion. Its reply is validated
here before anything reaches the ledger, and the user confirms the
suggestion explicitly.
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Protocol

from frotafin.database.mappers import parse_iso_date
from frotafin.domain import defaults
from frotafin.domain.entities import FuelRecord, Snapshot, Transaction, TransactionType
from frotafin.domain.errors import AnalysisError, ValidationError
from frotafin.domain.ledger import LedgerStore, normalize_plate

logger = logging.getLogger(__name__)

SUGGESTION_TYPES = ("fuel", "freight", "expense", "revenue")
# Replies from older analyzers use "general" for any non-fuel, non-freight entry.
_TYPE_ALIASES = {"general": "expense"}

_NUMBER_FIELDS = {
    "amount": "amount",
    "mileage": "mileage",
    "liters": "liters",
    "pricePerLiter": "price_per_liter",
    "startKm": "start_km",
    "endKm": "end_km",
    "weight": "weight",
    "volume": "volume",
}
_TEXT_FIELDS = {
    "aiFeedback": "ai_feedback",
    "description": "description",
    "truckPlate": "truck_plate",
    "client": "client",
    "cargoTypeName": "cargo_type_name",
    "categoryName": "category_name",
}


@dataclass(frozen=True)
class EntrySuggestion:
    """A typed, validated analyzer reply."""

    is_complete: bool
    type: Optional[str] = None
    ai_feedback: Optional[str] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    date: Optional[date] = None
    truck_plate: Optional[str] = None
    mileage: Optional[Decimal] = None
    liters: Optional[Decimal] = None
    price_per_liter: Optional[Decimal] = None
    client: Optional[str] = None
    cargo_type_name: Optional[str] = None
    start_km: Optional[Decimal] = None
    end_km: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    category_name: Optional[str] = None


class EntryAnalyzer(Protocol):
    """Anything that turns free text into an EntrySuggestion.

    ``previous`` carries the last incomplete suggestion so the analyzer can
    merge the follow-up answer into it. Implementations raise AnalysisError
    on failure, including timeouts.
    """

    def analyze(
        self, text: str, snapshot: Snapshot, previous: Optional[EntrySuggestion] = None
    ) -> EntrySuggestion: ...


class ReplyAnalyzer:
    """EntryAnalyzer for replies that were already produced, as JSON text.

    Fields missing from a follow-up reply are taken from ``previous``;
    completeness and feedback always come from the latest reply.
    """

    def analyze(
        self, text: str, snapshot: Snapshot, previous: Optional[EntrySuggestion] = None
    ) -> EntrySuggestion:
        suggestion = parse_suggestion(text)
        if previous is None:
            return suggestion
        merged = {
            f.name: getattr(previous, f.name)
            for f in fields(EntrySuggestion)
            if getattr(suggestion, f.name) is None and f.name != "ai_feedback"
        }
        return replace(suggestion, **merged)


def parse_suggestion(reply: str | dict[str, Any]) -> EntrySuggestion:
    """Validate an analyzer reply (JSON text or decoded object).

    Raises:
        AnalysisError: If the reply does not conform to the suggestion schema
    """
    if isinstance(reply, str):
        try:
            reply = json.loads(reply)
        except ValueError as e:
            raise AnalysisError(f"Analyzer reply is not valid JSON: {e}") from e
    if not isinstance(reply, dict):
        raise AnalysisError("Analyzer reply must be a JSON object")

    is_complete = reply.get("isComplete")
    if not isinstance(is_complete, bool):
        raise AnalysisError("Analyzer reply must include a boolean 'isComplete'")

    values: dict[str, Any] = {"is_complete": is_complete}

    entry_type = reply.get("type")
    if entry_type is not None:
        if not isinstance(entry_type, str):
            raise AnalysisError("Field 'type' must be a string")
        entry_type = entry_type.strip().lower()
        entry_type = _TYPE_ALIASES.get(entry_type, entry_type)
        if entry_type not in SUGGESTION_TYPES:
            raise AnalysisError(
                f"Unknown entry type '{entry_type}'. Expected one of: {', '.join(SUGGESTION_TYPES)}"
            )
        values["type"] = entry_type

    for key, attr in _NUMBER_FIELDS.items():
        value = reply.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise AnalysisError(f"Field '{key}' must be a number")
        number = Decimal(str(value))
        if not number.is_finite() or number < 0:
            raise AnalysisError(f"Field '{key}' must be a non-negative number")
        values[attr] = number

    for key, attr in _TEXT_FIELDS.items():
        value = reply.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise AnalysisError(f"Field '{key}' must be a string")
        values[attr] = value.strip() or None

    if reply.get("date"):
        if not isinstance(reply["date"], str):
            raise AnalysisError("Field 'date' must be a string")
        try:
            values["date"] = parse_iso_date(reply["date"])
        except ValidationError as e:
            raise AnalysisError(str(e)) from e

    return EntrySuggestion(**values)


def _match_truck(snapshot: Snapshot, plate: Optional[str]):
    if not plate:
        return None
    wanted = normalize_plate(plate)
    return next((t for t in snapshot.trucks if normalize_plate(t.plate) == wanted), None)


def _match_by_name(items, name: Optional[str]):
    if not name:
        return None
    wanted = name.strip().lower()
    return next((item for item in items if item.name.lower() == wanted), None)


def confirm_suggestion(
    store: LedgerStore, suggestion: EntrySuggestion
) -> FuelRecord | Transaction:
    """Record a complete suggestion in the ledger.

    Fuel suggestions become a fuel record (cost = amount, or liters × price
    per liter). Everything else becomes a paid transaction: freight is
    revenue in the freight category, other entries take the type of the
    named category.

    Raises:
        AnalysisError: If the suggestion is incomplete or cannot be matched
            to the fleet
        ValidationError: If the resulting record is invalid
    """
    if not suggestion.is_complete:
        raise AnalysisError(
            suggestion.ai_feedback or "Suggestion is incomplete and cannot be confirmed"
        )

    snapshot = store.snapshot
    truck = _match_truck(snapshot, suggestion.truck_plate)
    if suggestion.truck_plate and truck is None:
        raise AnalysisError(f"No truck with plate '{suggestion.truck_plate}'")

    if suggestion.type == "fuel":
        if truck is None:
            raise AnalysisError("Fuel entries need a truck plate")
        cost = suggestion.amount
        if not cost and suggestion.liters and suggestion.price_per_liter:
            cost = suggestion.liters * suggestion.price_per_liter
        record = store.add_fuel_record(
            truck_id=truck.id,
            mileage=suggestion.mileage,
            liters=suggestion.liters,
            price_per_liter=suggestion.price_per_liter or Decimal("0"),
            cost=cost,
            date=suggestion.date,
        )
        logger.info("Confirmed fuel suggestion as record %s", record.id)
        return record

    if not snapshot.categories:
        raise AnalysisError("No category available for the entry")
    category = _match_by_name(snapshot.categories, suggestion.category_name)
    if suggestion.type == "freight":
        category = snapshot.find_category_containing(defaults.FREIGHT_CATEGORY_HINT) or (
            snapshot.categories[0]
        )
        txn_type = TransactionType.REVENUE
    elif category is not None:
        txn_type = category.type
    else:
        category = snapshot.categories[0]
        txn_type = (
            TransactionType.REVENUE
            if suggestion.type == "revenue"
            else TransactionType.VARIABLE_EXPENSE
        )

    description = suggestion.description
    if not description and suggestion.type == "freight":
        description = f"Frete: {suggestion.client or 'Cliente Direto'}"
    elif not description:
        description = "Lançamento IA"
    cargo_type = _match_by_name(snapshot.cargo_types, suggestion.cargo_type_name)
    today = store.today()

    txn = store.add_transaction(
        date=today,
        execution_date=suggestion.date or today,
        is_paid=True,
        amount=suggestion.amount,
        description=description,
        sub_category=suggestion.client,
        category_id=category.id,
        type=txn_type,
        truck_id=truck.id if truck else None,
        start_mileage=suggestion.start_km,
        end_mileage=suggestion.end_km,
        weight=suggestion.weight,
        volume=suggestion.volume,
        cargo_type_id=cargo_type.id if cargo_type else None,
    )
    logger.info("Confirmed %s suggestion as transaction %s", suggestion.type, txn.id)
    return txn
