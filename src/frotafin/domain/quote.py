"""Freight quote calculator.

Quotes are computed on the fly and only become a revenue transaction once
the user confirms them.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from frotafin.domain import defaults
from frotafin.domain.entities import PricingMode, Transaction, TransactionType
from frotafin.domain.errors import ValidationError, required_field
from frotafin.domain.ledger import LedgerStore

# Assumed consumption of a loaded truck.
ASSUMED_KM_PER_LITER = Decimal("2.0")
ZERO = Decimal("0")


@dataclass(frozen=True)
class FreightQuote:
    """Inputs of a freight quote."""

    mode: PricingMode
    fuel_price: Decimal
    distance: Decimal
    load_amount: Decimal
    unit_price: Decimal
    other_expenses: Decimal = ZERO


@dataclass(frozen=True)
class QuoteResult:
    """Pricing and profitability of a freight quote."""

    suggested_freight: Decimal
    liters_needed: Decimal
    fuel_cost: Decimal
    total_cost: Decimal
    profit: Decimal
    margin: Decimal
    cost_per_km: Decimal
    revenue_per_km: Decimal


def calculate_quote(quote: FreightQuote) -> QuoteResult:
    """Price a freight and estimate its cost and margin.

    Per m³ the freight is distance × volume × price per km; per ton it is
    price per ton × weight. Fuel is estimated at ASSUMED_KM_PER_LITER.
    """
    if quote.mode == PricingMode.PER_M3:
        suggested_freight = quote.distance * quote.load_amount * quote.unit_price
    else:
        suggested_freight = quote.unit_price * quote.load_amount

    liters_needed = quote.distance / ASSUMED_KM_PER_LITER
    fuel_cost = liters_needed * quote.fuel_price
    total_cost = fuel_cost + quote.other_expenses
    profit = suggested_freight - total_cost

    return QuoteResult(
        suggested_freight=suggested_freight,
        liters_needed=liters_needed,
        fuel_cost=fuel_cost,
        total_cost=total_cost,
        profit=profit,
        margin=profit / suggested_freight * 100 if suggested_freight > 0 else ZERO,
        cost_per_km=total_cost / quote.distance if quote.distance > 0 else ZERO,
        revenue_per_km=suggested_freight / quote.distance if quote.distance > 0 else ZERO,
    )


def confirm_quote(
    store: LedgerStore,
    quote: FreightQuote,
    truck_id: str,
    client_name: Optional[str] = None,
) -> Transaction:
    """Record a confirmed quote as a paid freight revenue dated today."""
    if not truck_id:
        raise ValidationError(required_field("truck_id"))
    if quote.distance <= 0 or quote.load_amount <= 0 or quote.unit_price <= 0:
        raise ValidationError("Distance, load and unit price are required to save a freight")

    snapshot = store.snapshot
    category = snapshot.find_category_containing(defaults.FREIGHT_CATEGORY_HINT)
    if category is None:
        if not snapshot.categories:
            raise ValidationError("No category available for freight revenue")
        category = snapshot.categories[0]

    result = calculate_quote(quote)
    mode_label = "Por Ton" if quote.mode == PricingMode.PER_TON else "Por m³"
    today = store.today()
    return store.add_transaction(
        date=today,
        execution_date=today,
        is_paid=True,
        amount=result.suggested_freight.quantize(Decimal("0.01")),
        description=f"Frete: {client_name or 'Cliente Direto'} ({mode_label})",
        sub_category=client_name,
        category_id=category.id,
        type=TransactionType.REVENUE,
        truck_id=truck_id,
        weight=quote.load_amount if quote.mode == PricingMode.PER_TON else None,
        volume=quote.load_amount if quote.mode == PricingMode.PER_M3 else None,
        start_mileage=ZERO,
        end_mileage=quote.distance,
    )
