"""Derived ledger views.

Every function here is a pure reduction over a Snapshot plus a period or
reference date. Nothing is cached; callers recompute from the snapshot they
hold.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from frotafin.domain import defaults
from frotafin.domain.entities import (
    BudgetRequest,
    FuelRecord,
    Snapshot,
    Transaction,
    TransactionType,
)

ZERO = Decimal("0")
UNKNOWN_CATEGORY = "Outros"
UNKNOWN_TRUCK = "Excluido"


@dataclass(frozen=True)
class IncomeStatement:
    """Realized income statement (DRE) with pending amounts kept apart."""

    year: int
    month: Optional[int]
    revenue: Decimal
    fixed_costs: Decimal
    variable_expenses: Decimal
    gross_profit: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    pending_revenue: Decimal
    pending_expenses: Decimal
    category_totals: tuple[tuple[str, Decimal], ...] = ()


@dataclass(frozen=True)
class MonthlyTrendPoint:
    """Realized totals for one calendar month."""

    month: int
    revenue: Decimal
    expenses: Decimal
    profit: Decimal


@dataclass(frozen=True)
class FuelEfficiency:
    """Fuel consumption of one truck.

    ``average`` is None when there is not enough data to measure.
    """

    truck_id: str
    km_traveled: Decimal
    total_liters: Decimal
    average: Optional[Decimal]


@dataclass(frozen=True)
class TruckPerformance:
    """Yearly profitability of one truck."""

    truck_id: str
    plate: str
    model: str
    revenue: Decimal
    fixed_costs: Decimal
    variable_expenses: Decimal
    fuel_cost: Decimal
    total_cost: Decimal
    net_result: Decimal
    total_km: Decimal
    cost_per_km: Decimal
    revenue_per_km: Decimal
    expense_by_category: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class FleetTotals:
    """Fleet-wide sums over truck performances."""

    revenue: Decimal
    costs: Decimal
    result: Decimal


@dataclass(frozen=True)
class MaintenanceCosts:
    """Cost lines booked against one maintenance order."""

    order_id: str
    total: Decimal
    items: tuple[Transaction, ...]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _in_period(value: date, year: int, month: Optional[int] = None) -> bool:
    return value.year == year and (month is None or value.month == month)


def category_name(snapshot: Snapshot, category_id: Optional[str]) -> str:
    """Resolve a category name, tolerating dangling references."""
    category = snapshot.find_category(category_id)
    return category.name if category else UNKNOWN_CATEGORY


def truck_plate(snapshot: Snapshot, truck_id: Optional[str]) -> str:
    """Resolve a truck plate, tolerating dangling references."""
    truck = snapshot.find_truck(truck_id)
    return truck.plate if truck else UNKNOWN_TRUCK


def pending_transactions(snapshot: Snapshot, today: date) -> list[Transaction]:
    """Unpaid transactions whose due date has been reached, in insertion order."""
    return [
        txn
        for txn in snapshot.transactions
        if not txn.is_paid and txn.due_date is not None and txn.due_date <= today
    ]


def available_years(snapshot: Snapshot, today: date) -> list[int]:
    """Years that have data, plus the current one, newest first."""
    years = {today.year}
    years.update(txn.date.year for txn in snapshot.transactions)
    years.update(rec.date.year for rec in snapshot.fuel_records)
    return sorted(years, reverse=True)


def income_statement(
    snapshot: Snapshot, year: int, month: Optional[int] = None
) -> IncomeStatement:
    """Build the income statement for a year, optionally narrowed to one month.

    Only paid transactions count towards revenue, costs and profit. Unpaid
    transactions of the period are reported separately as pending amounts.
    """
    if month is not None and not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    period = [txn for txn in snapshot.transactions if _in_period(txn.date, year, month)]
    realized = [txn for txn in period if txn.is_paid]
    pending = [txn for txn in period if not txn.is_paid]

    def total(txns: Sequence[Transaction], txn_type: TransactionType) -> Decimal:
        return _sum(txn.amount for txn in txns if txn.type == txn_type)

    revenue = total(realized, TransactionType.REVENUE)
    fixed_costs = total(realized, TransactionType.FIXED_COST)
    variable_expenses = total(realized, TransactionType.VARIABLE_EXPENSE)
    gross_profit = revenue - fixed_costs
    net_profit = gross_profit - variable_expenses
    profit_margin = net_profit / revenue * 100 if revenue > 0 else ZERO

    category_totals = []
    for category in snapshot.categories:
        category_total = _sum(txn.amount for txn in realized if txn.category_id == category.id)
        if category_total > 0:
            category_totals.append((category.name, category_total))

    return IncomeStatement(
        year=year,
        month=month,
        revenue=revenue,
        fixed_costs=fixed_costs,
        variable_expenses=variable_expenses,
        gross_profit=gross_profit,
        net_profit=net_profit,
        profit_margin=profit_margin,
        pending_revenue=total(pending, TransactionType.REVENUE),
        pending_expenses=_sum(
            txn.amount for txn in pending if txn.type != TransactionType.REVENUE
        ),
        category_totals=tuple(category_totals),
    )


def monthly_trend(snapshot: Snapshot, year: int) -> list[MonthlyTrendPoint]:
    """Realized revenue, expenses and profit for each month of ``year``."""
    revenue: dict[int, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for txn in snapshot.transactions:
        if not txn.is_paid or txn.date.year != year:
            continue
        if txn.type == TransactionType.REVENUE:
            revenue[txn.date.month] += txn.amount
        else:
            expenses[txn.date.month] += txn.amount

    return [
        MonthlyTrendPoint(
            month=month,
            revenue=revenue[month],
            expenses=expenses[month],
            profit=revenue[month] - expenses[month],
        )
        for month in range(1, 13)
    ]


def fuel_efficiency(records: Iterable[FuelRecord], truck_id: str) -> FuelEfficiency:
    """Average km per liter for one truck.

    Fills are ordered by date. Distance is last odometer minus first; liters
    exclude the first fill, which only tops up the tank before the measured
    interval starts.
    """
    truck_records = sorted(
        (rec for rec in records if rec.truck_id == truck_id), key=lambda rec: rec.date
    )
    if len(truck_records) < 2:
        return FuelEfficiency(truck_id=truck_id, km_traveled=ZERO, total_liters=ZERO, average=None)

    km_traveled = truck_records[-1].mileage - truck_records[0].mileage
    total_liters = _sum(rec.liters for rec in truck_records[1:])
    average = km_traveled / total_liters if total_liters > 0 else None
    return FuelEfficiency(
        truck_id=truck_id,
        km_traveled=km_traveled,
        total_liters=total_liters,
        average=average,
    )


def fleet_fuel_efficiency(snapshot: Snapshot) -> list[FuelEfficiency]:
    """Fuel efficiency for every truck of the snapshot."""
    return [fuel_efficiency(snapshot.fuel_records, truck.id) for truck in snapshot.trucks]


def truck_performance(snapshot: Snapshot, year: int) -> list[TruckPerformance]:
    """Profitability of every truck for ``year``, in fleet order.

    Fuel is taken from the fuel records themselves; the paired fuel
    transactions are left out of variable expenses so fuel is counted once.
    """
    fuel_category = snapshot.find_category_containing(defaults.FUEL_CATEGORY_HINT)
    fuel_bucket = fuel_category.name if fuel_category else "Combustível"

    results = []
    for truck in snapshot.trucks:
        txns = [
            txn
            for txn in snapshot.transactions
            if txn.truck_id == truck.id and txn.date.year == year
        ]
        fuel_cost = _sum(
            rec.cost
            for rec in snapshot.fuel_records
            if rec.truck_id == truck.id and rec.date.year == year
        )

        revenue = _sum(txn.amount for txn in txns if txn.type == TransactionType.REVENUE)
        fixed_costs = _sum(txn.amount for txn in txns if txn.type == TransactionType.FIXED_COST)
        variable_expenses = _sum(
            txn.amount
            for txn in txns
            if txn.type == TransactionType.VARIABLE_EXPENSE and not txn.fuel_record_id
        )
        total_cost = fixed_costs + variable_expenses + fuel_cost
        total_km = _sum(
            txn.end_mileage - txn.start_mileage
            for txn in txns
            if txn.start_mileage is not None and txn.end_mileage is not None
        )

        expense_by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in txns:
            if txn.type != TransactionType.REVENUE and not txn.fuel_record_id:
                expense_by_category[category_name(snapshot, txn.category_id)] += txn.amount
        if fuel_cost > 0:
            expense_by_category[fuel_bucket] += fuel_cost

        results.append(
            TruckPerformance(
                truck_id=truck.id,
                plate=truck.plate,
                model=truck.model,
                revenue=revenue,
                fixed_costs=fixed_costs,
                variable_expenses=variable_expenses,
                fuel_cost=fuel_cost,
                total_cost=total_cost,
                net_result=revenue - total_cost,
                total_km=total_km,
                cost_per_km=total_cost / total_km if total_km > 0 else ZERO,
                revenue_per_km=revenue / total_km if total_km > 0 else ZERO,
                expense_by_category=dict(expense_by_category),
            )
        )
    return results


def truck_ranking(snapshot: Snapshot, year: int) -> list[TruckPerformance]:
    """Truck performances ordered by net result, best first."""
    return sorted(truck_performance(snapshot, year), key=lambda p: p.net_result, reverse=True)


def fleet_totals(performances: Iterable[TruckPerformance]) -> FleetTotals:
    """Sum revenue, costs and result over truck performances."""
    performances = list(performances)
    return FleetTotals(
        revenue=_sum(p.revenue for p in performances),
        costs=_sum(p.total_cost for p in performances),
        result=_sum(p.net_result for p in performances),
    )


def maintenance_costs(snapshot: Snapshot, order_id: str) -> MaintenanceCosts:
    """Transactions linked to a maintenance order and their total."""
    items = tuple(txn for txn in snapshot.transactions if txn.maintenance_id == order_id)
    return MaintenanceCosts(order_id=order_id, total=_sum(t.amount for t in items), items=items)


def lowest_price_option(request: BudgetRequest) -> Optional[str]:
    """ID of the cheapest option of a budget request (first one on ties)."""
    if not request.options:
        return None
    cheapest = request.options[0]
    for option in request.options[1:]:
        if option.amount < cheapest.amount:
            cheapest = option
    return cheapest.id
