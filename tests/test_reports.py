"""Tests for derived ledger views."""

from datetime import date
from decimal import Decimal

import pytest

from frotafin.domain.entities import BudgetOption, BudgetRequest, FuelRecord
from frotafin.domain.reports import (
    available_years,
    category_name,
    fleet_totals,
    fuel_efficiency,
    income_statement,
    lowest_price_option,
    maintenance_costs,
    monthly_trend,
    pending_transactions,
    truck_performance,
    truck_plate,
    truck_ranking,
)


@pytest.fixture
def dre_store(store):
    """Store with the income statement example entries in March 2024."""
    march = date(2024, 3, 5)
    store.add_transaction(category_id="1", amount=10000, date=march)
    store.add_transaction(category_id="1", amount=2000, date=march, is_paid=False)
    store.add_transaction(category_id="2", amount=3000, date=march)
    store.add_transaction(category_id="6", amount=1000, date=march)
    return store


def test_income_statement_example(dre_store):
    """Test the realized DRE keeps pending revenue apart."""
    dre = income_statement(dre_store.snapshot, 2024, 3)

    assert dre.revenue == Decimal("10000")
    assert dre.pending_revenue == Decimal("2000")
    assert dre.fixed_costs == Decimal("3000")
    assert dre.variable_expenses == Decimal("1000")
    assert dre.gross_profit == Decimal("7000")
    assert dre.net_profit == Decimal("6000")
    assert dre.profit_margin == Decimal("60")
    assert dre.pending_expenses == Decimal("0")


def test_income_statement_category_breakdown(dre_store):
    """Test only realized totals above zero are listed, in category order."""
    dre = income_statement(dre_store.snapshot, 2024)
    assert dre.category_totals == (
        ("Fretes", Decimal("10000")),
        ("Seguro", Decimal("3000")),
        ("Pedágio", Decimal("1000")),
    )


def test_income_statement_other_period_is_empty(dre_store):
    """Test a month without entries and zero-revenue margin."""
    dre = income_statement(dre_store.snapshot, 2024, 4)
    assert dre.revenue == Decimal("0")
    assert dre.net_profit == Decimal("0")
    assert dre.profit_margin == Decimal("0")


def test_income_statement_pending_expenses(store):
    """Test every unpaid non-revenue entry counts as pending expense."""
    store.add_transaction(category_id="2", amount=500, is_paid=False)
    store.add_transaction(category_id="5", amount=250, is_paid=False)
    dre = income_statement(store.snapshot, 2024, 3)
    assert dre.pending_expenses == Decimal("750")
    assert dre.fixed_costs == Decimal("0")


def test_income_statement_rejects_bad_month(store):
    """Test months outside 1..12 are rejected."""
    with pytest.raises(ValueError):
        income_statement(store.snapshot, 2024, 13)


def test_monthly_trend(dre_store):
    """Test realized totals land in their month."""
    dre_store.add_transaction(category_id="1", amount=500, date=date(2024, 1, 20))
    trend = monthly_trend(dre_store.snapshot, 2024)

    assert len(trend) == 12
    assert trend[0].revenue == Decimal("500")
    assert trend[2].revenue == Decimal("10000")
    assert trend[2].expenses == Decimal("4000")
    assert trend[2].profit == Decimal("6000")
    assert trend[5].profit == Decimal("0")


def test_fuel_efficiency_excludes_first_fill():
    """Test the efficiency example: 500 km over the 60 liters of the second fill."""
    records = [
        FuelRecord("f1", date(2024, 3, 1), "t1", Decimal("1000"), Decimal("40"), Decimal("6"), Decimal("240")),
        FuelRecord("f2", date(2024, 3, 8), "t1", Decimal("1500"), Decimal("60"), Decimal("6"), Decimal("360")),
    ]

    result = fuel_efficiency(records, "t1")

    assert result.km_traveled == Decimal("500")
    assert result.total_liters == Decimal("60")
    assert round(result.average, 2) == Decimal("8.33")


def test_fuel_efficiency_orders_by_date():
    """Test records are sorted by date before measuring."""
    records = [
        FuelRecord("f2", date(2024, 3, 8), "t1", Decimal("1500"), Decimal("60"), Decimal("6"), Decimal("360")),
        FuelRecord("f1", date(2024, 3, 1), "t1", Decimal("1000"), Decimal("40"), Decimal("6"), Decimal("240")),
    ]
    assert fuel_efficiency(records, "t1").km_traveled == Decimal("500")


def test_fuel_efficiency_needs_two_fills():
    """Test a single fill gives no average."""
    records = [
        FuelRecord("f1", date(2024, 3, 1), "t1", Decimal("1000"), Decimal("40"), Decimal("6"), Decimal("240")),
    ]
    result = fuel_efficiency(records, "t1")
    assert result.average is None
    assert fuel_efficiency([], "t2").average is None


def test_pending_transactions_due_today_or_earlier(store):
    """Test notifications include unpaid entries due up to today, in insertion order."""
    late = store.add_transaction(category_id="2", amount=100, is_paid=False, due_date=date(2024, 3, 20))
    due = store.add_transaction(category_id="2", amount=200, is_paid=False, due_date=date(2024, 3, 15))
    overdue = store.add_transaction(category_id="1", amount=300, is_paid=False, due_date=date(2024, 2, 1))
    store.add_transaction(category_id="2", amount=400, is_paid=True, due_date=date(2024, 3, 1))
    store.add_transaction(category_id="2", amount=500, is_paid=False)

    pending = pending_transactions(store.snapshot, date(2024, 3, 15))

    assert [t.id for t in pending] == [due.id, overdue.id]
    assert late not in pending


def test_truck_performance_counts_fuel_once(store, truck):
    """Test fuel comes from fuel records and paired expenses are not double counted."""
    store.add_transaction(
        category_id="1",
        amount=5000,
        truck_id=truck.id,
        start_mileage=0,
        end_mileage=400,
    )
    store.add_transaction(category_id="2", amount=1000, truck_id=truck.id)
    store.add_transaction(category_id="6", amount=200, truck_id=truck.id)
    store.add_fuel_record(truck_id=truck.id, mileage=1000, liters=100, price_per_liter=6)

    perf = next(p for p in truck_performance(store.snapshot, 2024) if p.truck_id == truck.id)

    assert perf.revenue == Decimal("5000")
    assert perf.fixed_costs == Decimal("1000")
    assert perf.variable_expenses == Decimal("200")
    assert perf.fuel_cost == Decimal("600.00")
    assert perf.total_cost == Decimal("1800.00")
    assert perf.net_result == Decimal("3200.00")
    assert perf.total_km == Decimal("400")
    assert perf.cost_per_km == Decimal("4.5")
    assert perf.expense_by_category == {
        "Seguro": Decimal("1000"),
        "Pedágio": Decimal("200"),
        "Combustível": Decimal("600.00"),
    }


def test_truck_ranking_and_fleet_totals(store):
    """Test ranking order and fleet sums."""
    store.add_transaction(category_id="1", amount=1000, truck_id="t1")
    store.add_transaction(category_id="1", amount=3000, truck_id="t2")
    store.add_transaction(category_id="2", amount=500, truck_id="t2")

    ranking = truck_ranking(store.snapshot, 2024)
    totals = fleet_totals(ranking)

    assert [p.plate for p in ranking] == ["XYZ-9999", "ABC-1234"]
    assert totals.revenue == Decimal("4000")
    assert totals.costs == Decimal("500")
    assert totals.result == Decimal("3500")


def test_available_years(store):
    """Test years with data plus the current year, newest first."""
    store.add_transaction(category_id="1", amount=10, date=date(2022, 5, 1))
    assert available_years(store.snapshot, date(2024, 3, 15)) == [2024, 2022]


def test_dangling_references_have_placeholders(store):
    """Test unknown IDs render as placeholders."""
    assert category_name(store.snapshot, "gone") == "Outros"
    assert truck_plate(store.snapshot, "gone") == "Excluido"


def test_maintenance_costs(store, truck):
    """Test cost lines linked to an order."""
    order = store.add_maintenance(truck_id=truck.id, title="Embreagem")
    store.add_maintenance_item(order.id, "Kit embreagem", 2500)
    store.add_maintenance_item(order.id, "Mão de obra", 600)
    store.add_transaction(category_id="5", amount=99)

    costs = maintenance_costs(store.snapshot, order.id)

    assert costs.total == Decimal("3100")
    assert [t.description for t in costs.items] == ["Kit embreagem", "Mão de obra"]


def test_lowest_price_option():
    """Test cheapest option wins and the first wins on ties."""
    day = date(2024, 3, 1)
    request = BudgetRequest(
        id="b1",
        title="Pneus",
        product_name="",
        description="",
        date=day,
        options=(
            BudgetOption("o1", "A", Decimal("900"), "", day),
            BudgetOption("o2", "B", Decimal("800"), "", day),
            BudgetOption("o3", "C", Decimal("800"), "", day),
        ),
    )
    assert lowest_price_option(request) == "o2"
    assert lowest_price_option(BudgetRequest("b2", "Vazio", "", "", day)) is None
