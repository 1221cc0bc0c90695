"""Tests for the ledger store."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from frotafin.domain.entities import MaintenanceStatus, MaintenanceType, TransactionType
from frotafin.domain.errors import (
    ConflictError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from frotafin.domain.ledger import LedgerStore, normalize_plate


def test_new_store_starts_with_seed_data(store):
    """Test a fresh store holds the seed categories, cargo types and trucks."""
    snapshot = store.snapshot
    assert [c.name for c in snapshot.categories] == [
        "Fretes",
        "Seguro",
        "Salários",
        "Combustível",
        "Manutenção",
        "Pedágio",
    ]
    assert len(snapshot.cargo_types) == 5
    assert [t.plate for t in snapshot.trucks] == ["ABC-1234", "XYZ-9999"]
    assert snapshot.transactions == ()
    assert snapshot.company_name == "Minha Transportadora"


def test_add_transaction_defaults(store):
    """Test type, dates and paid flag defaults."""
    txn = store.add_transaction(category_id="2", amount="1200", description="Seguro anual")

    assert txn.id == "id1"
    assert txn.type == TransactionType.FIXED_COST
    assert txn.date == date(2024, 3, 15)
    assert txn.execution_date == txn.date
    assert txn.is_paid is True
    assert txn.amount == Decimal("1200")
    assert store.snapshot.transactions == (txn,)


def test_add_transaction_explicit_type_overrides_category(store):
    """Test an explicit type wins over the category type."""
    txn = store.add_transaction(category_id="1", amount=100, type="VARIABLE_EXPENSE")
    assert txn.type == TransactionType.VARIABLE_EXPENSE


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"category_id": "404", "amount": 10}, "Category 404 not found"),
        ({"category_id": "1", "amount": 0}, "greater than zero"),
        ({"category_id": "1", "amount": -5}, "cannot be negative"),
        ({"category_id": "1", "amount": "abc"}, "must be a number"),
        ({"category_id": "1", "amount": 10, "truck_id": "nope"}, "Truck nope not found"),
        ({"category_id": "", "amount": 10}, "category_id"),
        (
            {"category_id": "1", "amount": 10, "start_mileage": 500, "end_mileage": 100},
            "end_mileage",
        ),
    ],
)
def test_add_transaction_rejects_invalid_input(store, fields, message):
    """Test validation errors leave the snapshot untouched."""
    before = store.snapshot
    with pytest.raises(ValidationError, match=message):
        store.add_transaction(**fields)
    assert store.snapshot is before


def test_add_transaction_sets_cargo_label(store):
    """Test the cargo label defaults to the cargo type name."""
    txn = store.add_transaction(category_id="1", amount=500, cargo_type_id="c2", weight=30)
    assert txn.cargo_type_label == "Brita 0"
    assert txn.weight == Decimal("30")


def test_transaction_count_tracks_adds_and_deletes(store):
    """Test count equals adds minus deletes of existing IDs."""
    first = store.add_transaction(category_id="1", amount=100)
    store.add_transaction(category_id="1", amount=200)
    store.add_transaction(category_id="2", amount=300)

    store.delete_transaction(first.id)
    store.delete_transaction("does-not-exist")

    assert len(store.snapshot.transactions) == 2


def test_delete_unknown_transaction_is_noop(store):
    """Test deleting a missing transaction returns the same snapshot."""
    before = store.snapshot
    assert store.delete_transaction("missing") is before


def test_mark_as_paid_and_postpone(store):
    """Test settling and postponing a pending transaction."""
    txn = store.add_transaction(
        category_id="2", amount=800, is_paid=False, due_date=date(2024, 3, 10)
    )

    snapshot = store.postpone_due_date(txn.id)
    assert snapshot.find_transaction(txn.id).due_date == date(2024, 3, 16)

    snapshot = store.postpone_due_date(txn.id, now=date(2024, 4, 30))
    assert snapshot.find_transaction(txn.id).due_date == date(2024, 5, 1)

    snapshot = store.mark_as_paid(txn.id)
    assert snapshot.find_transaction(txn.id).is_paid is True


def test_add_fuel_record_creates_paired_expense(store, truck):
    """Test the fuel example: one record and one matching expense."""
    record = store.add_fuel_record(
        truck_id=truck.id, mileage=1000, liters=50, price_per_liter="5.89", cost="294.50"
    )

    snapshot = store.snapshot
    assert snapshot.fuel_records == (record,)
    assert len(snapshot.transactions) == 1
    txn = snapshot.transactions[0]
    assert txn.amount == Decimal("294.50")
    assert txn.type == TransactionType.VARIABLE_EXPENSE
    assert txn.fuel_record_id == record.id
    assert txn.category_id == "4"
    assert txn.description == "Abastecimento - 50.00L"
    assert txn.sub_category == "Posto (ABC-1234)"
    assert txn.is_paid is True


def test_add_fuel_record_computes_cost(store, truck):
    """Test cost defaults to liters x price rounded to cents."""
    record = store.add_fuel_record(truck_id=truck.id, mileage=1000, liters=50, price_per_liter="5.89")
    assert record.cost == Decimal("294.50")


def test_add_fuel_record_without_fuel_category(store, truck):
    """Test only the record is stored when no fuel category exists."""
    store.delete_category("4")
    store.add_fuel_record(truck_id=truck.id, mileage=1000, liters=50, price_per_liter="5.89")

    assert len(store.snapshot.fuel_records) == 1
    assert store.snapshot.transactions == ()


def test_add_fuel_record_unknown_truck(store):
    """Test fuel records need an existing truck."""
    with pytest.raises(ValidationError, match="Truck ghost not found"):
        store.add_fuel_record(truck_id="ghost", mileage=1, liters=1, price_per_liter=1)


def test_delete_fuel_record_cascades_only_to_its_expense(store, truck):
    """Test deleting a fuel record removes its paired expense and nothing else."""
    other = store.add_transaction(category_id="1", amount=1000)
    record = store.add_fuel_record(truck_id=truck.id, mileage=1000, liters=50, price_per_liter=6)

    store.delete_fuel_record(record.id)

    assert store.snapshot.fuel_records == ()
    assert store.snapshot.transactions == (other,)


@pytest.mark.parametrize("kind", ["category", "cargo_type", "truck", "maintenance"])
def test_delete_referenced_entity_is_blocked(store, truck, kind):
    """Test deletes of referenced entities fail and leave the store unchanged."""
    order = store.add_maintenance(truck_id=truck.id, title="Troca de óleo")
    store.add_transaction(
        category_id="5",
        amount=350,
        truck_id=truck.id,
        cargo_type_id="c1",
        maintenance_id=order.id,
    )
    target = {"category": "5", "cargo_type": "c1", "truck": truck.id, "maintenance": order.id}
    delete = getattr(store, f"delete_{kind}")

    before = store.snapshot
    with pytest.raises(ReferentialIntegrityError, match="Cannot delete"):
        delete(target[kind])
    assert store.snapshot == before


def test_delete_unused_truck(store):
    """Test a truck without history can be deleted."""
    store.delete_truck("t2")
    assert [t.id for t in store.snapshot.trucks] == ["t1"]


def test_add_truck_rejects_duplicate_plate(store):
    """Test plates are unique ignoring dashes and case."""
    with pytest.raises(ConflictError, match="already exists"):
        store.add_truck("abc1234")


def test_add_truck_uppercases_plate(store):
    """Test new plates are stored uppercase."""
    truck = store.add_truck("qwe-5678", model="  MB Actros ")
    assert truck.plate == "QWE-5678"
    assert truck.model == "MB Actros"


def test_normalize_plate():
    """Test plate normalization."""
    assert normalize_plate("ABC-1234") == normalize_plate("abc 1234") == "abc1234"


def test_maintenance_workflow(store, truck):
    """Test opening, starting, costing and finishing an order."""
    order = store.add_maintenance(truck_id=truck.id, title="Freios", type="corretiva")
    assert order.status == MaintenanceStatus.PENDING

    store.start_maintenance(order.id)
    assert store.snapshot.find_maintenance(order.id).status == MaintenanceStatus.IN_PROGRESS

    item = store.add_maintenance_item(order.id, "Pastilhas", "820.00", supplier="Auto Peças")
    assert item.maintenance_id == order.id
    assert item.category_id == "5"
    assert item.truck_id == truck.id
    assert item.sub_category == "Auto Peças"

    store.finish_maintenance(order.id, result_notes="Freios revisados")
    finished = store.snapshot.find_maintenance(order.id)
    assert finished.status == MaintenanceStatus.COMPLETED
    assert finished.date_finished == date(2024, 3, 15)
    assert finished.result_notes == "Freios revisados"


def test_update_unknown_maintenance(store, truck):
    """Test updating a missing order raises NotFoundError."""
    order = store.add_maintenance(truck_id=truck.id, title="Pneus")
    with pytest.raises(NotFoundError):
        store.update_maintenance(replace(order, id="other"))


@pytest.mark.parametrize(
    "changes,message",
    [
        ({"truck_id": "ghost"}, "Truck"),
        ({"date_finished": date(2000, 1, 1)}, "date_finished"),
        ({"status": "DONE"}, "status"),
        ({"type": "OUTRA"}, "type"),
        ({"title": "  "}, "title"),
    ],
)
def test_update_maintenance_rejects_malformed_record(store, truck, changes, message):
    """Test a whole-record replace is validated like a new order."""
    order = store.add_maintenance(truck_id=truck.id, title="Pneus")
    before = store.snapshot

    with pytest.raises(ValidationError, match=message):
        store.update_maintenance(replace(order, **changes))

    assert store.snapshot is before


def test_update_maintenance_normalizes_enums(store, truck):
    """Test status and type given as text are stored as enum members."""
    order = store.add_maintenance(truck_id=truck.id, title="Pneus")

    store.update_maintenance(replace(order, status="in_progress", type="corretiva"))

    updated = store.snapshot.find_maintenance(order.id)
    assert updated.status == MaintenanceStatus.IN_PROGRESS
    assert updated.type == MaintenanceType.CORRETIVA


def test_orders_of_deleted_truck_can_be_finished(store):
    """Test an order keeps its workflow after its truck is removed."""
    truck = store.add_truck("DEL-0001")
    order = store.add_maintenance(truck_id=truck.id, title="Revisão")
    store.delete_truck(truck.id)

    store.finish_maintenance(order.id)

    assert store.snapshot.find_maintenance(order.id).status == MaintenanceStatus.COMPLETED


def test_select_option_is_exclusive_within_request(store):
    """Test selection affects only the options of one request."""
    first = store.add_budget_request("Pneus")
    second = store.add_budget_request("Bateria")
    a = store.add_option_to_request(first.id, "Loja A", 1000)
    b = store.add_option_to_request(first.id, "Loja B", 900)
    c = store.add_option_to_request(second.id, "Loja C", 500)
    store.select_option(second.id, c.id)

    store.select_option(first.id, a.id)
    store.select_option(first.id, b.id)

    snapshot = store.snapshot
    options = snapshot.find_budget(first.id).options
    assert [o.is_selected for o in options] == [False, True]
    assert snapshot.find_budget(second.id).options[0].is_selected is True


def test_select_option_of_other_request(store):
    """Test selecting an option that belongs elsewhere is rejected."""
    first = store.add_budget_request("Pneus")
    second = store.add_budget_request("Bateria")
    option = store.add_option_to_request(second.id, "Loja C", 500)

    with pytest.raises(NotFoundError):
        store.select_option(first.id, option.id)


def test_delete_option_and_request(store):
    """Test removing options and whole requests."""
    request = store.add_budget_request("Pneus")
    option = store.add_option_to_request(request.id, "Loja A", 1000)

    store.delete_option_from_request(request.id, option.id)
    assert store.snapshot.find_budget(request.id).options == ()

    store.delete_budget_request(request.id)
    assert store.snapshot.budgets == ()


def test_subscribers_see_each_new_snapshot(store):
    """Test subscription and unsubscription."""
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.add_category("Pneus", "VARIABLE_EXPENSE")
    unsubscribe()
    store.add_category("Lavagem", "VARIABLE_EXPENSE")

    assert len(seen) == 1
    assert seen[0].categories[-1].name == "Pneus"


def test_changes_persist_across_stores(store, storage, truck):
    """Test a new store on the same storage sees committed changes."""
    store.add_fuel_record(truck_id=truck.id, mileage=1000, liters=50, price_per_liter="5.89")
    store.set_company_name("Transportes Silva")

    reopened = LedgerStore(storage)

    assert reopened.snapshot.fuel_records == store.snapshot.fuel_records
    assert reopened.snapshot.transactions == store.snapshot.transactions
    assert reopened.snapshot.company_name == "Transportes Silva"


def test_set_company_name_requires_text(store):
    """Test blank company names are rejected."""
    with pytest.raises(ValidationError):
        store.set_company_name("   ")


def test_record_sync(store):
    """Test the last sync timestamp is stored."""
    store.record_sync("2024-03-15T10:00:00-03:00")
    assert store.snapshot.last_sync == "2024-03-15T10:00:00-03:00"
