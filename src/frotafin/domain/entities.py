"""Domain model entities for frotafin.

These are pure data classes representing business concepts, independent of
how they are persisted. Every entity is immutable; the ledger store replaces
whole records and whole collections instead of mutating them in place.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Ledger classification of a transaction or category."""

    REVENUE = "REVENUE"
    FIXED_COST = "FIXED_COST"
    VARIABLE_EXPENSE = "VARIABLE_EXPENSE"


class MeasureUnit(str, Enum):
    """How a cargo type is measured."""

    WEIGHT = "WEIGHT"
    VOLUME = "VOLUME"


class MaintenanceStatus(str, Enum):
    """Lifecycle of a maintenance order."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class MaintenanceType(str, Enum):
    """Preventive or corrective maintenance."""

    PREVENTIVA = "PREVENTIVA"
    CORRETIVA = "CORRETIVA"


class PricingMode(str, Enum):
    """Freight pricing mode used by the quote calculator."""

    PER_TON = "PER_TON"
    PER_M3 = "PER_M3"


@dataclass(frozen=True)
class Category:
    """Ledger category domain entity."""

    id: str
    name: str
    type: TransactionType


@dataclass(frozen=True)
class CargoType:
    """Cargo type domain entity."""

    id: str
    name: str
    unit: MeasureUnit


@dataclass(frozen=True)
class Truck:
    """Fleet vehicle domain entity."""

    id: str
    plate: str
    model: str


@dataclass(frozen=True)
class FuelRecord:
    """Fuel fill domain entity."""

    id: str
    date: date
    truck_id: str
    mileage: Decimal
    liters: Decimal
    price_per_liter: Decimal
    cost: Decimal


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    A transaction with ``is_paid`` False and a ``due_date`` is pending; it
    becomes a notification once the due date is reached.
    """

    id: str
    date: date
    execution_date: date
    is_paid: bool
    amount: Decimal
    description: str
    category_id: str
    type: TransactionType
    due_date: Optional[date] = None
    sub_category: Optional[str] = None
    truck_id: Optional[str] = None
    maintenance_id: Optional[str] = None
    fuel_record_id: Optional[str] = None
    mileage: Optional[Decimal] = None
    liters: Optional[Decimal] = None
    price_per_liter: Optional[Decimal] = None
    start_mileage: Optional[Decimal] = None
    end_mileage: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    cargo_type_id: Optional[str] = None
    cargo_type_label: Optional[str] = None


@dataclass(frozen=True)
class MaintenanceOrder:
    """Workshop order domain entity."""

    id: str
    truck_id: str
    title: str
    description: str
    date_started: date
    status: MaintenanceStatus
    type: MaintenanceType
    result_notes: Optional[str] = None
    date_finished: Optional[date] = None


@dataclass(frozen=True)
class BudgetOption:
    """A supplier quote inside a budget request."""

    id: str
    supplier: str
    amount: Decimal
    details: str
    date: date
    is_selected: bool = False


@dataclass(frozen=True)
class BudgetRequest:
    """Purchase budget request with competing supplier options."""

    id: str
    title: str
    product_name: str
    description: str
    date: date
    options: tuple[BudgetOption, ...] = ()


@dataclass(frozen=True)
class UserProfile:
    """Signed-in user shown by the front end."""

    id: str
    name: str
    email: str
    picture: str = ""


@dataclass(frozen=True)
class Snapshot:
    """Complete, consistent view of the ledger at one point in time."""

    categories: tuple[Category, ...] = ()
    cargo_types: tuple[CargoType, ...] = ()
    trucks: tuple[Truck, ...] = ()
    fuel_records: tuple[FuelRecord, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    budgets: tuple[BudgetRequest, ...] = ()
    maintenances: tuple[MaintenanceOrder, ...] = ()
    company_name: str = "Minha Transportadora"
    last_sync: Optional[str] = None
    user: Optional[UserProfile] = field(default=None)

    def find_category(self, category_id: Optional[str]) -> Optional[Category]:
        """Return the category with the given ID, if any."""
        return next((c for c in self.categories if c.id == category_id), None)

    def find_truck(self, truck_id: Optional[str]) -> Optional[Truck]:
        """Return the truck with the given ID, if any."""
        return next((t for t in self.trucks if t.id == truck_id), None)

    def find_cargo_type(self, cargo_type_id: Optional[str]) -> Optional[CargoType]:
        """Return the cargo type with the given ID, if any."""
        return next((c for c in self.cargo_types if c.id == cargo_type_id), None)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Return the transaction with the given ID, if any."""
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def find_maintenance(self, order_id: str) -> Optional[MaintenanceOrder]:
        """Return the maintenance order with the given ID, if any."""
        return next((m for m in self.maintenances if m.id == order_id), None)

    def find_budget(self, request_id: str) -> Optional[BudgetRequest]:
        """Return the budget request with the given ID, if any."""
        return next((b for b in self.budgets if b.id == request_id), None)

    def find_category_containing(self, fragment: str) -> Optional[Category]:
        """Return the first category whose name contains ``fragment`` (case-insensitive)."""
        fragment = fragment.lower()
        return next((c for c in self.categories if fragment in c.name.lower()), None)
