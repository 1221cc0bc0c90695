"""Ledger store: the single owner of every entity collection.

The store holds an immutable Snapshot. Each mutation validates its input,
builds a new snapshot, swaps it in with one assignment, persists the
affected keys and notifies subscribers. Readers therefore always observe a
complete, consistent snapshot.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from frotafin.database import mappers
from frotafin.database.base import Storage
from frotafin.domain import defaults
from frotafin.domain.entities import (
    BudgetOption,
    BudgetRequest,
    CargoType,
    Category,
    FuelRecord,
    MaintenanceOrder,
    MaintenanceStatus,
    MaintenanceType,
    MeasureUnit,
    Snapshot,
    Transaction,
    TransactionType,
    Truck,
    UserProfile,
)
from frotafin.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ReferentialIntegrityError,
    ValidationError,
    delete_blocked,
    duplicate_plate,
    entity_not_found,
    required_field,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[Snapshot], None]

_DEFAULTS: dict[str, Any] = {
    "categories": defaults.INITIAL_CATEGORIES,
    "cargo_types": defaults.INITIAL_CARGO_TYPES,
    "trucks": defaults.INITIAL_TRUCKS,
    "fuel_records": (),
    "transactions": (),
    "budgets": (),
    "maintenances": (),
    "user": None,
    "company_name": defaults.DEFAULT_COMPANY_NAME,
    "last_sync": None,
}


def generate_id() -> str:
    """Return a new opaque entity identifier."""
    return uuid.uuid4().hex


def normalize_plate(plate: str) -> str:
    """Normalize a plate for comparisons (no dashes or spaces, lowercase)."""
    return plate.replace("-", "").replace(" ", "").lower()


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(required_field(field))
    return str(value).strip()


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def _to_decimal(
    value: Any, field: str, required: bool = True, allow_zero: bool = True
) -> Optional[Decimal]:
    if value is None or value == "":
        if required:
            raise ValidationError(required_field(field))
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Field '{field}' must be a number")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Field '{field}' must be a number")
    if not result.is_finite():
        raise ValidationError(f"Field '{field}' must be a finite number")
    if result < 0:
        raise ValidationError(f"Field '{field}' cannot be negative")
    if not allow_zero and result == 0:
        raise ValidationError(f"Field '{field}' must be greater than zero")
    return result


def _to_date(value: Any, field: str, default: Optional[date] = None) -> Optional[date]:
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return mappers.parse_iso_date(value)
    raise ValidationError(f"Field '{field}' must be a date")


def _to_enum(enum_cls, value: Any, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Field '{field}' must be one of: {choices}")


class LedgerStore:
    """In-memory ledger with invariant-checked mutations and persistence."""

    def __init__(
        self,
        storage: Storage,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        """Initialize the store and load every persisted key.

        Args:
            storage: Persistence adapter
            id_factory: Callable returning fresh entity IDs (defaults to UUID4 hex)
            clock: Callable returning today's date (defaults to date.today)
        """
        self.storage = storage
        self._new_id = id_factory or generate_id
        self._today = clock or date.today
        self._subscribers: list[Subscriber] = []
        self.warnings: list[str] = []
        self._snapshot = self._load_snapshot()

    # Lifecycle
    @property
    def snapshot(self) -> Snapshot:
        """Return the current immutable snapshot."""
        return self._snapshot

    def today(self) -> date:
        """Return today's date according to the store clock."""
        return self._today()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for snapshot changes. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def flush(self) -> None:
        """Persist every key of the current snapshot."""
        self._persist(*mappers.STORAGE_KEYS)

    def close(self) -> None:
        """Flush and release the storage connection."""
        self.flush()
        self.storage.disconnect()

    def replace_snapshot(self, snapshot: Snapshot) -> Snapshot:
        """Replace the whole snapshot at once and persist every key."""
        logger.info(
            "Replacing snapshot: %d transactions, %d fuel records",
            len(snapshot.transactions),
            len(snapshot.fuel_records),
        )
        return self._commit(snapshot, *mappers.STORAGE_KEYS)

    def _load_snapshot(self) -> Snapshot:
        values = {
            field_name: self._load_field(field_name, key)
            for field_name, key in mappers.STORAGE_KEYS.items()
        }
        return Snapshot(**values)

    def _load_field(self, field_name: str, key: str) -> Any:
        default = _DEFAULTS[field_name]
        try:
            document = self.storage.load(key)
        except PersistenceError as e:
            logger.warning("Using defaults for %s: %s", key, e)
            return default
        if document is None:
            return default
        try:
            return mappers.field_from_document(field_name, document)
        except ValidationError as e:
            logger.warning("Using defaults for %s: stored data is invalid (%s)", key, e)
            return default

    def _persist(self, *field_names: str) -> None:
        # One batch per mutation: related keys never reach disk half written
        documents = {
            mappers.STORAGE_KEYS[field_name]: mappers.field_to_document(self._snapshot, field_name)
            for field_name in field_names
        }
        try:
            self.storage.save_many(documents)
        except PersistenceError as e:
            message = f"Changes kept in memory but not saved: {e}"
            logger.warning(message)
            self.warnings.append(message)

    def _commit(self, snapshot: Snapshot, *field_names: str) -> Snapshot:
        self._snapshot = snapshot
        self._persist(*field_names)
        for callback in list(self._subscribers):
            callback(snapshot)
        return snapshot

    # Settings
    def set_company_name(self, name: str) -> Snapshot:
        """Rename the company shown on reports."""
        name = _require_text(name, "company_name")
        return self._commit(replace(self._snapshot, company_name=name), "company_name")

    def set_user(self, user: Optional[UserProfile]) -> Snapshot:
        """Store or clear the signed-in user profile."""
        return self._commit(replace(self._snapshot, user=user), "user")

    def record_sync(self, timestamp: Optional[str] = None) -> Snapshot:
        """Remember when the last successful sync happened."""
        timestamp = timestamp or datetime.now().astimezone().isoformat()
        return self._commit(replace(self._snapshot, last_sync=timestamp), "last_sync")

    # Category operations
    def add_category(self, name: str, type: TransactionType | str) -> Category:
        """Create a category."""
        category = Category(
            id=self._new_id(),
            name=_require_text(name, "name"),
            type=_to_enum(TransactionType, type, "type"),
        )
        snapshot = self._snapshot
        self._commit(replace(snapshot, categories=snapshot.categories + (category,)), "categories")
        logger.info("Added category %s (%s)", category.name, category.id)
        return category

    def delete_category(self, category_id: str) -> Snapshot:
        """Delete a category that no transaction references.

        Raises:
            ReferentialIntegrityError: If any transaction uses the category
        """
        snapshot = self._snapshot
        used = sum(1 for txn in snapshot.transactions if txn.category_id == category_id)
        if used:
            raise ReferentialIntegrityError(
                delete_blocked("category", category_id, {"transaction": used})
            )
        categories = tuple(c for c in snapshot.categories if c.id != category_id)
        logger.info("Deleted category %s", category_id)
        return self._commit(replace(snapshot, categories=categories), "categories")

    # Cargo type operations
    def add_cargo_type(self, name: str, unit: MeasureUnit | str) -> CargoType:
        """Create a cargo type."""
        cargo_type = CargoType(
            id=self._new_id(),
            name=_require_text(name, "name"),
            unit=_to_enum(MeasureUnit, unit, "unit"),
        )
        snapshot = self._snapshot
        self._commit(
            replace(snapshot, cargo_types=snapshot.cargo_types + (cargo_type,)), "cargo_types"
        )
        logger.info("Added cargo type %s (%s)", cargo_type.name, cargo_type.id)
        return cargo_type

    def delete_cargo_type(self, cargo_type_id: str) -> Snapshot:
        """Delete a cargo type that no transaction references."""
        snapshot = self._snapshot
        used = sum(1 for txn in snapshot.transactions if txn.cargo_type_id == cargo_type_id)
        if used:
            raise ReferentialIntegrityError(
                delete_blocked("cargo type", cargo_type_id, {"transaction": used})
            )
        cargo_types = tuple(c for c in snapshot.cargo_types if c.id != cargo_type_id)
        logger.info("Deleted cargo type %s", cargo_type_id)
        return self._commit(replace(snapshot, cargo_types=cargo_types), "cargo_types")

    # Truck operations
    def add_truck(self, plate: str, model: str = "") -> Truck:
        """Create a truck.

        Raises:
            ConflictError: If another truck already has the same plate
        """
        plate = _require_text(plate, "plate").upper()
        snapshot = self._snapshot
        if any(normalize_plate(t.plate) == normalize_plate(plate) for t in snapshot.trucks):
            raise ConflictError(duplicate_plate(plate))
        truck = Truck(id=self._new_id(), plate=plate, model=(model or "").strip())
        self._commit(replace(snapshot, trucks=snapshot.trucks + (truck,)), "trucks")
        logger.info("Added truck %s (%s)", truck.plate, truck.id)
        return truck

    def delete_truck(self, truck_id: str) -> Snapshot:
        """Delete a truck without transactions or fuel records."""
        snapshot = self._snapshot
        txn_count = sum(1 for txn in snapshot.transactions if txn.truck_id == truck_id)
        fuel_count = sum(1 for rec in snapshot.fuel_records if rec.truck_id == truck_id)
        if txn_count or fuel_count:
            raise ReferentialIntegrityError(
                delete_blocked(
                    "truck", truck_id, {"transaction": txn_count, "fuel record": fuel_count}
                )
            )
        trucks = tuple(t for t in snapshot.trucks if t.id != truck_id)
        logger.info("Deleted truck %s", truck_id)
        return self._commit(replace(snapshot, trucks=trucks), "trucks")

    # Transaction operations
    def _build_transaction(
        self,
        *,
        amount: Any,
        category_id: str,
        date: Any = None,
        type: Optional[TransactionType | str] = None,
        description: str = "",
        execution_date: Any = None,
        due_date: Any = None,
        is_paid: bool = True,
        sub_category: Optional[str] = None,
        truck_id: Optional[str] = None,
        maintenance_id: Optional[str] = None,
        fuel_record_id: Optional[str] = None,
        mileage: Any = None,
        liters: Any = None,
        price_per_liter: Any = None,
        start_mileage: Any = None,
        end_mileage: Any = None,
        weight: Any = None,
        volume: Any = None,
        cargo_type_id: Optional[str] = None,
        cargo_type_label: Optional[str] = None,
        snapshot: Optional[Snapshot] = None,
    ) -> Transaction:
        snapshot = snapshot or self._snapshot
        category_id = _require_text(category_id, "category_id")
        category = snapshot.find_category(category_id)
        if category is None:
            raise ValidationError(entity_not_found("Category", category_id))
        if truck_id and snapshot.find_truck(truck_id) is None:
            raise ValidationError(entity_not_found("Truck", truck_id))
        if maintenance_id and snapshot.find_maintenance(maintenance_id) is None:
            raise ValidationError(entity_not_found("Maintenance order", maintenance_id))
        if cargo_type_id:
            cargo_type = snapshot.find_cargo_type(cargo_type_id)
            if cargo_type is None:
                raise ValidationError(entity_not_found("Cargo type", cargo_type_id))
            cargo_type_label = cargo_type_label or cargo_type.name

        txn_date = _to_date(date, "date", default=self._today())
        start = _to_decimal(start_mileage, "start_mileage", required=False)
        end = _to_decimal(end_mileage, "end_mileage", required=False)
        if start is not None and end is not None and end < start:
            raise ValidationError("Field 'end_mileage' cannot be lower than 'start_mileage'")

        return Transaction(
            id=self._new_id(),
            date=txn_date,
            execution_date=_to_date(execution_date, "execution_date", default=txn_date),
            due_date=_to_date(due_date, "due_date"),
            is_paid=bool(is_paid),
            amount=_to_decimal(amount, "amount", allow_zero=False),
            description=(description or "").strip(),
            sub_category=_optional_text(sub_category),
            category_id=category_id,
            type=_to_enum(TransactionType, type, "type") if type else category.type,
            truck_id=truck_id or None,
            maintenance_id=maintenance_id or None,
            fuel_record_id=fuel_record_id,
            mileage=_to_decimal(mileage, "mileage", required=False),
            liters=_to_decimal(liters, "liters", required=False),
            price_per_liter=_to_decimal(price_per_liter, "price_per_liter", required=False),
            start_mileage=start,
            end_mileage=end,
            weight=_to_decimal(weight, "weight", required=False),
            volume=_to_decimal(volume, "volume", required=False),
            cargo_type_id=cargo_type_id or None,
            cargo_type_label=_optional_text(cargo_type_label),
        )

    def add_transaction(self, **fields: Any) -> Transaction:
        """Create a transaction.

        Accepts the Transaction fields (except ``id``) as keyword arguments.
        ``type`` defaults to the category's type, ``date`` to today and
        ``execution_date`` to ``date``.

        Raises:
            ValidationError: If a required field is missing or a reference is unknown
        """
        txn = self._build_transaction(**fields)
        snapshot = self._snapshot
        self._commit(
            replace(snapshot, transactions=snapshot.transactions + (txn,)), "transactions"
        )
        logger.info("Added %s transaction %s (%s)", txn.type.value, txn.id, txn.amount)
        return txn

    def delete_transaction(self, transaction_id: str) -> Snapshot:
        """Delete a transaction. Unknown IDs are ignored."""
        snapshot = self._snapshot
        transactions = tuple(t for t in snapshot.transactions if t.id != transaction_id)
        if len(transactions) == len(snapshot.transactions):
            return snapshot
        logger.info("Deleted transaction %s", transaction_id)
        return self._commit(replace(snapshot, transactions=transactions), "transactions")

    def _replace_transaction(self, transaction_id: str, **changes: Any) -> Snapshot:
        snapshot = self._snapshot
        if snapshot.find_transaction(transaction_id) is None:
            return snapshot
        transactions = tuple(
            replace(t, **changes) if t.id == transaction_id else t
            for t in snapshot.transactions
        )
        return self._commit(replace(snapshot, transactions=transactions), "transactions")

    def mark_as_paid(self, transaction_id: str) -> Snapshot:
        """Mark a transaction as paid. Unknown IDs are ignored."""
        return self._replace_transaction(transaction_id, is_paid=True)

    def postpone_due_date(self, transaction_id: str, now: Optional[date] = None) -> Snapshot:
        """Move a transaction's due date to the day after ``now`` (default: today)."""
        now = now or self._today()
        return self._replace_transaction(transaction_id, due_date=now + timedelta(days=1))

    # Fuel operations
    def add_fuel_record(
        self,
        truck_id: str,
        mileage: Any,
        liters: Any,
        price_per_liter: Any,
        cost: Any = None,
        date: Any = None,
    ) -> FuelRecord:
        """Record a fuel fill and its paired expense transaction.

        The paired transaction goes into the first category whose name
        contains "combustível"; without such a category only the fuel record
        is stored. Both writes land in a single snapshot swap.
        """
        snapshot = self._snapshot
        truck_id = _require_text(truck_id, "truck_id")
        truck = snapshot.find_truck(truck_id)
        if truck is None:
            raise ValidationError(entity_not_found("Truck", truck_id))
        liters = _to_decimal(liters, "liters", allow_zero=False)
        price = _to_decimal(price_per_liter, "price_per_liter")
        cost = _to_decimal(cost, "cost", required=False)
        if cost is None:
            cost = (liters * price).quantize(Decimal("0.01"))

        record = FuelRecord(
            id=self._new_id(),
            date=_to_date(date, "date", default=self._today()),
            truck_id=truck_id,
            mileage=_to_decimal(mileage, "mileage"),
            liters=liters,
            price_per_liter=price,
            cost=cost,
        )

        transactions = snapshot.transactions
        fuel_category = snapshot.find_category_containing(defaults.FUEL_CATEGORY_HINT)
        if fuel_category is not None and cost > 0:
            txn = self._build_transaction(
                date=record.date,
                execution_date=record.date,
                due_date=record.date,
                is_paid=True,
                amount=record.cost,
                description=f"Abastecimento - {record.liters:.2f}L",
                sub_category=f"Posto ({truck.plate})",
                category_id=fuel_category.id,
                type=TransactionType.VARIABLE_EXPENSE,
                truck_id=truck_id,
                fuel_record_id=record.id,
                mileage=record.mileage,
                liters=record.liters,
                price_per_liter=record.price_per_liter,
                snapshot=snapshot,
            )
            transactions = transactions + (txn,)
        else:
            logger.warning("No fuel category found; fuel record %s has no expense", record.id)

        self._commit(
            replace(
                snapshot,
                fuel_records=snapshot.fuel_records + (record,),
                transactions=transactions,
            ),
            "fuel_records",
            "transactions",
        )
        logger.info("Added fuel record %s for truck %s", record.id, truck.plate)
        return record

    def delete_fuel_record(self, record_id: str) -> Snapshot:
        """Delete a fuel record together with its paired transaction."""
        snapshot = self._snapshot
        fuel_records = tuple(r for r in snapshot.fuel_records if r.id != record_id)
        transactions = tuple(t for t in snapshot.transactions if t.fuel_record_id != record_id)
        logger.info("Deleted fuel record %s", record_id)
        return self._commit(
            replace(snapshot, fuel_records=fuel_records, transactions=transactions),
            "fuel_records",
            "transactions",
        )

    # Maintenance operations
    def add_maintenance(
        self,
        truck_id: str,
        title: str,
        description: str = "",
        type: MaintenanceType | str = MaintenanceType.PREVENTIVA,
        date_started: Any = None,
    ) -> MaintenanceOrder:
        """Open a maintenance order in PENDING status."""
        snapshot = self._snapshot
        truck_id = _require_text(truck_id, "truck_id")
        if snapshot.find_truck(truck_id) is None:
            raise ValidationError(entity_not_found("Truck", truck_id))
        order = MaintenanceOrder(
            id=self._new_id(),
            truck_id=truck_id,
            title=_require_text(title, "title"),
            description=(description or "").strip(),
            date_started=_to_date(date_started, "date_started", default=self._today()),
            status=MaintenanceStatus.PENDING,
            type=_to_enum(MaintenanceType, type, "type"),
        )
        self._commit(
            replace(snapshot, maintenances=snapshot.maintenances + (order,)), "maintenances"
        )
        logger.info("Opened maintenance order %s (%s)", order.title, order.id)
        return order

    def update_maintenance(self, order: MaintenanceOrder) -> Snapshot:
        """Replace a maintenance order by ID.

        Raises:
            NotFoundError: If no order has the same ID
            ValidationError: If the new record is malformed
        """
        snapshot = self._snapshot
        current = snapshot.find_maintenance(order.id)
        if current is None:
            raise NotFoundError(entity_not_found("Maintenance order", order.id))
        truck_id = _require_text(order.truck_id, "truck_id")
        # Orders of a deleted truck stay editable as long as the truck is unchanged
        if truck_id != current.truck_id and snapshot.find_truck(truck_id) is None:
            raise ValidationError(entity_not_found("Truck", truck_id))
        date_started = _to_date(order.date_started, "date_started")
        if date_started is None:
            raise ValidationError(required_field("date_started"))
        date_finished = _to_date(order.date_finished, "date_finished")
        if date_finished is not None and date_finished < date_started:
            raise ValidationError("Field 'date_finished' cannot be before 'date_started'")
        order = replace(
            order,
            truck_id=truck_id,
            title=_require_text(order.title, "title"),
            date_started=date_started,
            date_finished=date_finished,
            status=_to_enum(MaintenanceStatus, order.status, "status"),
            type=_to_enum(MaintenanceType, order.type, "type"),
        )
        maintenances = tuple(order if m.id == order.id else m for m in snapshot.maintenances)
        return self._commit(replace(snapshot, maintenances=maintenances), "maintenances")

    def start_maintenance(self, order_id: str) -> Snapshot:
        """Move a maintenance order to IN_PROGRESS."""
        order = self._require_maintenance(order_id)
        return self.update_maintenance(replace(order, status=MaintenanceStatus.IN_PROGRESS))

    def finish_maintenance(
        self, order_id: str, result_notes: str = "", finished_on: Any = None
    ) -> Snapshot:
        """Complete a maintenance order, stamping the finish date and notes."""
        order = self._require_maintenance(order_id)
        return self.update_maintenance(
            replace(
                order,
                status=MaintenanceStatus.COMPLETED,
                date_finished=_to_date(finished_on, "finished_on", default=self._today()),
                result_notes=_optional_text(result_notes),
            )
        )

    def add_maintenance_item(
        self,
        order_id: str,
        description: str,
        amount: Any,
        supplier: Optional[str] = None,
        date: Any = None,
    ) -> Transaction:
        """Book a cost line for a maintenance order as a paid variable expense."""
        order = self._require_maintenance(order_id)
        snapshot = self._snapshot
        category = snapshot.find_category_containing(defaults.MAINTENANCE_CATEGORY_HINT)
        if category is None:
            if not snapshot.categories:
                raise ValidationError("No category available for maintenance costs")
            category = snapshot.categories[0]
        item_date = _to_date(date, "date", default=self._today())
        return self.add_transaction(
            date=item_date,
            execution_date=item_date,
            is_paid=True,
            amount=amount,
            description=_require_text(description, "description"),
            sub_category=supplier,
            category_id=category.id,
            type=TransactionType.VARIABLE_EXPENSE,
            truck_id=order.truck_id if snapshot.find_truck(order.truck_id) else None,
            maintenance_id=order.id,
        )

    def delete_maintenance(self, order_id: str) -> Snapshot:
        """Delete a maintenance order without linked cost transactions."""
        snapshot = self._snapshot
        linked = sum(1 for txn in snapshot.transactions if txn.maintenance_id == order_id)
        if linked:
            raise ReferentialIntegrityError(
                delete_blocked("maintenance order", order_id, {"linked transaction": linked})
            )
        maintenances = tuple(m for m in snapshot.maintenances if m.id != order_id)
        logger.info("Deleted maintenance order %s", order_id)
        return self._commit(replace(snapshot, maintenances=maintenances), "maintenances")

    def _require_maintenance(self, order_id: str) -> MaintenanceOrder:
        order = self._snapshot.find_maintenance(order_id)
        if order is None:
            raise NotFoundError(entity_not_found("Maintenance order", order_id))
        return order

    # Budget operations
    def add_budget_request(
        self, title: str, product_name: str = "", description: str = "", date: Any = None
    ) -> BudgetRequest:
        """Open a budget request with no options."""
        request = BudgetRequest(
            id=self._new_id(),
            title=_require_text(title, "title"),
            product_name=(product_name or "").strip(),
            description=(description or "").strip(),
            date=_to_date(date, "date", default=self._today()),
        )
        snapshot = self._snapshot
        self._commit(replace(snapshot, budgets=snapshot.budgets + (request,)), "budgets")
        logger.info("Opened budget request %s (%s)", request.title, request.id)
        return request

    def delete_budget_request(self, request_id: str) -> Snapshot:
        """Delete a budget request and its options."""
        snapshot = self._snapshot
        budgets = tuple(b for b in snapshot.budgets if b.id != request_id)
        return self._commit(replace(snapshot, budgets=budgets), "budgets")

    def _replace_budget(self, request: BudgetRequest) -> Snapshot:
        snapshot = self._snapshot
        budgets = tuple(request if b.id == request.id else b for b in snapshot.budgets)
        return self._commit(replace(snapshot, budgets=budgets), "budgets")

    def _require_budget(self, request_id: str) -> BudgetRequest:
        request = self._snapshot.find_budget(request_id)
        if request is None:
            raise NotFoundError(entity_not_found("Budget request", request_id))
        return request

    def add_option_to_request(
        self,
        request_id: str,
        supplier: str,
        amount: Any,
        details: str = "",
        date: Any = None,
    ) -> BudgetOption:
        """Add an unselected supplier option to a budget request."""
        request = self._require_budget(request_id)
        option = BudgetOption(
            id=self._new_id(),
            supplier=_require_text(supplier, "supplier"),
            amount=_to_decimal(amount, "amount"),
            details=(details or "").strip(),
            date=_to_date(date, "date", default=self._today()),
            is_selected=False,
        )
        self._replace_budget(replace(request, options=request.options + (option,)))
        return option

    def delete_option_from_request(self, request_id: str, option_id: str) -> Snapshot:
        """Remove an option from a budget request."""
        request = self._require_budget(request_id)
        options = tuple(o for o in request.options if o.id != option_id)
        return self._replace_budget(replace(request, options=options))

    def select_option(self, request_id: str, option_id: str) -> Snapshot:
        """Select one option and clear the selection of its siblings.

        Options of other requests are left untouched.
        """
        request = self._require_budget(request_id)
        if not any(o.id == option_id for o in request.options):
            raise NotFoundError(entity_not_found("Budget option", option_id))
        options = tuple(replace(o, is_selected=o.id == option_id) for o in request.options)
        return self._replace_budget(replace(request, options=options))
