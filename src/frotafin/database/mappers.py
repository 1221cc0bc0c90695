"""Mapper functions to convert between domain entities and JSON documents.

The JSON layout uses the camelCase field names of the persisted and synced
documents, so backups written by earlier releases stay readable. Parsing is
strict: anything that does not conform raises ValidationError and callers
decide whether to fall back to defaults or reject the whole payload.
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from dateutil import parser as date_parser

from frotafin.domain import entities as domain
from frotafin.domain.errors import ValidationError

SCHEMA_VERSION = 1

# Snapshot field -> persisted key.
STORAGE_KEYS = {
    "categories": "frotafin_categories",
    "cargo_types": "frotafin_cargo_types",
    "trucks": "frotafin_trucks",
    "fuel_records": "frotafin_fuel",
    "transactions": "frotafin_transactions",
    "budgets": "frotafin_budgets",
    "maintenances": "frotafin_maintenances",
    "user": "frotafin_user",
    "company_name": "frotafin_company_name",
    "last_sync": "frotafin_last_sync",
}

# Snapshot collection field -> key inside a sync payload.
PAYLOAD_KEYS = {
    "categories": "categories",
    "cargo_types": "cargoTypes",
    "trucks": "trucks",
    "fuel_records": "fuelRecords",
    "transactions": "transactions",
    "budgets": "budgets",
    "maintenances": "maintenances",
}

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


def _get(data: dict, key: str, required: bool) -> Any:
    value = data.get(key)
    if value is None or value == "":
        if required:
            raise ValidationError(f"Missing required field '{key}'")
        return None
    return value


def _text(data: dict, key: str, required: bool = True) -> Optional[str]:
    value = _get(data, key, required)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Field '{key}' must be a string")
    return value


def _decimal(data: dict, key: str, required: bool = True) -> Optional[Decimal]:
    value = _get(data, key, required)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"Field '{key}' must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"Field '{key}' must be a finite number")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Field '{key}' must be a number")
    if not result.is_finite():
        raise ValidationError(f"Field '{key}' must be a finite number")
    return result


def parse_iso_date(value: str) -> date:
    """Parse an ISO date or timestamp, normalising timestamps to their UTC date."""
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid date '{value}': {e}")
    if isinstance(parsed, datetime):
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()
    return parsed


def _date(data: dict, key: str, required: bool = True) -> Optional[date]:
    value = _get(data, key, required)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Field '{key}' must be an ISO date string")
    return parse_iso_date(value)


def _enum(enum_cls: type[E], data: dict, key: str) -> E:
    value = _get(data, key, True)
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Field '{key}' has unsupported value '{value}'")


def _bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValidationError(f"Field '{key}' must be true or false")
    return value


def _number(value: Optional[Decimal]) -> Optional[float | int]:
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _compact(document: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in document.items() if value is not None}


def _require_object(data: Any, kind: str) -> dict:
    if not isinstance(data, dict):
        raise ValidationError(f"{kind} entry must be an object")
    return data


# Category
def category_to_json(category: domain.Category) -> dict[str, Any]:
    """Convert Category entity to its JSON document."""
    return {"id": category.id, "name": category.name, "type": category.type.value}


def category_from_json(data: Any) -> domain.Category:
    """Convert JSON document to Category entity."""
    data = _require_object(data, "Category")
    return domain.Category(
        id=_text(data, "id"),
        name=_text(data, "name"),
        type=_enum(domain.TransactionType, data, "type"),
    )


# Cargo type
def cargo_type_to_json(cargo_type: domain.CargoType) -> dict[str, Any]:
    """Convert CargoType entity to its JSON document."""
    return {"id": cargo_type.id, "name": cargo_type.name, "unit": cargo_type.unit.value}


def cargo_type_from_json(data: Any) -> domain.CargoType:
    """Convert JSON document to CargoType entity."""
    data = _require_object(data, "Cargo type")
    return domain.CargoType(
        id=_text(data, "id"),
        name=_text(data, "name"),
        unit=_enum(domain.MeasureUnit, data, "unit"),
    )


# Truck
def truck_to_json(truck: domain.Truck) -> dict[str, Any]:
    """Convert Truck entity to its JSON document."""
    return {"id": truck.id, "plate": truck.plate, "model": truck.model}


def truck_from_json(data: Any) -> domain.Truck:
    """Convert JSON document to Truck entity."""
    data = _require_object(data, "Truck")
    return domain.Truck(
        id=_text(data, "id"),
        plate=_text(data, "plate"),
        model=_text(data, "model", required=False) or "",
    )


# Fuel record
def fuel_record_to_json(record: domain.FuelRecord) -> dict[str, Any]:
    """Convert FuelRecord entity to its JSON document."""
    return {
        "id": record.id,
        "date": _iso(record.date),
        "truckId": record.truck_id,
        "mileage": _number(record.mileage),
        "liters": _number(record.liters),
        "pricePerLiter": _number(record.price_per_liter),
        "cost": _number(record.cost),
    }


def fuel_record_from_json(data: Any) -> domain.FuelRecord:
    """Convert JSON document to FuelRecord entity."""
    data = _require_object(data, "Fuel record")
    return domain.FuelRecord(
        id=_text(data, "id"),
        date=_date(data, "date"),
        truck_id=_text(data, "truckId"),
        mileage=_decimal(data, "mileage"),
        liters=_decimal(data, "liters"),
        price_per_liter=_decimal(data, "pricePerLiter"),
        cost=_decimal(data, "cost"),
    )


# Transaction
def transaction_to_json(txn: domain.Transaction) -> dict[str, Any]:
    """Convert Transaction entity to its JSON document."""
    return _compact(
        {
            "id": txn.id,
            "date": _iso(txn.date),
            "executionDate": _iso(txn.execution_date),
            "dueDate": _iso(txn.due_date),
            "isPaid": txn.is_paid,
            "amount": _number(txn.amount),
            "description": txn.description,
            "subCategory": txn.sub_category,
            "categoryId": txn.category_id,
            "type": txn.type.value,
            "truckId": txn.truck_id,
            "maintenanceId": txn.maintenance_id,
            "fuelRecordId": txn.fuel_record_id,
            "mileage": _number(txn.mileage),
            "liters": _number(txn.liters),
            "pricePerLiter": _number(txn.price_per_liter),
            "startMileage": _number(txn.start_mileage),
            "endMileage": _number(txn.end_mileage),
            "weight": _number(txn.weight),
            "volume": _number(txn.volume),
            "cargoTypeId": txn.cargo_type_id,
            "cargoTypeLabel": txn.cargo_type_label,
        }
    )


def transaction_from_json(data: Any) -> domain.Transaction:
    """Convert JSON document to Transaction entity."""
    data = _require_object(data, "Transaction")
    txn_date = _date(data, "date")
    return domain.Transaction(
        id=_text(data, "id"),
        date=txn_date,
        execution_date=_date(data, "executionDate", required=False) or txn_date,
        due_date=_date(data, "dueDate", required=False),
        is_paid=_bool(data, "isPaid", True),
        amount=_decimal(data, "amount"),
        description=_text(data, "description", required=False) or "",
        sub_category=_text(data, "subCategory", required=False),
        category_id=_text(data, "categoryId"),
        type=_enum(domain.TransactionType, data, "type"),
        truck_id=_text(data, "truckId", required=False),
        maintenance_id=_text(data, "maintenanceId", required=False),
        fuel_record_id=_text(data, "fuelRecordId", required=False),
        mileage=_decimal(data, "mileage", required=False),
        liters=_decimal(data, "liters", required=False),
        price_per_liter=_decimal(data, "pricePerLiter", required=False),
        start_mileage=_decimal(data, "startMileage", required=False),
        end_mileage=_decimal(data, "endMileage", required=False),
        weight=_decimal(data, "weight", required=False),
        volume=_decimal(data, "volume", required=False),
        cargo_type_id=_text(data, "cargoTypeId", required=False),
        cargo_type_label=_text(data, "cargoTypeLabel", required=False),
    )


# Maintenance order
def maintenance_to_json(order: domain.MaintenanceOrder) -> dict[str, Any]:
    """Convert MaintenanceOrder entity to its JSON document."""
    return _compact(
        {
            "id": order.id,
            "truckId": order.truck_id,
            "title": order.title,
            "description": order.description,
            "resultNotes": order.result_notes,
            "dateStarted": _iso(order.date_started),
            "dateFinished": _iso(order.date_finished),
            "status": order.status.value,
            "type": order.type.value,
        }
    )


def maintenance_from_json(data: Any) -> domain.MaintenanceOrder:
    """Convert JSON document to MaintenanceOrder entity."""
    data = _require_object(data, "Maintenance order")
    return domain.MaintenanceOrder(
        id=_text(data, "id"),
        truck_id=_text(data, "truckId"),
        title=_text(data, "title"),
        description=_text(data, "description", required=False) or "",
        result_notes=_text(data, "resultNotes", required=False),
        date_started=_date(data, "dateStarted"),
        date_finished=_date(data, "dateFinished", required=False),
        status=_enum(domain.MaintenanceStatus, data, "status"),
        type=_enum(domain.MaintenanceType, data, "type"),
    )


# Budget request
def budget_option_to_json(option: domain.BudgetOption) -> dict[str, Any]:
    """Convert BudgetOption entity to its JSON document."""
    return {
        "id": option.id,
        "supplier": option.supplier,
        "amount": _number(option.amount),
        "details": option.details,
        "date": _iso(option.date),
        "isSelected": option.is_selected,
    }


def budget_option_from_json(data: Any) -> domain.BudgetOption:
    """Convert JSON document to BudgetOption entity."""
    data = _require_object(data, "Budget option")
    return domain.BudgetOption(
        id=_text(data, "id"),
        supplier=_text(data, "supplier"),
        amount=_decimal(data, "amount"),
        details=_text(data, "details", required=False) or "",
        date=_date(data, "date"),
        is_selected=_bool(data, "isSelected", False),
    )


def budget_to_json(request: domain.BudgetRequest) -> dict[str, Any]:
    """Convert BudgetRequest entity to its JSON document."""
    return {
        "id": request.id,
        "title": request.title,
        "productName": request.product_name,
        "description": request.description,
        "date": _iso(request.date),
        "options": [budget_option_to_json(option) for option in request.options],
    }


def budget_from_json(data: Any) -> domain.BudgetRequest:
    """Convert JSON document to BudgetRequest entity."""
    data = _require_object(data, "Budget request")
    options = data.get("options", [])
    if not isinstance(options, list):
        raise ValidationError("Field 'options' must be a list")
    parsed_options = tuple(budget_option_from_json(option) for option in options)
    if sum(1 for option in parsed_options if option.is_selected) > 1:
        raise ValidationError(
            f"Budget request {data.get('id')} has more than one selected option"
        )
    return domain.BudgetRequest(
        id=_text(data, "id"),
        title=_text(data, "title"),
        product_name=_text(data, "productName", required=False) or "",
        description=_text(data, "description", required=False) or "",
        date=_date(data, "date"),
        options=parsed_options,
    )


# User profile
def user_to_json(user: Optional[domain.UserProfile]) -> Optional[dict[str, Any]]:
    """Convert UserProfile entity to its JSON document."""
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email, "picture": user.picture}


def user_from_json(data: Any) -> Optional[domain.UserProfile]:
    """Convert JSON document to UserProfile entity."""
    if data is None:
        return None
    data = _require_object(data, "User profile")
    return domain.UserProfile(
        id=_text(data, "id"),
        name=_text(data, "name"),
        email=_text(data, "email", required=False) or "",
        picture=_text(data, "picture", required=False) or "",
    )


COLLECTION_CODECS: dict[str, tuple[Callable[[Any], dict], Callable[[Any], Any]]] = {
    "categories": (category_to_json, category_from_json),
    "cargo_types": (cargo_type_to_json, cargo_type_from_json),
    "trucks": (truck_to_json, truck_from_json),
    "fuel_records": (fuel_record_to_json, fuel_record_from_json),
    "transactions": (transaction_to_json, transaction_from_json),
    "budgets": (budget_to_json, budget_from_json),
    "maintenances": (maintenance_to_json, maintenance_from_json),
}


def collection_to_json(field_name: str, items: tuple) -> list[dict[str, Any]]:
    """Serialize one snapshot collection."""
    to_json, _ = COLLECTION_CODECS[field_name]
    return [to_json(item) for item in items]


def collection_from_json(field_name: str, data: Any) -> tuple:
    """Parse one snapshot collection, rejecting duplicate IDs."""
    _, from_json = COLLECTION_CODECS[field_name]
    if not isinstance(data, list):
        raise ValidationError(f"Collection '{field_name}' must be a list")
    items = tuple(from_json(entry) for entry in data)
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValidationError(f"Collection '{field_name}' repeats ID '{item.id}'")
        seen.add(item.id)
    return items


def field_to_document(snapshot: domain.Snapshot, field_name: str) -> Any:
    """Return the JSON document persisted under the key of ``field_name``."""
    if field_name in COLLECTION_CODECS:
        return collection_to_json(field_name, getattr(snapshot, field_name))
    if field_name == "user":
        return user_to_json(snapshot.user)
    return getattr(snapshot, field_name)


def field_from_document(field_name: str, document: Any) -> Any:
    """Parse the JSON document persisted under the key of ``field_name``."""
    if field_name in COLLECTION_CODECS:
        return collection_from_json(field_name, document)
    if field_name == "user":
        return user_from_json(document)
    if not isinstance(document, str):
        raise ValidationError(f"Setting '{field_name}' must be a string")
    return document


def snapshot_to_payload(snapshot: domain.Snapshot) -> dict[str, Any]:
    """Build the versioned sync payload for a snapshot."""
    payload: dict[str, Any] = {
        "schemaVersion": SCHEMA_VERSION,
        "companyName": snapshot.company_name,
    }
    for field_name, key in PAYLOAD_KEYS.items():
        payload[key] = collection_to_json(field_name, getattr(snapshot, field_name))
    return payload


def snapshot_from_payload(payload: Any, base: domain.Snapshot) -> domain.Snapshot:
    """Parse a complete sync payload into a new snapshot.

    Local-only settings (user profile, last sync) are carried over from
    ``base``. Raises ValidationError if any part of the payload is invalid.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be a JSON object")

    version = payload.get("schemaVersion", 0)
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        raise ValidationError(f"Unsupported schema version '{version}'")
    if version > SCHEMA_VERSION:
        raise ValidationError(
            f"Payload schema version {version} is newer than supported version {SCHEMA_VERSION}"
        )

    missing = [key for key in PAYLOAD_KEYS.values() if key not in payload]
    if missing:
        raise ValidationError(f"Payload is missing required keys: {', '.join(missing)}")

    collections = {
        field_name: collection_from_json(field_name, payload[key])
        for field_name, key in PAYLOAD_KEYS.items()
    }
    company_name = payload.get("companyName") or base.company_name
    if not isinstance(company_name, str):
        raise ValidationError("Field 'companyName' must be a string")

    return domain.Snapshot(
        company_name=company_name,
        last_sync=base.last_sync,
        user=base.user,
        **collections,
    )
