"""Utilities for resolving user-typed references to entities."""

from frotafin.domain.entities import CargoType, Category, Snapshot, Truck
from frotafin.domain.errors import NotFoundError
from frotafin.domain.ledger import normalize_plate


def resolve_truck(snapshot: Snapshot, truck: str) -> Truck:
    """Resolve a truck by ID or by plate.

    Plates match ignoring dashes, spaces and case, so "abc1234" finds
    "ABC-1234".

    Raises:
        NotFoundError: If no truck matches
    """
    found = snapshot.find_truck(truck)
    if found is not None:
        return found
    wanted = normalize_plate(truck)
    for candidate in snapshot.trucks:
        if normalize_plate(candidate.plate) == wanted:
            return candidate
    raise NotFoundError(f"Truck '{truck}' not found")


def resolve_category(snapshot: Snapshot, category: str) -> Category:
    """Resolve a category by ID or by name (case-insensitive).

    Raises:
        NotFoundError: If no category matches
    """
    found = snapshot.find_category(category)
    if found is not None:
        return found
    wanted = category.strip().lower()
    for candidate in snapshot.categories:
        if candidate.name.lower() == wanted:
            return candidate
    raise NotFoundError(f"Category '{category}' not found")


def resolve_cargo_type(snapshot: Snapshot, cargo_type: str) -> CargoType:
    """Resolve a cargo type by ID or by name (case-insensitive).

    Raises:
        NotFoundError: If no cargo type matches
    """
    found = snapshot.find_cargo_type(cargo_type)
    if found is not None:
        return found
    wanted = cargo_type.strip().lower()
    for candidate in snapshot.cargo_types:
        if candidate.name.lower() == wanted:
            return candidate
    raise NotFoundError(f"Cargo type '{cargo_type}' not found")
