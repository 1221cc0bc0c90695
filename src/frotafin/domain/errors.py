"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ReferentialIntegrityError(DomainError):
    """Delete blocked because dependent records exist."""


class PersistenceError(DomainError):
    """Local storage could not be read or written."""


class SyncError(DomainError):
    """Remote upload or download failed."""


class AnalysisError(DomainError):
    """Entry-suggestion collaborator failed or replied with garbage."""


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing entity."""
    return f"{kind} {entity_id} not found"


def required_field(field: str) -> str:
    """Return message for a missing required field."""
    return f"Field '{field}' is required"


def delete_blocked(kind: str, entity_id: str, dependents: dict[str, int]) -> str:
    """Return message when an entity still has dependent records."""
    parts = []
    for label, count in dependents.items():
        if count > 0:
            parts.append(f"{count} {label}{'s' if count != 1 else ''}")
    return (
        f"Cannot delete {kind} {entity_id}: it is referenced by {', '.join(parts)}. "
        "Please reassign or delete them first."
    )


def duplicate_plate(plate: str) -> str:
    """Return message for a duplicate truck plate."""
    return f"Truck with plate '{plate}' already exists"
