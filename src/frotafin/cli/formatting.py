"""Shared output formatting for CLI commands."""

from decimal import Decimal
from typing import Optional

from frotafin.domain.entities import MaintenanceStatus, TransactionType

# CLI choice -> transaction type
TRANSACTION_TYPES = {
    "revenue": TransactionType.REVENUE,
    "fixed": TransactionType.FIXED_COST,
    "variable": TransactionType.VARIABLE_EXPENSE,
}

TYPE_LABELS = {
    TransactionType.REVENUE: "Receita",
    TransactionType.FIXED_COST: "Custo Fixo",
    TransactionType.VARIABLE_EXPENSE: "Despesa Variável",
}

STATUS_LABELS = {
    MaintenanceStatus.PENDING: "Pendente",
    MaintenanceStatus.IN_PROGRESS: "Em andamento",
    MaintenanceStatus.COMPLETED: "Concluída",
}


def money(value: Decimal) -> str:
    """Format an amount as Brazilian currency, e.g. ``R$ 1.234,56``."""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def percent(value: Decimal) -> str:
    """Format a percentage with two decimals."""
    return f"{value:.2f}%"


def optional(value: Optional[object], empty: str = "-") -> str:
    """Render None as a placeholder."""
    return empty if value is None else str(value)
