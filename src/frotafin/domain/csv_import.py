"""Spreadsheet (CSV) import domain service."""

import csv
import logging
from pathlib import Path
from typing import Any, Optional

from frotafin.domain.entities import TransactionType
from frotafin.domain.ledger import LedgerStore, normalize_plate
from frotafin.utils.amount_parser import parse_amount
from frotafin.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

# Accepted headers per field, compared case-insensitively. First match wins.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("data", "date"),
    "execution_date": ("execucao", "execução"),
    "description": ("descricao", "descrição", "description"),
    "amount": ("valor", "amount"),
    "sub_category": ("subcategoria", "cliente", "fornecedor"),
    "category": ("categoria",),
    "plate": ("placa",),
    "type": ("tipo",),
    "status": ("status",),
    "due_date": ("vencimento",),
}

UNPAID_MARKERS = ("pendente", "aberto")


def _detect_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
    except csv.Error:
        return ";" if sample.count(";") > sample.count(",") else ","


def _map_columns(fieldnames: list[str]) -> dict[str, list[str]]:
    """Map each field to the CSV headers that can provide it, in alias order."""
    by_lower = {name.strip().lower(): name for name in fieldnames if name}
    return {
        field: [by_lower[alias] for alias in aliases if alias in by_lower]
        for field, aliases in COLUMN_ALIASES.items()
    }


def _value(row: dict[str, Any], columns: list[str]) -> Optional[str]:
    for column in columns:
        raw = row.get(column)
        if raw is not None and str(raw).strip():
            return str(raw).strip()
    return None


def type_from_label(label: Optional[str]) -> TransactionType:
    """Infer a transaction type from a free-text "Tipo" cell."""
    label = (label or "").lower()
    if "receita" in label:
        return TransactionType.REVENUE
    if "fixo" in label:
        return TransactionType.FIXED_COST
    return TransactionType.VARIABLE_EXPENSE


class SpreadsheetImportService:
    """Service for importing transactions from spreadsheet exports."""

    def __init__(self, store: LedgerStore):
        """Initialize the import service.

        Args:
            store: Ledger store receiving the transactions
        """
        self.store = store

    def import_csv(self, csv_file_path: str | Path) -> dict[str, Any]:
        """Import transactions from a CSV file.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Dict with import statistics:
            - imported: number of transactions imported
            - skipped: number of rows skipped (zero amount)
            - errors: list of error messages

        Raises:
            ValueError: If the file has no header or no category exists
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
        if not self.store.snapshot.categories:
            raise ValueError("At least one category is required before importing")

        imported = 0
        skipped = 0
        errors = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(4096)
            f.seek(0)
            reader = csv.DictReader(f, delimiter=_detect_delimiter(sample))
            if not reader.fieldnames:
                raise ValueError("CSV file has no columns")
            columns = _map_columns(reader.fieldnames)
            if not columns["amount"]:
                raise ValueError("CSV file missing an amount column (Valor or Amount)")

            for row_num, row in enumerate(reader, start=2):
                try:
                    amount = parse_amount(_value(row, columns["amount"]) or "0")
                    if amount == 0:
                        skipped += 1
                        continue
                    self._import_row(row, columns, amount)
                    imported += 1
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")

        logger.info(
            "Imported %d rows from %s (%d skipped, %d errors)",
            imported,
            csv_path,
            skipped,
            len(errors),
        )
        return {"imported": imported, "skipped": skipped, "errors": errors}

    def _import_row(self, row: dict[str, Any], columns: dict[str, list[str]], amount) -> None:
        snapshot = self.store.snapshot
        today = self.store.today()

        date_str = _value(row, columns["date"])
        txn_date = parse_date(date_str, today=today) if date_str else today
        execution_str = _value(row, columns["execution_date"])
        execution_date = parse_date(execution_str, today=today) if execution_str else txn_date
        due_str = _value(row, columns["due_date"])

        category_name = (_value(row, columns["category"]) or "").lower()
        category = next(
            (c for c in snapshot.categories if c.name.lower() == category_name), None
        )
        plate = _value(row, columns["plate"])
        truck = None
        if plate:
            truck = next(
                (t for t in snapshot.trucks if normalize_plate(t.plate) == normalize_plate(plate)),
                None,
            )

        status = (_value(row, columns["status"]) or "").lower()
        self.store.add_transaction(
            date=txn_date,
            execution_date=execution_date,
            due_date=parse_date(due_str, today=today) if due_str else None,
            is_paid=not any(marker in status for marker in UNPAID_MARKERS),
            amount=amount,
            description=_value(row, columns["description"]) or "",
            sub_category=_value(row, columns["sub_category"]),
            category_id=(category or snapshot.categories[0]).id,
            type=category.type if category else type_from_label(_value(row, columns["type"])),
            truck_id=truck.id if truck else None,
        )
