"""CSV export of ledger reports.

Files are semicolon-delimited UTF-8 with a byte order mark so spreadsheet
tools open them with the right encoding and column split.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from frotafin.domain.defaults import MONTHS
from frotafin.domain.entities import Snapshot
from frotafin.domain.reports import income_statement, truck_plate, truck_ranking

BOM = "\ufeff"
DELIMITER = ";"

FUEL_LOG_HEADERS = ("Data", "Placa", "KM Atual", "Litros", "Preco/L", "Custo Total")
TRUCK_RANKING_HEADERS = (
    "Placa",
    "Modelo",
    "Faturamento",
    "Custos Fixos",
    "Despesas Variaveis",
    "Combustivel",
    "Custo Total",
    "Resultado Liquido",
    "KM Rodados",
    "Custo/KM",
)


@dataclass(frozen=True)
class CSVReport:
    """A rendered report ready to be written to disk."""

    filename: str
    rows: tuple[tuple[str, ...], ...]

    def render(self) -> str:
        """Return the file content, BOM included."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=DELIMITER, lineterminator="\n")
        writer.writerows(self.rows)
        return BOM + buffer.getvalue()

    def write(self, directory: str | Path) -> Path:
        """Write the report into ``directory`` and return the file path."""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.render())
        return path


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def _number(value: Decimal) -> str:
    return format(value.normalize(), "f") if value == value.to_integral_value() else str(value)


def period_label(year: int, month: Optional[int] = None) -> str:
    """Label used in income statement file names, e.g. ``Março_2024`` or ``Ano_2024``."""
    if month is None:
        return f"Ano_{year}"
    return f"{MONTHS[month - 1]}_{year}"


def export_income_statement(
    snapshot: Snapshot, year: int, month: Optional[int], exported_on: date
) -> CSVReport:
    """Income statement with realized results, pending amounts and category detail."""
    dre = income_statement(snapshot, year, month)
    period = period_label(year, month)
    rows: list[tuple[str, ...]] = [
        ("RELATORIO DRE - FROTAFIN",),
        ("Periodo", period),
        ("Data de Exportacao", exported_on.strftime("%d/%m/%Y")),
        (),
        ("Descricao", "Valor"),
        ("RECEITA BRUTA REALIZADA", _money(dre.revenue)),
        ("(-) CUSTOS FIXOS REALIZADOS", _money(dre.fixed_costs)),
        ("(=) LUCRO BRUTO REALIZADO", _money(dre.gross_profit)),
        ("(-) DESPESAS VARIAVEIS REALIZADAS", _money(dre.variable_expenses)),
        ("(=) LUCRO / PREJUIZO LIQUIDO", _money(dre.net_profit)),
        ("Margem de Lucro (%)", f"{_money(dre.profit_margin)}%"),
        (),
        ("PENDENCIAS (NAO INCLUSAS NO LUCRO)",),
        ("A RECEBER", _money(dre.pending_revenue)),
        ("A PAGAR", _money(dre.pending_expenses)),
        (),
        ("DETALHAMENTO POR CATEGORIA (REALIZADO)",),
    ]
    rows.extend((name, _money(total)) for name, total in dre.category_totals)
    return CSVReport(filename=f"DRE_Realizado_{period}.csv", rows=tuple(rows))


def export_fuel_log(snapshot: Snapshot, exported_on: date) -> CSVReport:
    """Every fuel record in insertion order."""
    rows: list[tuple[str, ...]] = [FUEL_LOG_HEADERS]
    for record in snapshot.fuel_records:
        rows.append(
            (
                record.date.strftime("%d/%m/%Y"),
                truck_plate(snapshot, record.truck_id),
                _number(record.mileage),
                f"{record.liters:.2f}",
                f"{record.price_per_liter:.3f}",
                _money(record.cost),
            )
        )
    return CSVReport(filename=f"Abastecimentos_{exported_on.isoformat()}.csv", rows=tuple(rows))


def export_truck_ranking(snapshot: Snapshot, year: int) -> CSVReport:
    """Truck profitability for ``year``, best net result first."""
    rows: list[tuple[str, ...]] = [TRUCK_RANKING_HEADERS]
    for perf in truck_ranking(snapshot, year):
        rows.append(
            (
                perf.plate,
                perf.model,
                _money(perf.revenue),
                _money(perf.fixed_costs),
                _money(perf.variable_expenses),
                _money(perf.fuel_cost),
                _money(perf.total_cost),
                _money(perf.net_result),
                _number(perf.total_km),
                _money(perf.cost_per_km),
            )
        )
    return CSVReport(filename=f"Ranking_Frota_{year}.csv", rows=tuple(rows))
