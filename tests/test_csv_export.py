"""Tests for CSV report export."""

from datetime import date

from frotafin.domain.csv_export import (
    BOM,
    export_fuel_log,
    export_income_statement,
    export_truck_ranking,
    period_label,
)


def test_period_label():
    """Test month and year labels."""
    assert period_label(2024, 3) == "Março_2024"
    assert period_label(2024) == "Ano_2024"


def test_income_statement_export(store):
    """Test the DRE file layout."""
    store.add_transaction(category_id="1", amount=10000)
    store.add_transaction(category_id="1", amount=2000, is_paid=False)
    store.add_transaction(category_id="2", amount=3000)

    report = export_income_statement(store.snapshot, 2024, 3, date(2024, 3, 20))
    content = report.render()

    assert report.filename == "DRE_Realizado_Março_2024.csv"
    assert content.startswith(BOM + "RELATORIO DRE - FROTAFIN\n")
    assert "Periodo;Março_2024\n" in content
    assert "Data de Exportacao;20/03/2024\n" in content
    assert "RECEITA BRUTA REALIZADA;10000.00\n" in content
    assert "(=) LUCRO / PREJUIZO LIQUIDO;7000.00\n" in content
    assert "Margem de Lucro (%);70.00%\n" in content
    assert "A RECEBER;2000.00\n" in content
    assert "Fretes;10000.00\n" in content
    assert "\n\nDescricao;Valor\n" in content


def test_fuel_log_export(store, truck):
    """Test fuel rows use the truck plate and Brazilian dates."""
    store.add_fuel_record(
        truck_id=truck.id, mileage=1000, liters=50, price_per_liter="5.89", cost="294.50"
    )

    report = export_fuel_log(store.snapshot, date(2024, 3, 20))
    lines = report.render().lstrip(BOM).splitlines()

    assert report.filename == "Abastecimentos_2024-03-20.csv"
    assert lines[0] == "Data;Placa;KM Atual;Litros;Preco/L;Custo Total"
    assert lines[1] == "15/03/2024;ABC-1234;1000;50.00;5.890;294.50"


def test_truck_ranking_export(store, tmp_path):
    """Test ranking order and writing the file to disk."""
    store.add_transaction(category_id="1", amount=800, truck_id="t2")

    report = export_truck_ranking(store.snapshot, 2024)
    path = report.write(tmp_path)

    assert path == tmp_path / "Ranking_Frota_2024.csv"
    raw = path.read_text(encoding="utf-8")
    assert raw.startswith(BOM)
    lines = raw.lstrip(BOM).splitlines()
    assert lines[0].split(";")[0] == "Placa"
    assert lines[1].startswith("XYZ-9999;Scania R 450;800.00;")
    assert lines[2].startswith("ABC-1234;")
