"""Seed data used when nothing has been persisted yet."""

from frotafin.domain.entities import (
    CargoType,
    Category,
    MeasureUnit,
    TransactionType,
    Truck,
)

DEFAULT_COMPANY_NAME = "Minha Transportadora"

INITIAL_CATEGORIES = (
    Category(id="1", name="Fretes", type=TransactionType.REVENUE),
    Category(id="2", name="Seguro", type=TransactionType.FIXED_COST),
    Category(id="3", name="Salários", type=TransactionType.FIXED_COST),
    Category(id="4", name="Combustível", type=TransactionType.VARIABLE_EXPENSE),
    Category(id="5", name="Manutenção", type=TransactionType.VARIABLE_EXPENSE),
    Category(id="6", name="Pedágio", type=TransactionType.VARIABLE_EXPENSE),
)

INITIAL_CARGO_TYPES = (
    CargoType(id="c1", name="Aterro", unit=MeasureUnit.VOLUME),
    CargoType(id="c2", name="Brita 0", unit=MeasureUnit.WEIGHT),
    CargoType(id="c3", name="Brita 1", unit=MeasureUnit.WEIGHT),
    CargoType(id="c4", name="Areia", unit=MeasureUnit.VOLUME),
    CargoType(id="c5", name="Massa Asfáltica", unit=MeasureUnit.WEIGHT),
)

INITIAL_TRUCKS = (
    Truck(id="t1", plate="ABC-1234", model="Volvo FH 540"),
    Truck(id="t2", plate="XYZ-9999", model="Scania R 450"),
)

MONTHS = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)

# Name fragments used to find well-known categories.
FUEL_CATEGORY_HINT = "combustível"
MAINTENANCE_CATEGORY_HINT = "manutenção"
FREIGHT_CATEGORY_HINT = "frete"
