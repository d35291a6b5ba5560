import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from cost_math.models import (  # noqa: E402
    Catalog,
    Directory,
    GeneralCost,
    IngredientLine,
    ModifierGroup,
    Order,
    OrderItem,
    Patient,
    Product,
    RawMaterial,
    Recipe,
    Salesperson,
)


@pytest.fixture
def raw_materials() -> list[RawMaterial]:
    return [
        # 0.02 per ml
        RawMaterial(id="rm-aloe", name="Aloe", unit="ml", total_quantity=Decimal("5000"), total_price=Decimal("100.00")),
        # 15.00 per kg
        RawMaterial(id="rm-honey", name="Miele", unit="kg", total_quantity=Decimal("2"), total_price=Decimal("30.00")),
        RawMaterial(id="rm-empty", name="Grappa", unit="l", total_quantity=Decimal("0"), total_price=Decimal("12.00")),
    ]


@pytest.fixture
def modifier_groups() -> list[ModifierGroup]:
    return [
        ModifierGroup(id="grp-size", name="Formato", options=("Small", "Big")),
        ModifierGroup(id="grp-flavor", name="Gusto", options=("Menta", "Limone")),
    ]


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(
            id="p-gel",
            name="Gel Aloe",
            price=Decimal("35.00"),
            cost_per_item=Decimal("0"),
            labour_cost=Decimal("5.00"),
            external_commission=Decimal("8.00"),
            modifier_group_ids=("grp-size",),
        ),
        Product(
            id="p-cream",
            name="Crema Miele",
            price=Decimal("20.00"),
            cost_per_item=Decimal("10.00"),
            labour_cost=Decimal("2.00"),
            external_commission=Decimal("3.00"),
        ),
        Product(
            id="p-juice",
            name="Succo Aloe",
            price=Decimal("25.00"),
            cost_per_item=Decimal("1.50"),
            labour_cost=Decimal("1.00"),
            external_commission=Decimal("4.00"),
            modifier_group_ids=("grp-size", "grp-flavor"),
        ),
    ]


@pytest.fixture
def recipes() -> list[Recipe]:
    return [
        Recipe(
            id="r-small",
            modifier_group_id="grp-size",
            modifier_option="Small",
            ingredients=(IngredientLine(name="Aloe", quantity=Decimal("200"), unit="ml", raw_material_id="rm-aloe"),),
        ),
        Recipe(
            id="r-big",
            modifier_group_id="grp-size",
            modifier_option="Big",
            ingredients=(IngredientLine(name="Aloe", quantity=Decimal("500"), unit="ml", raw_material_id="rm-aloe"),),
        ),
        Recipe(
            id="r-juice",
            product_id="p-juice",
            ingredients=(
                # 0.1 kg at 15.00/kg
                IngredientLine(name="Miele", quantity=Decimal("100"), unit="gr", raw_material_id="rm-honey"),
                IngredientLine(name="Bottiglia", quantity=Decimal("1"), unit="Unità", cost_per_unit=Decimal("0.50")),
            ),
        ),
        Recipe(
            id="r-mint",
            modifier_group_id="grp-flavor",
            modifier_option="Menta",
            ingredients=(IngredientLine(name="Menta", quantity=Decimal("5"), unit="gr", cost_per_unit=Decimal("0.10")),),
        ),
    ]


@pytest.fixture
def catalog(products, raw_materials, modifier_groups, recipes) -> Catalog:
    return Catalog.build(
        products=products,
        raw_materials=raw_materials,
        modifier_groups=modifier_groups,
        recipes=recipes,
    )


@pytest.fixture
def directory() -> Directory:
    return Directory.build(
        patients=[
            Patient(id="pt-1", first_name="Mario", last_name="Rossi", address="Via Roma 1", city="Milano"),
            Patient(id="pt-2", first_name="Anna", last_name="Bianchi"),
        ],
        salespersons=[Salesperson(id="sp-1", name="Giulia")],
    )


@pytest.fixture
def external_order() -> Order:
    return Order(
        id="o-ext",
        date=date(2024, 5, 3),
        items=(
            OrderItem(product_id="p-gel", quantity=1, selected_modifiers={"grp-size": "Small"}),
            OrderItem(product_id="p-gel", quantity=1, selected_modifiers={"grp-size": "Big"}),
        ),
        is_external=True,
        is_shipping=True,
        commission=Decimal("16.00"),
        salesperson_id="sp-1",
        patient_id="pt-1",
    )


@pytest.fixture
def gift_order() -> Order:
    return Order(
        id="o-gift",
        date=date(2024, 5, 20),
        items=(OrderItem(product_id="p-juice", quantity=2, selected_modifiers={"grp-size": "", "grp-flavor": ""}),),
        is_free=True,
        patient_id="pt-2",
    )


@pytest.fixture
def april_order() -> Order:
    return Order(
        id="o-april",
        date=date(2024, 4, 28),
        items=(OrderItem(product_id="p-cream", quantity=3),),
        patient_id="pt-2",
    )


@pytest.fixture
def orders(external_order, gift_order, april_order) -> list[Order]:
    return [external_order, gift_order, april_order]


@pytest.fixture
def general_costs() -> list[GeneralCost]:
    return [
        GeneralCost(
            id="gc-rent",
            name="Affitto laboratorio",
            amount=Decimal("300.00"),
            category="Affitto",
            date=date(2023, 1, 1),
            is_recurring=True,
        ),
        GeneralCost(
            id="gc-fix", name="Riparazione", amount=Decimal("40.00"), category="Manutenzione", date=date(2024, 5, 15)
        ),
        GeneralCost(id="gc-old", name="Bolletta", amount=Decimal("25.00"), category="Utenze", date=date(2024, 4, 2)),
    ]
