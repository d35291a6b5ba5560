from __future__ import annotations

from decimal import Decimal

from cost_math.models import ModifierGroup, Product
from cost_math.skus import (
    NO_VARIANTS_LABEL,
    UNCONFIGURED_LABEL,
    expand,
    export_rows,
    generate_sku,
    linked_groups,
    option_code,
)

SIZE = ModifierGroup(id="g-size", name="Formato", options=("Small", "Big"))
FLAVOR = ModifierGroup(id="g-flavor", name="Gusto", options=("Menta", "Limone"))


def _product(**overrides) -> Product:
    data = dict(id="p1", name="Aloe Gel", price=Decimal("35"), sku="ALOE-GEL", modifier_group_ids=("g-size", "g-flavor"))
    data.update(overrides)
    return Product(**data)


def test_generate_sku() -> None:
    assert generate_sku("Aloe Gel 500") == "ALOE-GEL-500"
    assert generate_sku("Crema  all'Aloe!") == "CREMA-ALLALOE"
    assert generate_sku("Succo di aloe vera extra") == "SUCCO-DI-ALOE-V"


def test_option_code() -> None:
    assert option_code("small") == "SMA"
    assert option_code("5 ml") == "5ML"
    assert option_code("L") == "L"


def test_two_by_two_groups_yield_four_distinct_rows() -> None:
    rows = expand(_product(), [SIZE, FLAVOR])
    assert [(r.combination_label, r.sku) for r in rows] == [
        ("Small / Menta", "ALOE-GEL-SMA-MEN"),
        ("Small / Limone", "ALOE-GEL-SMA-LIM"),
        ("Big / Menta", "ALOE-GEL-BIG-MEN"),
        ("Big / Limone", "ALOE-GEL-BIG-LIM"),
    ]
    assert len({r.sku for r in rows}) == 4
    assert all(r.base_sku == "ALOE-GEL" and r.price == Decimal("35") for r in rows)


def test_product_without_groups_yields_base_row() -> None:
    [row] = expand(_product(modifier_group_ids=()), [SIZE, FLAVOR])
    assert row.combination_label == NO_VARIANTS_LABEL
    assert row.sku == "ALOE-GEL"


def test_group_without_options_is_not_configured() -> None:
    empty = ModifierGroup(id="g-flavor", name="Gusto", options=())
    [row] = expand(_product(), [SIZE, empty])
    assert row.combination_label == UNCONFIGURED_LABEL
    assert row.sku == "ALOE-GEL"


def test_missing_sku_is_generated_from_name() -> None:
    [row] = expand(_product(sku=None, modifier_group_ids=()), [])
    assert row.sku == "ALOE-GEL"


def test_custom_variant_sku_overrides_generated() -> None:
    product = _product(variant_skus={"ALOE-500-MINT": {"Formato": "Big", "g-flavor": "Menta"}, "EMPTY": {}})
    rows = {r.combination_label: r.sku for r in expand(product, [SIZE, FLAVOR])}
    assert rows["Big / Menta"] == "ALOE-500-MINT"
    assert rows["Small / Menta"] == "ALOE-GEL-SMA-MEN"


def test_dangling_group_ids_are_ignored() -> None:
    product = _product(modifier_group_ids=("g-size", "g-gone"))
    assert linked_groups(product, [SIZE, FLAVOR]) == [SIZE]
    assert len(expand(product, [SIZE, FLAVOR])) == 2


def test_export_rows_with_custom_labels() -> None:
    rows = export_rows([_product(modifier_group_ids=())], [SIZE], {"no_variants": "-"})
    assert rows[0].combination_label == "-"
