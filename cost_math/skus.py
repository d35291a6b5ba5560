"""Variant SKU expansion for catalog export."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from itertools import product as cartesian
from typing import Iterable, Mapping, Sequence

from .models import ModifierGroup, Product

NO_VARIANTS_LABEL = "N/A"
UNCONFIGURED_LABEL = "Varianti non configurate"

_SKU_STRIP = re.compile(r"[^A-Z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_BASE_SKU_LENGTH = 15


@dataclass(frozen=True)
class SkuRow:
    product_id: str
    product_name: str
    base_sku: str
    combination_label: str
    sku: str
    price: Decimal


def generate_sku(name: str) -> str:
    """Slug a product name into a base SKU, e.g. ``"Aloe Gel 500"`` -> ``"ALOE-GEL-500"``."""

    cleaned = _SKU_STRIP.sub("", name.upper())
    return _WHITESPACE.sub("-", cleaned)[:_BASE_SKU_LENGTH]


def option_code(option: str) -> str:
    return _WHITESPACE.sub("", option.upper())[:3]


def base_sku(product: Product) -> str:
    return product.sku or generate_sku(product.name)


def linked_groups(product: Product, groups: Iterable[ModifierGroup]) -> list[ModifierGroup]:
    """Groups linked to ``product`` in the order they are supplied; dangling ids are ignored."""

    linked = set(product.modifier_group_ids)
    return [group for group in groups if group.id in linked]


def _custom_sku(product: Product, groups: Sequence[ModifierGroup], combination: Sequence[str]) -> str | None:
    for sku, mapping in product.variant_skus.items():
        if not mapping or len(mapping) != len(groups):
            continue
        if all(mapping.get(g.id, mapping.get(g.name)) == option for g, option in zip(groups, combination)):
            return sku
    return None


def expand(
    product: Product,
    groups: Iterable[ModifierGroup],
    labels: Mapping[str, str] | None = None,
) -> list[SkuRow]:
    """Enumerate every option combination of the product's linked groups.

    Combinations follow group order, then option order within each group. A
    linked group with no options yields a single "not configured" row.
    """

    labels = labels or {}
    root = base_sku(product)
    linked = linked_groups(product, groups)

    def row(label: str, sku: str) -> SkuRow:
        return SkuRow(
            product_id=product.id,
            product_name=product.name,
            base_sku=root,
            combination_label=label,
            sku=sku,
            price=product.price,
        )

    if not linked:
        return [row(labels.get("no_variants", NO_VARIANTS_LABEL), root)]
    if any(len(group.options) == 0 for group in linked):
        return [row(labels.get("unconfigured", UNCONFIGURED_LABEL), root)]

    rows: list[SkuRow] = []
    for combination in cartesian(*(group.options for group in linked)):
        sku = _custom_sku(product, linked, combination)
        if sku is None:
            sku = f"{root}-" + "-".join(option_code(option) for option in combination)
        rows.append(row(" / ".join(combination), sku))
    return rows


def export_rows(
    products: Iterable[Product],
    groups: Iterable[ModifierGroup],
    labels: Mapping[str, str] | None = None,
) -> list[SkuRow]:
    group_list = list(groups)
    rows: list[SkuRow] = []
    for item in products:
        rows.extend(expand(item, group_list, labels))
    return rows
