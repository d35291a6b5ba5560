"""Revenue, material, labour and commission for order lines and orders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from .models import ZERO, Catalog, CostingError, Order, OrderItem
from .recipes import selection_cost
from .units import ConversionAmbiguity

logger = logging.getLogger(__name__)

MATERIAL_RECIPE = "recipe"
MATERIAL_STATIC = "static"
MATERIAL_MISSING = "missing"


@dataclass(frozen=True)
class LineCost:
    product_id: str
    quantity: int
    revenue: Decimal = ZERO
    material_cost: Decimal = ZERO
    labour_cost: Decimal = ZERO
    commission: Decimal = ZERO
    material_source: str = MATERIAL_MISSING
    warnings: Sequence[ConversionAmbiguity] = field(default_factory=tuple)

    @property
    def known_product(self) -> bool:
        return self.material_source != MATERIAL_MISSING


@dataclass(frozen=True)
class OrderCost:
    order_id: str
    lines: Sequence[LineCost]

    def _sum(self, attr: str) -> Decimal:
        total = ZERO
        for line in self.lines:
            total += getattr(line, attr)
        return total

    @property
    def revenue(self) -> Decimal:
        return self._sum("revenue")

    @property
    def material_cost(self) -> Decimal:
        return self._sum("material_cost")

    @property
    def labour_cost(self) -> Decimal:
        return self._sum("labour_cost")

    @property
    def commission(self) -> Decimal:
        return self._sum("commission")

    @property
    def margin(self) -> Decimal:
        return self.revenue - self.material_cost - self.labour_cost - self.commission

    @property
    def warnings(self) -> tuple[ConversionAmbiguity, ...]:
        return tuple(w for line in self.lines for w in line.warnings)


def check_quantity(item: OrderItem) -> Decimal:
    if item.quantity < 0:
        raise CostingError(f"Order item for product {item.product_id} has negative quantity {item.quantity}")
    return Decimal(item.quantity)


def cost_line(item: OrderItem, order: Order, catalog: Catalog) -> LineCost:
    """Cost one order line.

    A product missing from the catalog yields an all-zero line so historical
    orders keep aggregating after catalog edits.
    """

    qty = check_quantity(item)
    product = catalog.products.get(item.product_id)
    if product is None:
        logger.debug("Order %s references unknown product %s", order.id, item.product_id)
        return LineCost(product_id=item.product_id, quantity=item.quantity)

    # The stored cost stands in for a missing base recipe; matched variant
    # recipes are added on top either way.
    selection = selection_cost(product.id, item.active_modifiers(), catalog)
    base = selection.base_cost if selection.base is not None else product.cost_per_item
    material = (base + selection.variant_cost) * qty
    source = MATERIAL_RECIPE if selection.has_recipe else MATERIAL_STATIC

    return LineCost(
        product_id=product.id,
        quantity=item.quantity,
        revenue=ZERO if order.is_free else product.price * qty,
        material_cost=material,
        labour_cost=product.labour_cost * qty,
        commission=product.external_commission * qty if order.is_external else ZERO,
        material_source=source,
        warnings=selection.warnings,
    )


def cost_order(order: Order, catalog: Catalog) -> OrderCost:
    return OrderCost(order_id=order.id, lines=tuple(cost_line(item, order, catalog) for item in order.items))


def expected_commission(order: Order, catalog: Catalog) -> Decimal:
    """Commission derived from product data, ignoring the stored order total."""

    if not order.is_external:
        return ZERO
    total = ZERO
    for item in order.items:
        product = catalog.products.get(item.product_id)
        if product is None:
            continue
        total += product.external_commission * check_quantity(item)
    return total


def commission_drift(order: Order, catalog: Catalog) -> Decimal:
    return order.commission - expected_commission(order, catalog)
