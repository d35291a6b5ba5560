"""Per-unit production cost from a base recipe plus selected variant recipes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Mapping, Sequence

from .ingredients import IngredientCost, resolve_ingredient
from .models import ZERO, Catalog, Product, RawMaterial, Recipe
from .units import ConversionAmbiguity

DEFAULT_DRIFT_EPSILON = Decimal("0.01")


@dataclass(frozen=True)
class RecipeCost:
    recipe_id: str
    lines: Sequence[IngredientCost]

    @property
    def total(self) -> Decimal:
        total = ZERO
        for line in self.lines:
            total += line.cost
        return total


@dataclass(frozen=True)
class SelectionCost:
    """Single-unit cost of a product with a given variant selection."""

    product_id: str
    base: RecipeCost | None
    variants: Sequence[RecipeCost] = field(default_factory=tuple)

    @property
    def has_recipe(self) -> bool:
        return self.base is not None or bool(self.variants)

    @property
    def base_cost(self) -> Decimal:
        return self.base.total if self.base else ZERO

    @property
    def variant_cost(self) -> Decimal:
        total = ZERO
        for recipe in self.variants:
            total += recipe.total
        return total

    @property
    def unit_cost(self) -> Decimal:
        return self.base_cost + self.variant_cost

    @property
    def lines(self) -> tuple[IngredientCost, ...]:
        collected: list[IngredientCost] = []
        if self.base:
            collected.extend(self.base.lines)
        for recipe in self.variants:
            collected.extend(recipe.lines)
        return tuple(collected)

    @property
    def warnings(self) -> tuple[ConversionAmbiguity, ...]:
        return tuple(w for line in self.lines for w in line.warnings)


@dataclass(frozen=True)
class DriftReport:
    product_id: str
    stored: Decimal
    recomputed: Decimal

    @property
    def delta(self) -> Decimal:
        return self.stored - self.recomputed

    def drifted(self, epsilon: Decimal = DEFAULT_DRIFT_EPSILON) -> bool:
        return abs(self.delta) > epsilon


def cost_recipe(recipe: Recipe, raw_materials: Mapping[str, RawMaterial]) -> RecipeCost:
    return RecipeCost(
        recipe_id=recipe.id,
        lines=tuple(resolve_ingredient(line, raw_materials) for line in recipe.ingredients),
    )


def selection_cost(product_id: str, selected_modifiers: Mapping[str, str], catalog: Catalog) -> SelectionCost:
    """Resolve every ingredient of the base recipe and each matched variant recipe.

    Ingredients with the same name in base and variant recipes are not merged.
    """

    base_recipe = catalog.recipes.base_for(product_id)
    base = cost_recipe(base_recipe, catalog.raw_materials) if base_recipe else None
    variants = tuple(
        cost_recipe(recipe, catalog.raw_materials)
        for recipe in catalog.recipes.variants_for(selected_modifiers)
    )
    return SelectionCost(product_id=product_id, base=base, variants=variants)


def cost_for_selection(product_id: str, selected_modifiers: Mapping[str, str], catalog: Catalog) -> Decimal:
    return selection_cost(product_id, selected_modifiers, catalog).unit_cost


def base_recipe_cost(product_id: str, catalog: Catalog) -> Decimal | None:
    """Cost of the base recipe alone, or ``None`` when the product has none."""

    if catalog.recipes.base_for(product_id) is None:
        return None
    return cost_for_selection(product_id, {}, catalog)


def detect_drift(product: Product, catalog: Catalog) -> DriftReport | None:
    recomputed = base_recipe_cost(product.id, catalog)
    if recomputed is None:
        return None
    return DriftReport(product_id=product.id, stored=product.cost_per_item, recomputed=recomputed)


def sync_product_cost(product: Product, catalog: Catalog) -> Product | None:
    """Return ``product`` with ``cost_per_item`` set from its base recipe.

    Never applied automatically; the caller decides when to persist it.
    """

    recomputed = base_recipe_cost(product.id, catalog)
    if recomputed is None:
        return None
    return replace(product, cost_per_item=recomputed)
