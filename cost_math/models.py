"""Catalog, order and cost records consumed by the costing engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Sequence, Tuple

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class CostingError(ValueError):
    """Raised when the engine is called with inputs no caller should produce."""


class CatalogError(ValueError):
    """Raised when a recipe or product linkage is malformed at creation time."""


@dataclass(frozen=True)
class RawMaterial:
    id: str
    name: str
    unit: str
    total_quantity: Decimal
    total_price: Decimal

    @property
    def unit_cost(self) -> Decimal:
        if self.total_quantity <= ZERO:
            return ZERO
        return self.total_price / self.total_quantity


@dataclass(frozen=True)
class IngredientLine:
    name: str
    quantity: Decimal
    unit: str
    cost_per_unit: Decimal = ZERO
    raw_material_id: str | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.raw_material_id)


@dataclass(frozen=True)
class Recipe:
    """Either a base recipe (``product_id``) or a variant recipe."""

    id: str
    ingredients: Sequence[IngredientLine] = field(default_factory=tuple)
    product_id: str | None = None
    modifier_group_id: str | None = None
    modifier_option: str | None = None

    def __post_init__(self) -> None:
        is_base = bool(self.product_id)
        is_variant = bool(self.modifier_group_id) and bool(self.modifier_option)
        if is_base == is_variant:
            raise CatalogError(
                f"Recipe {self.id} must target exactly one product or one modifier option"
            )

    @property
    def is_base(self) -> bool:
        return bool(self.product_id)

    @property
    def variant_key(self) -> Tuple[str, str] | None:
        if self.is_base:
            return None
        return (str(self.modifier_group_id), str(self.modifier_option))


@dataclass(frozen=True)
class ModifierGroup:
    id: str
    name: str
    options: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal
    cost_per_item: Decimal = ZERO
    labour_cost: Decimal = ZERO
    external_commission: Decimal = ZERO
    modifier_group_ids: Sequence[str] = field(default_factory=tuple)
    sku: str | None = None
    variant_skus: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    quantity: int
    selected_modifiers: Mapping[str, str] = field(default_factory=dict)

    def active_modifiers(self) -> Dict[str, str]:
        """Selections with a real option; empty entries mean "standard"."""

        return {
            group_id: option
            for group_id, option in self.selected_modifiers.items()
            if option is not None and str(option).strip() != ""
        }


@dataclass(frozen=True)
class Order:
    id: str
    date: date | None
    items: Sequence[OrderItem] = field(default_factory=tuple)
    is_external: bool = False
    is_shipping: bool = False
    is_free: bool = False
    commission: Decimal = ZERO
    salesperson_id: str | None = None
    patient_id: str | None = None


@dataclass(frozen=True)
class GeneralCost:
    id: str
    name: str
    amount: Decimal
    category: str = "Altro"
    date: date | None = None
    is_recurring: bool = False


@dataclass(frozen=True)
class Patient:
    id: str
    first_name: str
    last_name: str
    address: str = ""
    city: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Salesperson:
    id: str
    name: str


class RecipeBook:
    """Read-only index of recipes by product and by variant option.

    Indexing never raises: when two recipes claim the same slot the first one
    wins and the collision is logged. Rejecting duplicates is the job of
    :func:`validate_recipe` at creation time.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self._base: Dict[str, Recipe] = {}
        self._variants: Dict[Tuple[str, str], Recipe] = {}
        for recipe in recipes:
            if recipe.is_base:
                key = str(recipe.product_id)
                if key in self._base:
                    logger.warning("Duplicate base recipe %s for product %s ignored", recipe.id, key)
                    continue
                self._base[key] = recipe
            else:
                variant = (str(recipe.modifier_group_id), str(recipe.modifier_option))
                if variant in self._variants:
                    logger.warning("Duplicate variant recipe %s for %s ignored", recipe.id, variant)
                    continue
                self._variants[variant] = recipe

    def base_for(self, product_id: str) -> Recipe | None:
        return self._base.get(product_id)

    def variant_for(self, group_id: str, option: str) -> Recipe | None:
        return self._variants.get((group_id, option))

    def variants_for(self, selected_modifiers: Mapping[str, str]) -> list[Recipe]:
        matched: list[Recipe] = []
        for group_id, option in selected_modifiers.items():
            if not option:
                continue
            recipe = self._variants.get((group_id, option))
            if recipe is not None:
                matched.append(recipe)
        return matched

    def __len__(self) -> int:
        return len(self._base) + len(self._variants)


def validate_recipe(candidate: Recipe, existing: Iterable[Recipe]) -> None:
    """Reject a recipe that would give a product or variant a second recipe."""

    for recipe in existing:
        if recipe.id == candidate.id:
            continue
        if candidate.is_base and recipe.product_id == candidate.product_id:
            raise CatalogError(f"Product {candidate.product_id} already has base recipe {recipe.id}")
        if not candidate.is_base and recipe.variant_key == candidate.variant_key:
            raise CatalogError(
                f"Option {candidate.modifier_option!r} of group {candidate.modifier_group_id} "
                f"already has recipe {recipe.id}"
            )


@dataclass(frozen=True)
class Catalog:
    """Immutable snapshot of reference data passed into every engine call."""

    products: Mapping[str, Product] = field(default_factory=dict)
    raw_materials: Mapping[str, RawMaterial] = field(default_factory=dict)
    modifier_groups: Mapping[str, ModifierGroup] = field(default_factory=dict)
    recipes: RecipeBook = field(default_factory=RecipeBook)

    @classmethod
    def build(
        cls,
        products: Iterable[Product] = (),
        raw_materials: Iterable[RawMaterial] = (),
        modifier_groups: Iterable[ModifierGroup] = (),
        recipes: Iterable[Recipe] = (),
    ) -> "Catalog":
        return cls(
            products={p.id: p for p in products},
            raw_materials={m.id: m for m in raw_materials},
            modifier_groups={g.id: g for g in modifier_groups},
            recipes=RecipeBook(recipes),
        )


@dataclass(frozen=True)
class Directory:
    """People referenced by orders, used only for report labels."""

    patients: Mapping[str, Patient] = field(default_factory=dict)
    salespersons: Mapping[str, Salesperson] = field(default_factory=dict)

    @classmethod
    def build(cls, patients: Iterable[Patient] = (), salespersons: Iterable[Salesperson] = ()) -> "Directory":
        return cls(
            patients={p.id: p for p in patients},
            salespersons={s.id: s for s in salespersons},
        )
