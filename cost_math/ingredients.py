"""Effective cost of a single recipe ingredient line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from .models import ZERO, CostingError, IngredientLine, RawMaterial
from .units import ConversionAmbiguity, convert

logger = logging.getLogger(__name__)

SOURCE_RAW_MATERIAL = "raw_material"
SOURCE_STATIC = "static"


@dataclass(frozen=True)
class IngredientCost:
    name: str
    unit: str
    quantity: Decimal
    cost: Decimal
    source: str
    raw_material_id: str | None = None
    warnings: Sequence[ConversionAmbiguity] = field(default_factory=tuple)

    @property
    def is_linked(self) -> bool:
        return self.source == SOURCE_RAW_MATERIAL


def quantize_cost(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)


def _linked_material(line: IngredientLine, raw_materials: Mapping[str, RawMaterial]) -> RawMaterial | None:
    if not line.raw_material_id:
        return None
    material = raw_materials.get(line.raw_material_id)
    if material is None:
        logger.debug("Raw material %s for %s not found, using static cost", line.raw_material_id, line.name)
        return None
    if material.total_quantity <= ZERO:
        return None
    return material


def resolve_ingredient(line: IngredientLine, raw_materials: Mapping[str, RawMaterial]) -> IngredientCost:
    """Cost one ingredient line against the current inventory.

    A resolvable raw-material link always wins over the stored ``cost_per_unit``;
    a dangling link or an empty stock record falls back to the static cost.
    """

    if line.quantity < ZERO:
        raise CostingError(f"Ingredient {line.name!r} has negative quantity {line.quantity}")

    material = _linked_material(line, raw_materials)
    if material is None:
        return IngredientCost(
            name=line.name,
            unit=line.unit,
            quantity=line.quantity,
            cost=quantize_cost(line.quantity * line.cost_per_unit),
            source=SOURCE_STATIC,
            raw_material_id=line.raw_material_id,
        )

    conversion = convert(line.unit, material.unit)
    warnings: tuple[ConversionAmbiguity, ...] = ()
    if not conversion.defined:
        warnings = (ConversionAmbiguity(from_unit=line.unit, to_unit=material.unit, ingredient=line.name),)
    converted = line.quantity * conversion.factor
    return IngredientCost(
        name=line.name,
        unit=line.unit,
        quantity=line.quantity,
        cost=quantize_cost(converted * material.unit_cost),
        source=SOURCE_RAW_MATERIAL,
        raw_material_id=material.id,
        warnings=warnings,
    )


def resolve_cost(line: IngredientLine, raw_materials: Mapping[str, RawMaterial]) -> Decimal:
    return resolve_ingredient(line, raw_materials).cost
