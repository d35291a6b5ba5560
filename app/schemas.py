"""Boundary models for snapshots handed over by the persistence collaborator.

Payloads use the camelCase keys of the hosted store (``totalQuantity``,
``selectedModifiers``...) and are converted into the engine's frozen records.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from cost_math.models import (
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


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_date(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


def _none_to_zero(value: Any) -> Any:
    return Decimal("0") if value is None else value


def _none_to_false(value: Any) -> Any:
    return False if value is None else value


OptionalRef = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
LooseDate = Annotated[Optional[date], BeforeValidator(_coerce_date)]
Money = Annotated[Decimal, BeforeValidator(_none_to_zero)]
Flag = Annotated[bool, BeforeValidator(_none_to_false)]


class SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RawMaterialIn(SnapshotModel):
    id: str
    name: str
    unit: str = ""
    total_quantity: Decimal = Field(default=Decimal("0"), ge=0)
    total_price: Decimal = Field(default=Decimal("0"), ge=0)

    def to_domain(self) -> RawMaterial:
        return RawMaterial(
            id=self.id,
            name=self.name,
            unit=self.unit,
            total_quantity=self.total_quantity,
            total_price=self.total_price,
        )


class IngredientIn(SnapshotModel):
    name: str
    quantity: Decimal = Field(ge=0)
    unit: str = ""
    cost_per_unit: Decimal = Decimal("0")
    raw_material_id: OptionalRef = None

    def to_domain(self) -> IngredientLine:
        return IngredientLine(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            cost_per_unit=self.cost_per_unit,
            raw_material_id=self.raw_material_id,
        )


class RecipeIn(SnapshotModel):
    id: str
    product_id: OptionalRef = None
    modifier_group_id: OptionalRef = None
    modifier_option: OptionalRef = None
    ingredients: List[IngredientIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_target(self) -> "RecipeIn":
        is_base = self.product_id is not None
        is_variant = self.modifier_group_id is not None and self.modifier_option is not None
        if is_base == is_variant:
            raise ValueError("recipe must target exactly one product or one modifier option")
        return self

    def to_domain(self) -> Recipe:
        return Recipe(
            id=self.id,
            product_id=self.product_id,
            modifier_group_id=self.modifier_group_id,
            modifier_option=self.modifier_option,
            ingredients=tuple(line.to_domain() for line in self.ingredients),
        )


class ModifierGroupIn(SnapshotModel):
    id: str
    name: str
    options: List[str] = Field(default_factory=list)

    @field_validator("options")
    @classmethod
    def _unique_options(cls, options: List[str]) -> List[str]:
        if len(set(options)) != len(options):
            raise ValueError("modifier options must be unique within a group")
        return options

    def to_domain(self) -> ModifierGroup:
        return ModifierGroup(id=self.id, name=self.name, options=tuple(self.options))


class ProductIn(SnapshotModel):
    id: str
    name: str
    sku: OptionalRef = None
    price: Money = Decimal("0")
    cost_per_item: Money = Decimal("0")
    labour_cost: Money = Decimal("0")
    external_commission: Money = Decimal("0")
    modifier_group_ids: List[str] = Field(default_factory=list)
    variant_map: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    @field_validator("modifier_group_ids", mode="before")
    @classmethod
    def _null_groups(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("variant_map", mode="before")
    @classmethod
    def _null_variant_map(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            cost_per_item=self.cost_per_item,
            labour_cost=self.labour_cost,
            external_commission=self.external_commission,
            modifier_group_ids=tuple(self.modifier_group_ids),
            sku=self.sku,
            variant_skus={sku: dict(mapping) for sku, mapping in self.variant_map.items()},
        )


class OrderItemIn(SnapshotModel):
    product_id: str
    quantity: int = Field(ge=0)
    selected_modifiers: Dict[str, Optional[str]] = Field(default_factory=dict)

    def to_domain(self) -> OrderItem:
        return OrderItem(
            product_id=self.product_id,
            quantity=self.quantity,
            selected_modifiers={k: v for k, v in self.selected_modifiers.items() if v},
        )


class OrderIn(SnapshotModel):
    id: str
    date: LooseDate = None
    items: List[OrderItemIn] = Field(default_factory=list)
    is_external: Flag = False
    is_shipping: Flag = False
    is_free: Flag = False
    commission: Money = Decimal("0")
    salesperson_id: OptionalRef = None
    patient_id: OptionalRef = None

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            date=self.date,
            items=tuple(item.to_domain() for item in self.items),
            is_external=self.is_external,
            is_shipping=self.is_shipping,
            is_free=self.is_free,
            commission=self.commission,
            salesperson_id=self.salesperson_id,
            patient_id=self.patient_id,
        )


class GeneralCostIn(SnapshotModel):
    id: str
    name: str
    amount: Decimal
    category: str = "Altro"
    date: LooseDate = None
    is_recurring: Flag = False

    def to_domain(self) -> GeneralCost:
        return GeneralCost(
            id=self.id,
            name=self.name,
            amount=self.amount,
            category=self.category,
            date=self.date,
            is_recurring=self.is_recurring,
        )


class PatientIn(SnapshotModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""

    def to_domain(self) -> Patient:
        return Patient(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            address=self.address,
            city=self.city,
        )


class SalespersonIn(SnapshotModel):
    id: str
    name: str

    def to_domain(self) -> Salesperson:
        return Salesperson(id=self.id, name=self.name)


class WorkspaceSnapshot(SnapshotModel):
    """Everything the engine needs for one workspace, as loaded by the store."""

    raw_materials: List[RawMaterialIn] = Field(default_factory=list)
    products: List[ProductIn] = Field(default_factory=list)
    modifier_groups: List[ModifierGroupIn] = Field(default_factory=list)
    recipes: List[RecipeIn] = Field(default_factory=list)
    orders: List[OrderIn] = Field(default_factory=list)
    general_costs: List[GeneralCostIn] = Field(default_factory=list)
    patients: List[PatientIn] = Field(default_factory=list)
    salespersons: List[SalespersonIn] = Field(default_factory=list)

    def to_catalog(self) -> Catalog:
        return Catalog.build(
            products=(p.to_domain() for p in self.products),
            raw_materials=(m.to_domain() for m in self.raw_materials),
            modifier_groups=(g.to_domain() for g in self.modifier_groups),
            recipes=(r.to_domain() for r in self.recipes),
        )

    def to_directory(self) -> Directory:
        return Directory.build(
            patients=(p.to_domain() for p in self.patients),
            salespersons=(s.to_domain() for s in self.salespersons),
        )

    def to_orders(self) -> list[Order]:
        return [order.to_domain() for order in self.orders]

    def to_general_costs(self) -> list[GeneralCost]:
        return [cost.to_domain() for cost in self.general_costs]


__all__ = [
    "GeneralCostIn",
    "IngredientIn",
    "ModifierGroupIn",
    "OrderIn",
    "OrderItemIn",
    "PatientIn",
    "ProductIn",
    "RawMaterialIn",
    "RecipeIn",
    "SalespersonIn",
    "WorkspaceSnapshot",
]
