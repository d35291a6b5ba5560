"""Report folds over a set of orders and general costs.

Every report is recomputed from scratch on each call; nothing is cached.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .models import ZERO, Catalog, Directory, GeneralCost, Order, OrderItem
from .orders import check_quantity, cost_order, expected_commission
from .recipes import selection_cost
from .units import ConversionAmbiguity

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ReportLabels:
    internal: str = "Interno"
    external: str = "Esterno"
    unknown: str = "Sconosciuto"
    no_address: str = "N/A"


@dataclass(frozen=True)
class ReportPeriod:
    """A calendar month."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be within 1..12, got {self.month}")

    @classmethod
    def of(cls, day: date) -> "ReportPeriod":
        return cls(year=day.year, month=day.month)

    def contains(self, day: date | None) -> bool:
        if day is None:
            return False
        return day.year == self.year and day.month == self.month

    def shift(self, months: int) -> "ReportPeriod":
        index = self.year * 12 + (self.month - 1) + months
        return ReportPeriod(year=index // 12, month=index % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def orders_in_period(orders: Iterable[Order], period: ReportPeriod | None) -> list[Order]:
    if period is None:
        return list(orders)
    return [order for order in orders if period.contains(order.date)]


def general_costs_in_period(costs: Iterable[GeneralCost], period: ReportPeriod | None) -> list[GeneralCost]:
    """Recurring costs count in every period, one-time costs only in their own."""

    if period is None:
        return list(costs)
    return [cost for cost in costs if cost.is_recurring or period.contains(cost.date)]


def _salesperson_label(order: Order, directory: Directory, labels: ReportLabels) -> str:
    if not order.is_external:
        return labels.internal
    salesperson = directory.salespersons.get(order.salesperson_id or "")
    return salesperson.name if salesperson else labels.external


def _patient_name(order: Order, directory: Directory, labels: ReportLabels) -> str:
    patient = directory.patients.get(order.patient_id or "")
    return patient.full_name if patient else labels.unknown


def _variant_labels(item: OrderItem) -> Tuple[str, ...]:
    return tuple(item.active_modifiers().values())


def _unique(warnings: Iterable[ConversionAmbiguity]) -> Tuple[ConversionAmbiguity, ...]:
    return tuple(OrderedDict.fromkeys(warnings))


# --- Production summary -----------------------------------------------------


@dataclass(frozen=True)
class ProductionBreakdown:
    order_id: str
    patient_name: str
    quantity: int
    variants: Tuple[str, ...]
    salesperson_label: str


@dataclass
class ProductionLine:
    product_id: str
    name: str
    total_qty: int = 0
    modifier_group_ids: Tuple[str, ...] = ()
    breakdown: List[ProductionBreakdown] = field(default_factory=list)


def production_summary(
    orders: Iterable[Order],
    catalog: Catalog,
    directory: Directory = Directory(),
    labels: ReportLabels = ReportLabels(),
) -> list[ProductionLine]:
    summary: Dict[str, ProductionLine] = {}
    for order in orders:
        patient_name = _patient_name(order, directory, labels)
        salesperson = _salesperson_label(order, directory, labels)
        for item in order.items:
            check_quantity(item)
            line = summary.get(item.product_id)
            if line is None:
                product = catalog.products.get(item.product_id)
                line = ProductionLine(
                    product_id=item.product_id,
                    name=product.name if product else labels.unknown,
                    modifier_group_ids=tuple(product.modifier_group_ids) if product else (),
                )
                summary[item.product_id] = line
            line.total_qty += item.quantity
            line.breakdown.append(
                ProductionBreakdown(
                    order_id=order.id,
                    patient_name=patient_name,
                    quantity=item.quantity,
                    variants=_variant_labels(item),
                    salesperson_label=salesperson,
                )
            )
    return sorted(summary.values(), key=lambda line: (line.name.casefold(), line.product_id))


# --- Shipping manifest ------------------------------------------------------


@dataclass(frozen=True)
class ManifestItem:
    product_id: str
    name: str
    quantity: int
    variants: Tuple[str, ...]


@dataclass(frozen=True)
class ShippingEntry:
    order_id: str
    patient_name: str
    address: str
    salesperson_label: str
    items: Tuple[ManifestItem, ...]

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


def _destination(order: Order, directory: Directory, labels: ReportLabels) -> str:
    patient = directory.patients.get(order.patient_id or "")
    if patient is None:
        return labels.no_address
    parts = [part.strip() for part in (patient.address, patient.city) if part and part.strip()]
    return ", ".join(parts) if parts else labels.no_address


def shipping_manifest(
    orders: Iterable[Order],
    catalog: Catalog,
    directory: Directory = Directory(),
    labels: ReportLabels = ReportLabels(),
) -> list[ShippingEntry]:
    entries: list[ShippingEntry] = []
    for order in orders:
        if not order.is_shipping:
            continue
        items = []
        for item in order.items:
            check_quantity(item)
            product = catalog.products.get(item.product_id)
            items.append(
                ManifestItem(
                    product_id=item.product_id,
                    name=product.name if product else labels.unknown,
                    quantity=item.quantity,
                    variants=_variant_labels(item),
                )
            )
        entries.append(
            ShippingEntry(
                order_id=order.id,
                patient_name=_patient_name(order, directory, labels),
                address=_destination(order, directory, labels),
                salesperson_label=_salesperson_label(order, directory, labels),
                items=tuple(items),
            )
        )
    return entries


# --- Material procurement ---------------------------------------------------


@dataclass
class ProcurementEntry:
    name: str
    unit: str
    quantity: Decimal = ZERO
    cost: Decimal = ZERO
    linked: bool = False
    warnings: Tuple[ConversionAmbiguity, ...] = ()


def material_procurement(orders: Iterable[Order], catalog: Catalog) -> list[ProcurementEntry]:
    """Ingredient totals reachable from ordered items, grouped by name and unit.

    Order-driven: an ingredient nobody ordered contributes nothing.
    """

    entries: Dict[Tuple[str, str], ProcurementEntry] = {}
    for order in orders:
        for item in order.items:
            qty = check_quantity(item)
            if item.product_id not in catalog.products:
                continue
            selection = selection_cost(item.product_id, item.active_modifiers(), catalog)
            for line in selection.lines:
                key = (line.name, line.unit)
                entry = entries.get(key)
                if entry is None:
                    entry = ProcurementEntry(name=line.name, unit=line.unit)
                    entries[key] = entry
                entry.quantity += line.quantity * qty
                entry.cost += line.cost * qty
                entry.linked = entry.linked or line.is_linked
                if line.warnings:
                    entry.warnings = _unique((*entry.warnings, *line.warnings))
    return sorted(entries.values(), key=lambda e: (e.name.casefold(), e.unit))


# --- Profit & loss ----------------------------------------------------------


@dataclass(frozen=True)
class ProfitAndLoss:
    period: ReportPeriod | None
    gross_revenue: Decimal
    total_materials_cost: Decimal
    total_labour_cost: Decimal
    total_commissions: Decimal
    general_costs: Tuple[GeneralCost, ...]
    order_count: int = 0
    gift_count: int = 0
    warnings: Tuple[ConversionAmbiguity, ...] = ()

    @property
    def total_general_costs(self) -> Decimal:
        total = ZERO
        for cost in self.general_costs:
            total += cost.amount
        return total

    @property
    def general_costs_by_category(self) -> Mapping[str, Decimal]:
        totals: Dict[str, Decimal] = {}
        for cost in self.general_costs:
            totals[cost.category] = totals.get(cost.category, ZERO) + cost.amount
        return totals

    @property
    def operating_profit(self) -> Decimal:
        return self.gross_revenue - self.total_materials_cost - self.total_labour_cost - self.total_commissions

    @property
    def net_profit(self) -> Decimal:
        return self.operating_profit - self.total_general_costs

    @property
    def net_margin_pct(self) -> Decimal:
        if self.gross_revenue == ZERO:
            return ZERO
        pct = self.net_profit / self.gross_revenue * HUNDRED
        return pct.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def profit_and_loss(
    orders: Iterable[Order],
    general_costs: Iterable[GeneralCost],
    catalog: Catalog,
    period: ReportPeriod | None = None,
) -> ProfitAndLoss:
    revenue = materials = labour = commissions = ZERO
    order_count = gift_count = 0
    warnings: list[ConversionAmbiguity] = []
    for order in orders_in_period(orders, period):
        costed = cost_order(order, catalog)
        revenue += costed.revenue
        materials += costed.material_cost
        labour += costed.labour_cost
        commissions += costed.commission
        warnings.extend(costed.warnings)
        order_count += 1
        if order.is_free:
            gift_count += 1
    return ProfitAndLoss(
        period=period,
        gross_revenue=revenue,
        total_materials_cost=materials,
        total_labour_cost=labour,
        total_commissions=commissions,
        general_costs=tuple(general_costs_in_period(general_costs, period)),
        order_count=order_count,
        gift_count=gift_count,
        warnings=_unique(warnings),
    )


# --- External sales ---------------------------------------------------------


@dataclass
class SalespersonSales:
    salesperson_id: str | None
    name: str
    order_count: int = 0
    gift_count: int = 0
    total_sales: Decimal = ZERO
    commissions_owed: Decimal = ZERO

    @property
    def net_retention(self) -> Decimal:
        return self.total_sales - self.commissions_owed


@dataclass(frozen=True)
class SalesReport:
    rows: Tuple[SalespersonSales, ...]

    @property
    def total_sales(self) -> Decimal:
        return sum((row.total_sales for row in self.rows), ZERO)

    @property
    def commissions_owed(self) -> Decimal:
        return sum((row.commissions_owed for row in self.rows), ZERO)

    @property
    def net_retention(self) -> Decimal:
        return self.total_sales - self.commissions_owed


def external_sales_report(
    orders: Iterable[Order],
    catalog: Catalog,
    directory: Directory = Directory(),
    salesperson_id: str | None = None,
    labels: ReportLabels = ReportLabels(),
) -> SalesReport:
    """Sales and product-derived commissions per external salesperson."""

    rows: Dict[str | None, SalespersonSales] = {}
    for order in orders:
        if not order.is_external:
            continue
        if salesperson_id is not None and order.salesperson_id != salesperson_id:
            continue
        row = rows.get(order.salesperson_id)
        if row is None:
            row = SalespersonSales(
                salesperson_id=order.salesperson_id,
                name=_salesperson_label(order, directory, labels),
            )
            rows[order.salesperson_id] = row
        row.order_count += 1
        if order.is_free:
            row.gift_count += 1
        row.total_sales += cost_order(order, catalog).revenue
        row.commissions_owed += expected_commission(order, catalog)
    ordered: Sequence[SalespersonSales] = sorted(rows.values(), key=lambda r: (r.name.casefold(), r.salesperson_id or ""))
    return SalesReport(rows=tuple(ordered))
