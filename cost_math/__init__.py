"""Stateless costing and reporting core."""

from .ingredients import IngredientCost, resolve_cost, resolve_ingredient
from .models import (
    Catalog,
    CatalogError,
    CostingError,
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
    RecipeBook,
    Salesperson,
    validate_recipe,
)
from .orders import LineCost, OrderCost, commission_drift, cost_line, cost_order, expected_commission
from .recipes import (
    DriftReport,
    SelectionCost,
    base_recipe_cost,
    cost_for_selection,
    detect_drift,
    selection_cost,
    sync_product_cost,
)
from .reports import (
    ProcurementEntry,
    ProductionLine,
    ProfitAndLoss,
    ReportLabels,
    ReportPeriod,
    SalesReport,
    ShippingEntry,
    external_sales_report,
    general_costs_in_period,
    material_procurement,
    orders_in_period,
    production_summary,
    profit_and_loss,
    shipping_manifest,
)
from .skus import SkuRow, expand, export_rows, generate_sku
from .units import Conversion, ConversionAmbiguity, convert, factor

__all__ = [
    "IngredientCost",
    "resolve_cost",
    "resolve_ingredient",
    "Catalog",
    "CatalogError",
    "CostingError",
    "Directory",
    "GeneralCost",
    "IngredientLine",
    "ModifierGroup",
    "Order",
    "OrderItem",
    "Patient",
    "Product",
    "RawMaterial",
    "Recipe",
    "RecipeBook",
    "Salesperson",
    "validate_recipe",
    "LineCost",
    "OrderCost",
    "commission_drift",
    "cost_line",
    "cost_order",
    "expected_commission",
    "DriftReport",
    "SelectionCost",
    "base_recipe_cost",
    "cost_for_selection",
    "detect_drift",
    "selection_cost",
    "sync_product_cost",
    "ProcurementEntry",
    "ProductionLine",
    "ProfitAndLoss",
    "ReportLabels",
    "ReportPeriod",
    "SalesReport",
    "ShippingEntry",
    "external_sales_report",
    "general_costs_in_period",
    "material_procurement",
    "orders_in_period",
    "production_summary",
    "profit_and_loss",
    "shipping_manifest",
    "SkuRow",
    "expand",
    "export_rows",
    "generate_sku",
    "Conversion",
    "ConversionAmbiguity",
    "convert",
    "factor",
]
