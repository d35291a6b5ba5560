from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from app.config import Settings
from app.dependencies import get_settings
from app.repos import CatalogProvider, OrderProvider
from cost_math.models import Order
from cost_math.orders import expected_commission
from cost_math.reports import (
    ProcurementEntry,
    ProductionLine,
    ProfitAndLoss,
    ReportPeriod,
    SalesReport,
    ShippingEntry,
    external_sales_report,
    material_procurement,
    orders_in_period,
    production_summary,
    profit_and_loss,
    shipping_manifest,
)
from cost_math.skus import SkuRow, export_rows

logger = logging.getLogger(__name__)


def _log_conversion_warnings(pnl: ProfitAndLoss, period: ReportPeriod | None) -> None:
    label = str(period) if period else "all orders"
    for warning in pnl.warnings:
        logger.warning("%s while costing %s", warning.describe(), label, extra={"period": label})


@dataclass(frozen=True)
class MonthlyReports:
    period: ReportPeriod
    production: Sequence[ProductionLine]
    shipping: Sequence[ShippingEntry]
    procurement: Sequence[ProcurementEntry]
    profit_and_loss: ProfitAndLoss


@dataclass(frozen=True)
class CommissionMismatch:
    order_id: str
    stored: Decimal
    expected: Decimal

    @property
    def delta(self) -> Decimal:
        return self.stored - self.expected


class ReportingService:
    """Builds report views from fresh collaborator snapshots on every call."""

    def __init__(
        self,
        catalog_provider: CatalogProvider,
        order_provider: OrderProvider,
        settings: Settings | None = None,
    ) -> None:
        self._catalog_provider = catalog_provider
        self._order_provider = order_provider
        self._settings = settings or get_settings()

    def _orders(self, period: ReportPeriod | None) -> List[Order]:
        return orders_in_period(self._order_provider.list_orders(), period)

    def monthly(self, year: int, month: int) -> MonthlyReports:
        period = ReportPeriod(year=year, month=month)
        catalog = self._catalog_provider.load_catalog()
        directory = self._order_provider.load_directory()
        labels = self._settings.report_labels()
        orders = self._orders(period)
        pnl = profit_and_loss(orders, self._order_provider.list_general_costs(), catalog, period)
        _log_conversion_warnings(pnl, period)
        return MonthlyReports(
            period=period,
            production=production_summary(orders, catalog, directory, labels),
            shipping=shipping_manifest(orders, catalog, directory, labels),
            procurement=material_procurement(orders, catalog),
            profit_and_loss=pnl,
        )

    def profit_and_loss(self, period: ReportPeriod | None = None) -> ProfitAndLoss:
        catalog = self._catalog_provider.load_catalog()
        pnl = profit_and_loss(
            self._order_provider.list_orders(), self._order_provider.list_general_costs(), catalog, period
        )
        _log_conversion_warnings(pnl, period)
        return pnl

    def external_sales(self, salesperson_id: str | None = None, period: ReportPeriod | None = None) -> SalesReport:
        return external_sales_report(
            self._orders(period),
            self._catalog_provider.load_catalog(),
            self._order_provider.load_directory(),
            salesperson_id=salesperson_id,
            labels=self._settings.report_labels(),
        )

    def commission_mismatches(self, period: ReportPeriod | None = None) -> List[CommissionMismatch]:
        """Orders whose stored commission disagrees with the product-derived one."""

        catalog = self._catalog_provider.load_catalog()
        mismatches: List[CommissionMismatch] = []
        for order in self._orders(period):
            expected = expected_commission(order, catalog)
            if abs(order.commission - expected) > self._settings.drift_epsilon:
                mismatches.append(CommissionMismatch(order_id=order.id, stored=order.commission, expected=expected))
        return mismatches

    def sku_export(self) -> List[SkuRow]:
        catalog = self._catalog_provider.load_catalog()
        return export_rows(catalog.products.values(), catalog.modifier_groups.values(), self._settings.sku_labels())


__all__ = ["CommissionMismatch", "MonthlyReports", "ReportingService"]
