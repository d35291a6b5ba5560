from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping

from app.config import Settings
from app.dependencies import get_settings
from app.repos import CatalogProvider, ProductRepo
from cost_math.models import Catalog
from cost_math.recipes import DriftReport, SelectionCost, detect_drift, selection_cost, sync_product_cost

logger = logging.getLogger(__name__)


class ProductNotFound(LookupError):
    """Raised when an administrator action names a product missing from the catalog."""


@dataclass(frozen=True)
class SyncResult:
    product_id: str
    previous: Decimal
    synced: Decimal | None

    @property
    def changed(self) -> bool:
        return self.synced is not None and self.synced != self.previous


class CostingService:
    """Unit costs, drift checks and the explicit cost-sync action."""

    def __init__(
        self,
        catalog_provider: CatalogProvider,
        product_repo: ProductRepo,
        settings: Settings | None = None,
    ) -> None:
        self._catalog_provider = catalog_provider
        self._product_repo = product_repo
        self._settings = settings or get_settings()

    def _catalog(self) -> Catalog:
        return self._catalog_provider.load_catalog()

    def unit_cost(self, product_id: str, selected_modifiers: Mapping[str, str] | None = None) -> SelectionCost:
        catalog = self._catalog()
        selection = selection_cost(product_id, dict(selected_modifiers or {}), catalog)
        for warning in selection.warnings:
            logger.warning("%s", warning.describe(), extra={"product_id": product_id})
        return selection

    def drift(self, product_id: str) -> DriftReport | None:
        catalog = self._catalog()
        product = catalog.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return detect_drift(product, catalog)

    def drifted_products(self) -> List[DriftReport]:
        """Products whose stored cost differs from the base recipe by more than the epsilon."""

        catalog = self._catalog()
        reports: List[DriftReport] = []
        for product in catalog.products.values():
            report = detect_drift(product, catalog)
            if report is not None and report.drifted(self._settings.drift_epsilon):
                reports.append(report)
        return reports

    def sync_product_cost(self, product_id: str) -> SyncResult:
        """Recompute ``cost_per_item`` from the base recipe and persist it.

        Products without a base recipe are left untouched.
        """

        catalog = self._catalog()
        product = catalog.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        synced = sync_product_cost(product, catalog)
        if synced is None:
            logger.info("Product %s has no base recipe; cost left at %s", product_id, product.cost_per_item)
            return SyncResult(product_id=product_id, previous=product.cost_per_item, synced=None)
        self._product_repo.update_cost_per_item(product_id, synced.cost_per_item)
        logger.info(
            "Synced product %s cost %s -> %s",
            product_id,
            product.cost_per_item,
            synced.cost_per_item,
            extra={"product_id": product_id},
        )
        return SyncResult(product_id=product_id, previous=product.cost_per_item, synced=synced.cost_per_item)


__all__ = ["CostingService", "ProductNotFound", "SyncResult"]
