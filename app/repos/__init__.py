"""Collaborator interfaces for the persistence layer (testable via fakes).

Concrete implementations live with the application that owns the store; the
costing services only depend on these protocols.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from cost_math.models import Catalog, Directory, GeneralCost, Order


class CatalogProvider(Protocol):
    def load_catalog(self) -> Catalog: ...


class OrderProvider(Protocol):
    def list_orders(self) -> Sequence[Order]: ...
    def list_general_costs(self) -> Sequence[GeneralCost]: ...
    def load_directory(self) -> Directory: ...


class ProductRepo(Protocol):
    def update_cost_per_item(self, product_id: str, cost: Decimal) -> None: ...


__all__ = ["CatalogProvider", "OrderProvider", "ProductRepo"]
