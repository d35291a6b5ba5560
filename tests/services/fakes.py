from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Sequence

from cost_math.models import Catalog, Directory, GeneralCost, Order


class FakeStore:
    """In-memory stand-in for the persistence collaborator."""

    def __init__(
        self,
        catalog: Catalog,
        orders: Sequence[Order] = (),
        general_costs: Sequence[GeneralCost] = (),
        directory: Directory | None = None,
    ) -> None:
        self.catalog = catalog
        self.orders = list(orders)
        self.general_costs = list(general_costs)
        self.directory = directory or Directory()
        self.writes: List[tuple[str, Decimal]] = []
        self.loads = 0

    def load_catalog(self) -> Catalog:
        self.loads += 1
        return self.catalog

    def list_orders(self) -> Sequence[Order]:
        return list(self.orders)

    def list_general_costs(self) -> Sequence[GeneralCost]:
        return list(self.general_costs)

    def load_directory(self) -> Directory:
        return self.directory

    def update_cost_per_item(self, product_id: str, cost: Decimal) -> None:
        self.writes.append((product_id, cost))
        products: Dict[str, object] = dict(self.catalog.products)
        products[product_id] = replace(self.catalog.products[product_id], cost_per_item=cost)
        self.catalog = replace(self.catalog, products=products)
