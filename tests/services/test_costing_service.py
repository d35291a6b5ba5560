from __future__ import annotations

from decimal import Decimal

import pytest

from app.config import Settings
from app.services.costing_service import CostingService, ProductNotFound

from .fakes import FakeStore


@pytest.fixture
def store(catalog) -> FakeStore:
    return FakeStore(catalog)


@pytest.fixture
def service(store: FakeStore) -> CostingService:
    return CostingService(store, store, settings=Settings(_env_file=None))


def test_unit_cost_reloads_snapshot(service: CostingService, store: FakeStore) -> None:
    selection = service.unit_cost("p-juice", {"grp-size": "Small"})
    assert selection.unit_cost == Decimal("6.0000")
    service.unit_cost("p-juice")
    assert store.loads == 2


def test_drifted_products(service: CostingService) -> None:
    reports = service.drifted_products()
    assert [r.product_id for r in reports] == ["p-juice"]
    assert reports[0].recomputed == Decimal("2.0000")


def test_drift_within_epsilon_is_ignored(store: FakeStore) -> None:
    service = CostingService(store, store, settings=Settings(_env_file=None, drift_epsilon=Decimal("1.00")))
    assert service.drifted_products() == []


def test_sync_persists_recomputed_cost(service: CostingService, store: FakeStore) -> None:
    result = service.sync_product_cost("p-juice")
    assert result.previous == Decimal("1.50")
    assert result.synced == Decimal("2.0000")
    assert result.changed
    assert store.writes == [("p-juice", Decimal("2.0000"))]
    assert service.drift("p-juice").drifted() is False


def test_sync_twice_stores_same_value(service: CostingService, store: FakeStore) -> None:
    first = service.sync_product_cost("p-juice")
    second = service.sync_product_cost("p-juice")
    assert first.synced == second.synced
    assert not second.changed
    assert store.writes[0][1] == store.writes[1][1]


def test_sync_without_base_recipe_writes_nothing(service: CostingService, store: FakeStore) -> None:
    result = service.sync_product_cost("p-cream")
    assert result.synced is None
    assert not result.changed
    assert store.writes == []


def test_unknown_product_raises(service: CostingService) -> None:
    with pytest.raises(ProductNotFound):
        service.sync_product_cost("p-missing")
    with pytest.raises(ProductNotFound):
        service.drift("p-missing")
