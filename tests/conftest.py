from typing import Optional

import pytest

from src.shipping.config import PricingConfig
from src.shipping.models.domain import Branch, BranchZoneOverride, ShippingZone
from src.shipping.services.shipping.service import ShippingService

AMMAN = (31.9539, 35.9106)


class FakeBranchRepository:
    def __init__(self, branches: list[Branch]):
        self.branches = branches
        self.lookups: list[int] = []

    def get_active_branch_by_id(self, branch_id: int) -> Optional[Branch]:
        self.lookups.append(branch_id)
        for branch in self.branches:
            if branch.id == branch_id and branch.is_active:
                return branch
        return None

    def list_active_branches(self) -> list[Branch]:
        return [branch for branch in self.branches if branch.is_active]


class FakeZoneRepository:
    def __init__(self, zones: list[ShippingZone], overrides: list[BranchZoneOverride] | None = None):
        self.zones = zones
        self.overrides = overrides or []
        self.calls = 0

    def list_active_zones(self) -> list[ShippingZone]:
        return sorted((zone for zone in self.zones if zone.is_active), key=lambda zone: zone.sort_order)

    def list_active_zones_with_overrides(self, branch_id):
        self.calls += 1
        by_zone = {
            override.zone_id: override
            for override in self.overrides
            if override.branch_id == branch_id and override.is_active
        }
        return [(zone, by_zone.get(zone.id)) for zone in self.list_active_zones()]


def make_zone(zone_id: int, low: float, high: float, base: float, per_km: float, **kwargs) -> ShippingZone:
    return ShippingZone(
        id=zone_id,
        name_en=kwargs.pop("name_en", f"Zone {zone_id}"),
        min_distance_km=low,
        max_distance_km=high,
        base_price=base,
        price_per_km=per_km,
        sort_order=kwargs.pop("sort_order", zone_id),
        **kwargs,
    )


@pytest.fixture
def config() -> PricingConfig:
    return PricingConfig()


@pytest.fixture
def zones() -> list[ShippingZone]:
    return [
        make_zone(1, 0, 5, 2.0, 0.5, free_shipping_threshold=50.0, name_en="Urban Zone", name_ar="المنطقة الحضرية"),
        make_zone(2, 5, 20, 3.0, 0.4),
        make_zone(3, 20, 100, 5.0, 0.3),
    ]


@pytest.fixture
def branches() -> list[Branch]:
    return [
        Branch(id=7, title_en="Main Branch", title_ar="الفرع الرئيسي", latitude=AMMAN[0], longitude=AMMAN[1]),
        Branch(id=8, title_en="Zarqa", latitude=32.0728, longitude=36.0880),
        Branch(id=9, title_en="Closed", latitude=31.95, longitude=35.91, is_active=False),
        Branch(id=10, title_en="No GPS"),
    ]


@pytest.fixture
def branch_repo(branches) -> FakeBranchRepository:
    return FakeBranchRepository(branches)


@pytest.fixture
def zone_repo(zones) -> FakeZoneRepository:
    return FakeZoneRepository(zones)


@pytest.fixture
def service(branch_repo, zone_repo, config) -> ShippingService:
    return ShippingService(branches=branch_repo, zones=zone_repo, config=config)
