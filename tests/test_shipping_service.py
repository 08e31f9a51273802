import math

import pytest

from src.shipping.config import PricingConfig
from src.shipping.models.domain import BranchZoneOverride
from src.shipping.services.shipping.errors import (
    BranchCoordinatesMissing,
    BranchNotFound,
    InvalidCoordinate,
    MissingParameter,
    NoBranchAvailable,
    RepositoryFailure,
)
from src.shipping.services.shipping.service import ShippingService

from conftest import AMMAN, FakeBranchRepository, FakeZoneRepository


def _north_of(origin: tuple[float, float], km: float) -> tuple[float, float]:
    return origin[0] + math.degrees(km / 6371.0), origin[1]


def test_customer_at_branch_pays_base_price(service):
    result = service.calculate_shipping(AMMAN[0], AMMAN[1], 7, 30)

    assert result.raw_distance_km == 0.0
    assert result.effective_distance_km == 0.0
    assert result.fee.distance_cost == 0.0
    assert result.total_cost == 2.0
    assert result.zone.zone_id == 1
    assert result.is_within_range is True


def test_out_of_range_is_priced_at_the_limit(service):
    lat, lon = _north_of(AMMAN, 150)
    result = service.calculate_shipping(lat, lon, 7, 20)

    assert result.raw_distance_km == pytest.approx(150.0, abs=0.01)
    assert result.effective_distance_km == 100.0
    assert result.is_within_range is False
    assert result.max_delivery_distance == 100.0
    assert result.zone.zone_id == 3
    assert result.fee.distance_cost == 30.0
    assert result.total_cost == 35.0


def test_free_shipping_regardless_of_distance(service):
    lat, lon = _north_of(AMMAN, 3)
    result = service.calculate_shipping(lat, lon, 7, 60)

    assert result.fee.free_shipping_applied is True
    assert result.total_cost == 0.0


def test_branch_override_flows_into_the_quote(branch_repo, zones, config):
    zone_repo = FakeZoneRepository(zones, [BranchZoneOverride(branch_id=7, zone_id=1, custom_base_price=1.50)])
    service = ShippingService(branch_repo, zone_repo, config)

    assert service.calculate_shipping(AMMAN[0], AMMAN[1], 7, 10).total_cost == 1.50


@pytest.mark.parametrize("branch_id", [9, 404])
def test_unknown_or_inactive_branch_is_not_priced(service, zone_repo, branch_id):
    with pytest.raises(BranchNotFound):
        service.calculate_shipping(AMMAN[0], AMMAN[1], branch_id, 10)
    assert zone_repo.calls == 0


def test_branch_without_coordinates(service):
    with pytest.raises(BranchCoordinatesMissing):
        service.calculate_shipping(AMMAN[0], AMMAN[1], 10, 10)


@pytest.mark.parametrize(
    "lat, lon, branch_id",
    [(None, 35.9, 7), (31.9, None, 7), (31.9, 35.9, None)],
)
def test_missing_parameters(service, branch_repo, lat, lon, branch_id):
    with pytest.raises(MissingParameter):
        service.calculate_shipping(lat, lon, branch_id, 10)
    assert branch_repo.lookups == []


def test_zero_coordinates_are_valid(service):
    result = service.calculate_shipping(0.0, 0.0, 7, 0)
    assert result.is_within_range is False


def test_malformed_coordinates_propagate(service):
    with pytest.raises(InvalidCoordinate):
        service.calculate_shipping(float("nan"), 35.9, 7, 10)


def test_repository_failure_propagates_unchanged(zones, config):
    class BrokenBranches(FakeBranchRepository):
        def get_active_branch_by_id(self, branch_id):
            raise RepositoryFailure("database unreachable")

    service = ShippingService(BrokenBranches([]), FakeZoneRepository(zones), config)
    with pytest.raises(RepositoryFailure, match="unreachable"):
        service.calculate_shipping(AMMAN[0], AMMAN[1], 7, 10)


def test_result_wire_fields(service):
    payload = service.calculate_shipping(AMMAN[0], AMMAN[1], 7, 30).to_dict()

    for key in (
        "distance_km",
        "zone_id",
        "zone_name",
        "base_cost",
        "distance_cost",
        "total_cost",
        "free_shipping_applied",
        "free_shipping_threshold",
        "order_amount",
        "raw_distance_km",
        "effective_distance_km",
        "is_within_range",
        "max_delivery_distance",
    ):
        assert key in payload
    assert payload["zone_name"] == "Urban Zone"
    assert payload["distance_basis"] == "bounded_0-100_km"
    assert payload["branch"]["id"] == 7


def test_quote_for_location_picks_nearest_branch(service):
    lat, lon = 32.06, 36.08
    assert service.quote_for_location(lat, lon, None, 10).branch.id == 8
    assert service.quote_for_location(lat, lon, 7, 10).branch.id == 7


def test_nearest_branch_requires_coordinates(service):
    with pytest.raises(MissingParameter):
        service.find_nearest_branch(None, 35.9)


def test_nearest_branch_without_candidates(zones, config):
    service = ShippingService(FakeBranchRepository([]), FakeZoneRepository(zones), config)
    with pytest.raises(NoBranchAvailable):
        service.find_nearest_branch(*AMMAN)


def test_find_zone_for_distance_clamps_input(service):
    assert service.find_zone_for_distance(250).zone_id == 3
    assert service.find_zone_for_distance(-3).zone_id == 1


def test_custom_maximum_distance(branch_repo, zone_repo):
    service = ShippingService(branch_repo, zone_repo, PricingConfig(max_delivery_distance_km=10))
    lat, lon = _north_of(AMMAN, 15)
    result = service.calculate_shipping(lat, lon, 7, 0)

    assert result.effective_distance_km == 10.0
    assert result.zone.zone_id == 2
    assert result.total_cost == 7.0
    assert result.distance_basis == "bounded_0-10_km"
