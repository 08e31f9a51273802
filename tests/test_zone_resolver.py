from src.shipping.models.domain import BranchZoneOverride
from src.shipping.services.shipping.zones import ZoneResolver, apply_override, select_zone

from conftest import FakeZoneRepository, make_zone


def test_resolves_zone_by_inclusive_range(zone_repo, config):
    resolver = ZoneResolver(zone_repo, config)

    assert resolver.resolve(0.0).zone_id == 1
    assert resolver.resolve(5.0).zone_id == 1  # shared boundary goes to the lower sort order
    assert resolver.resolve(5.01).zone_id == 2
    assert resolver.resolve(100.0).zone_id == 3


def test_lowest_sort_order_wins_on_overlap(config):
    wide = make_zone(1, 0, 50, 9.0, 0.0, sort_order=5)
    narrow = make_zone(2, 0, 10, 1.0, 0.0, sort_order=1)
    resolver = ZoneResolver(FakeZoneRepository([wide, narrow]), config)

    assert resolver.resolve(8).zone_id == 2
    assert resolver.resolve(30).zone_id == 1


def test_gap_falls_back_to_default_fee(config):
    repo = FakeZoneRepository([make_zone(1, 0, 5, 2.0, 0.5), make_zone(2, 10, 20, 3.0, 0.4)])
    pricing = ZoneResolver(repo, config).resolve(7.5, branch_id=7)

    assert pricing.is_fallback
    assert pricing.base_price == config.default_shipping_fee
    assert pricing.price_per_km == 0.0
    assert pricing.free_shipping_threshold is None


def test_no_zones_at_all_falls_back(config):
    assert ZoneResolver(FakeZoneRepository([]), config).resolve(3).zone_id is None


def test_inactive_zones_are_skipped(config):
    repo = FakeZoneRepository([make_zone(1, 0, 100, 2.0, 0.5, is_active=False)])
    assert ZoneResolver(repo, config).resolve(3).is_fallback


def test_branch_override_applies_only_to_that_branch(zones, config):
    repo = FakeZoneRepository(zones, [BranchZoneOverride(branch_id=7, zone_id=1, custom_base_price=1.50)])
    resolver = ZoneResolver(repo, config)

    own = resolver.resolve(3.0, branch_id=7)
    other = resolver.resolve(3.0, branch_id=8)

    assert own.base_price == 1.50
    assert own.price_per_km == 0.5  # inherited
    assert own.free_shipping_threshold == 50.0  # inherited
    assert own.has_override is True
    assert other.base_price == 2.00
    assert other.has_override is False


def test_zero_override_is_a_price_not_a_gap(zones):
    override = BranchZoneOverride(branch_id=7, zone_id=1, custom_price_per_km=0.0, custom_free_threshold=0.0)
    pricing = apply_override(zones[0], override)

    assert pricing.price_per_km == 0.0
    assert pricing.free_shipping_threshold == 0.0
    assert pricing.base_price == 2.0


def test_inactive_override_is_ignored(zones):
    override = BranchZoneOverride(branch_id=7, zone_id=1, custom_base_price=0.5, is_active=False)
    assert apply_override(zones[0], override).base_price == 2.0


def test_override_for_a_different_zone_is_ignored(zones):
    override = BranchZoneOverride(branch_id=7, zone_id=2, custom_base_price=0.5)
    assert apply_override(zones[0], override).base_price == 2.0


def test_select_zone_returns_none_when_uncovered(zones):
    assert select_zone(150.0, [(zone, None) for zone in zones]) is None


def test_branch_pricing_lists_every_zone(zones, config):
    repo = FakeZoneRepository(zones, [BranchZoneOverride(branch_id=7, zone_id=2, custom_price_per_km=0.25)])
    pricing = ZoneResolver(repo, config).branch_pricing(7)

    assert [zone.zone_id for zone in pricing] == [1, 2, 3]
    assert pricing[1].price_per_km == 0.25
    assert [zone.has_override for zone in pricing] == [False, True, False]
