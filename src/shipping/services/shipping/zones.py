"""Distance-to-zone resolution with per-branch price overrides."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ...config import PricingConfig
from ...models.domain import BranchZoneOverride, ShippingZone, ZonePricing

logger = logging.getLogger(__name__)

FALLBACK_ZONE_NAME_EN = "Default Zone"
FALLBACK_ZONE_NAME_AR = "المنطقة الافتراضية"


class ZoneRepository(Protocol):
    def list_active_zones_with_overrides(
        self, branch_id: Optional[int]
    ) -> Sequence[tuple[ShippingZone, Optional[BranchZoneOverride]]]: ...

    def list_active_zones(self) -> Sequence[ShippingZone]: ...


def _inherit(custom: Optional[float], default: Optional[float]) -> Optional[float]:
    return default if custom is None else custom


def apply_override(zone: ShippingZone, override: Optional[BranchZoneOverride]) -> ZonePricing:
    """Merge a branch override into a zone's defaults, field by field.

    Each ``custom_*`` value replaces the zone default only when it is not
    ``None``; a custom value of ``0`` is a real price and wins. Inactive
    overrides, and overrides recorded for another zone, are ignored.
    """

    active = override is not None and override.is_active and override.zone_id == zone.id
    return ZonePricing(
        zone_id=zone.id,
        name_en=zone.name_en,
        name_ar=zone.name_ar,
        description_en=zone.description_en,
        description_ar=zone.description_ar,
        base_price=_inherit(override.custom_base_price, zone.base_price) if active else zone.base_price,
        price_per_km=_inherit(override.custom_price_per_km, zone.price_per_km) if active else zone.price_per_km,
        free_shipping_threshold=(
            _inherit(override.custom_free_threshold, zone.free_shipping_threshold)
            if active
            else zone.free_shipping_threshold
        ),
        min_distance_km=zone.min_distance_km,
        max_distance_km=zone.max_distance_km,
        has_override=active,
    )


def fallback_pricing(config: PricingConfig) -> ZonePricing:
    return ZonePricing(
        zone_id=None,
        name_en=FALLBACK_ZONE_NAME_EN,
        name_ar=FALLBACK_ZONE_NAME_AR,
        base_price=config.default_shipping_fee,
        price_per_km=0.0,
        free_shipping_threshold=None,
        min_distance_km=0.0,
        max_distance_km=config.fallback_zone_max_distance_km,
    )


def _ordered(
    rows: Sequence[tuple[ShippingZone, Optional[BranchZoneOverride]]],
) -> list[tuple[ShippingZone, Optional[BranchZoneOverride]]]:
    # sorted() is stable, so equal sort orders keep repository order
    return sorted((row for row in rows if row[0].is_active), key=lambda row: row[0].sort_order)


def select_zone(
    distance_km: float,
    rows: Sequence[tuple[ShippingZone, Optional[BranchZoneOverride]]],
) -> Optional[tuple[ShippingZone, Optional[BranchZoneOverride]]]:
    """Return the first active zone (lowest sort order) whose range contains the distance."""

    for zone, override in _ordered(rows):
        if zone.covers(distance_km):
            return zone, override
    return None


class ZoneResolver:
    def __init__(self, repository: ZoneRepository, config: PricingConfig) -> None:
        self._repository = repository
        self._config = config

    def resolve(self, effective_distance_km: float, branch_id: Optional[int] = None) -> ZonePricing:
        rows = self._repository.list_active_zones_with_overrides(branch_id)
        match = select_zone(effective_distance_km, rows)
        if match is None:
            logger.warning(
                "No shipping zone covers %.2f km (branch %s); using default fee %.2f",
                effective_distance_km,
                branch_id,
                self._config.default_shipping_fee,
            )
            return fallback_pricing(self._config)
        zone, override = match
        if override is not None and override.branch_id != branch_id:
            override = None
        return apply_override(zone, override)

    def branch_pricing(self, branch_id: int) -> list[ZonePricing]:
        """Effective tariff of every active zone for one branch."""

        rows = self._repository.list_active_zones_with_overrides(branch_id)
        return [
            apply_override(zone, override if override is not None and override.branch_id == branch_id else None)
            for zone, override in _ordered(rows)
        ]
