"""High-level orchestration for delivery-fee requests."""

from __future__ import annotations

import logging
from typing import Optional

from ...config import PricingConfig
from ...models.domain import NearestBranch, ShippingCalculationResult, ShippingZone, ZonePricing
from ..geospatial import distance_km, round2
from .bounds import DistanceBounds
from .errors import BranchCoordinatesMissing, BranchNotFound, MissingParameter
from .fees import compute_cost
from .nearest import BranchRepository, NearestBranchLocator
from .zones import ZoneRepository, ZoneResolver

logger = logging.getLogger(__name__)


def _require(**params: object) -> None:
    missing = [name for name, value in params.items() if value is None or value == ""]
    if missing:
        raise MissingParameter(f"Missing required parameter(s): {', '.join(missing)}")


class ShippingService:
    """Composes the pricing components around the branch and zone repositories.

    Holds no mutable state beyond the injected configuration, so a single
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        branches: BranchRepository,
        zones: ZoneRepository,
        config: PricingConfig,
    ) -> None:
        self.config = config
        self._branches = branches
        self._zones = zones
        self.bounds = DistanceBounds(config)
        self.resolver = ZoneResolver(zones, config)
        self.locator = NearestBranchLocator(branches, config)

    def calculate_shipping(
        self,
        customer_lat: float,
        customer_lon: float,
        branch_id: int,
        order_amount: float = 0.0,
    ) -> ShippingCalculationResult:
        """Price a delivery from ``branch_id`` to the customer coordinates.

        Distances beyond ``max_delivery_distance_km`` are priced at the
        maximum and flagged with ``is_within_range=False``; rejecting such
        orders is left to the checkout flow.
        """

        _require(customer_latitude=customer_lat, customer_longitude=customer_lon, branch_id=branch_id)

        branch = self._branches.get_active_branch_by_id(branch_id)
        if branch is None or not branch.is_active:
            raise BranchNotFound(f"Branch {branch_id} not found or inactive")
        if not branch.has_coordinates:
            raise BranchCoordinatesMissing(f"Branch {branch_id} coordinates not configured")

        raw_distance = distance_km(
            customer_lat,
            customer_lon,
            branch.latitude,
            branch.longitude,
            radius_km=self.config.earth_radius_km,
        )
        effective_distance = self.bounds.clamp(raw_distance)
        pricing = self.resolver.resolve(effective_distance, branch.id)
        fee = compute_cost(effective_distance, pricing, order_amount)

        within_range = self.bounds.is_within_range(raw_distance)
        if not within_range:
            logger.info(
                "Branch %s is %.2f km from customer, beyond the %.2f km delivery radius; priced at the limit",
                branch.id,
                raw_distance,
                self.config.max_delivery_distance_km,
            )

        return ShippingCalculationResult(
            branch=branch,
            customer_latitude=float(customer_lat),
            customer_longitude=float(customer_lon),
            raw_distance_km=round2(raw_distance),
            effective_distance_km=fee.distance_km,
            zone=pricing,
            fee=fee,
            is_within_range=within_range,
            max_delivery_distance=self.config.max_delivery_distance_km,
            distance_basis=self.config.distance_basis,
        )

    def quote_for_location(
        self,
        customer_lat: float,
        customer_lon: float,
        branch_id: Optional[int] = None,
        order_amount: float = 0.0,
    ) -> ShippingCalculationResult:
        """Like :meth:`calculate_shipping`, choosing the nearest branch when none is given."""

        if branch_id is None:
            branch_id = self.find_nearest_branch(customer_lat, customer_lon).branch.id
        return self.calculate_shipping(customer_lat, customer_lon, branch_id, order_amount)

    def find_nearest_branch(self, customer_lat: float, customer_lon: float) -> NearestBranch:
        _require(customer_latitude=customer_lat, customer_longitude=customer_lon)
        return self.locator.find_nearest(customer_lat, customer_lon)

    def find_zone_for_distance(self, distance: float, branch_id: Optional[int] = None) -> ZonePricing:
        return self.resolver.resolve(self.bounds.clamp(distance), branch_id)

    def branch_zone_pricing(self, branch_id: int) -> list[ZonePricing]:
        return self.resolver.branch_pricing(branch_id)

    def list_zones(self) -> list[ShippingZone]:
        return sorted(
            (zone for zone in self._zones.list_active_zones() if zone.is_active),
            key=lambda zone: (zone.sort_order, zone.min_distance_km),
        )
