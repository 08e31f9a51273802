"""Closest-branch lookup for customer coordinates."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ...config import PricingConfig
from ...models.domain import Branch, NearestBranch
from ..geospatial import distance_km
from .errors import NoBranchAvailable

logger = logging.getLogger(__name__)


class BranchRepository(Protocol):
    def get_active_branch_by_id(self, branch_id: int) -> Optional[Branch]: ...

    def list_active_branches(self) -> Sequence[Branch]: ...


class NearestBranchLocator:
    """Linear scan over active branches with coordinates.

    Candidates are visited in ascending branch id, and only a strictly
    shorter distance replaces the current best, so ties go to the lowest id.
    """

    def __init__(self, repository: BranchRepository, config: PricingConfig) -> None:
        self._repository = repository
        self._config = config

    def find_nearest(self, customer_lat: float, customer_lon: float) -> NearestBranch:
        candidates = sorted(
            (branch for branch in self._repository.list_active_branches() if branch.is_active and branch.has_coordinates),
            key=lambda branch: branch.id,
        )
        if not candidates:
            raise NoBranchAvailable("No active branches with coordinates found")

        nearest: NearestBranch | None = None
        for branch in candidates:
            distance = distance_km(
                customer_lat,
                customer_lon,
                branch.latitude,
                branch.longitude,
                radius_km=self._config.earth_radius_km,
            )
            if nearest is None or distance < nearest.distance_km:
                nearest = NearestBranch(branch=branch, distance_km=distance)

        logger.debug(
            "Nearest branch to (%s, %s) is %s at %.2f km",
            customer_lat,
            customer_lon,
            nearest.branch.id,
            nearest.distance_km,
        )
        return nearest
