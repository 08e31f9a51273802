"""Clamp raw distances into the serviceable pricing range."""

from __future__ import annotations

import math
from numbers import Real

from ...config import PricingConfig
from ..geospatial import round2


class DistanceBounds:
    """Total function mapping any input onto ``[min_effective, max_delivery]``."""

    def __init__(self, config: PricingConfig) -> None:
        self.min_distance_km = config.min_effective_distance_km
        self.max_distance_km = config.max_delivery_distance_km

    def clamp(self, distance: object) -> float:
        if isinstance(distance, bool) or not isinstance(distance, Real) or math.isnan(distance):
            return self.min_distance_km
        if distance < self.min_distance_km:
            return self.min_distance_km
        if distance > self.max_distance_km:
            return self.max_distance_km
        return round2(distance)

    def is_within_range(self, distance_km: float) -> bool:
        return distance_km <= self.max_distance_km
