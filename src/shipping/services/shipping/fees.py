"""Fee computation from a resolved zone tariff."""

from __future__ import annotations

import math
from typing import Optional

from ...models.domain import FeeBreakdown, ZonePricing
from ..geospatial import round2


def _amount(value: Optional[float]) -> float:
    """Coerce a possibly missing numeric field to a float, treating gaps as zero."""

    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def compute_cost(effective_distance_km: float, pricing: ZonePricing, order_amount: float = 0.0) -> FeeBreakdown:
    """Price a delivery.

    ``total = base_price + distance * price_per_km``, waived to exactly 0 when
    the threshold is positive and the order amount reaches it. The base and
    distance components are still reported when the waiver applies.
    """

    distance = round2(_amount(effective_distance_km))
    base_cost = round2(_amount(pricing.base_price))
    per_km = _amount(pricing.price_per_km)
    threshold = _amount(pricing.free_shipping_threshold)
    amount = _amount(order_amount)

    distance_cost = round2(distance * per_km)
    free_shipping_applied = threshold > 0 and amount >= threshold
    total_cost = 0.0 if free_shipping_applied else max(0.0, round2(base_cost + distance_cost))

    return FeeBreakdown(
        distance_km=distance,
        base_cost=base_cost,
        distance_cost=distance_cost,
        total_cost=total_cost,
        free_shipping_applied=free_shipping_applied,
        free_shipping_threshold=pricing.free_shipping_threshold,
        order_amount=round2(amount),
    )
