"""Geospatial helper functions."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from numbers import Real

from .shipping.errors import InvalidCoordinate

EARTH_RADIUS_KM = 6371.0
TWOPLACES = Decimal("0.01")


def round2(value: float) -> float:
    """Round half-up to two decimals using the value's shortest repr (6.175 -> 6.18)."""

    try:
        return float(Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot round non-finite value {value!r}") from exc


def haversine_km(
    lat1: float, lon1: float, lat2: float, lon2: float, radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius_km * c


def _require_coordinate(name: str, value: object) -> float:
    # bool is a Real subclass but never a coordinate
    if value is None or isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidCoordinate(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidCoordinate(f"{name} must be finite, got {value!r}")
    return number


def distance_km(
    lat1: float, lon1: float, lat2: float, lon2: float, radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Great-circle distance in kilometres, rounded to 2 decimals.

    Raises ``InvalidCoordinate`` when any coordinate is missing, non-numeric or
    not finite. Zero is a valid coordinate.
    """

    coords = [
        _require_coordinate(name, value)
        for name, value in (("lat1", lat1), ("lon1", lon1), ("lat2", lat2), ("lon2", lon2))
    ]
    return round2(haversine_km(*coords, radius_km=radius_km))
