"""Domain models for branches, shipping zones and computed quotes."""

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(slots=True)
class Branch:
    """A bakery branch that dispatches deliveries."""

    id: int
    title_en: str
    title_ar: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address_en: Optional[str] = None
    address_ar: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(slots=True)
class ShippingZone:
    """Distance-keyed pricing tier. The range is inclusive at both ends."""

    id: int
    name_en: str
    min_distance_km: float
    max_distance_km: float
    base_price: float
    price_per_km: float = 0.0
    free_shipping_threshold: Optional[float] = None
    name_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True

    def covers(self, distance_km: float) -> bool:
        return self.min_distance_km <= distance_km <= self.max_distance_km


@dataclass(slots=True)
class BranchZoneOverride:
    """Per-branch replacement of zone pricing fields.

    ``None`` in a ``custom_*`` field means "inherit the zone's value".
    """

    branch_id: int
    zone_id: int
    custom_base_price: Optional[float] = None
    custom_price_per_km: Optional[float] = None
    custom_free_threshold: Optional[float] = None
    is_active: bool = True


@dataclass(slots=True)
class ZonePricing:
    """Effective pricing for one zone after branch overrides were applied."""

    zone_id: Optional[int]
    name_en: str
    base_price: float
    price_per_km: float
    free_shipping_threshold: Optional[float]
    min_distance_km: float
    max_distance_km: float
    name_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    has_override: bool = False

    @property
    def is_fallback(self) -> bool:
        return self.zone_id is None


@dataclass(slots=True)
class FeeBreakdown:
    distance_km: float
    base_cost: float
    distance_cost: float
    total_cost: float
    free_shipping_applied: bool
    free_shipping_threshold: Optional[float]
    order_amount: float


@dataclass(slots=True)
class NearestBranch:
    branch: Branch
    distance_km: float


@dataclass(slots=True)
class ShippingCalculationResult:
    """Outcome of a single delivery-fee calculation.

    Ephemeral: built per request and optionally handed to the calculation log.
    """

    branch: Branch
    customer_latitude: float
    customer_longitude: float
    raw_distance_km: float
    effective_distance_km: float
    zone: ZonePricing
    fee: FeeBreakdown
    is_within_range: bool
    max_delivery_distance: float
    distance_basis: str
    calculation_method: str = "zone_based"

    @property
    def total_cost(self) -> float:
        return self.fee.total_cost

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the wire representation used by the checkout clients."""

        return {
            "branch": {
                "id": self.branch.id,
                "title_en": self.branch.title_en,
                "title_ar": self.branch.title_ar,
                "latitude": self.branch.latitude,
                "longitude": self.branch.longitude,
                "address_en": self.branch.address_en,
                "address_ar": self.branch.address_ar,
            },
            "customer_coordinates": {
                "latitude": self.customer_latitude,
                "longitude": self.customer_longitude,
            },
            "distance_km": self.fee.distance_km,
            "zone_id": self.zone.zone_id,
            "zone_name": self.zone.name_en,
            "zone_name_ar": self.zone.name_ar,
            "base_cost": self.fee.base_cost,
            "distance_cost": self.fee.distance_cost,
            "total_cost": self.fee.total_cost,
            "free_shipping_applied": self.fee.free_shipping_applied,
            "free_shipping_threshold": self.fee.free_shipping_threshold,
            "order_amount": self.fee.order_amount,
            "raw_distance_km": self.raw_distance_km,
            "effective_distance_km": self.effective_distance_km,
            "is_within_range": self.is_within_range,
            "max_delivery_distance": self.max_delivery_distance,
            "calculation_method": self.calculation_method,
            "distance_basis": self.distance_basis,
            "zone": asdict(self.zone),
        }
