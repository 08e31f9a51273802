"""Shipping API schemas."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CoordinatesModel(BaseModel):
    latitude: float
    longitude: float


class BranchModel(BaseModel):
    id: int
    title_en: str
    title_ar: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address_en: Optional[str] = None
    address_ar: Optional[str] = None


class ZonePricingModel(BaseModel):
    zone_id: Optional[int] = None
    name_en: str
    name_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    base_price: float
    price_per_km: float
    free_shipping_threshold: Optional[float] = None
    min_distance_km: float
    max_distance_km: float
    has_override: bool = False


class ShippingZoneModel(BaseModel):
    id: int
    name_en: str
    name_ar: Optional[str] = None
    description_en: Optional[str] = None
    description_ar: Optional[str] = None
    min_distance_km: float
    max_distance_km: float
    base_price: float
    price_per_km: float
    free_shipping_threshold: Optional[float] = None
    sort_order: int = 0


class ShippingCalculateRequest(BaseModel):
    """Checkout pricing request. Legacy clients send ``customer_lat``/``customer_lng``."""

    model_config = ConfigDict(populate_by_name=True)

    customer_latitude: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("customer_latitude", "customer_lat"),
    )
    customer_longitude: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("customer_longitude", "customer_lon", "customer_lng"),
    )
    branch_id: Optional[int] = None
    order_amount: float = Field(default=0.0, ge=0.0)
    order_id: Optional[int] = Field(default=None, description="Order the quote belongs to, for analytics.")
    delivery_address_id: Optional[int] = Field(
        default=None,
        description="Saved address to annotate with the computed distance and zone.",
    )


class NearestBranchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_latitude: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("customer_latitude", "customer_lat"),
    )
    customer_longitude: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("customer_longitude", "customer_lon", "customer_lng"),
    )


class ShippingCalculationModel(BaseModel):
    branch: BranchModel
    customer_coordinates: CoordinatesModel
    distance_km: float
    zone_id: Optional[int] = None
    zone_name: str
    zone_name_ar: Optional[str] = None
    base_cost: float
    distance_cost: float
    total_cost: float
    free_shipping_applied: bool
    free_shipping_threshold: Optional[float] = None
    order_amount: float
    raw_distance_km: float
    effective_distance_km: float
    is_within_range: bool
    max_delivery_distance: float
    calculation_method: str
    distance_basis: str
    zone: ZonePricingModel


class ShippingCalculationResponse(BaseModel):
    success: bool = True
    data: ShippingCalculationModel


class NearestBranchModel(BranchModel):
    distance_km: float


class NearestBranchResponse(BaseModel):
    success: bool = True
    data: dict[str, NearestBranchModel]


class ZoneForDistanceResponse(BaseModel):
    success: bool = True
    data: dict[str, Any]


class ZoneListResponse(BaseModel):
    success: bool = True
    data: dict[str, List[Any]]
