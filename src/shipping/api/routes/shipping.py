"""API routes for delivery-fee pricing."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict
from functools import lru_cache
from typing import NoReturn

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from ...config import settings
from ...data.branch_repository import SupabaseBranchRepository
from ...data.zone_repository import SupabaseZoneRepository
from ...persistence.database import save_shipping_calculation, update_address_shipping_info
from ...schemas.shipping import (
    NearestBranchRequest,
    NearestBranchResponse,
    ShippingCalculateRequest,
    ShippingCalculationModel,
    ShippingCalculationResponse,
    ZoneForDistanceResponse,
    ZoneListResponse,
)
from ...services.shipping.calculation_log import CalculationLogger
from ...services.shipping.errors import (
    BranchCoordinatesMissing,
    BranchNotFound,
    InvalidCoordinate,
    MissingParameter,
    NoBranchAvailable,
    RepositoryFailure,
    ShippingError,
)
from ...services.shipping.service import ShippingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"])

_STATUS_BY_ERROR: dict[type[ShippingError], int] = {
    InvalidCoordinate: status.HTTP_400_BAD_REQUEST,
    MissingParameter: status.HTTP_400_BAD_REQUEST,
    BranchNotFound: status.HTTP_404_NOT_FOUND,
    NoBranchAvailable: status.HTTP_404_NOT_FOUND,
    BranchCoordinatesMissing: status.HTTP_422_UNPROCESSABLE_ENTITY,
    RepositoryFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@lru_cache()
def get_shipping_service() -> ShippingService:
    return ShippingService(
        branches=SupabaseBranchRepository(),
        zones=SupabaseZoneRepository(),
        config=settings.pricing_config(),
    )


@lru_cache()
def get_calculation_logger() -> CalculationLogger:
    return CalculationLogger(
        save_shipping_calculation,
        enabled=settings.calculation_log_enabled,
        max_workers=settings.calculation_log_workers,
    )


def _raise_http(exc: ShippingError) -> NoReturn:
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.error(f"Shipping request failed: {exc}")
    raise HTTPException(status_code=code, detail={"code": exc.code, "message": str(exc)}) from exc


def _calculation_response(
    payload: ShippingCalculateRequest,
    service: ShippingService,
    calculation_logger: CalculationLogger,
    background_tasks: BackgroundTasks,
    *,
    nearest_if_missing: bool,
) -> ShippingCalculationResponse:
    try:
        if nearest_if_missing:
            result = service.quote_for_location(
                payload.customer_latitude,
                payload.customer_longitude,
                payload.branch_id,
                payload.order_amount,
            )
        else:
            result = service.calculate_shipping(
                payload.customer_latitude,
                payload.customer_longitude,
                payload.branch_id,
                payload.order_amount,
            )
    except ShippingError as exc:
        _raise_http(exc)

    calculation_logger.record(result, order_id=payload.order_id)
    if payload.delivery_address_id is not None:
        background_tasks.add_task(
            update_address_shipping_info,
            payload.delivery_address_id,
            result.effective_distance_km,
            result.zone.zone_id,
        )
    return ShippingCalculationResponse(data=ShippingCalculationModel.model_validate(result.to_dict()))


@router.post("/calculate", response_model=ShippingCalculationResponse, status_code=status.HTTP_200_OK)
def calculate_shipping(
    payload: ShippingCalculateRequest,
    background_tasks: BackgroundTasks,
    service: ShippingService = Depends(get_shipping_service),
    calculation_logger: CalculationLogger = Depends(get_calculation_logger),
) -> ShippingCalculationResponse:
    """Price a delivery from a given branch to the customer's coordinates.

    Out-of-range addresses are still priced (at the maximum distance) and
    reported with ``is_within_range: false``; checkout decides whether to block.
    """
    return _calculation_response(
        payload, service, calculation_logger, background_tasks, nearest_if_missing=False
    )


@router.post("/quote", response_model=ShippingCalculationResponse, status_code=status.HTTP_200_OK)
def quote_shipping(
    payload: ShippingCalculateRequest,
    background_tasks: BackgroundTasks,
    service: ShippingService = Depends(get_shipping_service),
    calculation_logger: CalculationLogger = Depends(get_calculation_logger),
) -> ShippingCalculationResponse:
    """Same as ``/calculate`` but picks the nearest active branch when ``branch_id`` is omitted."""
    return _calculation_response(
        payload, service, calculation_logger, background_tasks, nearest_if_missing=True
    )


@router.post("/nearest-branch", response_model=NearestBranchResponse, status_code=status.HTTP_200_OK)
def nearest_branch(
    payload: NearestBranchRequest,
    service: ShippingService = Depends(get_shipping_service),
) -> NearestBranchResponse:
    try:
        nearest = service.find_nearest_branch(payload.customer_latitude, payload.customer_longitude)
    except ShippingError as exc:
        _raise_http(exc)
    branch = asdict(nearest.branch)
    branch["distance_km"] = nearest.distance_km
    return NearestBranchResponse(data={"nearest_branch": branch})


@router.get("/zones", response_model=ZoneListResponse, status_code=status.HTTP_200_OK)
def list_zones(service: ShippingService = Depends(get_shipping_service)) -> ZoneListResponse:
    try:
        zones = service.list_zones()
    except ShippingError as exc:
        _raise_http(exc)
    return ZoneListResponse(data={"zones": [asdict(zone) for zone in zones]})


@router.get("/zones/distance/{distance}", response_model=ZoneForDistanceResponse, status_code=status.HTTP_200_OK)
def zone_for_distance(
    distance: float,
    branch_id: int | None = Query(default=None, description="Apply this branch's price overrides"),
    service: ShippingService = Depends(get_shipping_service),
) -> ZoneForDistanceResponse:
    if not math.isfinite(distance) or distance < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": MissingParameter.code, "message": "Valid distance is required"},
        )
    effective_distance = service.bounds.clamp(distance)
    try:
        zone = service.find_zone_for_distance(effective_distance, branch_id)
    except ShippingError as exc:
        _raise_http(exc)
    return ZoneForDistanceResponse(data={"zone": asdict(zone), "distance_km": effective_distance})


@router.get("/branches/{branch_id}/zones", response_model=ZoneListResponse, status_code=status.HTTP_200_OK)
def branch_zones(
    branch_id: int,
    service: ShippingService = Depends(get_shipping_service),
) -> ZoneListResponse:
    """Every active zone with this branch's overrides merged in."""
    try:
        zones = service.branch_zone_pricing(branch_id)
    except ShippingError as exc:
        _raise_http(exc)
    return ZoneListResponse(data={"zones": [asdict(zone) for zone in zones]})
