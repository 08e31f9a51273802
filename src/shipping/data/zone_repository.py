"""Shipping zone and branch override lookups."""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from ..models.domain import BranchZoneOverride, ShippingZone
from ..services.shipping.errors import RepositoryFailure
from .rows import coerce_bool, coerce_float, require_client

logger = logging.getLogger(__name__)


def zone_from_row(row: dict[str, Any]) -> ShippingZone:
    min_distance = coerce_float(row.get("min_distance_km"))
    max_distance = coerce_float(row.get("max_distance_km"))
    base_price = coerce_float(row.get("base_price"))
    if min_distance is None or max_distance is None or base_price is None:
        raise ValueError(f"zone {row.get('id')} is missing its distance range or base price")
    return ShippingZone(
        id=int(row["id"]),
        name_en=str(row.get("name_en") or ""),
        name_ar=row.get("name_ar"),
        description_en=row.get("description_en"),
        description_ar=row.get("description_ar"),
        min_distance_km=min_distance,
        max_distance_km=max_distance,
        base_price=base_price,
        price_per_km=coerce_float(row.get("price_per_km")) or 0.0,
        free_shipping_threshold=coerce_float(row.get("free_shipping_threshold")),
        sort_order=int(row.get("sort_order") or 0),
        is_active=coerce_bool(row.get("is_active", True)),
    )


def override_from_row(row: dict[str, Any]) -> BranchZoneOverride:
    return BranchZoneOverride(
        branch_id=int(row["branch_id"]),
        zone_id=int(row["zone_id"]),
        custom_base_price=coerce_float(row.get("custom_base_price")),
        custom_price_per_km=coerce_float(row.get("custom_price_per_km")),
        custom_free_threshold=coerce_float(row.get("custom_free_threshold")),
        is_active=coerce_bool(row.get("is_active", True)),
    )


class SupabaseZoneRepository:
    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    def list_active_zones(self) -> list[ShippingZone]:
        client = require_client(self._client)
        try:
            response = (
                client.table("shipping_zones")
                .select("*")
                .eq("is_active", True)
                .order("sort_order")
                .order("min_distance_km")
                .execute()
            )
        except Exception as exc:
            logger.error(f"Failed to load shipping zones: {exc}")
            raise RepositoryFailure("Failed to load shipping zones") from exc

        zones: list[ShippingZone] = []
        for row in response.data or []:
            try:
                zones.append(zone_from_row(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid shipping zone row: {e}")
        return zones

    def _active_overrides(self, client: Client, branch_id: int) -> dict[int, BranchZoneOverride]:
        try:
            response = (
                client.table("branch_shipping_zones")
                .select("*")
                .eq("branch_id", branch_id)
                .eq("is_active", True)
                .execute()
            )
        except Exception as exc:
            logger.error(f"Failed to load shipping overrides for branch {branch_id}: {exc}")
            raise RepositoryFailure(f"Failed to load shipping overrides for branch {branch_id}") from exc

        overrides: dict[int, BranchZoneOverride] = {}
        for row in response.data or []:
            try:
                override = override_from_row(row)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid branch override row: {e}")
                continue
            overrides[override.zone_id] = override
        return overrides

    def list_active_zones_with_overrides(
        self, branch_id: Optional[int]
    ) -> list[tuple[ShippingZone, Optional[BranchZoneOverride]]]:
        """Active zones in ascending sort order, each paired with the branch's active override."""
        zones = self.list_active_zones()
        if branch_id is None:
            return [(zone, None) for zone in zones]
        overrides = self._active_overrides(require_client(self._client), branch_id)
        return [(zone, overrides.get(zone.id)) for zone in zones]
