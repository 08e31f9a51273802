"""Database persistence for shipping calculations."""

from __future__ import annotations

import logging
from typing import Any

from ..db.supabase import get_supabase_client


def save_shipping_calculation(row: dict[str, Any]) -> bool:
    """Insert one row into ``shipping_calculations``.

    Returns ``False`` when no database is configured. Insert errors propagate;
    callers run this through the calculation logger, which reports them
    without failing the quote.
    """
    supabase = get_supabase_client()
    if not supabase:
        # Database not configured, skip silently
        logging.info("Supabase not configured - shipping calculation not stored")
        return False

    supabase.table("shipping_calculations").insert(row).execute()
    return True


def update_address_shipping_info(address_id: int, distance_km: float, zone_id: int | None) -> bool:
    """Cache the computed distance and zone on a saved customer address.

    Supplementary information only: failures are logged and reported as ``False``.
    """
    supabase = get_supabase_client()
    if not supabase:
        return False

    try:
        supabase.table("user_addresses").update(
            {"calculated_distance_km": distance_km, "shipping_zone_id": zone_id}
        ).eq("id", address_id).execute()
        return True
    except Exception as e:
        logging.warning(f"Failed to update shipping info for address {address_id}: {e}")
        return False
