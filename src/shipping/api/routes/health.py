"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and shipping zone availability."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set SHIP_SUPABASE_URL and SHIP_SUPABASE_KEY environment variables.",
            "zones_count": 0,
        }

    try:
        response = supabase.table("shipping_zones").select("id", count="exact").eq("is_active", True).execute()
        zones_count = response.count if response.count is not None else len(response.data or [])
        return {
            "configured": True,
            "connected": True,
            "zones_count": zones_count,
            "message": f"Database connected. Found {zones_count} active shipping zones.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
