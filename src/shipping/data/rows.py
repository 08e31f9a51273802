"""Helpers for coercing database rows into domain values."""

from __future__ import annotations

from typing import Any, Optional

from supabase import Client

from ..db.supabase import get_supabase_client
from ..services.shipping.errors import RepositoryFailure


def coerce_float(value: Any) -> Optional[float]:
    """Parse a nullable numeric column. PostgREST may return numerics as strings."""
    if value is None or value == "":
        return None
    try:
        return float(str(value).replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes"}
    return bool(value)


def require_client(client: Client | None = None) -> Client:
    client = client or get_supabase_client()
    if client is None:
        raise RepositoryFailure(
            "Supabase not configured. Set SHIP_SUPABASE_URL and SHIP_SUPABASE_KEY environment variables."
        )
    return client
