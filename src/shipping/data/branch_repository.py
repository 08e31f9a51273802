"""Branch lookups backed by the ``branches`` table."""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from ..models.domain import Branch
from ..services.shipping.errors import RepositoryFailure
from .rows import coerce_bool, coerce_float, require_client

logger = logging.getLogger(__name__)

BRANCH_COLUMNS = "id, title_en, title_ar, latitude, longitude, address_en, address_ar, phone, is_active"


def branch_from_row(row: dict[str, Any]) -> Branch:
    return Branch(
        id=int(row["id"]),
        title_en=str(row.get("title_en") or ""),
        title_ar=row.get("title_ar"),
        latitude=coerce_float(row.get("latitude")),
        longitude=coerce_float(row.get("longitude")),
        address_en=row.get("address_en"),
        address_ar=row.get("address_ar"),
        phone=row.get("phone"),
        is_active=coerce_bool(row.get("is_active", True)),
    )


class SupabaseBranchRepository:
    """Read-only view of active branches."""

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    def get_active_branch_by_id(self, branch_id: int) -> Optional[Branch]:
        client = require_client(self._client)
        try:
            response = (
                client.table("branches")
                .select(BRANCH_COLUMNS)
                .eq("id", branch_id)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            logger.error(f"Failed to load branch {branch_id}: {exc}")
            raise RepositoryFailure(f"Failed to load branch {branch_id}") from exc

        rows = response.data or []
        if not rows:
            return None
        try:
            return branch_from_row(rows[0])
        except (KeyError, ValueError, TypeError) as exc:
            raise RepositoryFailure(f"Branch {branch_id} row is malformed: {exc}") from exc

    def list_active_branches(self) -> list[Branch]:
        client = require_client(self._client)
        try:
            response = (
                client.table("branches")
                .select(BRANCH_COLUMNS)
                .eq("is_active", True)
                .not_.is_("latitude", "null")
                .not_.is_("longitude", "null")
                .order("id")
                .execute()
            )
        except Exception as exc:
            logger.error(f"Failed to list active branches: {exc}")
            raise RepositoryFailure("Failed to list active branches") from exc

        branches: list[Branch] = []
        for row in response.data or []:
            try:
                branches.append(branch_from_row(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping invalid branch row: {e}")
        return branches
