"""Application configuration and settings management."""

from dataclasses import dataclass
from typing import Any, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True, slots=True)
class PricingConfig:
    """Read-only pricing parameters shared by every engine component."""

    earth_radius_km: float = 6371.0
    min_effective_distance_km: float = 0.0
    max_delivery_distance_km: float = 100.0
    default_shipping_fee: float = 5.00
    fallback_zone_max_distance_km: float = 999.0

    @property
    def distance_basis(self) -> str:
        return f"bounded_{self.min_effective_distance_km:g}-{self.max_delivery_distance_km:g}_km"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SHIP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Bakery Shipping Pricing API"
    api_prefix: str = "/api"
    earth_radius_km: float = Field(default=6371.0, gt=0.0)
    min_effective_distance_km: float = Field(default=0.0, ge=0.0)
    max_delivery_distance_km: float = Field(
        default=100.0,
        gt=0.0,
        description="Distances above this value are priced as if they were exactly this far.",
    )
    default_shipping_fee: float = Field(
        default=5.00,
        ge=0.0,
        description="Flat fee charged when no shipping zone covers the delivery distance.",
    )
    fallback_zone_max_distance_km: float = Field(default=999.0, gt=0.0)
    calculation_log_enabled: bool = Field(
        default=True,
        description="Persist every computed quote to the shipping_calculations table.",
    )
    calculation_log_workers: int = Field(default=2, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @model_validator(mode="after")
    def _check_distance_bounds(self) -> "Settings":
        if self.max_delivery_distance_km <= self.min_effective_distance_km:
            raise ValueError("max_delivery_distance_km must be greater than min_effective_distance_km")
        return self

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    def pricing_config(self) -> PricingConfig:
        return PricingConfig(
            earth_radius_km=self.earth_radius_km,
            min_effective_distance_km=self.min_effective_distance_km,
            max_delivery_distance_km=self.max_delivery_distance_km,
            default_shipping_fee=self.default_shipping_fee,
            fallback_zone_max_distance_km=self.fallback_zone_max_distance_km,
        )


settings = Settings()
