"""
Configuration — environment-driven settings.

    from storefront.config import get_settings

    settings = get_settings()
    settings.platform_fee_rate  # Decimal("0.15")

Every field can be overridden with a `STOREFRONT_` environment variable;
mappings are given as JSON, e.g. STOREFRONT_TAX_RATES='{"GB": "0.2"}'.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Storefront settings loaded from the environment (and `.env`)."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    # Settlement
    base_currency: str = Field("GBP", description="Settlement currency for fee reporting")
    platform_fee_rate: Decimal = Field(Decimal("0.15"), description="Share of subtotal kept by the platform")
    conversion_rates: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "GBP": Decimal("1"),
            "USD": Decimal("0.80"),
            "EUR": Decimal("0.85"),
            "JPY": Decimal("0.005"),
        },
        description="Rate to the base currency, keyed by source currency",
    )
    tax_rates: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "GB": Decimal("0.20"),
            "US": Decimal("0.08"),
            "CA": Decimal("0.13"),
        },
        description="Tax rate fraction keyed by destination country",
    )

    # Payment gateway simulation
    payment_success_rate: float = Field(0.95, ge=0.0, le=1.0)
    payment_delay_seconds: float = Field(1.5, ge=0.0)

    # Persistence
    database_url: str = Field("sqlite+aiosqlite:///:memory:")
    idempotency_ttl_seconds: int = Field(3600, ge=0)

    # Logging
    log_level: str = Field("INFO")
    log_json: bool = Field(False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


__all__ = ("Settings", "get_settings")
