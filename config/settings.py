"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )
    supabase_page_size: int = Field(
        default=1000,
        ge=1,
        description="Rows per request for bulk reads (PostgREST max-rows)"
    )

    # ===================
    # FBA FORECAST DEFAULTS
    # ===================
    fba_days_target: int = Field(
        default=45,
        ge=1,
        le=365,
        description="Days of FBA stock to cover with shipments"
    )
    fba_daily_capacity: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Maximum units shipped per day across all SKUs"
    )
    fba_weekly_capacity: int = Field(
        default=700,
        ge=1,
        le=700000,
        description="Weekly shipping capacity (reported, not enforced)"
    )
    fba_default_channel: str = Field(
        default="amazon_us",
        description="Sales channel forecast when the request names none"
    )
    fba_min_shipment_size: int = Field(
        default=5,
        ge=1,
        le=10000,
        description="Minimum units per SKU in a shipment"
    )
    fba_preferred_batch_size: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Preferred units per shipment batch"
    )
    fba_batch_interval_days: int = Field(
        default=30,
        ge=1,
        le=90,
        description="Days between consecutive batches of one SKU"
    )
    fba_horizon_days: int = Field(
        default=90,
        ge=1,
        le=365,
        description="Scheduling horizon for batches and deferrals"
    )
    fba_urgent_days: int = Field(
        default=14,
        ge=1,
        le=90,
        description="Days of stock below which a SKU counts as urgent"
    )

    # ===================
    # DEMAND SIGNALS
    # ===================
    seasonality_lookahead_days: int = Field(
        default=30,
        ge=0,
        le=120,
        description="Days ahead to look for upcoming seasonal events"
    )
    seasonality_upcoming_window_days: int = Field(
        default=90,
        ge=1,
        le=366,
        description="Default window for the upcoming events listing"
    )
    velocity_window_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Trailing window for the units-sold diagnostic"
    )
    default_lead_time_days: int = Field(
        default=45,
        ge=1,
        le=365,
        description="Supplier lead time when a product has none recorded"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
