"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    CamelSchema,
)
from models.seasonality import (
    SeasonalEvent,
    SeasonalityAdjustment,
    UpcomingSeasonalEvent,
    SeasonalEventListResponse,
    UpcomingSeasonalEventsResponse,
    SeasonalityMultiplierResponse,
)
from models.fba_forecast import (
    ProductKind,
    VelocitySource,
    SkuDemandProfile,
    SkipCounters,
    CalculationBreakdown,
    ShipmentBatch,
    ReplenishmentRecommendation,
    CapacityAdjustedShipment,
    WeeklyLoad,
    ForecastSummary,
    FbaForecastRequest,
    ForecastParameters,
    FbaForecastResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "CamelSchema",

    # Seasonality
    "SeasonalEvent",
    "SeasonalityAdjustment",
    "UpcomingSeasonalEvent",
    "SeasonalEventListResponse",
    "UpcomingSeasonalEventsResponse",
    "SeasonalityMultiplierResponse",

    # FBA forecast
    "ProductKind",
    "VelocitySource",
    "SkuDemandProfile",
    "SkipCounters",
    "CalculationBreakdown",
    "ShipmentBatch",
    "ReplenishmentRecommendation",
    "CapacityAdjustedShipment",
    "WeeklyLoad",
    "ForecastSummary",
    "FbaForecastRequest",
    "ForecastParameters",
    "FbaForecastResponse",
]
