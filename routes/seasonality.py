"""
Seasonality API routes.

Read-only views of the seasonal events the forecast uses.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
from datetime import date
import structlog

from config import settings
from models.seasonality import (
    SeasonalEventListResponse,
    SeasonalityMultiplierResponse,
    UpcomingSeasonalEventsResponse,
)
from services.seasonality_service import get_seasonality_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/forecasting/seasonality", tags=["Seasonality"])


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.get("/events", response_model=SeasonalEventListResponse)
async def list_seasonal_events():
    """
    List all seasonal events ordered by start date.

    Raises:
        503: Seasonal events are unavailable
    """
    try:
        service = get_seasonality_service()
        return SeasonalEventListResponse(data=service.get_all_events())

    except Exception as e:
        return handle_error(e)


@router.get("/upcoming", response_model=UpcomingSeasonalEventsResponse)
async def list_upcoming_events(
    days: Optional[int] = Query(None, ge=1, le=366, description="Window in days"),
):
    """
    Active events starting within the window.

    Events whose start already passed this year are shown with next
    year's date.
    """
    try:
        service = get_seasonality_service()
        window = days or settings.seasonality_upcoming_window_days
        return UpcomingSeasonalEventsResponse(
            window_days=window,
            data=service.get_upcoming(window_days=window),
        )

    except Exception as e:
        return handle_error(e)


@router.get("/multiplier", response_model=SeasonalityMultiplierResponse)
async def get_seasonality_multiplier(
    on: Optional[date] = Query(None, alias="date", description="Planning date (today)"),
):
    """
    Multiplier the FBA forecast would apply on a date.

    Only events starting within the next 30 days count; events already
    underway do not. Falls back to 1.0 when events are unavailable.
    """
    try:
        service = get_seasonality_service()
        as_of = on or date.today()
        adjustment = service.get_multiplier(as_of)
        return SeasonalityMultiplierResponse(
            as_of=as_of,
            lookahead_days=service.lookahead_days,
            multiplier=adjustment.multiplier,
            note=adjustment.note,
            event_name=adjustment.event_name,
        )

    except Exception as e:
        return handle_error(e)
