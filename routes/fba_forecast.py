"""
FBA shipment forecast API routes.

Exposes the replenishment forecast with capacity-leveled shipment
batches for a sales channel.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.fba_forecast import FbaForecastRequest, FbaForecastResponse
from services.fba_forecast_service import get_fba_forecast_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/forecasting", tags=["Forecasting"])


# ===================
# EXCEPTION HANDLER
# ===================

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
                "message": "Failed to generate FBA shipment forecast"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post("/fba-shipments", response_model=FbaForecastResponse)
async def generate_fba_shipment_forecast(data: Optional[FbaForecastRequest] = None):
    """
    Generate the FBA shipment forecast.

    For every active SKU mapped to the channel, calculates the units
    needed to cover `daysTarget` days (with upcoming seasonality),
    splits them into batches every 30 days within a 90-day horizon, and
    levels all batches so no day ships more than `dailyCapacity`.

    All body fields are optional:
    - daysTarget (45), dailyCapacity (100), weeklyCapacity (700)
    - channel ("amazon_us"), minShipmentSize (5), preferredBatchSize (100)
    - asOf: planning date (today)

    Raises:
        500: Demand data could not be read (no partial result)
    """
    try:
        service = get_fba_forecast_service()
        return service.generate(data or FbaForecastRequest())

    except Exception as e:
        return handle_error(e)
