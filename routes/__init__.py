"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.fba_forecast import router as fba_forecast_router
from routes.seasonality import router as seasonality_router

__all__ = [
    "fba_forecast_router",
    "seasonality_router",
]
