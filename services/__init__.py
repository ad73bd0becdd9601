"""
Business logic services.

Each service handles one stage of the FBA forecast.
"""

from services.sales_service import SalesService, get_sales_service
from services.demand_profile_service import DemandProfileService, get_demand_profile_service
from services.seasonality_service import SeasonalityService, get_seasonality_service
from services.fba_forecast_service import FbaForecastService, get_fba_forecast_service

__all__ = [
    "SalesService",
    "get_sales_service",
    "DemandProfileService",
    "get_demand_profile_service",
    "SeasonalityService",
    "get_seasonality_service",
    "FbaForecastService",
    "get_fba_forecast_service",
]
