"""
Forecast summary aggregation.
"""

from typing import Optional

from models.fba_forecast import (
    CapacityAdjustedShipment,
    ForecastSummary,
    ReplenishmentRecommendation,
    SkipCounters,
    WeeklyLoad,
)


def count_urgent(
    recommendations: list[ReplenishmentRecommendation],
    urgent_days: int
) -> int:
    """SKUs with fewer than urgent_days of stock."""
    return sum(1 for r in recommendations if r.days_of_stock < urgent_days)


def build_summary(
    recommendations: list[ReplenishmentRecommendation],
    shipments: list[CapacityAdjustedShipment],
    counters: SkipCounters,
    urgent_days: int = 14,
    units_beyond_horizon: int = 0,
    weekly_overages: Optional[list[WeeklyLoad]] = None
) -> ForecastSummary:
    """
    Totals for the dashboard.

    Args:
        recommendations: All recommendations of the run
        shipments: Capacity-leveled schedule
        counters: Loader and calculator skip counters
        urgent_days: Days-of-stock threshold for "urgent"
        units_beyond_horizon: Units leveling pushed past the horizon
        weekly_overages: Weeks above the weekly capacity

    Returns:
        ForecastSummary
    """
    return ForecastSummary(
        total_skus=len(recommendations),
        total_units_needed=sum(r.needed_units for r in recommendations),
        total_shipments=len(shipments),
        total_units_planned=sum(r.planned_units for r in recommendations),
        total_units_scheduled=sum(s.batch.quantity for s in shipments),
        units_beyond_horizon=units_beyond_horizon,
        urgent=count_urgent(recommendations, urgent_days),
        weekly_overages=weekly_overages or [],
        debug=counters,
    )
