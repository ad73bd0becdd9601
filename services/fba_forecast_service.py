"""
FBA shipment forecast service.

Runs the whole forecast for one channel:

    demand profiles -> seasonality -> replenishment -> batches
        -> capacity leveling -> summary

Every run reads a fresh snapshot and keeps its state on the run's own
result objects, so concurrent requests never share anything mutable.
"""

import math
from typing import Optional
from datetime import date, datetime
from uuid import uuid4
import structlog

from config import settings
from models.fba_forecast import (
    FbaForecastRequest,
    FbaForecastResponse,
    ForecastParameters,
    ReplenishmentRecommendation,
)
from services.batch_planning_service import plan_batches
from services.capacity_service import find_weekly_overages, level_shipments
from services.demand_profile_service import get_demand_profile_service
from services.forecast_report_service import build_summary
from services.replenishment_service import calculate_replenishment
from services.seasonality_service import get_seasonality_service

logger = structlog.get_logger(__name__)


class FbaForecastService:
    """
    Replenishment forecast with capacity-leveled shipment batches.
    """

    def __init__(self):
        self.profile_service = get_demand_profile_service()
        self.seasonality_service = get_seasonality_service()

        # Settings
        self.batch_interval_days = settings.fba_batch_interval_days
        self.horizon_days = settings.fba_horizon_days
        self.urgent_days = settings.fba_urgent_days

    def resolve_parameters(self, request: FbaForecastRequest) -> ForecastParameters:
        """Fill omitted request fields from settings."""

        def pick(value, default):
            return default if value is None else value

        return ForecastParameters(
            days_target=pick(request.days_target, settings.fba_days_target),
            daily_capacity=pick(request.daily_capacity, settings.fba_daily_capacity),
            weekly_capacity=pick(request.weekly_capacity, settings.fba_weekly_capacity),
            channel=pick(request.channel, settings.fba_default_channel),
            min_shipment_size=pick(request.min_shipment_size, settings.fba_min_shipment_size),
            preferred_batch_size=pick(
                request.preferred_batch_size, settings.fba_preferred_batch_size
            ),
            batch_interval_days=self.batch_interval_days,
            horizon_days=self.horizon_days,
            as_of=pick(request.as_of, date.today()),
        )

    def generate(self, request: Optional[FbaForecastRequest] = None) -> FbaForecastResponse:
        """
        Generate the FBA shipment forecast.

        Args:
            request: Forecast parameters (all optional)

        Returns:
            FbaForecastResponse with recommendations, leveled schedule
            and summary

        Raises:
            DatabaseError: If demand data can't be read (no partial result)
        """
        params = self.resolve_parameters(request or FbaForecastRequest())
        run_id = str(uuid4())
        log = logger.bind(run_id=run_id, channel=params.channel)

        log.info(
            "fba_forecast_started",
            as_of=params.as_of.isoformat(),
            days_target=params.days_target,
            daily_capacity=params.daily_capacity
        )

        profiles, counters = self.profile_service.load_profiles(params.channel, params.as_of)
        seasonality = self.seasonality_service.get_multiplier(params.as_of)

        recommendations: list[ReplenishmentRecommendation] = []
        for profile in profiles:
            calc = calculate_replenishment(profile, params.days_target, seasonality)
            if not calc.include:
                counters.skipped_enough_stock += 1
                continue

            batches = plan_batches(
                needed_units=calc.needed_units,
                preferred_batch_size=params.preferred_batch_size,
                min_shipment_size=params.min_shipment_size,
                start=params.as_of,
                current_inventory=profile.current_inventory,
                velocity=profile.velocity,
                interval_days=params.batch_interval_days,
                horizon_days=params.horizon_days,
            )

            recommendations.append(ReplenishmentRecommendation(
                master_sku=profile.master_sku,
                channel_sku=profile.channel_sku,
                title=profile.title,
                channel=profile.channel,
                current_fba_inventory=profile.current_inventory,
                channel_velocity=profile.velocity,
                days_of_stock=math.floor(calc.days_of_stock),
                target_days=params.days_target,
                lead_time_days=profile.lead_time_days,
                needed_units=calc.needed_units,
                batches=batches,
                calculation_breakdown=calc.breakdown,
            ))

        leveling = level_shipments(
            recommendations,
            daily_capacity=params.daily_capacity,
            start=params.as_of,
            horizon_days=params.horizon_days,
        )
        weekly_overages = find_weekly_overages(leveling.shipments, params.weekly_capacity)

        summary = build_summary(
            recommendations,
            leveling.shipments,
            counters,
            urgent_days=self.urgent_days,
            units_beyond_horizon=leveling.dropped_units,
            weekly_overages=weekly_overages,
        )

        log.info(
            "fba_forecast_complete",
            total_mappings=counters.total_mappings,
            skipped_no_product=counters.skipped_no_product,
            skipped_parent=counters.skipped_parent,
            skipped_no_velocity=counters.skipped_no_velocity,
            skipped_enough_stock=counters.skipped_enough_stock,
            recommendations=summary.total_skus,
            shipments=summary.total_shipments,
            urgent=summary.urgent,
            weekly_overages=len(weekly_overages)
        )

        return FbaForecastResponse(
            run_id=run_id,
            generated_at=datetime.utcnow(),
            parameters=params,
            recommendations=recommendations,
            capacity_adjusted_shipments=leveling.shipments,
            summary=summary,
        )


# Singleton instance
_fba_forecast_service: Optional[FbaForecastService] = None


def get_fba_forecast_service() -> FbaForecastService:
    """Get or create FbaForecastService instance."""
    global _fba_forecast_service
    if _fba_forecast_service is None:
        _fba_forecast_service = FbaForecastService()
    return _fba_forecast_service
