"""
FBA shipment forecast schemas.

Covers the per-run demand profiles, replenishment recommendations,
shipment batches and the capacity-leveled schedule returned to the
dashboard.
"""

from pydantic import Field, computed_field
from typing import Optional
from decimal import Decimal
from datetime import date, datetime
from enum import Enum

from models.base import BaseSchema, CamelSchema


class ProductKind(str, Enum):
    """Position of a product in the parent/variation hierarchy."""
    LEAF = "LEAF"          # Standalone sellable product
    PARENT = "PARENT"      # Variation container, never shipped itself
    VARIANT = "VARIANT"    # Child of a parent product


class VelocitySource(str, Enum):
    """Where a SKU's velocity figure came from."""
    CHANNEL = "channel"
    GLOBAL = "global"


# ===================
# RUN INPUTS
# ===================

class SkuDemandProfile(BaseSchema):
    """Demand and FBA inventory position for one mapped SKU."""

    master_sku: str
    channel_sku: str
    channel: str
    title: Optional[str] = None
    kind: ProductKind = ProductKind.LEAF

    velocity: Decimal = Field(..., ge=0, description="Units/day over 30 days")
    velocity_source: VelocitySource = VelocitySource.GLOBAL

    fba_available: int = 0
    fba_inbound_working: int = 0
    fba_inbound_shipped: int = 0
    fba_inbound_receiving: int = 0

    lead_time_days: int = Field(..., ge=0)
    units_sold_30d: int = 0

    @computed_field
    @property
    def current_inventory(self) -> int:
        """Available plus all three inbound states."""
        return (
            self.fba_available
            + self.fba_inbound_working
            + self.fba_inbound_shipped
            + self.fba_inbound_receiving
        )


class SkipCounters(BaseSchema):
    """Why mappings did not produce a recommendation."""

    total_mappings: int = 0
    skipped_no_product: int = 0
    skipped_parent: int = 0
    skipped_no_velocity: int = 0
    skipped_enough_stock: int = 0


# ===================
# RECOMMENDATIONS
# ===================

class CalculationBreakdown(CamelSchema):
    """Every intermediate value behind a needed-units figure."""

    units_sold_30d: int
    channel_velocity: Decimal
    base_demand: Decimal = Field(..., description="velocity × target days")
    seasonality_multiplier: Decimal
    seasonality_note: str = ""
    adjusted_demand: Decimal = Field(..., description="base demand × multiplier")
    current_fba_inventory: int
    final_needed: Decimal = Field(..., description="max(0, adjusted - inventory)")


class ShipmentBatch(CamelSchema):
    """One planned shipment of a SKU."""

    ship_date: date
    quantity: int = Field(..., ge=0)
    projected_fba_inventory: Decimal = Field(
        ...,
        description="Inventory left at ship date assuming linear depletion"
    )


class ReplenishmentRecommendation(CamelSchema):
    """Units a SKU needs at FBA and how to ship them."""

    master_sku: str
    channel_sku: str
    title: Optional[str] = None
    channel: str

    current_fba_inventory: int
    channel_velocity: Decimal
    days_of_stock: int
    target_days: int
    lead_time_days: int

    needed_units: int = Field(..., ge=0)
    batches: list[ShipmentBatch] = Field(default_factory=list)
    calculation_breakdown: CalculationBreakdown

    @property
    def planned_units(self) -> int:
        """Units placed in batches; below needed_units when the horizon cuts in."""
        return sum(b.quantity for b in self.batches)


class CapacityAdjustedShipment(CamelSchema):
    """A batch after daily capacity leveling."""

    master_sku: str
    channel_sku: str
    title: Optional[str] = None
    original_ship_date: date
    deferred_days: int = 0
    batch: ShipmentBatch


# ===================
# SUMMARY
# ===================

class WeeklyLoad(CamelSchema):
    """Leveled units shipped in one ISO week."""

    week: str = Field(..., description="ISO week label, e.g. 2026-W43")
    week_start: date
    quantity: int
    capacity: int


class ForecastSummary(CamelSchema):
    """Totals for the dashboard header."""

    total_skus: int
    total_units_needed: int
    total_shipments: int
    total_units_planned: int
    total_units_scheduled: int
    units_beyond_horizon: int = 0
    urgent: int
    weekly_overages: list[WeeklyLoad] = Field(default_factory=list)
    debug: SkipCounters


# ===================
# REQUEST / RESPONSE
# ===================

class FbaForecastRequest(CamelSchema):
    """
    Forecast parameters. Every field is optional.

    Omitted values fall back to the FBA_* settings.
    """

    days_target: Optional[int] = Field(None, ge=1, le=365)
    daily_capacity: Optional[int] = Field(None, ge=1)
    weekly_capacity: Optional[int] = Field(None, ge=1)
    channel: Optional[str] = Field(None, min_length=1, max_length=50)
    min_shipment_size: Optional[int] = Field(None, ge=1)
    preferred_batch_size: Optional[int] = Field(None, ge=1)
    as_of: Optional[date] = Field(
        None,
        description="Planning date (defaults to today)"
    )


class ForecastParameters(CamelSchema):
    """Fully resolved parameters a run used."""

    days_target: int
    daily_capacity: int
    weekly_capacity: int
    channel: str
    min_shipment_size: int
    preferred_batch_size: int
    batch_interval_days: int
    horizon_days: int
    as_of: date


class FbaForecastResponse(CamelSchema):
    """Result of one forecast run."""

    success: bool = True
    run_id: str
    generated_at: datetime
    parameters: ForecastParameters
    recommendations: list[ReplenishmentRecommendation]
    capacity_adjusted_shipments: list[CapacityAdjustedShipment]
    summary: ForecastSummary
