"""
Replenishment calculations.

Turns a demand profile and a seasonality multiplier into the number of
units FBA needs to cover the target window:

    base_demand     = velocity × target_days
    adjusted_demand = base_demand × seasonality multiplier
    needed          = max(0, adjusted_demand − current FBA inventory)
    days_of_stock   = current FBA inventory / velocity  (999 if velocity is 0)

A SKU gets a recommendation when it needs units OR is below the target
coverage, so a SKU whose need rounds away is still reported.
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from models.fba_forecast import CalculationBreakdown, SkuDemandProfile
from models.seasonality import SeasonalityAdjustment

# Days of stock reported when velocity is zero (unconstrained/unknown)
UNKNOWN_DAYS_OF_STOCK = Decimal("999")


@dataclass
class ReplenishmentCalculation:
    """Outcome of the calculation for one SKU."""

    needed: Decimal
    needed_units: int
    days_of_stock: Decimal
    include: bool
    breakdown: CalculationBreakdown


def calculate_days_of_stock(inventory: int, velocity: Decimal) -> Decimal:
    """Days the current inventory lasts at the given velocity."""
    if velocity <= 0:
        return UNKNOWN_DAYS_OF_STOCK
    return Decimal(inventory) / velocity


def needs_replenishment(
    needed: Decimal,
    days_of_stock: Decimal,
    target_days: int
) -> bool:
    """Either signal is enough."""
    return needed > 0 or days_of_stock < target_days


def calculate_replenishment(
    profile: SkuDemandProfile,
    target_days: int,
    seasonality: SeasonalityAdjustment
) -> ReplenishmentCalculation:
    """
    Calculate units needed at FBA for one SKU.

    Args:
        profile: Demand profile for the SKU
        target_days: Days of coverage to reach
        seasonality: Multiplier chosen for this run

    Returns:
        ReplenishmentCalculation with the full breakdown
    """
    velocity = profile.velocity
    inventory = profile.current_inventory

    base_demand = velocity * target_days
    adjusted_demand = base_demand * seasonality.multiplier
    needed = max(Decimal("0"), adjusted_demand - inventory)
    days_of_stock = calculate_days_of_stock(inventory, velocity)

    breakdown = CalculationBreakdown(
        units_sold_30d=profile.units_sold_30d,
        channel_velocity=velocity,
        base_demand=base_demand,
        seasonality_multiplier=seasonality.multiplier,
        seasonality_note=seasonality.note,
        adjusted_demand=adjusted_demand,
        current_fba_inventory=inventory,
        final_needed=needed,
    )

    return ReplenishmentCalculation(
        needed=needed,
        needed_units=math.ceil(needed),
        days_of_stock=days_of_stock,
        include=needs_replenishment(needed, days_of_stock, target_days),
        breakdown=breakdown,
    )
