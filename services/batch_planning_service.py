"""
Shipment batch planning.

Splits a SKU's needed units into equal batches spaced a fixed interval
apart, starting on the planning date. Batches are only scheduled inside
the horizon; whatever is left beyond it is picked up by a later run once
inventory has drawn down.
"""

import math
from decimal import Decimal
from datetime import date, timedelta

from models.fba_forecast import ShipmentBatch


def effective_batch_size(
    needed_units: int,
    preferred_batch_size: int,
    min_shipment_size: int
) -> int:
    """
    Equalized batch size.

    ceil(needed / preferred) batches, each ceil(needed / batches) units,
    never below the minimum shipment size.
    """
    total_batches = math.ceil(needed_units / preferred_batch_size)
    return max(min_shipment_size, math.ceil(needed_units / total_batches))


def project_inventory(
    current_inventory: int,
    velocity: Decimal,
    days_ahead: int
) -> Decimal:
    """Inventory left after days_ahead of linear depletion (floored at 0)."""
    return max(Decimal("0"), Decimal(current_inventory) - velocity * days_ahead)


def plan_batches(
    needed_units: int,
    preferred_batch_size: int,
    min_shipment_size: int,
    start: date,
    current_inventory: int = 0,
    velocity: Decimal = Decimal("0"),
    interval_days: int = 30,
    horizon_days: int = 90
) -> list[ShipmentBatch]:
    """
    Plan shipment batches for one SKU.

    Args:
        needed_units: Units to ship (already rounded up)
        preferred_batch_size: Target units per batch
        min_shipment_size: Smallest batch worth shipping
        start: Date of the first batch
        current_inventory: FBA inventory today, for projections
        velocity: Units/day, for projections
        interval_days: Days between batches
        horizon_days: Batches are scheduled while offset < horizon_days

    Returns:
        Batches in date order. Sum of quantities <= needed_units and every
        quantity >= min_shipment_size. A trailing remainder smaller than
        the minimum is dropped.
    """
    if needed_units <= 0:
        return []

    batch_size = effective_batch_size(needed_units, preferred_batch_size, min_shipment_size)

    batches: list[ShipmentBatch] = []
    remaining = needed_units
    offset = 0

    while remaining > 0 and offset < horizon_days:
        quantity = min(batch_size, remaining)
        if quantity < min_shipment_size:
            break

        batches.append(ShipmentBatch(
            ship_date=start + timedelta(days=offset),
            quantity=quantity,
            projected_fba_inventory=project_inventory(current_inventory, velocity, offset),
        ))
        remaining -= quantity
        offset += interval_days

    return batches
