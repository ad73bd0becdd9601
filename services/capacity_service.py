"""
Daily shipping capacity leveling.

Given every SKU's planned batches and a daily unit ceiling, reassigns
ship dates so that no day ships more than the ceiling:

1. Batches are grouped by ship date, keeping discovery order
   (recommendation order, then batch order).
2. Dates are worked through chronologically from a queue.
3. A date whose total fits passes through unchanged.
4. Otherwise each batch, in order, takes what capacity is left that day
   and its remainder is queued at the back of the next day.
5. A remainder that would land on or past the horizon is dropped; the
   next run recomputes it.

This is a greedy FIFO heuristic, not an optimal packing.
"""

import heapq
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Optional
from decimal import Decimal
from datetime import date, timedelta
import structlog

from models.fba_forecast import (
    CapacityAdjustedShipment,
    ReplenishmentRecommendation,
    ShipmentBatch,
    WeeklyLoad,
)

logger = structlog.get_logger(__name__)


@dataclass
class PendingShipment:
    """A batch (or what's left of one) waiting for a ship date."""

    master_sku: str
    channel_sku: str
    title: Optional[str]
    original_ship_date: date
    quantity: int
    projected_fba_inventory: Decimal


@dataclass
class LevelingResult:
    """Leveled schedule plus anything pushed past the horizon."""

    shipments: list[CapacityAdjustedShipment]
    dropped_by_sku: dict[str, int] = field(default_factory=dict)

    @property
    def dropped_units(self) -> int:
        return sum(self.dropped_by_sku.values())


def collect_pending(
    recommendations: list[ReplenishmentRecommendation]
) -> dict[date, deque[PendingShipment]]:
    """Group all planned batches by ship date in discovery order."""
    pending: dict[date, deque[PendingShipment]] = {}
    for rec in recommendations:
        for batch in rec.batches:
            pending.setdefault(batch.ship_date, deque()).append(PendingShipment(
                master_sku=rec.master_sku,
                channel_sku=rec.channel_sku,
                title=rec.title,
                original_ship_date=batch.ship_date,
                quantity=batch.quantity,
                projected_fba_inventory=batch.projected_fba_inventory,
            ))
    return pending


def _ship(item: PendingShipment, ship_date: date, quantity: int) -> CapacityAdjustedShipment:
    return CapacityAdjustedShipment(
        master_sku=item.master_sku,
        channel_sku=item.channel_sku,
        title=item.title,
        original_ship_date=item.original_ship_date,
        deferred_days=(ship_date - item.original_ship_date).days,
        batch=ShipmentBatch(
            ship_date=ship_date,
            quantity=quantity,
            projected_fba_inventory=item.projected_fba_inventory,
        ),
    )


def level_shipments(
    recommendations: list[ReplenishmentRecommendation],
    daily_capacity: int,
    start: date,
    horizon_days: int = 90
) -> LevelingResult:
    """
    Level all planned batches against a daily capacity.

    Args:
        recommendations: Recommendations whose batches get leveled
        daily_capacity: Max units shipped per day (>= 1)
        start: Planning date; the horizon counts from here
        horizon_days: Deferrals may not land on start + horizon_days or later

    Returns:
        LevelingResult with shipments sorted by ship date
    """
    if daily_capacity < 1:
        raise ValueError("daily_capacity must be at least 1")

    horizon_end = start + timedelta(days=horizon_days)
    pending = collect_pending(recommendations)
    queue = list(pending)
    heapq.heapify(queue)

    shipments: list[CapacityAdjustedShipment] = []
    dropped: dict[str, int] = {}
    overloaded_days = 0

    while queue:
        day = heapq.heappop(queue)
        items = pending.pop(day)
        total = sum(item.quantity for item in items)

        if total <= daily_capacity:
            shipments.extend(_ship(item, day, item.quantity) for item in items)
            continue

        overloaded_days += 1
        remaining_capacity = daily_capacity
        next_day = day + timedelta(days=1)

        for item in items:
            allocated = min(item.quantity, remaining_capacity)
            if allocated > 0:
                shipments.append(_ship(item, day, allocated))
                remaining_capacity -= allocated

            deferred = item.quantity - allocated
            if deferred <= 0:
                continue

            if next_day >= horizon_end:
                dropped[item.master_sku] = dropped.get(item.master_sku, 0) + deferred
                logger.info(
                    "shipment_beyond_horizon",
                    sku=item.master_sku,
                    units=deferred,
                    original_ship_date=item.original_ship_date.isoformat()
                )
                continue

            if next_day not in pending:
                pending[next_day] = deque()
                heapq.heappush(queue, next_day)
            pending[next_day].append(replace(item, quantity=deferred))

    shipments.sort(key=lambda s: s.batch.ship_date)

    logger.info(
        "capacity_leveling_complete",
        shipments=len(shipments),
        daily_capacity=daily_capacity,
        overloaded_days=overloaded_days,
        dropped_units=sum(dropped.values())
    )

    return LevelingResult(shipments=shipments, dropped_by_sku=dropped)


def find_weekly_overages(
    shipments: list[CapacityAdjustedShipment],
    weekly_capacity: int
) -> list[WeeklyLoad]:
    """
    ISO weeks whose leveled total exceeds the weekly capacity.

    Informational only; leveling enforces the daily ceiling alone.
    """
    totals: dict[tuple[int, int], int] = {}
    for shipment in shipments:
        year, week, _ = shipment.batch.ship_date.isocalendar()
        totals[(year, week)] = totals.get((year, week), 0) + shipment.batch.quantity

    return [
        WeeklyLoad(
            week=f"{year}-W{week:02d}",
            week_start=date.fromisocalendar(year, week, 1),
            quantity=quantity,
            capacity=weekly_capacity,
        )
        for (year, week), quantity in sorted(totals.items())
        if quantity > weekly_capacity
    ]
