"""
Seasonality service.

Resolves the forward-looking demand multiplier for a forecast run. Only
events starting within the lookahead window count; an event that has
already begun is never applied retroactively.

The seasonal_events table is optional. When it cannot be read the
forecast runs without seasonality.
"""

import calendar
from typing import Optional
from decimal import Decimal
from datetime import date
import structlog
from pydantic import ValidationError

from config import settings, get_supabase_client
from exceptions import SeasonalityUnavailableError
from models.seasonality import (
    SeasonalEvent,
    SeasonalityAdjustment,
    UpcomingSeasonalEvent,
)

logger = structlog.get_logger(__name__)

NO_SEASONALITY = SeasonalityAdjustment(multiplier=Decimal("1.0"), note="")


def occurrence_in_year(month: int, day: int, year: int) -> date:
    """
    Date of a recurring month/day in a given year.

    Feb 29 falls back to Feb 28 outside leap years.
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def format_seasonality_note(name: str, multiplier: Decimal) -> str:
    """'Prime Day coming up (+50%)'."""
    pct = ((multiplier - 1) * 100).quantize(Decimal("1"))
    return f"{name} coming up (+{pct}%)"


def resolve_seasonality(
    events: list[SeasonalEvent],
    today: date,
    lookahead_days: int = 30
) -> SeasonalityAdjustment:
    """
    Pick the highest multiplier among events starting soon.

    An event qualifies when this year's start date is between today and
    today + lookahead_days (both inclusive). Learned multipliers win over
    base multipliers. Only multipliers above the running best (starting
    at 1.0) are taken, so ties keep the first event seen.

    Args:
        events: Seasonal events (inactive ones are ignored)
        today: Planning date
        lookahead_days: Window ahead of today

    Returns:
        SeasonalityAdjustment (multiplier 1.0 when nothing qualifies)
    """
    best = NO_SEASONALITY

    for event in events:
        if not event.is_active:
            continue

        start = occurrence_in_year(event.start_month, event.start_day, today.year)
        days_until = (start - today).days
        if days_until < 0 or days_until > lookahead_days:
            continue

        multiplier = event.effective_multiplier
        if multiplier > best.multiplier:
            best = SeasonalityAdjustment(
                multiplier=multiplier,
                note=format_seasonality_note(event.name, multiplier),
                event_name=event.name,
                days_until_start=days_until,
            )

    return best


def upcoming_events(
    events: list[SeasonalEvent],
    today: date,
    window_days: int = 90
) -> list[UpcomingSeasonalEvent]:
    """
    Active events whose next occurrence starts within window_days.

    Unlike resolve_seasonality, an event whose start already passed this
    year rolls over to next year's occurrence.
    """
    upcoming = []
    for event in events:
        if not event.is_active:
            continue

        event_date = occurrence_in_year(event.start_month, event.start_day, today.year)
        if event_date < today:
            event_date = occurrence_in_year(
                event.start_month, event.start_day, today.year + 1
            )

        days_until = (event_date - today).days
        if days_until <= window_days:
            upcoming.append(UpcomingSeasonalEvent(
                event=event,
                event_date=event_date,
                days_until=days_until,
                effective_multiplier=event.effective_multiplier,
            ))

    upcoming.sort(key=lambda u: (u.days_until, u.event.name))
    return upcoming


class SeasonalityService:
    """
    Reads seasonal events and resolves multipliers.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "seasonal_events"
        self.lookahead_days = settings.seasonality_lookahead_days

    # ===================
    # READ OPERATIONS
    # ===================

    def _get_events(self, active_only: bool) -> list[SeasonalEvent]:
        try:
            query = self.db.table(self.table).select("*")
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("start_month").order("start_day").execute()
            return [SeasonalEvent(**row) for row in result.data]
        except ValidationError as e:
            logger.error("seasonal_event_invalid", error=str(e))
            raise SeasonalityUnavailableError(f"Invalid seasonal event row: {e}") from e
        except Exception as e:
            raise SeasonalityUnavailableError(str(e)) from e

    def get_all_events(self) -> list[SeasonalEvent]:
        """
        All seasonal events ordered by start date.

        Raises:
            SeasonalityUnavailableError: If the events table can't be read
        """
        logger.debug("getting_seasonal_events")
        return self._get_events(active_only=False)

    def get_active_events(self) -> list[SeasonalEvent]:
        """
        Active seasonal events.

        Raises:
            SeasonalityUnavailableError: If the events table can't be read
        """
        return self._get_events(active_only=True)

    # ===================
    # MULTIPLIERS
    # ===================

    def get_multiplier(
        self,
        today: Optional[date] = None,
        lookahead_days: Optional[int] = None
    ) -> SeasonalityAdjustment:
        """
        Multiplier for a forecast run.

        Never fails: an unreadable events table means no seasonality.
        """
        today = today or date.today()
        lookahead = self.lookahead_days if lookahead_days is None else lookahead_days

        try:
            events = self.get_active_events()
        except SeasonalityUnavailableError as e:
            logger.warning(
                "seasonality_unavailable",
                reason=e.details.get("reason"),
                fallback_multiplier="1.0"
            )
            return NO_SEASONALITY

        adjustment = resolve_seasonality(events, today, lookahead)

        logger.info(
            "seasonality_resolved",
            today=today.isoformat(),
            events=len(events),
            multiplier=str(adjustment.multiplier),
            event_name=adjustment.event_name
        )

        return adjustment

    def get_upcoming(
        self,
        today: Optional[date] = None,
        window_days: Optional[int] = None
    ) -> list[UpcomingSeasonalEvent]:
        """
        Upcoming active events.

        Raises:
            SeasonalityUnavailableError: If the events table can't be read
        """
        today = today or date.today()
        window = window_days or settings.seasonality_upcoming_window_days
        return upcoming_events(self.get_active_events(), today, window)


# Singleton instance
_seasonality_service: Optional[SeasonalityService] = None


def get_seasonality_service() -> SeasonalityService:
    """Get or create SeasonalityService instance."""
    global _seasonality_service
    if _seasonality_service is None:
        _seasonality_service = SeasonalityService()
    return _seasonality_service
