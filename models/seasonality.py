"""
Seasonal event schemas.

Events are maintained elsewhere; this service only reads them.
"""

from pydantic import Field
from typing import Optional, Union
from decimal import Decimal
from datetime import date

from models.base import BaseSchema, CamelSchema


class SeasonalEvent(CamelSchema):
    """A recurring demand event (Prime Day, Black Friday, ...)."""

    id: Optional[Union[int, str]] = None
    name: str
    start_month: int = Field(..., ge=1, le=12)
    start_day: int = Field(..., ge=1, le=31)
    end_month: int = Field(..., ge=1, le=12)
    end_day: int = Field(..., ge=1, le=31)
    base_multiplier: Decimal = Field(default=Decimal("1.0"), ge=0)
    learned_multiplier: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Multiplier learned from past sales; preferred when set"
    )
    is_active: bool = True

    @property
    def effective_multiplier(self) -> Decimal:
        """Learned multiplier when present, base otherwise."""
        if self.learned_multiplier:
            return self.learned_multiplier
        return self.base_multiplier


class SeasonalityAdjustment(BaseSchema):
    """Forward-looking demand multiplier chosen for a run."""

    multiplier: Decimal = Field(default=Decimal("1.0"))
    note: str = ""
    event_name: Optional[str] = None
    days_until_start: Optional[int] = None


class UpcomingSeasonalEvent(CamelSchema):
    """Seasonal event with its next occurrence resolved."""

    event: SeasonalEvent
    event_date: date
    days_until: int
    effective_multiplier: Decimal


class SeasonalEventListResponse(CamelSchema):
    """Seasonal events listing."""

    success: bool = True
    data: list[SeasonalEvent]


class UpcomingSeasonalEventsResponse(CamelSchema):
    """Upcoming events within a window."""

    success: bool = True
    window_days: int
    data: list[UpcomingSeasonalEvent]


class SeasonalityMultiplierResponse(CamelSchema):
    """Multiplier the forecast would apply on a given date."""

    success: bool = True
    as_of: date
    lookahead_days: int
    multiplier: Decimal
    note: str
    event_name: Optional[str] = None
