"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ExternalServiceError,
    DatabaseError,

    # Forecast
    SeasonalityUnavailableError,
)

__all__ = [
    # Base
    "AppError",
    "ExternalServiceError",
    "DatabaseError",

    # Forecast
    "SeasonalityUnavailableError",
]
