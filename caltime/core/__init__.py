"""Core domain logic for caltime.

This package contains zero external dependencies and represents
the pure calendar arithmetic. Concrete calendar and timezone
collaborators are provided by the adapters package.
"""

from .models import (
    ENGLAND,
    GREGORIAN,
    ITALY,
    JULIAN,
    AdvanceRequest,
    CivilDate,
    FieldOverrides,
    InvalidCalendarDate,
    TimestampValue,
    Weekday,
)
from .time_machine import TimeMachine

__all__ = [
    "ENGLAND",
    "GREGORIAN",
    "ITALY",
    "JULIAN",
    "AdvanceRequest",
    "CivilDate",
    "FieldOverrides",
    "InvalidCalendarDate",
    "TimeMachine",
    "TimestampValue",
    "Weekday",
]
