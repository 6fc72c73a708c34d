"""Port interfaces for the caltime calendar engine.

These abstract base classes define the boundaries between the core
arithmetic engine and the collaborators it relies on. Implementations
live in the adapters/ package.

Driven Ports (core calls out to adapters):
   - CalendarPort: civil-date construction and calendar math
   - TimezoneResolverPort: TZID lookup, carried opaquely by values
"""

from abc import ABC, abstractmethod
from datetime import tzinfo

from .models import CivilDate, TimestampValue, Weekday


class CalendarPort(ABC):
    """Port for low-level civil calendar calculations.

    Implementations must honour the calendar_start carried by each
    CivilDate: dates before the reform are Julian-calendar dates.
    """

    @abstractmethod
    def shift_months(self, date: CivilDate, months: int) -> CivilDate:
        """Shift a date by a signed number of months.

        When the target month is shorter than date.day, the result is
        clamped to the last valid day of the target month
        (Jan 31 + 1 month -> Feb 28 or Feb 29).
        """

    @abstractmethod
    def shift_days(self, date: CivilDate, days: int) -> CivilDate:
        """Shift a date by a signed number of days."""

    @abstractmethod
    def days_in_month(self, year: int, month: int, calendar_start: float) -> int:
        """Return the number of the last day in year/month."""

    @abstractmethod
    def julian_day(self, date: CivilDate) -> int:
        """Return the chronological Julian day number of date."""

    @abstractmethod
    def start_of_week(self, date: CivilDate, wkst: Weekday) -> CivilDate:
        """Return the wkst day on or before date."""

    @abstractmethod
    def iso_year_start(self, date: CivilDate, wkst: Weekday) -> CivilDate:
        """Return the first day of week one of the ISO year containing date.

        Week one is the week starting on wkst that contains January 4th.
        """

    @abstractmethod
    def iso_weeks_in_year(self, date: CivilDate, wkst: Weekday) -> int:
        """Return 52 or 53, the week count of the ISO year containing date."""

    @abstractmethod
    def civil(
        self,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int,
        utc_offset: int,
        calendar_start: float,
    ) -> TimestampValue:
        """Construct a timestamp from its eight primitive fields.

        Raises:
            InvalidCalendarDate: If the fields do not denote a real
                date and time under calendar_start.
        """


class TimezoneResolverPort(ABC):
    """Port for resolving a TZID to timezone rules.

    The arithmetic engine never inspects the resolver; it is passed
    through unchanged to every derived TimestampValue.
    """

    @abstractmethod
    def find_timezone(self, tzid: str) -> tzinfo | None:
        """Return the tzinfo for tzid, or None if it is not known."""
