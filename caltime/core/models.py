"""Domain models for the caltime calendar arithmetic engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from . import julian
from .julian import ENGLAND, GREGORIAN, ITALY, JULIAN

if TYPE_CHECKING:
    from .ports import TimezoneResolverPort

SECONDS_PER_DAY = 86400


class InvalidCalendarDate(ValueError):
    """Raised when fields do not denote a real calendar date/time."""

    def __init__(self, message: str, **fields: Any):
        super().__init__(message)
        self.fields = fields


def _require_integers(**values: Any) -> None:
    """Reject calendar fields that are not plain integers (bool included)."""
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidCalendarDate(
                f"{name} must be an integer, got {value!r}", **{name: value}
            )


class Weekday(Enum):
    """RFC 5545 weekday codes.

    The value is the day-of-week number used by the calendar math,
    with Sunday = 0.
    """

    SU = 0
    MO = 1
    TU = 2
    WE = 3
    TH = 4
    FR = 5
    SA = 6

    @property
    def wday(self) -> int:
        return self.value

    @classmethod
    def parse(cls, code: "str | Weekday") -> "Weekday":
        """Look up a weekday by its two-letter code, case-insensitive."""
        if isinstance(code, Weekday):
            return code
        try:
            return cls[code.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown weekday code {code!r}, expected one of "
                f"{', '.join(day.name for day in cls)}"
            ) from None


@dataclass(frozen=True)
class CivilDate:
    """A calendar date interpreted under a reform cutover."""

    year: int
    month: int
    day: int
    calendar_start: float = ITALY

    def __post_init__(self) -> None:
        """Reject dates that do not exist under calendar_start."""
        _require_integers(year=self.year, month=self.month, day=self.day)
        if not julian.is_valid_civil(self.year, self.month, self.day, self.calendar_start):
            raise InvalidCalendarDate(
                f"Invalid date {self.year:04d}-{self.month:02d}-{self.day:02d}",
                year=self.year,
                month=self.month,
                day=self.day,
            )

    @classmethod
    def from_julian_day(cls, jd: int, calendar_start: float = ITALY) -> "CivilDate":
        year, month, day = julian.jd_to_civil(jd, calendar_start)
        return cls(year, month, day, calendar_start)

    @property
    def julian_day(self) -> int:
        return julian.civil_to_jd(self.year, self.month, self.day, self.calendar_start)

    @property
    def wday(self) -> int:
        """Day of week, 0 = Sunday."""
        return julian.wday(self.julian_day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class TimestampValue:
    """An RFC 5545 DATE-TIME value.

    A civil date and time of day with its UTC offset, the calendar
    reform cutover used to interpret the date, and the optional TZID
    and parameter bag of the property it came from.

    Instances are immutable. The parameter bag is snapshotted into a
    read-only proxy on construction, so derived values never share it
    with their source.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    utc_offset: int = 0  # seconds east of UTC
    calendar_start: float = ITALY
    tzid: str | None = None
    params: Mapping[str, str] | None = field(default=None, hash=False)
    timezone_resolver: "TimezoneResolverPort | None" = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        """Validate field ranges and snapshot the parameter bag."""
        _require_integers(
            year=self.year,
            month=self.month,
            day=self.day,
            hour=self.hour,
            minute=self.minute,
            second=self.second,
            utc_offset=self.utc_offset,
        )
        if not 0 <= self.hour <= 23:
            raise InvalidCalendarDate(f"hour must be 0..23, got {self.hour}", hour=self.hour)
        if not 0 <= self.minute <= 59:
            raise InvalidCalendarDate(
                f"minute must be 0..59, got {self.minute}", minute=self.minute
            )
        if not 0 <= self.second <= 59:
            raise InvalidCalendarDate(
                f"second must be 0..59, got {self.second}", second=self.second
            )
        if abs(self.utc_offset) >= SECONDS_PER_DAY:
            raise InvalidCalendarDate(
                f"utc_offset must be within one day, got {self.utc_offset}",
                utc_offset=self.utc_offset,
            )
        if not julian.is_valid_civil(self.year, self.month, self.day, self.calendar_start):
            raise InvalidCalendarDate(
                f"Invalid date {self.year:04d}-{self.month:02d}-{self.day:02d}",
                year=self.year,
                month=self.month,
                day=self.day,
            )
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def civil(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int,
        utc_offset: int,
        calendar_start: float,
        params: Mapping[str, str] | None = None,
        tzid: str | None = None,
        timezone_resolver: "TimezoneResolverPort | None" = None,
    ) -> "TimestampValue":
        """Build a value from all eight primitive fields."""
        return cls(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            utc_offset=utc_offset,
            calendar_start=calendar_start,
            tzid=tzid,
            params=params,
            timezone_resolver=timezone_resolver,
        )

    @property
    def date(self) -> CivilDate:
        return CivilDate(self.year, self.month, self.day, self.calendar_start)

    @property
    def julian_day(self) -> int:
        return julian.civil_to_jd(self.year, self.month, self.day, self.calendar_start)

    @property
    def wday(self) -> int:
        return julian.wday(self.julian_day)

    @property
    def days_in_month(self) -> int:
        return julian.last_day_of_month(self.year, self.month, self.calendar_start)

    @property
    def timezone(self) -> tzinfo | None:
        """The tzinfo for tzid, if a resolver is attached and knows it."""
        if self.timezone_resolver is None or self.tzid is None:
            return None
        return self.timezone_resolver.find_timezone(self.tzid)

    def to_datetime(self) -> datetime:
        """Convert to an aware datetime with a fixed-offset tzinfo.

        Only meaningful for Gregorian dates; Julian-calendar dates raise
        ValueError from datetime when they do not exist in the proleptic
        Gregorian calendar.
        """
        return datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            tzinfo=timezone(timedelta(seconds=self.utc_offset)),
        )

    def __str__(self) -> str:
        sign = "-" if self.utc_offset < 0 else "+"
        hours, rem = divmod(abs(self.utc_offset), 3600)
        return (
            f"{self.date}T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
            f"{sign}{hours:02d}:{rem // 60:02d}"
        )


@dataclass(frozen=True)
class FieldOverrides:
    """Sparse field overrides for TimeMachine.change.

    None means the field is not overridden and keeps the source value.
    """

    year: int | None = None
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    utc_offset: int | None = None
    calendar_start: float | None = None

    def with_cascading_reset(self) -> "FieldOverrides":
        """Resolve implied resets of finer time fields.

        Overriding hour without minute zeroes the minute; overriding
        hour or minute without second zeroes the second.
        """
        minute = self.minute
        second = self.second
        if self.hour is not None and minute is None:
            minute = 0
        if (self.hour is not None or self.minute is not None) and second is None:
            second = 0
        return FieldOverrides(
            year=self.year,
            month=self.month,
            day=self.day,
            hour=self.hour,
            minute=minute,
            second=second,
            utc_offset=self.utc_offset,
            calendar_start=self.calendar_start,
        )

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class AdvanceRequest:
    """Signed relative offsets for TimeMachine.advance."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int | float = 0
    minutes: int | float = 0
    seconds: int | float = 0

    @property
    def month_delta(self) -> int:
        return self.years * 12 + self.months

    @property
    def day_delta(self) -> int:
        return self.weeks * 7 + self.days

    @property
    def second_delta(self) -> int | float:
        return self.seconds + self.minutes * 60 + self.hours * 3600


__all__ = [
    "AdvanceRequest",
    "CivilDate",
    "ENGLAND",
    "FieldOverrides",
    "GREGORIAN",
    "ITALY",
    "InvalidCalendarDate",
    "JULIAN",
    "SECONDS_PER_DAY",
    "TimestampValue",
    "Weekday",
]
