"""Julian day conversions for civil dates under a calendar reform cutover.

A calendar start is the Julian day number on which the Gregorian calendar
took effect. Dates falling before it are reckoned in the Julian calendar.
Pure functions over integers, no external dependencies.
"""

import math
from typing import Final

# Julian day of 1582-10-15, first Gregorian day in Catholic Europe
ITALY: Final[float] = 2299161
# Julian day of 1752-09-14, first Gregorian day in Britain and its colonies
ENGLAND: Final[float] = 2361222
# Proleptic calendars: every day is Gregorian / every day is Julian
GREGORIAN: Final[float] = -math.inf
JULIAN: Final[float] = math.inf

CALENDAR_STARTS: Final[dict[str, float]] = {
    "italy": ITALY,
    "england": ENGLAND,
    "gregorian": GREGORIAN,
    "julian": JULIAN,
}


def civil_to_jd(year: int, month: int, day: int, calendar_start: float = ITALY) -> int:
    """Convert a civil date to its chronological Julian day number.

    The Gregorian correction is dropped when the resulting day falls
    before calendar_start. No validation: out-of-range days roll over,
    use is_valid_civil() to reject them.
    """
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100.0)
    b = 2 - a + math.floor(a / 4.0)
    jd = (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + b
        - 1524
    )
    if jd < calendar_start:
        jd -= b
    return jd


def jd_to_civil(jd: int, calendar_start: float = ITALY) -> tuple[int, int, int]:
    """Convert a Julian day number back to (year, month, day)."""
    if jd < calendar_start:
        a = jd
    else:
        x = math.floor((jd - 1867216.25) / 36524.25)
        a = jd + 1 + x - math.floor(x / 4.0)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)
    day = b - d - math.floor(30.6001 * e)
    if e <= 13:
        month = e - 1
        year = c - 4716
    else:
        month = e - 13
        year = c - 4715
    return year, month, day


def is_valid_civil(year: int, month: int, day: int, calendar_start: float = ITALY) -> bool:
    """True if the date exists, including outside a reform gap."""
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return False
    jd = civil_to_jd(year, month, day, calendar_start)
    return jd_to_civil(jd, calendar_start) == (year, month, day)


def last_day_of_month(year: int, month: int, calendar_start: float = ITALY) -> int:
    """Highest valid day-of-month number for year/month."""
    for day in (31, 30, 29, 28):
        if is_valid_civil(year, month, day, calendar_start):
            return day
    raise ValueError(f"Month {year}-{month:02d} has no valid last day")


def wday(jd: int) -> int:
    """Day of week for a Julian day, 0 = Sunday through 6 = Saturday."""
    return (jd + 1) % 7
