"""Calendar adapter for the Julian/Gregorian reform calendar.

Implements CalendarPort over chronological Julian day numbers, so that
every date is interpreted under the calendar_start it carries. Week
numbering follows ISO 8601 generalized to any week-start day: week one
of a year is the week starting on wkst that contains January 4th.
"""

import logging

from caltime.core import julian
from caltime.core.models import CivilDate, TimestampValue, Weekday
from caltime.core.ports import CalendarPort

logger = logging.getLogger(__name__)


class ReformCalendarAdapter(CalendarPort):
    """CalendarPort implementation honouring the Gregorian reform cutover."""

    def shift_months(self, date: CivilDate, months: int) -> CivilDate:
        """Shift by whole months, clamping to the last valid day.

        Days that fall inside a reform gap step back to the nearest
        earlier day that exists.
        """
        year, month_index = divmod(date.year * 12 + (date.month - 1) + months, 12)
        month = month_index + 1
        day = min(date.day, self.days_in_month(year, month, date.calendar_start))
        while not julian.is_valid_civil(year, month, day, date.calendar_start):
            day -= 1
        if day != date.day:
            logger.debug(
                f"Clamped day {date.day} to {day} shifting {date} by {months} months"
            )
        return CivilDate(year, month, day, date.calendar_start)

    def shift_days(self, date: CivilDate, days: int) -> CivilDate:
        return CivilDate.from_julian_day(date.julian_day + days, date.calendar_start)

    def days_in_month(self, year: int, month: int, calendar_start: float) -> int:
        return julian.last_day_of_month(year, month, calendar_start)

    def julian_day(self, date: CivilDate) -> int:
        return date.julian_day

    def start_of_week(self, date: CivilDate, wkst: Weekday) -> CivilDate:
        return self.shift_days(date, -((date.wday - wkst.wday) % 7))

    def iso_year_start(self, date: CivilDate, wkst: Weekday) -> CivilDate:
        return self._iso_year_and_week_one_start(date, wkst)[1]

    def iso_weeks_in_year(self, date: CivilDate, wkst: Weekday) -> int:
        """53 if the day 52 weeks after week one is still in the same ISO year."""
        iso_year, week_one_start = self._iso_year_and_week_one_start(date, wkst)
        probe = self.shift_days(week_one_start, 7 * 52)
        probe_year, _ = self._iso_year_and_week_one_start(probe, wkst)
        return 53 if probe_year == iso_year else 52

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
        return TimestampValue.civil(
            year, month, day, hour, minute, second, utc_offset, calendar_start
        )

    def _iso_week_one(self, year: int, wkst: Weekday, calendar_start: float) -> CivilDate:
        """First day of week one of year: the wkst on or before January 4th."""
        return self.start_of_week(CivilDate(year, 1, 4, calendar_start), wkst)

    def _iso_year_and_week_one_start(
        self, date: CivilDate, wkst: Weekday
    ) -> tuple[int, CivilDate]:
        """Return (iso_year, week_one_start) for the ISO year containing date.

        Only dates from December 29th onwards can belong to the next ISO
        year, and only dates before week one to the previous one.
        """
        calendar_start = date.calendar_start
        iso_year = date.year
        jd = date.julian_day
        if jd >= julian.civil_to_jd(iso_year, 12, 29, calendar_start):
            week_one_start = self._iso_week_one(iso_year + 1, wkst, calendar_start)
            if week_one_start.julian_day <= jd:
                iso_year += 1
            else:
                week_one_start = self._iso_week_one(iso_year, wkst, calendar_start)
        else:
            week_one_start = self._iso_week_one(iso_year, wkst, calendar_start)
            if jd < week_one_start.julian_day:
                iso_year -= 1
                week_one_start = self._iso_week_one(iso_year, wkst, calendar_start)
        return iso_year, week_one_start
