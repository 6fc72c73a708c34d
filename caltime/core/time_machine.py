"""Calendar arithmetic over DATE-TIME values.

This module implements the rules for deriving one TimestampValue from
another: relative advances, sparse field overrides, period boundaries
and ISO week/year positions.
"""

import math
from dataclasses import replace

from .models import (
    SECONDS_PER_DAY,
    AdvanceRequest,
    CivilDate,
    FieldOverrides,
    TimestampValue,
    Weekday,
)
from .ports import CalendarPort


def _round_half_away(value: int | float) -> int:
    """Round to the nearest whole number, halves away from zero."""
    if isinstance(value, int):
        return value
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class TimeMachine:
    """Derives new timestamps from a source timestamp.

    Pure logic, no side effects. Every derived value carries the
    source's TZID, timezone resolver and a copy of its parameters.
    Impossible field combinations raise InvalidCalendarDate; only
    advance() and in_month() clamp the day of month.
    """

    def __init__(self, calendar: CalendarPort):
        self.calendar = calendar

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _carry(self, source: TimestampValue, value: TimestampValue) -> TimestampValue:
        """Attach the source's TZID, resolver and parameters to value."""
        return replace(
            value,
            tzid=source.tzid,
            params=source.params,
            timezone_resolver=source.timezone_resolver,
        )

    def _compute_change(
        self, ts: TimestampValue, overrides: FieldOverrides
    ) -> TimestampValue:
        resolved = overrides.with_cascading_reset()
        return self.calendar.civil(
            resolved.year if resolved.year is not None else ts.year,
            resolved.month if resolved.month is not None else ts.month,
            resolved.day if resolved.day is not None else ts.day,
            resolved.hour if resolved.hour is not None else ts.hour,
            resolved.minute if resolved.minute is not None else ts.minute,
            resolved.second if resolved.second is not None else ts.second,
            resolved.utc_offset if resolved.utc_offset is not None else ts.utc_offset,
            resolved.calendar_start
            if resolved.calendar_start is not None
            else ts.calendar_start,
        )

    def _compute_advance(
        self, ts: TimestampValue, request: AdvanceRequest
    ) -> TimestampValue:
        date = ts.date
        if request.month_delta != 0:
            date = self.calendar.shift_months(date, request.month_delta)
        if request.day_delta != 0:
            date = self.calendar.shift_days(date, request.day_delta)

        # Same time of day on the shifted date; year/month/day only, so
        # no cascading reset applies.
        advanced_by_date = self._compute_change(
            ts, FieldOverrides(year=date.year, month=date.month, day=date.day)
        )

        seconds = _round_half_away(request.second_delta)
        if seconds == 0:
            return advanced_by_date
        return self._add_seconds(advanced_by_date, seconds)

    def _add_seconds(self, ts: TimestampValue, seconds: int) -> TimestampValue:
        """Move ts along the timeline by a whole number of seconds."""
        second_of_day = ts.hour * 3600 + ts.minute * 60 + ts.second + seconds
        days, second_of_day = divmod(second_of_day, SECONDS_PER_DAY)
        date = ts.date
        if days != 0:
            date = self.calendar.shift_days(date, days)
        hour, remainder = divmod(second_of_day, 3600)
        minute, second = divmod(remainder, 60)
        return self.calendar.civil(
            date.year,
            date.month,
            date.day,
            hour,
            minute,
            second,
            ts.utc_offset,
            ts.calendar_start,
        )

    def _replace_field(self, ts: TimestampValue, **field: int) -> TimestampValue:
        values = {
            "year": ts.year,
            "month": ts.month,
            "day": ts.day,
            "hour": ts.hour,
            "minute": ts.minute,
            "second": ts.second,
        }
        values.update(field)
        return self._carry(
            ts,
            self.calendar.civil(
                values["year"],
                values["month"],
                values["day"],
                values["hour"],
                values["minute"],
                values["second"],
                ts.utc_offset,
                ts.calendar_start,
            ),
        )

    # ------------------------------------------------------------------
    # Overrides and advances
    # ------------------------------------------------------------------

    def change(self, ts: TimestampValue, overrides: FieldOverrides) -> TimestampValue:
        """Return ts with some fields overridden.

        Overriding hour without minute resets the minute to 0, and
        overriding hour or minute without second resets the second to 0:
        change(10:15:45, hour=5) is 05:00:00, not 05:15:45.

        Raises:
            InvalidCalendarDate: If the result is not a real date/time
                (e.g. day=31 in April).
        """
        if overrides.is_empty():
            return self._carry(ts, ts)
        return self._carry(ts, self._compute_change(ts, overrides))

    def advance(self, ts: TimestampValue, request: AdvanceRequest) -> TimestampValue:
        """Return ts moved by the signed offsets in request.

        Months (including years) are applied first, clamping the day to
        the end of a shorter month, then weeks and days, then the time
        of day is restored and hours/minutes/seconds are added as a
        continuous offset.
        """
        return self._carry(ts, self._compute_advance(ts, request))

    def change_second(self, ts: TimestampValue, second: int) -> TimestampValue:
        return self._replace_field(ts, second=second)

    def change_minute(self, ts: TimestampValue, minute: int) -> TimestampValue:
        return self._replace_field(ts, minute=minute)

    def change_hour(self, ts: TimestampValue, hour: int) -> TimestampValue:
        return self._replace_field(ts, hour=hour)

    def change_day(self, ts: TimestampValue, day: int) -> TimestampValue:
        return self._replace_field(ts, day=day)

    def change_month(self, ts: TimestampValue, month: int) -> TimestampValue:
        return self._replace_field(ts, month=month)

    def change_year(self, ts: TimestampValue, year: int) -> TimestampValue:
        return self._replace_field(ts, year=year)

    # ------------------------------------------------------------------
    # Period boundaries
    # ------------------------------------------------------------------

    def start_of_minute(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(second=0))

    def end_of_minute(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(second=59))

    def start_of_hour(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(minute=0, second=0))

    def end_of_hour(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(minute=59, second=59))

    def start_of_day(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(hour=0, minute=0, second=0))

    def end_of_day(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(hour=23, minute=59, second=59))

    def start_of_month(self, ts: TimestampValue) -> TimestampValue:
        return self.change(ts, FieldOverrides(day=1, hour=0, minute=0, second=0))

    def end_of_month(self, ts: TimestampValue) -> TimestampValue:
        last_day = self.calendar.days_in_month(ts.year, ts.month, ts.calendar_start)
        return self.change(
            ts, FieldOverrides(day=last_day, hour=23, minute=59, second=59)
        )

    def start_of_year(self, ts: TimestampValue) -> TimestampValue:
        return self.change(
            ts, FieldOverrides(month=1, day=1, hour=0, minute=0, second=0)
        )

    def end_of_year(self, ts: TimestampValue) -> TimestampValue:
        return self.change(
            ts, FieldOverrides(month=12, day=31, hour=23, minute=59, second=59)
        )

    # ------------------------------------------------------------------
    # Weeks and ISO years
    # ------------------------------------------------------------------

    def week_start_date(self, ts: TimestampValue, wkst: Weekday | str) -> CivilDate:
        """First day of the week starting on wkst that contains ts."""
        return self.calendar.start_of_week(ts.date, Weekday.parse(wkst))

    def start_of_week(self, ts: TimestampValue, wkst: Weekday | str) -> TimestampValue:
        """Same time of day, on the first day of ts's wkst week."""
        date = self.week_start_date(ts, wkst)
        return self.change(
            ts, FieldOverrides(year=date.year, month=date.month, day=date.day)
        )

    def end_of_week(self, ts: TimestampValue, wkst: Weekday | str) -> TimestampValue:
        """Last second of the last day of ts's wkst week."""
        last_day = self.advance(self.start_of_week(ts, wkst), AdvanceRequest(days=6))
        return self.end_of_day(last_day)

    def in_week_starting(self, ts: TimestampValue, date: CivilDate) -> bool:
        """Is ts within the seven days beginning on date?"""
        week_start_jd = self.calendar.julian_day(date)
        return week_start_jd <= self.calendar.julian_day(ts.date) <= week_start_jd + 6

    def at_start_of_iso_year(
        self, ts: TimestampValue, wkst: Weekday | str
    ) -> TimestampValue:
        """Same time of day, on the first day of ts's ISO year."""
        start = self.calendar.iso_year_start(ts.date, Weekday.parse(wkst))
        return self.change(
            ts, FieldOverrides(year=start.year, month=start.month, day=start.day)
        )

    def at_end_of_iso_year(
        self, ts: TimestampValue, wkst: Weekday | str
    ) -> TimestampValue:
        """Same time of day, on the last day of ts's ISO year."""
        num_weeks = self.calendar.iso_weeks_in_year(ts.date, Weekday.parse(wkst))
        return self.advance(
            self.at_start_of_iso_year(ts, wkst),
            AdvanceRequest(weeks=num_weeks - 1, days=6),
        )

    def at_start_of_next_iso_year(
        self, ts: TimestampValue, wkst: Weekday | str
    ) -> TimestampValue:
        """Same time of day, on the first day of the following ISO year."""
        num_weeks = self.calendar.iso_weeks_in_year(ts.date, Weekday.parse(wkst))
        return self.advance(
            self.at_start_of_iso_year(ts, wkst), AdvanceRequest(weeks=num_weeks)
        )

    def end_of_iso_year(self, ts: TimestampValue, wkst: Weekday | str) -> TimestampValue:
        """Last second of the last day of ts's ISO year."""
        return self.end_of_day(self.at_end_of_iso_year(ts, wkst))

    def iso_week_number(self, ts: TimestampValue, wkst: Weekday | str) -> int:
        """1-based number of ts's week within its ISO year."""
        start = self.calendar.iso_year_start(ts.date, Weekday.parse(wkst))
        elapsed = self.calendar.julian_day(ts.date) - self.calendar.julian_day(start)
        return elapsed // 7 + 1

    # ------------------------------------------------------------------
    # Month projection
    # ------------------------------------------------------------------

    def in_month(self, ts: TimestampValue, month: int) -> TimestampValue:
        """Same day of month and time in another month of the same year.

        The day is clamped to the target month's last day, so Jan 31
        projects onto Feb 28 (or Feb 29 in a leap year).
        """
        first = self.change(ts, FieldOverrides(month=month, day=1))
        last_day = self.calendar.days_in_month(
            first.year, first.month, first.calendar_start
        )
        return self.change(first, FieldOverrides(day=min(last_day, ts.day)))
