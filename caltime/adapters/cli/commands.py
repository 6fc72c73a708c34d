"""CLI command implementations over the calendar engine.

This adapter maps JSON commands (advance, change, boundary, week,
iso_year, in_month) to TimeMachine operations. Timestamps travel as
JSON objects of fields, not as iCalendar text. It handles CLI-specific
formatting and error reporting.
"""

import logging
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

from caltime.core.models import (
    ITALY,
    AdvanceRequest,
    CivilDate,
    FieldOverrides,
    TimestampValue,
    Weekday,
)
from caltime.core.ports import TimezoneResolverPort
from caltime.core.time_machine import TimeMachine

logger = logging.getLogger(__name__)

BOUNDARIES = (
    "start_of_minute",
    "end_of_minute",
    "start_of_hour",
    "end_of_hour",
    "start_of_day",
    "end_of_day",
    "start_of_month",
    "end_of_month",
    "start_of_year",
    "end_of_year",
)

TIMESTAMP_FIELDS = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "utc_offset",
    "tzid",
    "params",
)


def _check_keys(kind: str, given: Mapping[str, Any], allowed: tuple[str, ...]) -> None:
    unknown = sorted(set(given) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(unknown)}")


class CLICommandHandler:
    """Handles CLI commands by delegating to TimeMachine.

    Every command returns a dictionary with a "status" of "success" or
    "error"; invalid dates and malformed arguments are reported, not
    raised.
    """

    def __init__(
        self,
        time_machine: TimeMachine,
        default_wkst: Weekday = Weekday.MO,
        calendar_start: float = ITALY,
        timezone_resolver: TimezoneResolverPort | None = None,
        default_tzid: str | None = None,
    ):
        """Initialize the CLI command handler.

        Args:
            time_machine: Engine used to compute results.
            default_wkst: Week start used when a command omits "wkst".
            calendar_start: Reform cutover applied to input timestamps.
            timezone_resolver: Resolver attached to input timestamps.
            default_tzid: TZID for input timestamps that do not name one.
        """
        self.time_machine = time_machine
        self.default_wkst = default_wkst
        self.calendar_start = calendar_start
        self.timezone_resolver = timezone_resolver
        self.default_tzid = default_tzid

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def parse_timestamp(self, data: Mapping[str, Any]) -> TimestampValue:
        """Build a TimestampValue from a JSON object of fields.

        Raises:
            ValueError: On unknown or missing fields.
            InvalidCalendarDate: If the fields are not a real date/time.
        """
        _check_keys("timestamp", data, TIMESTAMP_FIELDS)
        missing = [name for name in ("year", "month", "day") if name not in data]
        if missing:
            raise ValueError(f"Missing timestamp field(s): {', '.join(missing)}")
        return TimestampValue(
            year=data["year"],
            month=data["month"],
            day=data["day"],
            hour=data.get("hour", 0),
            minute=data.get("minute", 0),
            second=data.get("second", 0),
            utc_offset=data.get("utc_offset", 0),
            calendar_start=self.calendar_start,
            tzid=data.get("tzid", self.default_tzid),
            params=data.get("params"),
            timezone_resolver=self.timezone_resolver,
        )

    @staticmethod
    def format_timestamp(ts: TimestampValue) -> dict[str, Any]:
        result: dict[str, Any] = {
            "year": ts.year,
            "month": ts.month,
            "day": ts.day,
            "hour": ts.hour,
            "minute": ts.minute,
            "second": ts.second,
            "utc_offset": ts.utc_offset,
            "iso": str(ts),
        }
        if ts.tzid is not None:
            result["tzid"] = ts.tzid
        if ts.params is not None:
            result["params"] = dict(ts.params)
        return result

    def _wkst(self, wkst: str | None) -> Weekday:
        return Weekday.parse(wkst) if wkst else self.default_wkst

    @staticmethod
    def _error(operation: str, e: Exception) -> dict[str, Any]:
        logger.error(f"Failed to run {operation}: {e}")
        return {"status": "error", "operation": operation, "message": str(e)}

    @staticmethod
    def _success(operation: str, ts: TimestampValue, **extra: Any) -> dict[str, Any]:
        result = {
            "status": "success",
            "operation": operation,
            "result": CLICommandHandler.format_timestamp(ts),
        }
        result.update(extra)
        return result

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def advance(
        self, timestamp: Mapping[str, Any], offsets: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Advance a timestamp by relative offsets.

        Args:
            timestamp: Source timestamp fields.
            offsets: Any of years, months, weeks, days, hours, minutes, seconds.

        Returns:
            Dictionary with status and the resulting timestamp.
        """
        try:
            _check_keys(
                "offset", offsets, tuple(f.name for f in fields(AdvanceRequest))
            )
            ts = self.parse_timestamp(timestamp)
            result = self.time_machine.advance(ts, AdvanceRequest(**offsets))
            logger.debug(f"Advanced {ts} by {dict(offsets)} to {result}")
            return self._success("advance", result)
        except (TypeError, ValueError) as e:
            return self._error("advance", e)

    def change(
        self, timestamp: Mapping[str, Any], overrides: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Override fields of a timestamp, with cascading time resets."""
        try:
            _check_keys(
                "override",
                overrides,
                tuple(f.name for f in fields(FieldOverrides) if f.name != "calendar_start"),
            )
            ts = self.parse_timestamp(timestamp)
            result = self.time_machine.change(ts, FieldOverrides(**overrides))
            return self._success("change", result)
        except (TypeError, ValueError) as e:
            return self._error("change", e)

    def boundary(self, timestamp: Mapping[str, Any], boundary: str) -> dict[str, Any]:
        """Start or end of the minute/hour/day/month/year containing a timestamp."""
        try:
            if boundary not in BOUNDARIES:
                raise ValueError(
                    f"Unknown boundary {boundary!r}, expected one of {', '.join(BOUNDARIES)}"
                )
            ts = self.parse_timestamp(timestamp)
            result = getattr(self.time_machine, boundary)(ts)
            return self._success("boundary", result, boundary=boundary)
        except (TypeError, ValueError) as e:
            return self._error("boundary", e)

    def week(
        self,
        timestamp: Mapping[str, Any],
        position: str = "start",
        wkst: str | None = None,
    ) -> dict[str, Any]:
        """Start or end of the week containing a timestamp."""
        try:
            week_start = self._wkst(wkst)
            ts = self.parse_timestamp(timestamp)
            if position == "start":
                result = self.time_machine.start_of_week(ts, week_start)
            elif position == "end":
                result = self.time_machine.end_of_week(ts, week_start)
            else:
                raise ValueError(f"Unknown week position {position!r}, expected start or end")
            return self._success("week", result, wkst=week_start.name)
        except (TypeError, ValueError) as e:
            return self._error("week", e)

    def iso_year(
        self,
        timestamp: Mapping[str, Any],
        position: str = "start",
        wkst: str | None = None,
    ) -> dict[str, Any]:
        """Position within the ISO year containing a timestamp.

        position is one of "start", "end", "next" (start of the next ISO
        year) or "last_second" (end of the ISO year's last day).
        """
        try:
            week_start = self._wkst(wkst)
            ts = self.parse_timestamp(timestamp)
            operations = {
                "start": self.time_machine.at_start_of_iso_year,
                "end": self.time_machine.at_end_of_iso_year,
                "next": self.time_machine.at_start_of_next_iso_year,
                "last_second": self.time_machine.end_of_iso_year,
            }
            if position not in operations:
                raise ValueError(
                    f"Unknown ISO year position {position!r}, expected one of "
                    f"{', '.join(operations)}"
                )
            result = operations[position](ts, week_start)
            return self._success(
                "iso_year",
                result,
                wkst=week_start.name,
                week_number=self.time_machine.iso_week_number(ts, week_start),
            )
        except (TypeError, ValueError) as e:
            return self._error("iso_year", e)

    def in_week_starting(
        self, timestamp: Mapping[str, Any], date: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Is a timestamp within the seven days starting on date?"""
        try:
            _check_keys("date", date, ("year", "month", "day"))
            ts = self.parse_timestamp(timestamp)
            week_start = CivilDate(
                date["year"], date["month"], date["day"], self.calendar_start
            )
            return {
                "status": "success",
                "operation": "in_week_starting",
                "result": self.time_machine.in_week_starting(ts, week_start),
            }
        except (KeyError, TypeError, ValueError) as e:
            return self._error("in_week_starting", e)

    def in_month(self, timestamp: Mapping[str, Any], month: int) -> dict[str, Any]:
        """Same day and time in another month, clamped to that month's length."""
        try:
            ts = self.parse_timestamp(timestamp)
            result = self.time_machine.in_month(ts, month)
            return self._success("in_month", result)
        except (TypeError, ValueError) as e:
            return self._error("in_month", e)


def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler to execute against.
        command: Command name.
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required
            parameter is missing.
    """
    if "timestamp" not in args:
        raise ValueError("Missing required parameter: timestamp")
    timestamp = args["timestamp"]

    if command == "advance":
        return handler.advance(timestamp, args.get("offsets", {}))

    elif command == "change":
        return handler.change(timestamp, args.get("overrides", {}))

    elif command == "boundary":
        if "boundary" not in args:
            raise ValueError("Missing required parameter: boundary")
        return handler.boundary(timestamp, args["boundary"])

    elif command == "week":
        return handler.week(timestamp, args.get("position", "start"), args.get("wkst"))

    elif command == "iso_year":
        return handler.iso_year(timestamp, args.get("position", "start"), args.get("wkst"))

    elif command == "in_week_starting":
        if "date" not in args:
            raise ValueError("Missing required parameter: date")
        return handler.in_week_starting(timestamp, args["date"])

    elif command == "in_month":
        if "month" not in args:
            raise ValueError("Missing required parameter: month")
        return handler.in_month(timestamp, args["month"])

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
