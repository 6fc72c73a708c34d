"""Tests for CLI command handler.

Tests the CLICommandHandler, which maps JSON commands to TimeMachine
operations and formats results.
"""

import logging

import pytest

from caltime.adapters.calendar.reform import ReformCalendarAdapter
from caltime.adapters.cli.commands import CLICommandHandler, run_command
from caltime.core.models import Weekday
from caltime.core.time_machine import TimeMachine
from caltime.tests.fakes import FakeTimezoneResolver


@pytest.fixture
def handler() -> CLICommandHandler:
    """Create a CLI handler over the reform calendar."""
    return CLICommandHandler(TimeMachine(ReformCalendarAdapter()))


@pytest.fixture
def source() -> dict:
    """2024-01-31 10:15:45 as command input."""
    return {"year": 2024, "month": 1, "day": 31, "hour": 10, "minute": 15, "second": 45}


# ============================================================================
# Input and output conversion
# ============================================================================


def test_parse_timestamp_defaults(handler: CLICommandHandler) -> None:
    """Omitted time fields default to midnight UTC."""
    value = handler.parse_timestamp({"year": 2024, "month": 2, "day": 29})
    assert (value.hour, value.minute, value.second, value.utc_offset) == (0, 0, 0, 0)
    assert value.tzid is None


def test_parse_timestamp_missing_fields(handler: CLICommandHandler) -> None:
    """year, month and day are required."""
    with pytest.raises(ValueError, match=r"Missing timestamp field\(s\): day"):
        handler.parse_timestamp({"year": 2024, "month": 2})


def test_parse_timestamp_unknown_fields(handler: CLICommandHandler) -> None:
    """Unknown fields are rejected instead of ignored."""
    with pytest.raises(ValueError, match=r"Unknown timestamp field\(s\): hours"):
        handler.parse_timestamp({"year": 2024, "month": 2, "day": 1, "hours": 3})


def test_default_tzid_and_resolver_attached() -> None:
    """Configured defaults are attached to parsed timestamps."""
    resolver = FakeTimezoneResolver()
    handler = CLICommandHandler(
        TimeMachine(ReformCalendarAdapter()),
        timezone_resolver=resolver,
        default_tzid="UTC",
    )
    value = handler.parse_timestamp({"year": 2024, "month": 1, "day": 1})
    assert value.tzid == "UTC"
    assert value.timezone_resolver is resolver


def test_format_timestamp(handler: CLICommandHandler) -> None:
    """Results include the fields and an ISO 8601 rendering."""
    value = handler.parse_timestamp(
        {"year": 2024, "month": 1, "day": 31, "hour": 9, "tzid": "X", "params": {"A": "1"}}
    )
    assert handler.format_timestamp(value) == {
        "year": 2024,
        "month": 1,
        "day": 31,
        "hour": 9,
        "minute": 0,
        "second": 0,
        "utc_offset": 0,
        "iso": "2024-01-31T09:00:00+00:00",
        "tzid": "X",
        "params": {"A": "1"},
    }


# ============================================================================
# Commands
# ============================================================================


def test_advance(handler: CLICommandHandler, source: dict) -> None:
    """advance clamps into the leap February."""
    result = handler.advance(source, {"months": 1})
    assert result["status"] == "success"
    assert result["operation"] == "advance"
    assert result["result"]["iso"] == "2024-02-29T10:15:45+00:00"


def test_advance_unknown_offset(handler: CLICommandHandler, source: dict) -> None:
    """Unknown offset names produce an error result."""
    result = handler.advance(source, {"fortnights": 1})
    assert result["status"] == "error"
    assert "fortnights" in result["message"]


def test_advance_wrong_offset_type(handler: CLICommandHandler, source: dict) -> None:
    """A string offset is an error result, not an exception."""
    result = handler.advance(source, {"days": "3"})
    assert result["status"] == "error"
    assert result["operation"] == "advance"


@pytest.mark.parametrize(
    "timestamp",
    [
        {"year": "2024", "month": 1, "day": 31},
        {"year": 2024, "month": 1, "day": 31, "hour": 1.5},
    ],
)
def test_change_wrong_field_type(handler: CLICommandHandler, timestamp: dict) -> None:
    """Non-integer timestamp fields are reported as errors."""
    result = handler.change(timestamp, {"day": 1})
    assert result["status"] == "error"
    assert "must be an integer" in result["message"]


def test_in_month_wrong_type(handler: CLICommandHandler, source: dict) -> None:
    assert handler.in_month(source, "2")["status"] == "error"


def test_change_cascades(handler: CLICommandHandler, source: dict) -> None:
    """change applies the cascading reset."""
    result = handler.change(source, {"hour": 0})
    assert result["result"]["iso"] == "2024-01-31T00:00:00+00:00"


def test_change_invalid_date_reports_error(
    handler: CLICommandHandler, source: dict, caplog: pytest.LogCaptureFixture
) -> None:
    """InvalidCalendarDate becomes an error result and an ERROR log."""
    with caplog.at_level(logging.ERROR):
        result = handler.change(source, {"month": 4})
    assert result == {
        "status": "error",
        "operation": "change",
        "message": "Invalid date 2024-04-31",
    }
    assert "Failed to run change" in caplog.text


def test_boundary(handler: CLICommandHandler, source: dict) -> None:
    """Named boundaries dispatch to the engine."""
    result = handler.boundary(source, "end_of_month")
    assert result["result"]["iso"] == "2024-01-31T23:59:59+00:00"
    assert result["boundary"] == "end_of_month"


def test_boundary_unknown(handler: CLICommandHandler, source: dict) -> None:
    """Only the documented boundaries are accepted."""
    result = handler.boundary(source, "__init__")
    assert result["status"] == "error"


def test_week_uses_default_wkst(source: dict) -> None:
    """Omitted wkst falls back to the configured week start."""
    handler = CLICommandHandler(TimeMachine(ReformCalendarAdapter()), default_wkst=Weekday.SU)
    result = handler.week(source)
    assert result["wkst"] == "SU"
    assert result["result"]["iso"] == "2024-01-28T10:15:45+00:00"


def test_week_end(handler: CLICommandHandler, source: dict) -> None:
    result = handler.week(source, "end", "MO")
    assert result["result"]["iso"] == "2024-02-04T23:59:59+00:00"


def test_week_bad_wkst(handler: CLICommandHandler, source: dict) -> None:
    """An unknown weekday code is an error result."""
    result = handler.week(source, "start", "XX")
    assert result["status"] == "error"


def test_iso_year(handler: CLICommandHandler, source: dict) -> None:
    """ISO year positions include the week number of the input."""
    result = handler.iso_year(source, "next")
    assert result["result"]["iso"] == "2024-12-30T10:15:45+00:00"
    assert result["week_number"] == 5
    assert handler.iso_year(source, "last_second")["result"]["iso"] == "2024-12-29T23:59:59+00:00"


def test_iso_year_bad_position(handler: CLICommandHandler, source: dict) -> None:
    assert handler.iso_year(source, "middle")["status"] == "error"


def test_in_week_starting(handler: CLICommandHandler, source: dict) -> None:
    """Membership is reported as a boolean result."""
    assert handler.in_week_starting(source, {"year": 2024, "month": 1, "day": 29})["result"] is True
    assert handler.in_week_starting(source, {"year": 2024, "month": 2, "day": 1})["result"] is False


def test_in_week_starting_incomplete_date(handler: CLICommandHandler, source: dict) -> None:
    assert handler.in_week_starting(source, {"year": 2024})["status"] == "error"


def test_in_month(handler: CLICommandHandler, source: dict) -> None:
    result = handler.in_month(source, 2)
    assert result["result"]["iso"] == "2024-02-29T10:15:45+00:00"


# ============================================================================
# run_command dispatch
# ============================================================================


def test_run_command_dispatch(handler: CLICommandHandler, source: dict) -> None:
    """Command names map onto handler methods."""
    result = run_command(handler, "advance", {"timestamp": source, "offsets": {"days": 1}})
    assert result["result"]["iso"] == "2024-02-01T10:15:45+00:00"
    result = run_command(handler, "in_month", {"timestamp": source, "month": 4})
    assert result["result"]["iso"] == "2024-04-30T10:15:45+00:00"


def test_run_command_unknown(handler: CLICommandHandler, source: dict) -> None:
    with pytest.raises(ValueError, match="Unknown command: travel"):
        run_command(handler, "travel", {"timestamp": source})


def test_run_command_missing_parameters(handler: CLICommandHandler, source: dict) -> None:
    with pytest.raises(ValueError, match="Missing required parameter: timestamp"):
        run_command(handler, "advance", {})
    with pytest.raises(ValueError, match="Missing required parameter: boundary"):
        run_command(handler, "boundary", {"timestamp": source})
