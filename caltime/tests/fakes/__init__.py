"""Fake implementations of core ports for testing.

These in-memory implementations allow the engine to be tested
without the concrete adapters:

- FakeCalendarPort: Standard-library Gregorian calendar with call logs
- FakeTimezoneResolver: Fixed TZID table with recorded lookups
"""

from .calendar_utility import FakeCalendarPort
from .timezone import FakeTimezoneResolver

__all__ = [
    "FakeCalendarPort",
    "FakeTimezoneResolver",
]
