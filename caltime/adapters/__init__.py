"""External adapters for caltime.

Adapter Organization:

- calendar/: CalendarPort implementations (reform-aware Julian day math)
- timezone/: TimezoneResolverPort implementations (zoneinfo)
- cli/: Command-line interface over the TimeMachine engine
"""
