"""Command-line interface adapters.

Provides JSON commands over the calendar engine:
- advance: Move a timestamp by relative offsets
- change: Override fields of a timestamp
- boundary: Start or end of the containing minute/hour/day/month/year
- week / iso_year: Week and ISO year positions
- in_month: Project a timestamp onto another month
"""
