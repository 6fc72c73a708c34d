"""TZID resolution backed by the IANA database via zoneinfo."""

import logging
from collections.abc import Mapping
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from caltime.core.ports import TimezoneResolverPort

logger = logging.getLogger(__name__)


class ZoneInfoResolver(TimezoneResolverPort):
    """Resolves TZIDs to zoneinfo timezones.

    iCalendar producers often emit TZIDs that are not IANA names
    (e.g. "Eastern Standard Time"); aliases maps those onto IANA keys.
    Lookups are cached per TZID, including misses.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None):
        """Initialize the resolver.

        Args:
            aliases: Optional mapping of TZID to IANA timezone key.
        """
        self.aliases = dict(aliases or {})
        self._cache: dict[str, tzinfo | None] = {}

    def find_timezone(self, tzid: str) -> tzinfo | None:
        if tzid in self._cache:
            return self._cache[tzid]

        key = self.aliases.get(tzid, tzid)
        try:
            zone: tzinfo | None = ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.debug(f"Unknown TZID {tzid!r} (key {key!r}): {e}")
            zone = None

        self._cache[tzid] = zone
        return zone
