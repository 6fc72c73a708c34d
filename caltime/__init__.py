"""caltime: calendar arithmetic for RFC 5545 DATE-TIME values."""

__version__ = "0.1.0"
