"""
Utilities for date parsing.

Reference months travel through JSON (cache entries, API responses) as ISO
strings and come back as ``date`` objects at day precision.
"""

from datetime import date


def parse_iso_date(value: str | None) -> date | None:
    """
    Parse an ISO date or datetime string down to a ``date``.

    Accepts both "2024-01-01" and "2024-01-01T00:00:00.000Z".
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except (ValueError, TypeError):
        return None
