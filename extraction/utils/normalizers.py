"""
Text and number normalization for Brazilian utility bills.

Bills print numbers in pt-BR locale ("1.234,56") and reference months as
Portuguese month names ("JAN/2024", "MARÇO/2024"). The helpers here turn
those tokens into Python floats and ``date`` objects.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Final

_WHITESPACE_RE = re.compile(r"\s+")

MONTH_MAP: Final[dict[str, int]] = {
    "JAN": 1,
    "FEV": 2,
    "MAR": 3,
    "ABR": 4,
    "MAI": 5,
    "JUN": 6,
    "JUL": 7,
    "AGO": 8,
    "SET": 9,
    "OUT": 10,
    "NOV": 11,
    "DEZ": 12,
    "JANEIRO": 1,
    "FEVEREIRO": 2,
    "MARÇO": 3,
    "MARCO": 3,
    "ABRIL": 4,
    "MAIO": 5,
    "JUNHO": 6,
    "JULHO": 7,
    "AGOSTO": 8,
    "SETEMBRO": 9,
    "OUTUBRO": 10,
    "NOVEMBRO": 11,
    "DEZEMBRO": 12,
}

# Misreadings seen in text extracted from scanned/re-encoded bills
MONTH_VARIATIONS: Final[dict[str, str]] = {
    "AIO": "MAI",
    "MA1": "MAI",
    "MAL": "MAI",
    "MA10": "MAIO",
    "JUL10": "JULHO",
    "AGO5TO": "AGOSTO",
    "SET3": "SET",
    "N0V": "NOV",
    "DEZ12": "DEZ",
}


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def parse_decimal(raw: str) -> float:
    """
    Parse a pt-BR formatted number.

    Thousands separators (``.``) are dropped and the decimal comma becomes a
    dot. Malformed input yields ``0.0`` instead of raising.

    Example:
        >>> parse_decimal("1.234,56")
        1234.56
        >>> parse_decimal("abc")
        0.0
    """
    try:
        return float(raw.replace(".", "").replace(",", "."))
    except (AttributeError, ValueError):
        return 0.0


def normalize_month(token: str) -> str:
    normalized = token.strip().upper()
    return MONTH_VARIATIONS.get(normalized, normalized)


def parse_month_year(month_token: str, year_token: str) -> date | None:
    """
    Map a month name and a year to the first day of that month.

    Args:
        month_token: 3-letter or full Portuguese month name, any case
        year_token: Four-digit year

    Returns:
        ``date(year, month, 1)``, or None when the month is unknown or the
        year is not an integer.
    """
    month = MONTH_MAP.get(normalize_month(month_token))
    if month is None:
        return None
    try:
        year = int(year_token)
    except (TypeError, ValueError):
        return None
    try:
        return date(year, month, 1)
    except ValueError:
        return None
