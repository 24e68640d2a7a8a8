"""
Month and year rules shared by the API, the services and the reports.
"""
from datetime import date
from typing import Any, Optional

from chama.core.exceptions import InvalidInputError

# Canonical month names, also used as contribution column names.
MONTHS: tuple[str, ...] = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

MIN_YEAR = 2000
MAX_YEAR = 2100


def current_year() -> int:
    return date.today().year


def month_label(month: str) -> str:
    """'march' -> 'March'."""
    return month.capitalize()


def normalize_month(value: str) -> str:
    """
    Return the canonical (lowercase) month name for ``value``.

    Matching is case-insensitive but exact: abbreviations are rejected.
    """
    month = (value or "").strip().lower()
    if month not in MONTHS:
        raise InvalidInputError("Invalid month")
    return month


def parse_year(value: Any, default: Optional[int] = None) -> int:
    """
    Parse and range-check a year.

    Falsy values (None, "", 0) fall back to ``default`` or the current year.
    """
    if not value:
        return default if default is not None else current_year()

    if isinstance(value, bool):
        raise InvalidInputError("Invalid year parameter")

    try:
        year = int(str(value).strip())
    except ValueError:
        raise InvalidInputError("Invalid year parameter")

    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidInputError("Invalid year parameter")
    return year
