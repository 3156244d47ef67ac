"""
Date normalization for staff records.

Source tables carry dates as free text (mostly ``DD/MM/YYYY``), as ISO strings,
as native dates, or not at all. Everything here is total: bad input yields
``None`` (or the caller's fallback), never an exception.

Day/month ordering is always DD/MM; the source data is produced in that
convention.
"""
import logging
import re
from datetime import date, datetime
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

DDMMYYYY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

MIN_YEAR = 1900
MAX_YEAR = 2100

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DAYS_PER_YEAR = 365.25


def _parse_ddmmyyyy(text: str, original: Any) -> date | None:
    match = DDMMYYYY_PATTERN.match(text)
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    if not (1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR):
        logger.warning("Invalid DD/MM/YYYY date components in %r", original)
        return None

    try:
        # date() rejects 31/04 and 30/02 instead of rolling over
        return date(year, month, day)
    except ValueError:
        logger.warning("Impossible calendar date %r", original)
        return None


def _parse_generic(text: str, original: Any) -> date | None:
    if text[-1] in "Zz":
        # fromisoformat only learned the UTC designator in Python 3.11
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text)
    except ValueError:
        logger.warning("Unparseable date value %r", original)
        return None


def parse_date(value: Any) -> date | None:
    """
    Calendar date for ``value`` or None.

    Accepts None, empty strings, ``D/M/YYYY`` / ``DD/MM/YYYY`` text, ISO text
    and date/datetime objects.
    """
    if value is None:
        return None

    # datetime first: it is a subclass of date
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if DDMMYYYY_PATTERN.match(text):
            return _parse_ddmmyyyy(text, value)
        return _parse_generic(text, value)

    logger.warning("Unexpected date value type %s: %r", type(value).__name__, value)
    return None


def normalize_date(value: Any) -> str | None:
    """Canonical ``YYYY-MM-DD`` string, or None when there is no usable date."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def format_date(value: Any, fallback: str = "") -> str:
    """Display form ``DD Mon YYYY`` (en-IN style), or ``fallback``."""
    parsed = parse_date(value)
    if parsed is None:
        return fallback
    return f"{parsed.day:02d} {MONTH_ABBR[parsed.month - 1]} {parsed.year}"


# ---------------------------------------------------------------------------
# Arithmetic on parsed dates
# ---------------------------------------------------------------------------


class RetirementCountdown(NamedTuple):
    text: str
    days: int  # -1 when unknown or already retired


def calculate_age(dob: Any, today: date) -> int:
    born = parse_date(dob)
    if born is None:
        return 0
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def time_to_retirement(dor: Any, today: date) -> RetirementCountdown:
    retirement = parse_date(dor)
    if retirement is None:
        return RetirementCountdown("N/A", -1)

    total_days = (retirement - today).days
    if total_days <= 0:
        return RetirementCountdown("Retired", -1)

    years, remainder = divmod(total_days, 365)
    months, days = divmod(remainder, 30)

    parts = []
    if years > 0:
        parts.append(f"{years}y")
    if months > 0:
        parts.append(f"{months}m")
    if days > 0 and years == 0:
        parts.append(f"{days}d")
    return RetirementCountdown(" ".join(parts) or "0d", total_days)


def years_of_service(doj: Any, today: date) -> int | None:
    joined = parse_date(doj)
    if joined is None:
        return None
    return int((today - joined).days // DAYS_PER_YEAR)


def _anniversary(born: date, year: int) -> date:
    try:
        return born.replace(year=year)
    except ValueError:
        # 29 Feb outside a leap year
        return date(year, 2, 28)


def days_until_birthday(dob: Any, today: date) -> int | None:
    born = parse_date(dob)
    if born is None:
        return None
    upcoming = _anniversary(born, today.year)
    if upcoming < today:
        upcoming = _anniversary(born, today.year + 1)
    return (upcoming - today).days


def is_birthday(dob: Any, today: date) -> bool:
    """True on the birthday; 29 Feb birthdays fall on 28 Feb in common years."""
    born = parse_date(dob)
    return born is not None and _anniversary(born, today.year) == today
