import logging
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from personnel_directory.core.config import settings

logger = logging.getLogger(__name__)


def local_tz() -> tzinfo | None:
    try:
        return ZoneInfo(settings.TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown TIMEZONE %r, falling back to the system clock", settings.TIMEZONE)
        return None


def utc_now() -> datetime:
    """Aware UTC timestamp for stored audit and creation times."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    tz = local_tz()
    return datetime.now(tz) if tz else datetime.now().astimezone()


def local_today() -> date:
    return local_now().date()


def get_today() -> date:
    """FastAPI dependency for the server's notion of "today"."""
    return local_today()
