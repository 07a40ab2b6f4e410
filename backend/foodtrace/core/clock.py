"""Local wall-clock helpers.

Everything that depends on "today" takes the date as an argument; these
helpers are only called at the edges (routes, scheduler).
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from foodtrace.core.config import settings


def local_now() -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone))


def local_today() -> date:
    return local_now().date()


def hhmm(moment: datetime) -> str:
    """Format a time of day as HH:MM."""
    return moment.strftime("%H:%M")
