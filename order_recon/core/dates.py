# order_recon/core/dates.py

"""
Reference time zone helpers.

Every date the service derives ("today", report timestamps) is taken in a
fixed zone rather than the host's local zone.
"""

from datetime import date, datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/New_York"
REPORT_TIMESTAMP_FORMAT = "%m/%d/%y, %I:%M %p"


def today_in_zone(timezone: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> date:
    """
    Calendar date in the given zone.

    `now` must be timezone-aware when given; defaults to the current time.
    """
    moment = now or datetime.now(dt_timezone.utc)
    return moment.astimezone(ZoneInfo(timezone)).date()


def format_report_timestamp(moment: datetime, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Render a timestamp for people, e.g. '01/05/24, 02:30 PM'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt_timezone.utc)
    return moment.astimezone(ZoneInfo(timezone)).strftime(REPORT_TIMESTAMP_FORMAT)
