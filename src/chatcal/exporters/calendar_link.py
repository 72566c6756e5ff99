"""Google Calendar deep links pre-filled with an event."""

from datetime import date, datetime, timedelta
from urllib.parse import quote, urlencode

from ..core.error_handler import ExportError
from ..core.logging_manager import LoggingManager
from .ics_exporter import local_wall_clock

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"

logger = LoggingManager.get_logger(__name__)


def all_day_end(start: date) -> date:
    """Exclusive end date of an all-day event."""
    return start + timedelta(days=1)


def format_dates(event, timezone: str) -> str:
    """
    The ``dates`` parameter: ``YYYYMMDD/YYYYMMDD`` for all-day events (end is
    the following day) or local ``YYYYMMDDTHHMMSS/YYYYMMDDTHHMMSS`` times.
    """
    start = getattr(event, "start", None)
    if not isinstance(start, datetime):
        raise ExportError("Event has no start time", export_format="calendar_link")

    if getattr(event, "all_day", False):
        start_day = start.date()
        return f"{start_day:%Y%m%d}/{all_day_end(start_day):%Y%m%d}"

    end = getattr(event, "end", None)
    if not isinstance(end, datetime):
        raise ExportError("Timed event has no end time", export_format="calendar_link")

    local_start = local_wall_clock(start, timezone)
    local_end = local_wall_clock(end, timezone)
    return f"{local_start:%Y%m%dT%H%M%S}/{local_end:%Y%m%dT%H%M%S}"


def build_calendar_url(event, timezone: str, base_url: str = GOOGLE_CALENDAR_URL) -> str:
    """
    Build a link that opens Google Calendar's new-event page.

    Args:
        event: Event to link
        timezone: Sent as ``ctz`` so local times are read in this zone
        base_url: Calendar render endpoint

    Returns:
        URL with percent-encoded title, dates and timezone
    """
    title = getattr(event, "title", None)
    if not isinstance(title, str) or not title.strip():
        raise ExportError("Event has no title", export_format="calendar_link")

    try:
        dates = format_dates(event, timezone)
    except ExportError as e:
        e.export_format = "calendar_link"
        raise

    params = [
        ("action", "TEMPLATE"),
        ("text", title),
        ("dates", dates),
        ("ctz", timezone),
    ]
    url = f"{base_url}?{urlencode(params, quote_via=quote, safe='/')}"
    logger.debug(f"Calendar link for {title!r}: {url}")
    return url
