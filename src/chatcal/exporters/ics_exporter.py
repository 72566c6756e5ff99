"""
ICS Exporter for creating iCalendar (.ics) documents.
Generates RFC5545-compliant single-event calendars. Timed events are written
as floating local times so calendar apps do not shift them a second time.
"""

import hashlib
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from dateutil import tz as dateutil_tz

from ..core.error_handler import ExportError
from ..core.logging_manager import LoggingManager
from ..processors.timezones import get_zone

DEFAULT_PRODUCT_ID = "-//ChatCal//ChatCal//EN"
DEFAULT_UID_DOMAIN = "chatcal.local"
MAX_LINE_OCTETS = 75

logger = LoggingManager.get_logger(__name__)


@dataclass(frozen=True)
class IcsDocument:
    """Rendered calendar file."""
    filename: str
    content: str


def _escape_ical_text(text: str) -> str:
    """
    Escape text for iCalendar format (RFC5545).
    Escapes commas, semicolons, backslashes, and newlines.
    """
    # Replace backslashes first (before other replacements)
    text = text.replace('\\', '\\\\')
    text = text.replace(';', '\\;')
    text = text.replace(',', '\\,')
    text = text.replace('\r\n', '\\n').replace('\n', '\\n')
    return text.replace('\r', '')


def _fold_line(line: str) -> List[str]:
    """
    Fold a content line to at most 75 octets per physical line.
    Continuation lines start with a single space.
    """
    lines = []
    current_line = ""

    for char in line:
        test_line = current_line + char
        if len(test_line.encode('utf-8')) <= MAX_LINE_OCTETS:
            current_line = test_line
        else:
            lines.append(current_line)
            current_line = " " + char

    lines.append(current_line)
    return lines


def _format_ical_datetime_utc(dt: datetime) -> str:
    """Format an aware datetime as UTC (YYYYMMDDTHHMMSSZ)."""
    return dt.astimezone(dateutil_tz.UTC).strftime('%Y%m%dT%H%M%SZ')


def _format_ical_local(dt: datetime) -> str:
    """Format wall-clock time without a zone suffix (YYYYMMDDTHHMMSS)."""
    return dt.strftime('%Y%m%dT%H%M%S')


def _format_ical_date(d: date) -> str:
    return d.strftime('%Y%m%d')


def ics_filename(title: str) -> str:
    """File name for the document: the title with non-alphanumerics replaced by '_'."""
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', title)}.ics"


def local_wall_clock(dt: datetime, timezone: str) -> datetime:
    """
    Wall-clock time of ``dt`` in ``timezone``.
    Naive datetimes are taken to already be local; aware ones attached to the
    same zone come back unchanged.
    """
    zone = get_zone(timezone)
    if zone is None:
        raise ExportError(f"Unknown timezone: {timezone!r}")
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(zone)


class IcsExporter:
    """Renders a single Event to an iCalendar document."""

    def __init__(self, product_id: str = DEFAULT_PRODUCT_ID, uid_domain: str = DEFAULT_UID_DOMAIN):
        self.product_id = product_id
        self.uid_domain = uid_domain

    def export(self, event, timezone: str, generated_at: Optional[datetime] = None) -> IcsDocument:
        """
        Render ``event`` as a VCALENDAR document.

        Args:
            event: Event to render
            timezone: IANA zone the event's local times belong to
            generated_at: DTSTAMP value; current UTC time when omitted

        Returns:
            IcsDocument with file name and CRLF-terminated content

        Raises:
            ExportError: If the event is missing required fields
        """
        title, start, end, all_day = self._validated_fields(event)
        if get_zone(timezone) is None:
            raise ExportError(f"Unknown timezone: {timezone!r}")

        try:
            if all_day:
                start_line = f"DTSTART;VALUE=DATE:{_format_ical_date(start.date())}"
                end_line = None
            else:
                start_line = f"DTSTART:{_format_ical_local(local_wall_clock(start, timezone))}"
                end_line = f"DTEND:{_format_ical_local(local_wall_clock(end, timezone))}"
        except (TypeError, ValueError, OverflowError) as e:
            raise ExportError(f"Failed to format event times: {e}") from e

        stamp = generated_at or datetime.now(dateutil_tz.UTC)
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=dateutil_tz.UTC)
        uid = hashlib.md5(f"{title}|{start.isoformat()}".encode('utf-8')).hexdigest() + f"@{self.uid_domain}"

        ics_lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{self.product_id}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            f"X-WR-TIMEZONE:{timezone}",
            "BEGIN:VEVENT",
            f"UID:{uid}",
            f"DTSTAMP:{_format_ical_datetime_utc(stamp)}",
            start_line,
        ]
        if end_line:
            ics_lines.append(end_line)
        ics_lines.append(f"SUMMARY:{_escape_ical_text(title)}")
        ics_lines.extend(["END:VEVENT", "END:VCALENDAR"])

        folded = [physical for line in ics_lines for physical in _fold_line(line)]
        content = '\r\n'.join(folded) + '\r\n'

        logger.info(f"ICS document generated for {title!r} ({'all-day' if all_day else 'timed'})")
        return IcsDocument(filename=ics_filename(title), content=content)

    def _validated_fields(self, event):
        """Pull title/start/end/all_day out of ``event`` or raise ExportError."""
        if event is None:
            raise ExportError("No event to export")

        title = getattr(event, "title", None)
        start = getattr(event, "start", None)
        end = getattr(event, "end", None)
        all_day = getattr(event, "all_day", None)

        if not isinstance(title, str) or not title.strip():
            raise ExportError("Event has no title")
        if not isinstance(start, datetime):
            raise ExportError("Event has no start time")
        if not isinstance(all_day, bool):
            raise ExportError("Event does not say whether it is all-day")
        if not all_day:
            if not isinstance(end, datetime):
                raise ExportError("Timed event has no end time")
            try:
                if end <= start:
                    raise ExportError("Event ends before it starts")
            except TypeError as e:
                raise ExportError(f"Event start and end are not comparable: {e}") from e

        return title, start, end, all_day


def export_ics(event, timezone: str, generated_at: Optional[datetime] = None) -> IcsDocument:
    """Render ``event`` with the default exporter settings."""
    return IcsExporter().export(event, timezone, generated_at=generated_at)
