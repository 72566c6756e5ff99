"""Calendar exporters: iCalendar documents, Google Calendar links and chat summaries."""

from .calendar_link import GOOGLE_CALENDAR_URL, all_day_end, build_calendar_url
from .ics_exporter import IcsDocument, IcsExporter, export_ics, ics_filename
from .summary_formatter import format_event_summary, format_when

__all__ = [
    "GOOGLE_CALENDAR_URL",
    "IcsDocument",
    "IcsExporter",
    "all_day_end",
    "build_calendar_url",
    "export_ics",
    "format_event_summary",
    "format_when",
    "ics_filename",
]
