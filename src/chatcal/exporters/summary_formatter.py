"""Confirmation text sent back to the chat once an event is detected.

The output uses the chat's HTML parse mode, so every user-supplied value is
escaped before it is embedded.
"""

import html
from typing import Optional

from ..core.error_handler import ExportError
from .ics_exporter import local_wall_clock


def format_when(event, duration_minutes: Optional[int] = None,
                timezone: Optional[str] = None) -> str:
    """
    Human-readable start of the event.

    Args:
        event: Event to describe
        duration_minutes: Length shown for timed events; taken from the
            event itself when omitted
        timezone: Zone to show timed events in; the start's own zone when omitted

    Returns:
        ``Friday, Oct 25 (All day)`` or ``Tue, Oct 22, 03:00 PM (60min)``
    """
    if event.all_day:
        day = event.start_date
        return f"{day:%A}, {day:%b} {day.day} (All day)"

    start = event.start
    if timezone is not None:
        start = local_wall_clock(start, timezone)
    if duration_minutes is None:
        duration_minutes = event.duration_minutes()
    return f"{start:%a}, {start:%b} {start.day}, {start:%I:%M %p} ({duration_minutes}min)"


def format_event_summary(event, timezone: str, created_by: Optional[str] = None,
                         duration_minutes: Optional[int] = None) -> str:
    """
    Multi-line HTML summary of the detected event.

    ``created_by`` is only shown in group chats, where several people may be
    adding events.
    """
    if event is None:
        raise ExportError("No event to summarize", export_format="summary")

    when = format_when(event, duration_minutes, timezone=timezone)
    lines = [
        "📅 <b>Event detected:</b>",
        f"<b>Title:</b> {html.escape(event.title)}",
        f"<b>When:</b> {html.escape(when)}",
        f"<b>Timezone:</b> {html.escape(timezone)}",
    ]
    if created_by:
        lines.append(f"<b>Created by:</b> {html.escape(created_by)}")
    return "\n".join(lines)
