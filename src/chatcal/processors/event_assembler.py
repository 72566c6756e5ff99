"""Event Assembler

Turns a resolved date/time and a title into an ``Event``: timed when the match
carries a time-of-day, all-day otherwise.
"""

from datetime import datetime, timedelta

from ..core.logging_manager import LoggingManager
from .models import Event, ResolutionContext, TemporalMatch

logger = LoggingManager.get_logger(__name__)


def assemble(title: str, match: TemporalMatch, ctx: ResolutionContext) -> Event:
    """Build the event for ``match``.

    The start is the match's wall-clock time attached directly to
    ``ctx.timezone``; it is never converted through UTC, so 15:00 stays 15:00.

    Args:
        title: Event title, used as-is
        match: Resolved date/time
        ctx: Supplies the timezone and the default duration

    Returns:
        Timed event ending ``default_duration_minutes`` after its start, or an
        all-day event without an end

    Raises:
        EventValidationError: If the result would violate the Event invariants
    """
    zone = ctx.zone

    if match.has_time:
        start = datetime(match.year, match.month, match.day, match.hour, match.minute, tzinfo=zone)
        end = start + timedelta(minutes=ctx.default_duration_minutes)
        event = Event(title=title, start=start, end=end, all_day=False)
    else:
        start = datetime(match.year, match.month, match.day, tzinfo=zone)
        event = Event(title=title, start=start, all_day=True)

    logger.info(
        f"Assembled {'all-day' if event.all_day else 'timed'} event {event.title!r} "
        f"starting {event.start.isoformat()} ({ctx.timezone})"
    )
    return event
