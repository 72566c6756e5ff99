"""Temporal Resolver for Chat Message Date/Time Processing

Runs the pattern library as a strict priority cascade: the first matcher
that finds a valid date/time wins and lower-priority matchers are not tried.
Time ranges are collapsed to their start before the cascade runs.
"""

from typing import Optional, Sequence

from ..core.logging_manager import LoggingManager
from .models import ResolutionContext, TemporalMatch
from .patterns import Matcher, default_matchers, has_explicit_day, rewrite_time_range


class TemporalResolver:
    """Resolve the date/time a chat message refers to."""

    def __init__(self, matchers: Optional[Sequence[Matcher]] = None):
        """Initialize the resolver.

        Args:
            matchers: Cascade in priority order; the standard notations when omitted
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.matchers = tuple(matchers) if matchers is not None else default_matchers()

    def resolve(self, text: str, ctx: ResolutionContext) -> Optional[TemporalMatch]:
        """Resolve the first recognizable date/time in ``text``.

        Args:
            text: Raw message text
            ctx: Reference time, timezone and default duration

        Returns:
            The winning match, or None when the message has no date/time the
            cascade recognizes
        """
        if not text or not text.strip():
            return None

        working_text = rewrite_time_range(text)
        if working_text != text:
            self.logger.debug(f"Time range collapsed to its start: {working_text!r}")

        # A message naming a day number must not silently land on today
        explicit_day = has_explicit_day(working_text)

        for matcher in self.matchers:
            result = matcher.match(working_text, ctx)
            if result is None:
                continue
            if explicit_day and result.defaulted_to_today:
                self.logger.debug(f"Discarding {matcher.name} result: text names a day but match defaulted to today")
                continue

            self.logger.debug(
                f"Matched {matcher.name}: {result.span.text!r} -> "
                f"{result.year:04d}-{result.month:02d}-{result.day:02d}"
                + (f" {result.hour:02d}:{result.minute:02d}" if result.has_time else " (date only)")
            )
            return result

        self.logger.debug("No temporal expression found")
        return None


_default_resolver = TemporalResolver()


def resolve(text: str, ctx: ResolutionContext) -> Optional[TemporalMatch]:
    """Resolve ``text`` with the standard cascade."""
    return _default_resolver.resolve(text, ctx)
