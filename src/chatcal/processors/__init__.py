"""Text Processing Module

Date/time resolution, title extraction and event assembly for chat messages.
"""

from .event_assembler import assemble
from .message_filter import MessageFilter, should_process
from .models import Event, MatchedSpan, ResolutionContext, TemporalMatch
from .patterns import Matcher, default_matchers
from .temporal_resolver import TemporalResolver, resolve
from .timezones import DEFAULT_TIMEZONE, get_zone, is_valid_timezone, safe_timezone
from .title_extractor import FALLBACK_TITLE, extract_title

__all__ = [
    "DEFAULT_TIMEZONE",
    "FALLBACK_TITLE",
    "Event",
    "MatchedSpan",
    "Matcher",
    "MessageFilter",
    "ResolutionContext",
    "TemporalMatch",
    "TemporalResolver",
    "assemble",
    "default_matchers",
    "extract_title",
    "get_zone",
    "is_valid_timezone",
    "resolve",
    "safe_timezone",
    "should_process",
]
