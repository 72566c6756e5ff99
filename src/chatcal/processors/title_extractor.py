"""Title extraction: what is left of a message once the date/time noise is gone."""

import re
from typing import Optional

from ..core.logging_manager import LoggingManager
from .models import TemporalMatch
from .patterns import TITLE_NOISE_PATTERNS

FALLBACK_TITLE = "Event"
MIN_TITLE_LENGTH = 2

STOPWORD_PATTERN = re.compile(r"\b(?:at|on|the|a|an)\b", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")

logger = LoggingManager.get_logger(__name__)


def _collapse(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def extract_title(text: str, match: Optional[TemporalMatch]) -> str:
    """
    Build the event title from the message text.

    Every date/time shape is removed, not only the one that matched, so
    leftovers like a stray "tmr" do not end up in the title. Articles and
    "at"/"on" are dropped afterwards.

    Args:
        text: Raw message text
        match: Resolved date/time; with None the trimmed text is returned

    Returns:
        The title, or "Event" when fewer than two characters remain
    """
    if match is None:
        return text.strip()

    clean_text = text
    for pattern in TITLE_NOISE_PATTERNS:
        clean_text = pattern.sub(" ", clean_text)

    clean_text = _collapse(clean_text)
    clean_text = _collapse(STOPWORD_PATTERN.sub(" ", clean_text))

    if len(clean_text) < MIN_TITLE_LENGTH:
        logger.debug(f"Nothing left of {text!r} after stripping, using fallback title")
        return FALLBACK_TITLE

    return clean_text
