"""Timezone lookup helpers.

Zones are resolved through ``dateutil.tz.gettz`` so that IANA names such as
``Asia/Singapore`` produce tzinfo objects that apply the right offset for the
wall-clock date they are attached to.
"""

from datetime import tzinfo
from typing import Optional

from dateutil import tz as dateutil_tz

from ..core.logging_manager import LoggingManager

DEFAULT_TIMEZONE = "Asia/Singapore"

logger = LoggingManager.get_logger(__name__)


def get_zone(name: Optional[str]) -> Optional[tzinfo]:
    """Return the tzinfo for an IANA zone name, or None if it is unknown."""
    if not name or not isinstance(name, str):
        return None
    # gettz treats strings like "" or "local" specially; only accept region names and UTC
    if "/" not in name and name.upper() not in ("UTC", "GMT"):
        return None
    if name.startswith(("/", ":")) or ".." in name:
        return None
    if name.upper() in ("UTC", "GMT"):
        return dateutil_tz.UTC
    return dateutil_tz.gettz(name)


def is_valid_timezone(name: Optional[str]) -> bool:
    return get_zone(name) is not None


def safe_timezone(name: Optional[str], fallback: str = DEFAULT_TIMEZONE) -> str:
    """Return ``name`` when it is a valid zone, otherwise ``fallback``."""
    if is_valid_timezone(name):
        return name
    logger.warning(f"Invalid timezone {name!r}, falling back to {fallback}")
    return fallback
