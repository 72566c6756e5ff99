"""Blacklist/whitelist word filter applied to messages before extraction."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.logging_manager import LoggingManager

DEFAULT_BLACKLIST = ("now",)

logger = LoggingManager.get_logger(__name__)


def _normalize(words: Optional[Iterable[str]]) -> List[str]:
    if not words:
        return []
    return [word.strip().lower() for word in words if word and word.strip()]


@dataclass
class MessageFilter:
    """
    Skips messages containing a blacklisted word unless they also contain a
    whitelisted one. Words match as case-insensitive substrings.
    """
    blacklist: List[str] = field(default_factory=lambda: list(DEFAULT_BLACKLIST))
    whitelist: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.blacklist = _normalize(self.blacklist)
        self.whitelist = _normalize(self.whitelist)

    def blacklisted_word(self, text: str) -> Optional[str]:
        lower_text = text.lower()
        return next((word for word in self.blacklist if word in lower_text), None)

    def whitelisted_word(self, text: str) -> Optional[str]:
        lower_text = text.lower()
        return next((word for word in self.whitelist if word in lower_text), None)

    def should_process(self, text: str) -> bool:
        blocked_by = self.blacklisted_word(text)
        if blocked_by is None:
            return True

        allowed_by = self.whitelisted_word(text)
        if allowed_by is not None:
            logger.debug(f"Blacklisted word {blocked_by!r} overridden by whitelisted {allowed_by!r}")
            return True

        logger.debug(f"Skipping message containing blacklisted word {blocked_by!r}")
        return False

    def toggle(self, word: str, list_name: str = "blacklist") -> bool:
        """
        Add ``word`` to the named list, or remove it if already present.

        Returns:
            True if the word was added, False if it was removed
        """
        if list_name not in ("blacklist", "whitelist"):
            raise ValueError(f"Unknown word list: {list_name}")

        words = getattr(self, list_name)
        word = word.strip().lower()
        if word in words:
            words.remove(word)
            return False
        words.append(word)
        return True


def should_process(text: str, blacklist: Optional[Iterable[str]] = None,
                   whitelist: Optional[Iterable[str]] = None) -> bool:
    """Apply the word filter with the given lists (default blacklist: "now")."""
    return MessageFilter(
        blacklist=list(DEFAULT_BLACKLIST) if blacklist is None else list(blacklist),
        whitelist=list(whitelist or []),
    ).should_process(text)
