"""ChatCal Application Core

Pipeline orchestration: word filter, temporal resolution, title extraction,
event assembly and export.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from .config_manager import AppConfig, ConfigManager
from .error_handler import ErrorHandler, ExportError
from .logging_manager import LoggingManager
from ..exporters.calendar_link import build_calendar_url
from ..exporters.ics_exporter import IcsDocument, IcsExporter
from ..exporters.summary_formatter import format_event_summary
from ..processors.event_assembler import assemble
from ..processors.message_filter import MessageFilter
from ..processors.models import Event, ResolutionContext
from ..processors.temporal_resolver import TemporalResolver
from ..processors.timezones import get_zone, safe_timezone
from ..processors.title_extractor import extract_title


@dataclass(frozen=True)
class ExportBundle:
    """Everything the delivery layer needs to answer a message."""
    event: Event
    ics: IcsDocument
    calendar_url: str
    summary: str
    timezone: str


class ChatCalApp:
    """Main application controller for ChatCal."""

    def __init__(self, config_path: Optional[Path] = None,
                 config_manager: Optional[ConfigManager] = None):
        """Initialize ChatCal application.

        Args:
            config_path: Optional configuration directory
            config_manager: Pre-built configuration manager, overrides ``config_path``
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)
        self.config_manager = config_manager or ConfigManager(config_path)
        self.resolver = TemporalResolver()

    @property
    def config(self) -> AppConfig:
        return self.config_manager.load_config()

    def process_message(
        self,
        text: str,
        reference_now: Optional[datetime] = None,
        timezone: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        blacklist: Optional[Iterable[str]] = None,
        whitelist: Optional[Iterable[str]] = None,
        created_by: Optional[str] = None,
    ) -> Optional[ExportBundle]:
        """Turn a chat message into an event and its exports.

        Args:
            text: Raw message text
            reference_now: "Now" for relative expressions; current time in the
                zone when omitted
            timezone: IANA zone of the chat; falls back to the configured zones
            duration_minutes: Length of timed events
            blacklist: Words that suppress processing; configured list when omitted
            whitelist: Words that override the blacklist
            created_by: Sender name shown in the summary

        Returns:
            ExportBundle, or None when the message is filtered out or names no
            date/time

        Raises:
            ExportError: If the event cannot be rendered
        """
        config = self.config
        events = config.events

        message_filter = MessageFilter(
            blacklist=list(config.filters.blacklist if blacklist is None else blacklist),
            whitelist=list(config.filters.whitelist if whitelist is None else whitelist),
        )
        if not message_filter.should_process(text):
            self.logger.info("Message skipped by word filter")
            return None

        zone_name = safe_timezone(timezone or events.default_timezone, events.fallback_timezone)
        if reference_now is None:
            reference_now = datetime.now(get_zone(zone_name))

        ctx = ResolutionContext(
            reference_now=reference_now,
            timezone=zone_name,
            default_duration_minutes=duration_minutes or events.default_duration_minutes,
        )

        match = self.resolver.resolve(text, ctx)
        if match is None:
            self.logger.info("No event found in message")
            return None

        title = extract_title(text, match)
        event = assemble(title, match, ctx)
        return self.export_event(event, zone_name, created_by=created_by)

    def export_event(self, event: Event, timezone: str,
                     created_by: Optional[str] = None) -> ExportBundle:
        """Render ``event`` as an ICS document, a calendar link and a summary."""
        export_config = self.config.export
        try:
            ics = IcsExporter(export_config.product_id, export_config.uid_domain).export(event, timezone)
            calendar_url = build_calendar_url(event, timezone, base_url=export_config.calendar_base_url)
            summary = format_event_summary(event, timezone, created_by=created_by)
        except ExportError as e:
            self.error_handler.handle_error(e, context=f"Exporting {e.export_format}")
            raise

        self.logger.info(f"Event {event.title!r} exported")
        return ExportBundle(event=event, ics=ics, calendar_url=calendar_url,
                            summary=summary, timezone=timezone)

    def save_ics(self, bundle: ExportBundle, output_dir: Optional[Union[str, Path]] = None) -> Path:
        """Write the bundle's ICS document to ``output_dir``.

        Returns:
            Path of the written file

        Raises:
            ExportError: If the file cannot be written
        """
        target_dir = Path(output_dir or self.config.export.output_dir)
        target = target_dir / bundle.ics.filename
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            # content already carries CRLF line endings
            with open(target, 'w', encoding='utf-8', newline='') as f:
                f.write(bundle.ics.content)
        except OSError as e:
            error = ExportError(f"Failed to write {target}: {e}")
            self.error_handler.handle_error(error, context="Saving ICS file")
            raise error from e

        self.logger.info(f"ICS file written to {target}")
        return target
