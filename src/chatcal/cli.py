"""ChatCal command line

    chatcal "Team meeting tmr 3pm" --tz Asia/Singapore --duration 60

Prints the event summary and calendar link, and optionally writes the .ics
file. Exit status: 0 event found, 1 no event, 2 export or configuration failure.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dateutil import parser as date_parser

from .core.application import ChatCalApp
from .core.config_manager import ConfigManager
from .core.error_handler import ConfigurationError, EventValidationError, ExportError
from .core.logging_manager import LoggingManager

EXIT_EVENT = 0
EXIT_NO_EVENT = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chatcal", description="Turn a chat message into a calendar event")
    parser.add_argument("text", help="Message text, e.g. \"Team meeting tmr 3pm\"")
    parser.add_argument("--tz", dest="timezone", help="IANA timezone of the chat (default from config)")
    parser.add_argument("--duration", type=int, help="Length of timed events in minutes (default from config)")
    parser.add_argument("--now", help="Reference time as ISO 8601, e.g. 2024-10-21T10:00")
    parser.add_argument("--ics-out", metavar="DIR", help="Write the .ics file into DIR")
    parser.add_argument("--config", metavar="DIR", help="Configuration directory")
    parser.add_argument("--created-by", help="Sender name shown in the summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the chatcal command."""
    args = build_parser().parse_args(argv)

    try:
        config_manager = ConfigManager(Path(args.config) if args.config else None)
        config = config_manager.load_config()
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    LoggingManager.configure(
        level="DEBUG" if args.verbose or config.debug_mode else config.logging.level,
        log_dir=config.logging.log_dir,
        log_to_console=config.logging.log_to_console,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
    )

    reference_now = None
    if args.now:
        try:
            reference_now = date_parser.isoparse(args.now)
        except ValueError as e:
            print(f"❌ Invalid --now value {args.now!r}: {e}", file=sys.stderr)
            return EXIT_FAILURE

    if args.duration is not None and args.duration <= 0:
        print("❌ --duration must be a positive number of minutes", file=sys.stderr)
        return EXIT_FAILURE

    app = ChatCalApp(config_manager=config_manager)
    try:
        bundle = app.process_message(
            args.text,
            reference_now=reference_now,
            timezone=args.timezone,
            duration_minutes=args.duration,
            created_by=args.created_by,
        )
        if bundle is None:
            print("No event found")
            return EXIT_NO_EVENT

        print(bundle.summary)
        print(bundle.calendar_url)

        if args.ics_out:
            path = app.save_ics(bundle, args.ics_out)
            print(f"ICS file saved to: {path}")

    except (ExportError, EventValidationError, ConfigurationError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_EVENT


if __name__ == "__main__":
    sys.exit(main())
