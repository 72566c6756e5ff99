#!/usr/bin/env python3
"""ChatCal - Chat Message to Calendar Event

Entry point for running ChatCal from a source checkout.
"""

import sys
from pathlib import Path

# Adding src to path for development
sys.path.insert(0, str(Path(__file__).parent / "src"))


def main():
    """Main entry point for ChatCal."""
    try:
        from chatcal.cli import main as cli_main
    except ImportError as e:
        print(f"❌ Failed to import ChatCal: {e}")
        print("💡 Try running: pip install -e .")
        sys.exit(1)

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
