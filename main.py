"""
WellMeet client entry point.

Usage:
    Interactive chat:  python main.py [console] [--mode fixed|free_text]
    Scripted replay:   python main.py scenario booking
"""

import logging
import sys
from typing import Optional

from wellmeet.config import settings

logger = logging.getLogger(__name__)


def _run_console_mode(args: list[str]) -> None:
    """Start the offline chat-to-booking console (no API required)."""
    from console_demo import main as console_main

    console_main(args)


def _run_scenario_mode(args: list[str]) -> None:
    from console_demo import main as console_main

    if not args:
        print("usage: python main.py scenario <booking|free_text|no_match>")
        sys.exit(2)
    console_main(["--scenario", args[0]])


def main(argv: Optional[list[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    logger.debug("Starting %s", settings.app_name)
    if args and args[0] == "scenario":
        _run_scenario_mode(args[1:])
    elif args and args[0] == "console":
        _run_console_mode(args[1:])
    else:
        _run_console_mode(args)


if __name__ == "__main__":
    main()
