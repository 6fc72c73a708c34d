"""Composition root for caltime.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core engine initialization
- Interactive command loop
"""

import json
import logging
import sys
from dataclasses import dataclass

from caltime.adapters.calendar.reform import ReformCalendarAdapter
from caltime.adapters.cli.commands import CLICommandHandler, run_command
from caltime.adapters.timezone.iana import ZoneInfoResolver
from caltime.config import Settings, load_settings
from caltime.core.time_machine import TimeMachine

HELP_TEXT = """
Available Commands (JSON format):

  Every command takes a "timestamp" object with year, month, day and
  optionally hour, minute, second, utc_offset (seconds), tzid, params.

  advance
    Move a timestamp by relative offsets.
    Optional: offsets (years, months, weeks, days, hours, minutes, seconds)

    Example: advance {"timestamp": {"year": 2024, "month": 1, "day": 31}, "offsets": {"months": 1}}

  change
    Override fields. Setting hour resets minute and second unless given.
    Optional: overrides (year, month, day, hour, minute, second, utc_offset)

    Example: change {"timestamp": {"year": 2024, "month": 1, "day": 31, "hour": 10}, "overrides": {"hour": 0}}

  boundary
    Start or end of the containing period.
    Required: boundary (start_of_day, end_of_month, ...)

    Example: boundary {"timestamp": {"year": 2024, "month": 1, "day": 31}, "boundary": "end_of_month"}

  week
    Start or end of the containing week.
    Optional: position (start, end), wkst (SU, MO, ... SA)

  iso_year
    Position within the containing ISO year.
    Optional: position (start, end, next, last_second), wkst

  in_week_starting
    Whether the timestamp is in the seven days starting on a date.
    Required: date (year, month, day)

  in_month
    Same day of month in another month, clamped to its length.
    Required: month

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
"""


@dataclass(frozen=True)
class Application:
    """Wired components for one run."""

    settings: Settings
    time_machine: TimeMachine
    cli_handler: CLICommandHandler


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def bootstrap(settings: Settings | None = None) -> Application:
    """Load configuration and wire adapters into the engine.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Initialize the engine and CLI handler
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading caltime...")

    calendar = ReformCalendarAdapter()
    resolver = ZoneInfoResolver(settings.timezone_aliases)
    logger.info(
        f"Calendar: reform start {settings.calendar_start} "
        f"(JD {settings.calendar_start_jd}), week start {settings.wkst.name}"
    )

    time_machine = TimeMachine(calendar)
    cli_handler = CLICommandHandler(
        time_machine,
        default_wkst=settings.wkst,
        calendar_start=settings.calendar_start_jd,
        timezone_resolver=resolver,
        default_tzid=settings.default_tzid,
    )
    return Application(settings=settings, time_machine=time_machine, cli_handler=cli_handler)


def execute_line(cli_handler: CLICommandHandler, command_line: str) -> dict | None:
    """Parse and run one REPL line; None for blank lines."""
    parts = command_line.strip().split(maxsplit=1)
    if not parts:
        return None

    command = parts[0].lower()
    args = json.loads(parts[1]) if len(parts) > 1 else {}
    if not isinstance(args, dict):
        raise ValueError("Command arguments must be a JSON object")
    return run_command(cli_handler, command, args)


def run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface over the engine commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    while True:
        try:
            command_line = input("caltime> ").strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                print(HELP_TEXT)
                continue

            try:
                result = execute_line(cli_handler, command_line)
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))
                continue

            print(json.dumps(result, indent=2, default=str))

        except EOFError:
            logger.info("EOF received, exiting CLI")
            break


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        app = bootstrap()
        run_cli_interactive(app.cli_handler)
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
