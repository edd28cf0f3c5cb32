"""Command-line interface for fsclookup.

This module provides the CLI commands for serving the API and running a
single lookup from the terminal.
"""

import asyncio
import json
import sys
from typing import Optional

from loguru import logger

from fsclookup.models.household import Found, NotFound
from fsclookup.version import format_version_string

__all__ = ["cli_main"]

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_FAILED = 2


def print_version() -> None:
    """Print version information."""
    print(format_version_string())


def cmd_serve() -> int:
    """Start the API server.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    print_version()
    print()
    print("Starting fsclookup API...")
    print("(Use Ctrl+C to stop)")
    print()

    try:
        from fsclookup.main import main as run_app

        run_app()
        return 0

    except KeyboardInterrupt:
        print("\n✓ fsclookup stopped")
        return 0
    except Exception as e:
        print(f"\n✗ Error: {e}")
        logger.exception("Server error")
        return 1


def cmd_lookup(fsc_no: str) -> int:
    """Look up one FSC number and print the result as JSON.

    Args:
        fsc_no: FSC reference number

    Returns:
        Exit code (0 found, 1 not found, 2 failed or invalid)
    """
    from fsclookup.services.portal import ValidationError, get_lookup_service

    try:
        outcome = asyncio.run(get_lookup_service().lookup(fsc_no))
    except ValidationError as e:
        print(f"✗ {e}")
        return EXIT_FAILED

    if isinstance(outcome, Found):
        print(json.dumps(outcome.record.to_dict(), indent=2))
        return EXIT_FOUND

    if isinstance(outcome, NotFound):
        print(f"✗ {outcome.reason}")
        return EXIT_NOT_FOUND

    print(f"✗ Lookup failed: {outcome.error_type}: {outcome.cause}")
    return EXIT_FAILED


def print_help() -> None:
    """Print CLI help message."""
    print_version()
    print()
    print("Usage: fsclookup [COMMAND]")
    print()
    print("Commands:")
    print("  serve            Start the HTTP API (GET /fsc?no=...)")
    print("  lookup FSC_NO    Look up one FSC number and print JSON")
    print("  version          Show version information")
    print("  help             Show this help message")
    print()
    print("Examples:")
    print("  fsclookup serve                   # Serve on $PORT (default 10000)")
    print("  fsclookup lookup FSC0000001234    # One-off lookup")
    print()


def cli_main(args: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if args is None:
        args = sys.argv[1:]

    # No command or help
    if not args or args[0] in ("help", "-h", "--help"):
        print_help()
        return 0

    command = args[0].lower()

    # Execute command
    if command == "serve":
        return cmd_serve()
    elif command == "lookup":
        if len(args) < 2:
            print("✗ Missing FSC number")
            print()
            print_help()
            return EXIT_FAILED
        return cmd_lookup(args[1])
    elif command == "version":
        print_version()
        return 0
    else:
        print(f"✗ Unknown command: {command}")
        print()
        print_help()
        return 1
