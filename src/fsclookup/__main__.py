"""Entry point for fsclookup.

This module provides the command-line entry point for the application.
"""

import sys


def main() -> int:
    """Main entry point for fsclookup command.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    # Import and run the CLI
    from fsclookup.cli import cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
