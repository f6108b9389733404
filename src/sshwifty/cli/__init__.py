"""CLI entry point for sshwifty configuration tooling.

Provides command-line interface for:
- Checking that the environment holds a loadable configuration
- Showing the loaded configuration with secrets masked
- Displaying version information

Usage:
    sshwifty-config check
    sshwifty-config show --format yaml
    sshwifty-config version
"""

import argparse
import logging
import sys
from typing import List, Optional


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="sshwifty-config",
        description="Inspect the sshwifty configuration loaded from the environment",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    subparsers.add_parser(
        "check",
        help="Load the configuration and print a summary",
    )

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Print the loaded configuration with secrets masked",
    )
    show_parser.add_argument(
        "-f", "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format (default: yaml)",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Handle --version flag at top level
    if args.version:
        from sshwifty.cli.commands.version import cmd_version
        return cmd_version()

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    if args.command == "check":
        from sshwifty.cli.commands.check import cmd_check
        return cmd_check()

    elif args.command == "show":
        from sshwifty.cli.commands.show import cmd_show
        return cmd_show(output_format=args.format)

    elif args.command == "version":
        from sshwifty.cli.commands.version import cmd_version
        return cmd_version()

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
