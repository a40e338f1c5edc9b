"""CLI entry point for ccache_stats.

Usage:
    python -m ccache_stats <command> [options]

Commands:
    show [--dir DIR] [--json]
    print [--dir DIR]
    leaf <path> [--raw | --json]
    monitor [--dir DIR] [--interval SECONDS] [--count N]
    config validate
    config get <key>
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn

from ccache_stats import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ccache-stats",
        description="Read ccache statistics without running ccache",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        help="Path to config file (default: search for .ccache-stats.toml)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show command
    show_parser = subparsers.add_parser(
        "show", help="Show summary of statistics counters in human-readable format"
    )
    show_parser.add_argument(
        "--dir",
        help="ccache directory (default: $CCACHE_DIR, config, or ~/.ccache)",
    )
    show_parser.add_argument(
        "--json", action="store_true", help="Print counters as JSON"
    )

    # print command
    print_parser = subparsers.add_parser(
        "print", help="Print statistics counter IDs and values in machine-parsable format"
    )
    print_parser.add_argument(
        "--dir",
        help="ccache directory (default: $CCACHE_DIR, config, or ~/.ccache)",
    )

    # leaf command
    leaf_parser = subparsers.add_parser("leaf", help="Show a single stats file")
    leaf_parser.add_argument("path", help="Path to a ccache 'stats' file")
    leaf_format = leaf_parser.add_mutually_exclusive_group()
    leaf_format.add_argument(
        "--raw", action="store_true", help="Machine-parsable output"
    )
    leaf_format.add_argument(
        "--json", action="store_true", help="Print counters as JSON"
    )

    # monitor command
    monitor_parser = subparsers.add_parser(
        "monitor", help="Report counter changes as they happen"
    )
    monitor_parser.add_argument(
        "--dir",
        help="ccache directory (default: $CCACHE_DIR, config, or ~/.ccache)",
    )
    monitor_parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between polls (default: config value or 5)",
    )
    monitor_parser.add_argument(
        "--count",
        "-n",
        type=int,
        help="Stop after N polls (default: run until interrupted)",
    )

    # config command
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(
        dest="config_command", help="Config subcommands"
    )

    # config validate
    config_subparsers.add_parser("validate", help="Validate configuration")

    # config get
    get_parser = config_subparsers.add_parser("get", help="Get configuration value")
    get_parser.add_argument("key", help="Configuration key (e.g. monitor.interval)")

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    from ccache_stats import cli

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "show":
        sys.exit(cli.cmd_show(args))
    elif args.command == "print":
        sys.exit(cli.cmd_print(args))
    elif args.command == "leaf":
        sys.exit(cli.cmd_leaf(args))
    elif args.command == "monitor":
        sys.exit(cli.cmd_monitor(args))
    elif args.command == "config":
        if args.config_command == "validate":
            sys.exit(cli.cmd_config_validate(args))
        elif args.config_command == "get":
            sys.exit(cli.cmd_config_get(args))
        else:
            parser.parse_args(["config", "--help"])
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
