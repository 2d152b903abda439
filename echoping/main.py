"""Command-line interface for echoping."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from rich.markup import escape

from . import __version__
from ._exceptions import ConfigurationError, ResolutionError, SessionError
from ._log import configure_logging, console
from ._models import ProbeConfig
from ._probe import ping
from ._report import ConsoleReporter

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="echoping", description="Send ICMP echo requests to a host"
    )
    parser.add_argument("host", help="target hostname or IP address")
    parser.add_argument(
        "-c", "--count", type=int, default=4, help="number of echo requests to send"
    )
    parser.add_argument(
        "-t", "--timeout", type=float, default=1.0, help="timeout in seconds"
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=1.0,
        help="interval between requests in seconds",
    )
    parser.add_argument(
        "-s", "--size", type=int, default=56, help="size of payload in bytes"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="show debug logging"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="only log warnings and errors"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    try:
        config = ProbeConfig(
            host=args.host,
            count=args.count,
            timeout=args.timeout,
            interval=args.interval,
            size=args.size,
        )
    except ConfigurationError as exc:
        console.print(f"[red]Invalid arguments:[/red] {escape(str(exc))}")
        return EXIT_USAGE

    console.print(f"[bold cyan]echoping v{__version__}[/bold cyan]")
    try:
        asyncio.run(ping(config, reporter=ConsoleReporter(console)))
    except (ResolutionError, SessionError) as exc:
        console.print(f"[bold red]Error[/bold red]: {escape(str(exc))}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return EXIT_INTERRUPTED
    return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
