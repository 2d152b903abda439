"""Console rendering of probe outcomes and run summaries."""

from __future__ import annotations

from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape

from ._log import console as default_console
from ._models import ProbeOutcome
from ._resolver import Address
from ._stats import EchoStats


class Reporter(Protocol):
    def start(self, host: str, address: Address, size: int) -> None: ...

    def outcome(self, sequence: int, outcome: ProbeOutcome) -> None: ...

    def summary(self, host: str, stats: EchoStats) -> None: ...


class ConsoleReporter:
    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else default_console

    def start(self, host: str, address: Address, size: int) -> None:
        self.console.print(
            f"Pinging [green]{escape(host)}[/green] {escape(f'[{address}]')} "
            f"with {size} bytes of data:",
            highlight=False,
        )

    def outcome(self, sequence: int, outcome: ProbeOutcome) -> None:
        self.console.print(outcome, highlight=False)

    def summary(self, host: str, stats: EchoStats) -> None:
        lines = [
            f"\n--- Ping statistics for {escape(host)} ---",
            f"Packets: Sent = {stats.sent}, Received = {stats.received}, "
            f"Lost = {stats.lost} ({stats.loss_percent:.1f}% loss)",
        ]
        if (
            stats.rtt_min is not None
            and stats.rtt_avg is not None
            and stats.rtt_max is not None
        ):
            lines.append("Round-trip times (ms):")
            lines.append(
                f"  Min = {stats.rtt_min:.1f}, Max = {stats.rtt_max:.1f}, "
                f"Avg = {stats.rtt_avg:.1f}"
            )
        self.console.print("\n".join(lines), highlight=False)
