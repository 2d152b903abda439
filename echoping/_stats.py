"""Round-trip statistics over a series of probe outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ._models import EchoReply, ProbeOutcome


@dataclass
class EchoStats:
    sent: int = 0
    received: int = 0
    lost: int = 0
    loss_percent: float = 0.0
    rtt_min: Optional[float] = None
    rtt_avg: Optional[float] = None
    rtt_max: Optional[float] = None
    rtts: list[float] = field(default_factory=list, repr=False)

    def record(self, outcome: ProbeOutcome) -> None:
        """Count one probe; exactly one of received/lost moves with sent."""
        self.sent += 1
        if isinstance(outcome, EchoReply):
            self.received += 1
            self.rtts.append(outcome.rtt)
        else:
            self.lost += 1

    def finalize(self) -> "EchoStats":
        rtts = self.rtts
        self.loss_percent = (self.lost / self.sent) * 100 if self.sent else 0.0
        self.rtt_min = min(rtts) if rtts else None
        self.rtt_avg = (sum(rtts) / len(rtts)) if rtts else None
        self.rtt_max = max(rtts) if rtts else None
        return self


def aggregate(outcomes: Iterable[ProbeOutcome]) -> EchoStats:
    stats = EchoStats()
    for outcome in outcomes:
        stats.record(outcome)
    return stats.finalize()
