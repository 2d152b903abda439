"""Probe loop: paced echo exchanges folded into running statistics."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Protocol

from ._log import logger
from ._models import EchoReply, ProbeConfig, ProbeOutcome, TimedOut
from ._report import Reporter
from ._resolver import Address, Lookup, resolve
from ._session import EchoSession
from ._stats import EchoStats

Sleep = Callable[[float], Awaitable[None]]


class Exchanger(Protocol):
    async def exchange(
        self, sequence: int, payload: bytes, timeout: float
    ) -> ProbeOutcome: ...


class ProbeLoop:
    """Drive ``config.count`` exchanges on one session.

    Consecutive sends are separated by exactly ``config.interval``; the time
    spent waiting for the previous reply is not deducted. Per-probe failures
    are recorded as lost probes and never abort the loop.
    """

    def __init__(
        self,
        config: ProbeConfig,
        session: Exchanger,
        *,
        reporter: Optional[Reporter] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self.session = session
        self.reporter = reporter
        self._sleep = sleep
        self._stats = EchoStats()

    @property
    def statistics(self) -> EchoStats:
        """Finalized statistics of the probes completed so far."""
        return self._stats.finalize()

    async def run(self) -> EchoStats:
        payload = self.config.payload()
        count = self.config.count
        for idx in range(count):
            if idx > 0:
                await self._sleep(self.config.interval)
            sequence = idx & 0xFFFF
            logger.debug("Sending ping %d/%d (seq=%d)", idx + 1, count, sequence)
            outcome = await self.session.exchange(
                sequence, payload, self.config.timeout
            )
            self._stats.record(outcome)
            if isinstance(outcome, EchoReply):
                logger.debug(
                    "Ping %d: reply from %s in %.2f ms",
                    idx + 1,
                    outcome.source,
                    outcome.rtt,
                )
            elif isinstance(outcome, TimedOut):
                logger.debug("Ping %d: timed out", idx + 1)
            else:
                logger.debug("Ping %d: error %s", idx + 1, outcome.message)
            if self.reporter is not None:
                self.reporter.outcome(sequence, outcome)
        return self.statistics


async def ping(
    config: ProbeConfig,
    *,
    reporter: Optional[Reporter] = None,
    lookup: Optional[Lookup] = None,
    session_factory: Callable[[Address], EchoSession] = EchoSession,
    sleep: Sleep = asyncio.sleep,
) -> EchoStats:
    """Resolve ``config.host``, open a session and run the probe loop.

    Only resolution and session construction failures propagate. If the run
    is cancelled, the reporter still receives the summary of the probes that
    completed before the cancellation.
    """
    address = await resolve(config.host, lookup=lookup)
    session = session_factory(address)
    async with session:
        if reporter is not None:
            reporter.start(config.host, address, config.size)
        probe_loop = ProbeLoop(config, session, reporter=reporter, sleep=sleep)
        logger.debug(
            "Starting %d probes to %s (identifier=%d)",
            config.count,
            address,
            session.identifier,
        )
        try:
            return await probe_loop.run()
        finally:
            stats = probe_loop.statistics
            logger.debug(
                "Ping stats -> sent: %d received: %d loss: %.1f%%",
                stats.sent,
                stats.received,
                stats.loss_percent,
            )
            if reporter is not None:
                reporter.summary(config.host, stats)
