"""One ICMP echo conversation with a single address."""

from __future__ import annotations

import asyncio
import ipaddress
import os
import time
from typing import Optional, Protocol, Union

from ._exceptions import PacketError
from ._log import logger
from ._models import (
    EchoReply,
    IPv4Fields,
    IPv6Fields,
    ProbeOutcome,
    TimedOut,
    TransportFailure,
)
from ._packet import (
    ECHO_REPLY,
    ERROR_TYPES,
    ReceivedPacket,
    build_echo_request,
    describe_error,
    icmp_checksum,
    parse_reply,
    quoted_echo,
)
from ._resolver import Address
from ._socket import IcmpSocket


class EchoSocket(Protocol):
    async def sendto(self, data: bytes, address: str) -> None: ...

    async def recvfrom(self) -> tuple[bytes, str]: ...

    def close(self) -> None: ...


class EchoSession:
    """Owns one ICMP socket and exchanges echo requests with ``address``.

    The identifier is fixed for the lifetime of the session. Exchanges are
    serialized, so replies can always be matched against a single
    outstanding (identifier, sequence) pair.
    """

    def __init__(
        self,
        address: Union[Address, str],
        *,
        identifier: Optional[int] = None,
        sock: Optional[EchoSocket] = None,
    ):
        self.address: Address = ipaddress.ip_address(address)
        if identifier is None:
            identifier = os.getpid()
        self.identifier = identifier & 0xFFFF
        self._sock: Optional[EchoSocket] = (
            sock if sock is not None else IcmpSocket(self.address.version)
        )
        self._lock = asyncio.Lock()

    @property
    def version(self) -> int:
        return self.address.version

    async def exchange(
        self, sequence: int, payload: bytes, timeout: float
    ) -> ProbeOutcome:
        sequence &= 0xFFFF
        async with self._lock:
            try:
                return await asyncio.wait_for(
                    self._send_and_wait(sequence, payload), timeout
                )
            except asyncio.TimeoutError:
                logger.debug("seq=%d: no reply within %.3fs", sequence, timeout)
                return TimedOut(timeout=timeout)
            except OSError as exc:
                logger.debug("seq=%d: transport error %r", sequence, exc)
                return TransportFailure(message=str(exc) or exc.__class__.__name__)

    async def _send_and_wait(self, sequence: int, payload: bytes) -> ProbeOutcome:
        sock = self._socket()
        packet = build_echo_request(
            self.identifier, sequence, payload, version=self.version
        )
        sent_at = time.perf_counter()
        await sock.sendto(packet, str(self.address))

        while True:
            data, source = await sock.recvfrom()
            received_at = time.perf_counter()
            try:
                received = parse_reply(data, source, version=self.version)
            except PacketError as err:
                logger.debug("Discarding malformed packet: %s", err)
                continue

            outcome = self._classify(
                received, sequence, (received_at - sent_at) * 1000
            )
            if outcome is not None:
                return outcome

    def _classify(
        self, received: ReceivedPacket, sequence: int, rtt: float
    ) -> Optional[ProbeOutcome]:
        icmp_pkt = received.icmp_packet

        if icmp_pkt.type == ECHO_REPLY[self.version]:
            if icmp_pkt.id != self.identifier or icmp_pkt.sequence != sequence:
                return None
            if self.version == 6:
                return EchoReply(
                    source=received.src_addr,
                    size=received.size,
                    rtt=rtt,
                    sequence=sequence,
                    family=IPv6Fields(),
                )
            if icmp_checksum(received.raw) != 0:
                return TransportFailure(
                    message=f"Malformed reply from {received.src_addr}: bad checksum"
                )
            return EchoReply(
                source=received.src_addr,
                size=received.size,
                rtt=rtt,
                sequence=sequence,
                family=IPv4Fields(ttl=received.ttl),
            )

        if icmp_pkt.type in ERROR_TYPES[self.version]:
            if quoted_echo(icmp_pkt, version=self.version) != (
                self.identifier,
                sequence,
            ):
                return None
            reason = describe_error(icmp_pkt, version=self.version)
            return TransportFailure(message=f"{reason} (from {received.src_addr})")

        return None

    def _socket(self) -> EchoSocket:
        if self._sock is None:
            raise OSError("Echo session is closed")
        return self._sock

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    async def __aenter__(self) -> "EchoSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
