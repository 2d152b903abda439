"""ICMP and ICMPv6 echo framing and reply parsing."""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass
from typing import Optional

from ._exceptions import PacketError

ICMP_ECHO_REQUEST = 8
ICMP_ECHO_REPLY = 0
ICMP_DEST_UNREACHABLE = 3
ICMP_TIME_EXCEEDED = 11

ICMPV6_DEST_UNREACHABLE = 1
ICMPV6_TIME_EXCEEDED = 3
ICMPV6_ECHO_REQUEST = 128
ICMPV6_ECHO_REPLY = 129

IPV6_HEADER_LENGTH = 40
IPPROTO_ICMPV6 = 58

ICMP_HEADER = struct.Struct("!BBHHH")

ECHO_REQUEST = {4: ICMP_ECHO_REQUEST, 6: ICMPV6_ECHO_REQUEST}
ECHO_REPLY = {4: ICMP_ECHO_REPLY, 6: ICMPV6_ECHO_REPLY}
ERROR_TYPES = {
    4: {ICMP_DEST_UNREACHABLE, ICMP_TIME_EXCEEDED},
    6: {ICMPV6_DEST_UNREACHABLE, ICMPV6_TIME_EXCEEDED},
}

_UNREACHABLE_V4 = {
    0: "Destination net unreachable",
    1: "Destination host unreachable",
    2: "Destination protocol unreachable",
    3: "Destination port unreachable",
    4: "Fragmentation needed",
    13: "Communication administratively prohibited",
}
_UNREACHABLE_V6 = {
    0: "No route to destination",
    1: "Communication administratively prohibited",
    3: "Destination address unreachable",
    4: "Destination port unreachable",
}


@dataclass
class IcmpPacket:
    type: int
    code: int
    checksum: int
    id: int
    sequence: int
    data: bytes


@dataclass
class ReceivedPacket:
    src_addr: str
    ttl: Optional[int]
    icmp_packet: IcmpPacket
    raw: bytes

    @property
    def size(self) -> int:
        return len(self.raw)


def icmp_checksum(data: bytes) -> int:
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack("!%dH" % (len(data) // 2), data))
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return (~total) & 0xFFFF


def build_echo_request(
    identifier: int, sequence: int, payload: bytes, *, version: int = 4
) -> bytes:
    """Frame an echo request.

    ICMPv6 requests are sent with a zero checksum: the kernel fills it in for
    raw ICMPv6 sockets since it depends on the IPv6 pseudo-header.
    """
    icmp_type = ECHO_REQUEST[version]
    header = ICMP_HEADER.pack(icmp_type, 0, 0, identifier, sequence)
    if version == 6:
        return header + payload
    checksum = icmp_checksum(header + payload)
    header = ICMP_HEADER.pack(icmp_type, 0, checksum, identifier, sequence)
    return header + payload


def _parse_icmp(message: bytes) -> IcmpPacket:
    if len(message) < ICMP_HEADER.size:
        raise PacketError("Packet shorter than ICMP header (8 bytes).")
    icmph = ICMP_HEADER.unpack(message[: ICMP_HEADER.size])
    return IcmpPacket(
        type=icmph[0],
        code=icmph[1],
        checksum=icmph[2],
        id=icmph[3],
        sequence=icmph[4],
        data=message[ICMP_HEADER.size :],
    )


def parse_ipv4(pkt: bytes) -> ReceivedPacket:
    """Decode a datagram read from a raw IPv4 socket (IP header included)."""
    if len(pkt) < 20:
        raise PacketError("Packet shorter than minimum IP header length (20 bytes).")

    version_ihl = pkt[0]
    if version_ihl >> 4 != 4:
        raise PacketError(f"Unexpected IP version {version_ihl >> 4}.")
    iph_length = (version_ihl & 0xF) * 4
    if iph_length < 20 or len(pkt) < iph_length + ICMP_HEADER.size:
        raise PacketError(
            "Packet shorter than IP header + ICMP header (IHL + 8 bytes)."
        )

    ttl = pkt[8]
    src_addr = socket.inet_ntoa(pkt[12:16])
    message = pkt[iph_length:]
    return ReceivedPacket(
        src_addr=src_addr, ttl=ttl, icmp_packet=_parse_icmp(message), raw=message
    )


def parse_ipv6(message: bytes, src_addr: str) -> ReceivedPacket:
    """Decode a message read from a raw ICMPv6 socket (no IPv6 header)."""
    return ReceivedPacket(
        src_addr=src_addr, ttl=None, icmp_packet=_parse_icmp(message), raw=message
    )


def parse_reply(data: bytes, src_addr: str, *, version: int = 4) -> ReceivedPacket:
    if version == 6:
        return parse_ipv6(data, src_addr)
    return parse_ipv4(data)


def quoted_echo(icmp_pkt: IcmpPacket, *, version: int = 4) -> Optional[tuple[int, int]]:
    """Return the (identifier, sequence) of the echo request quoted by an error."""
    data = icmp_pkt.data
    if version == 6:
        if len(data) < IPV6_HEADER_LENGTH + ICMP_HEADER.size:
            return None
        if data[6] != IPPROTO_ICMPV6:
            return None
        offset = IPV6_HEADER_LENGTH
    else:
        if len(data) < 20:
            return None
        offset = (data[0] & 0xF) * 4
        if offset < 20 or len(data) < offset + ICMP_HEADER.size:
            return None

    inner_type, _, _, inner_id, inner_seq = ICMP_HEADER.unpack(
        data[offset : offset + ICMP_HEADER.size]
    )
    if inner_type != ECHO_REQUEST[version]:
        return None
    return inner_id, inner_seq


def describe_error(icmp_pkt: IcmpPacket, *, version: int = 4) -> str:
    if version == 6:
        if icmp_pkt.type == ICMPV6_TIME_EXCEEDED:
            return "Hop limit exceeded"
        reason = _UNREACHABLE_V6.get(icmp_pkt.code)
    else:
        if icmp_pkt.type == ICMP_TIME_EXCEEDED:
            return "Time to live exceeded"
        reason = _UNREACHABLE_V4.get(icmp_pkt.code)
    if reason is None:
        return f"Destination unreachable (code {icmp_pkt.code})"
    return reason
