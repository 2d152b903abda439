import asyncio
import socket
import struct
from collections import deque

import pytest

from echoping._packet import ICMP_HEADER, icmp_checksum


def icmp_message(icmp_type, identifier, sequence, payload=b"", *, code=0, checksum=True):
    header = ICMP_HEADER.pack(icmp_type, code, 0, identifier, sequence)
    value = icmp_checksum(header + payload) if checksum else 0
    return ICMP_HEADER.pack(icmp_type, code, value, identifier, sequence) + payload


def ipv4_datagram(message, *, src="10.0.0.1", dst="10.0.0.2", ttl=57, protocol=1):
    header = struct.pack(
        "!BBHHHBBH4s4s",
        0x45,
        0,
        20 + len(message),
        0,
        0,
        ttl,
        protocol,
        0,
        socket.inet_aton(src),
        socket.inet_aton(dst),
    )
    return header + message


class FakeSocket:
    """In-memory stand-in for IcmpSocket.

    ``responder`` is called with every sent packet and returns the items to
    queue for ``recvfrom``: ``(data, source)`` tuples or exceptions to raise.
    An empty queue blocks until the caller's timeout cancels the wait.
    """

    def __init__(self, responder=None):
        self.responder = responder
        self.sent = []
        self.pending = deque()
        self.send_errors = deque()
        self.closed = False

    async def sendto(self, data, address):
        if self.send_errors:
            raise self.send_errors.popleft()
        self.sent.append((data, address))
        if self.responder is not None:
            self.pending.extend(self.responder(data, address))

    async def recvfrom(self):
        while not self.pending:
            await asyncio.sleep(3600)
        item = self.pending.popleft()
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self):
        self.closed = True


def echo_reply_v4(request, *, src="10.0.0.1", ttl=57):
    _, _, _, identifier, sequence = ICMP_HEADER.unpack(request[:8])
    return ipv4_datagram(
        icmp_message(0, identifier, sequence, request[8:]), src=src, ttl=ttl
    )


@pytest.fixture
def fake_socket():
    return FakeSocket
