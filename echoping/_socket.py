"""Raw ICMP socket driven by the asyncio event loop."""

from __future__ import annotations

import asyncio
import socket
from typing import Optional

from ._exceptions import RawSocketPermissionError, SessionError
from ._log import logger

RECV_BUFFER = 4096


class IcmpSocket:
    def __init__(self, version: int = 4):
        self.version = version
        if version == 6:
            family, proto = socket.AF_INET6, socket.IPPROTO_ICMPV6
        else:
            family, proto = socket.AF_INET, socket.getprotobyname("icmp")
        try:
            sock = socket.socket(family, socket.SOCK_RAW, proto)
        except PermissionError as exc:
            message = (
                "Raw socket requires elevated privileges. Use sudo or grant "
                "CAP_NET_RAW to the Python interpreter."
            )
            raise RawSocketPermissionError(message) from exc
        except OSError as exc:
            raise SessionError(f"Cannot open ICMP socket: {exc}") from exc
        sock.setblocking(False)
        self._sock: Optional[socket.socket] = sock
        logger.debug("Opened raw ICMPv%d socket (fd=%d)", version, sock.fileno())

    @property
    def sock(self) -> socket.socket:
        if self._sock is None:
            raise OSError("ICMP socket is closed")
        return self._sock

    async def sendto(self, data: bytes, address: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.sock_sendto(self.sock, data, (address, 0))

    async def recvfrom(self) -> tuple[bytes, str]:
        loop = asyncio.get_running_loop()
        data, addr = await loop.sock_recvfrom(self.sock, RECV_BUFFER)
        return data, addr[0]

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
