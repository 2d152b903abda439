"""Host resolution helpers."""

from __future__ import annotations

import asyncio
import ipaddress
import socket
from typing import Awaitable, Callable, Optional, Sequence, Union

from ._exceptions import ResolutionError
from ._log import logger

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
Lookup = Callable[[str], Awaitable[Sequence[str]]]


def parse_address(host: str) -> Optional[Address]:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


async def lookup_host(host: str) -> list[str]:
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None, type=socket.SOCK_DGRAM)
    return [info[4][0] for info in infos]


async def resolve(host: str, *, lookup: Optional[Lookup] = None) -> Address:
    """Turn ``host`` into a single address.

    Literal IPv4/IPv6 addresses are returned as-is without any lookup;
    otherwise the first address produced by ``lookup`` wins.
    """
    literal = parse_address(host)
    if literal is not None:
        return literal

    logger.info("Resolving %s...", host)
    lookup = lookup or lookup_host
    try:
        addresses = await lookup(host)
    except (OSError, ValueError) as exc:
        raise ResolutionError(
            host, f"DNS resolution failed for {host}: {exc}"
        ) from exc

    for candidate in addresses:
        address = parse_address(candidate)
        if address is not None:
            logger.info("Resolved %s to %s", host, address)
            return address
    raise ResolutionError(host, f"Could not resolve host: {host}")
