from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Union

from rich.markup import escape

from ._exceptions import ConfigurationError

MAX_COUNT = 0xFFFF
MAX_PAYLOAD_SIZE = 1500


@dataclass(frozen=True)
class ProbeConfig:
    host: str
    count: int = 4
    timeout: float = 1.0
    interval: float = 1.0
    size: int = 56

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.host:
            raise ConfigurationError("host must not be empty")
        if not 1 <= self.count <= MAX_COUNT:
            raise ConfigurationError(f"count must be between 1 and {MAX_COUNT}")
        if not (math.isfinite(self.timeout) and self.timeout > 0):
            raise ConfigurationError("timeout must be a positive number of seconds")
        if not (math.isfinite(self.interval) and self.interval > 0):
            raise ConfigurationError("interval must be a positive number of seconds")
        if not 1 <= self.size <= MAX_PAYLOAD_SIZE:
            raise ConfigurationError(
                f"size must be between 1 and {MAX_PAYLOAD_SIZE} bytes"
            )

    def payload(self) -> bytes:
        return bytes(self.size)


@dataclass(frozen=True)
class IPv4Fields:
    ttl: Optional[int] = None


@dataclass(frozen=True)
class IPv6Fields:
    pass


@dataclass(frozen=True)
class EchoReply:
    source: str
    size: int
    rtt: float
    sequence: int
    family: Union[IPv4Fields, IPv6Fields] = field(default_factory=IPv4Fields)

    def __str__(self) -> str:
        text = f"Reply from {self.source}: bytes={self.size} time={self.rtt:.1f}ms"
        if isinstance(self.family, IPv4Fields) and self.family.ttl is not None:
            text += f" TTL={self.family.ttl}"
        return text

    def __rich__(self) -> str:
        return escape(self.__str__())


@dataclass(frozen=True)
class TransportFailure:
    message: str

    def __str__(self) -> str:
        return f"Error: {self.message}"

    def __rich__(self) -> str:
        return f"[red]Error[/red]: {escape(self.message)}"


@dataclass(frozen=True)
class TimedOut:
    timeout: float

    def __str__(self) -> str:
        return "Timeout: Request timed out."

    def __rich__(self) -> str:
        return "[yellow]Timeout[/yellow]: Request timed out."


ProbeOutcome = Union[EchoReply, TransportFailure, TimedOut]
