__version__ = "0.1.0"

from ._exceptions import (
    ConfigurationError,
    EchopingError,
    PacketError,
    RawSocketPermissionError,
    ResolutionError,
    SessionError,
)
from ._log import configure_logging, console, logger
from ._models import (
    EchoReply,
    IPv4Fields,
    IPv6Fields,
    ProbeConfig,
    ProbeOutcome,
    TimedOut,
    TransportFailure,
)
from ._probe import ProbeLoop, ping
from ._report import ConsoleReporter, Reporter
from ._resolver import resolve
from ._session import EchoSession
from ._stats import EchoStats, aggregate

__all__ = [
    "__version__",
    "ConfigurationError",
    "EchopingError",
    "PacketError",
    "RawSocketPermissionError",
    "ResolutionError",
    "SessionError",
    "configure_logging",
    "console",
    "logger",
    "EchoReply",
    "IPv4Fields",
    "IPv6Fields",
    "ProbeConfig",
    "ProbeOutcome",
    "TimedOut",
    "TransportFailure",
    "ProbeLoop",
    "ping",
    "ConsoleReporter",
    "Reporter",
    "resolve",
    "EchoSession",
    "EchoStats",
    "aggregate",
]
