from __future__ import annotations


class EchopingError(Exception):
    """Base class for every error raised by echoping."""


class ConfigurationError(EchopingError, ValueError):
    """Raised when a probe configuration value is out of range."""


class ResolutionError(EchopingError):
    """Raised when a host cannot be turned into an address."""

    def __init__(self, host: str, message: str):
        super().__init__(message)
        self.host = host


class SessionError(EchopingError):
    """Raised when the ICMP socket backing a session cannot be opened."""


class RawSocketPermissionError(SessionError, PermissionError):
    """Raised when raw socket creation fails due to missing privileges."""


class PacketError(EchopingError, ValueError):
    """Raised when a received packet cannot be decoded."""
