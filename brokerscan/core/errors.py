"""Error kinds raised by the scan core.

Only :class:`ValidationError` is allowed to escape a scan.  The other two
are raised by individual broker strategies and converted into failed
``BrokerResult`` entries by the orchestrator.
"""
from __future__ import annotations


class BrokerScanError(Exception):
    """Base class for all brokerscan errors."""


class ValidationError(BrokerScanError, ValueError):
    """Raised when a search query is missing a required field."""


class TransportError(BrokerScanError, ConnectionError):
    """Raised when a broker call fails at the network or payload level."""

    def __init__(self, message: str, *, broker: str | None = None) -> None:
        super().__init__(message)
        self.broker = broker


class ConfigurationError(BrokerScanError, RuntimeError):
    """Raised when a broker integration is missing its credential or endpoint."""
