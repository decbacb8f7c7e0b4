"""
MockGate Errors

Exception types raised by the registry, resource loader and transports.

A request that matches no mock is not an error: the matcher returns
PassThrough for it.
"""

from typing import Any, List, Optional


class MockGateError(Exception):
    """Base class for all MockGate errors."""


class MalformedURL(MockGateError):
    """Raised when an intercepted request has no resolvable URL."""

    def __init__(self, message: str = "Request has no resolvable URL"):
        super().__init__(message)


class MockDataUnavailable(MockGateError):
    """
    Raised when the bytes of a selected mock response cannot be loaded.

    Attributes:
        source: The payload source that was being loaded
        searched: Locations that were tried, in order
    """

    def __init__(self, source: Any, searched: Optional[List[str]] = None, reason: str = ""):
        self.source = source
        self.searched = list(searched or [])
        message = f"Failed to load mock data for {source}"
        if reason:
            message += f": {reason}"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class MockSuiteError(MockGateError, ValueError):
    """Raised when a mock suite definition is invalid."""


class DeliveryCancelled(MockGateError):
    """Raised when a delayed mock delivery was cancelled before it completed."""
