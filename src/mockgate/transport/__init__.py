"""
MockGate Transports

Interception hooks for httpx and requests.
"""

from .httpx_transport import MockTransport, AsyncMockTransport, MockTransportError
from .requests_adapter import MockAdapter

__all__ = [
    'MockTransport',
    'AsyncMockTransport',
    'MockTransportError',
    'MockAdapter',
]
