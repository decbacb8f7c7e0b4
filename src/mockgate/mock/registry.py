"""
MockGate Mock Registry

Thread-safe store mapping match keys to status-code buckets of mock
response descriptors.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..common.rwlock import ReadWriteLock
from .models import MatchKey, MockResponse

logger = logging.getLogger("mockgate.registry")

Buckets = Dict[int, Tuple[MockResponse, ...]]


class MockRegistry:
    """
    Concurrent store of registered mocks.

    Every key maps to ``{status_code: [descriptor, ...]}``. Registering under
    an existing (key, status_code) pair appends to that bucket, so several
    body-matched variants can share one status code.

    Mutations take the write lock; lookups take the read lock and return a
    copy, so callers never observe a partially updated bucket.

    Example:
        registry = MockRegistry()
        key = DirectKey('https://api.example.com/users', RequestMethod.GET)
        registry.register(key, 200, MockResponse(NamedResource('users_success')))

        buckets = registry.lookup(key)   # {200: (MockResponse(...),)}
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._mocks: Dict[MatchKey, Dict[int, List[MockResponse]]] = {}

    def register(self, key: MatchKey, status_code: int, response: MockResponse) -> None:
        """
        Append a descriptor to the bucket for (key, status_code).

        Args:
            key: DirectKey or GraphQLKey
            status_code: HTTP status code served with the response
            response: Mock response descriptor
        """
        with self._lock.write_locked():
            buckets = self._mocks.setdefault(key, {})
            buckets.setdefault(int(status_code), []).append(response)

        logger.debug(f"Registered mock {response.describe()} for {key} (status {status_code})")

    def clear_all(self) -> None:
        """Remove every registered mock."""
        with self._lock.write_locked():
            count = len(self._mocks)
            self._mocks = {}

        if count:
            logger.debug(f"Cleared mocks for {count} keys")

    def lookup(self, key: MatchKey) -> Optional[Buckets]:
        """
        Get a snapshot of the buckets registered for a key.

        Returns:
            Mapping of status code to descriptors in insertion order, or None
        """
        with self._lock.read_locked():
            buckets = self._mocks.get(key)
            if buckets is None:
                return None
            return {status: tuple(responses) for status, responses in buckets.items()}

    def contains(self, key: MatchKey) -> bool:
        """Check whether any mock is registered for a key."""
        with self._lock.read_locked():
            return key in self._mocks

    def keys(self) -> List[MatchKey]:
        """Snapshot of registered keys, in registration order."""
        with self._lock.read_locked():
            return list(self._mocks.keys())

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._mocks)

    def __contains__(self, key: MatchKey) -> bool:
        return self.contains(key)
