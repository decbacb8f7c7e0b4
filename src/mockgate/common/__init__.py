"""
MockGate Common Utilities

Shared errors, locks and helpers used across MockGate modules.
"""

from .errors import (
    MockGateError,
    MalformedURL,
    MockDataUnavailable,
    MockSuiteError,
    DeliveryCancelled,
)
from .rwlock import ReadWriteLock
from .utils import safe_json_parse, extract_operation_name, split_env_paths, canonical_url

__all__ = [
    'MockGateError',
    'MalformedURL',
    'MockDataUnavailable',
    'MockSuiteError',
    'DeliveryCancelled',
    'ReadWriteLock',
    'safe_json_parse',
    'extract_operation_name',
    'split_env_paths',
    'canonical_url',
]
