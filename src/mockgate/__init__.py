"""
MockGate

Request-mocking engine for HTTP and GraphQL-over-HTTP clients.

Register mock responses on a MockGate, mount its transport on an httpx
client or requests session, and matching requests are answered from
payload files instead of the network.
"""

from .mock import (
    MockGate,
    MockConfig,
    RequestMethod,
    NamedResource,
    DirectLocation,
    MockResponse,
    Intercept,
    PassThrough,
    InterceptedRequest,
    json_contains_object,
    json_path_equals,
    graphql_operation,
    body_contains,
)
from .capture import LogMode, RequestLogInfo
from .common import MockGateError, MalformedURL, MockDataUnavailable, MockSuiteError, DeliveryCancelled

__all__ = [
    'MockGate',
    'MockConfig',
    'RequestMethod',
    'NamedResource',
    'DirectLocation',
    'MockResponse',
    'Intercept',
    'PassThrough',
    'InterceptedRequest',
    'json_contains_object',
    'json_path_equals',
    'graphql_operation',
    'body_contains',
    'LogMode',
    'RequestLogInfo',
    'MockGateError',
    'MalformedURL',
    'MockDataUnavailable',
    'MockSuiteError',
    'DeliveryCancelled',
]

__version__ = '1.0.0'
