"""
MockGate Mock Module

Mock registration and request matching for intercepted HTTP traffic.

This module provides:
- Thread-safe mock registry
- Request matching engine (GraphQL, method and body aware)
- Interception facade for transport hooks
- Cancellable delayed delivery
- YAML mock suites
"""

from .models import (
    RequestMethod,
    PayloadSource,
    NamedResource,
    DirectLocation,
    MockResponse,
    DirectKey,
    GraphQLKey,
    Intercept,
    PassThrough,
)
from .registry import MockRegistry
from .matcher import RequestMatcher, select_response, candidate_keys
from .interceptor import InterceptedRequest, InterceptionFacade
from .delivery import DeliveryClient, MockDelivery, ResponseCollector
from .resources import ResourceLoader
from .suite import MockSuite, MockDefinition
from .helpers import json_contains_object, json_path_equals, graphql_operation, body_contains
from .gate import MockGate, MockConfig

__all__ = [
    # Models
    'RequestMethod',
    'PayloadSource',
    'NamedResource',
    'DirectLocation',
    'MockResponse',
    'DirectKey',
    'GraphQLKey',
    'Intercept',
    'PassThrough',

    # Registry and matching
    'MockRegistry',
    'RequestMatcher',
    'select_response',
    'candidate_keys',

    # Interception
    'InterceptedRequest',
    'InterceptionFacade',
    'DeliveryClient',
    'MockDelivery',
    'ResponseCollector',
    'ResourceLoader',

    # Suites and helpers
    'MockSuite',
    'MockDefinition',
    'json_contains_object',
    'json_path_equals',
    'graphql_operation',
    'body_contains',

    # Service
    'MockGate',
    'MockConfig',
]
