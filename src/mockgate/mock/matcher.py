"""
MockGate Request Matcher

Matching engine resolving an outgoing request to at most one registered
mock response.

Matching runs in two stages:
- Key resolution: GraphQL operation key, then URL + method, then URL + ALL
- Response selection inside the resolved key's status-code buckets, using
  body predicates when any are configured and default status precedence
  otherwise
"""

import logging
from typing import Iterator, List, Optional, Tuple

from ..common.utils import extract_operation_name
from .models import (
    DirectKey,
    GraphQLKey,
    Intercept,
    MatchKey,
    MatchResult,
    MockResponse,
    PassThrough,
    RequestMethod,
)
from .registry import Buckets, MockRegistry

logger = logging.getLogger("mockgate.matcher")

DEFAULT_STATUS = 200


def candidate_keys(
    url: str,
    method: Optional[RequestMethod],
    operation_name: Optional[str] = None
) -> List[MatchKey]:
    """
    List the registry keys a request may match, in priority order.

    Args:
        url: Absolute request URL
        method: Concrete request method, or None for methods only ALL covers
        operation_name: GraphQL operation name extracted from the body

    Returns:
        Keys to try, most specific first
    """
    keys: List[MatchKey] = []
    if operation_name:
        keys.append(GraphQLKey(url, operation_name))
    if method is not None and method is not RequestMethod.ALL:
        keys.append(DirectKey(url, method))
    keys.append(DirectKey(url, RequestMethod.ALL))
    return keys


def _ordered_pairs(buckets: Buckets) -> Iterator[Tuple[int, MockResponse]]:
    """Yield (status_code, response) by ascending status, then insertion order."""
    for status_code in sorted(buckets):
        for response in buckets[status_code]:
            yield status_code, response


def _predicate_matches(response: MockResponse, body: Optional[bytes]) -> bool:
    try:
        return bool(response.body_matches(body))
    except Exception as e:
        logger.warning(f"Body predicate of mock {response.describe()} raised {e!r}; treating as no match")
        return False


def select_response(
    buckets: Optional[Buckets],
    body: Optional[bytes],
    key: Optional[MatchKey] = None
) -> MatchResult:
    """
    Pick the response to serve from a key's status-code buckets.

    - If any descriptor has a body predicate, only descriptors with a
      predicate are eligible and the first one whose predicate accepts the
      body wins. If none accepts it, the request passes through.
    - Otherwise status 200 wins if present, else the lowest status code;
      the first descriptor of that bucket is served.

    Args:
        buckets: Snapshot from MockRegistry.lookup
        body: Captured request body
        key: Key the buckets belong to, recorded on the result

    Returns:
        Intercept or PassThrough
    """
    if not buckets:
        return PassThrough(reason="No mocks registered for request")

    pairs = list(_ordered_pairs(buckets))
    if not pairs:
        return PassThrough(reason="No mocks registered for request")

    conditional = [(status, response) for status, response in pairs if response.has_predicate]
    if conditional:
        for status_code, response in conditional:
            if _predicate_matches(response, body):
                return Intercept(status_code=status_code, response=response, key=key)
        return PassThrough(reason="No body predicate matched the request body")

    if buckets.get(DEFAULT_STATUS):
        return Intercept(status_code=DEFAULT_STATUS, response=buckets[DEFAULT_STATUS][0], key=key)

    status_code, response = pairs[0]
    return Intercept(status_code=status_code, response=response, key=key)


class RequestMatcher:
    """
    Matching engine bound to a mock registry.

    Example:
        matcher = RequestMatcher(registry)
        result = matcher.find_match('POST', 'https://api.example.com/graphql',
                                    body=b'{"operationName": "GetUser"}')

        if result.intercepted:
            print(f"Serving {result.response.describe()} with {result.status_code}")
    """

    def __init__(self, registry: MockRegistry):
        self.registry = registry

    def resolve_key(
        self,
        url: str,
        method: Optional[RequestMethod],
        operation_name: Optional[str] = None
    ) -> Optional[MatchKey]:
        """Return the first candidate key present in the registry, or None."""
        for key in candidate_keys(url, method, operation_name):
            if self.registry.contains(key):
                return key
        return None

    def has_mock(
        self,
        url: str,
        method: Optional[RequestMethod],
        operation_name: Optional[str] = None
    ) -> bool:
        """Check whether any candidate key for the request is registered."""
        return self.resolve_key(url, method, operation_name) is not None

    def find_match(
        self,
        method: Optional[str],
        url: str,
        body: Optional[bytes] = None,
        operation_name: Optional[str] = None
    ) -> MatchResult:
        """
        Resolve a request to a mock response or a pass-through decision.

        Args:
            method: HTTP method string
            url: Absolute request URL
            body: Captured request body
            operation_name: GraphQL operation name; extracted from the body if None

        Returns:
            Intercept with the status code and descriptor, or PassThrough
        """
        if operation_name is None:
            operation_name = extract_operation_name(body)

        request_method = RequestMethod.from_http(method)

        for key in candidate_keys(url, request_method, operation_name):
            buckets = self.registry.lookup(key)
            if buckets is None:
                continue

            result = select_response(buckets, body, key=key)
            if isinstance(result, Intercept):
                logger.debug(
                    f"Matched {method} {url} to {result.response.describe()} "
                    f"(status {result.status_code}, key {key})"
                )
            else:
                logger.debug(f"Passing through {method} {url}: {result.reason}")
            return result

        return PassThrough(reason=f"No mock registered for {method} {url}")
