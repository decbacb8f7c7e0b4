"""
MockGate Data Model

Request methods, payload sources, mock response descriptors, match keys
and match results shared by the registry, matcher and transports.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..common.utils import canonical_url

BodyPredicate = Callable[[Optional[bytes]], bool]


class RequestMethod(Enum):
    """HTTP request methods a mock can be registered for."""

    ALL = "ALL"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def from_http(cls, method: Optional[str]) -> Optional['RequestMethod']:
        """
        Map a transport-level method string to a RequestMethod.

        Methods outside the concrete set (HEAD, OPTIONS, ...) and ``ALL``
        itself map to None: such requests can only match ``ALL`` mocks.
        """
        if not method:
            return cls.GET

        try:
            member = cls(method.upper())
        except ValueError:
            return None
        return None if member is cls.ALL else member

    @classmethod
    def coerce(cls, method: Union['RequestMethod', str]) -> 'RequestMethod':
        """Accept a RequestMethod or its name for registration calls."""
        if isinstance(method, cls):
            return method
        return cls(str(method).upper())


class PayloadSource:
    """Base class for where the bytes of a mock response come from."""


@dataclass(frozen=True)
class NamedResource(PayloadSource):
    """A payload resolved by name through the resource directories."""

    name: str

    def __str__(self) -> str:
        return f"resource '{self.name}'"


@dataclass(frozen=True)
class DirectLocation(PayloadSource):
    """A payload read directly from a file path or file:// URI."""

    path: str

    def __str__(self) -> str:
        return f"file '{self.path}'"


def as_payload_source(payload: Union[PayloadSource, str, Path]) -> PayloadSource:
    """
    Normalize the payload argument of registration calls.

    A plain string names a resource, a Path is a direct location.
    """
    if isinstance(payload, PayloadSource):
        return payload
    if isinstance(payload, Path):
        return DirectLocation(str(payload))
    if isinstance(payload, str):
        return NamedResource(payload)
    raise TypeError(f"Unsupported payload source: {payload!r}")


@dataclass(frozen=True)
class MockResponse:
    """
    Immutable descriptor of one candidate mock response.

    The status code is not part of the descriptor: it is the registry
    bucket the descriptor is stored under.
    """

    source: PayloadSource
    response_delay: float = 0.0
    body_matches: Optional[BodyPredicate] = None
    identifier: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.source, PayloadSource) or type(self.source) is PayloadSource:
            raise TypeError("source must be a NamedResource or a DirectLocation")
        if self.response_delay < 0:
            raise ValueError(f"response_delay must be non-negative, got {self.response_delay}")

    @property
    def has_predicate(self) -> bool:
        return self.body_matches is not None

    def describe(self) -> str:
        """Short label for logs."""
        return self.identifier or str(self.source)


@dataclass(frozen=True)
class DirectKey:
    """Registry key for a plain URL and method; the URL is kept in canonical form."""

    url: str
    method: RequestMethod

    def __post_init__(self):
        object.__setattr__(self, "url", canonical_url(self.url))


@dataclass(frozen=True)
class GraphQLKey:
    """Registry key for a GraphQL operation posted to a URL (canonical form)."""

    url: str
    operation_name: str

    def __post_init__(self):
        object.__setattr__(self, "url", canonical_url(self.url))


MatchKey = Union[DirectKey, GraphQLKey]


@dataclass(frozen=True)
class Intercept:
    """The matcher selected a mock response."""

    status_code: int
    response: MockResponse
    key: Optional[MatchKey] = None

    @property
    def intercepted(self) -> bool:
        return True


@dataclass(frozen=True)
class PassThrough:
    """No applicable mock; the request goes to its real destination."""

    reason: str = ""

    @property
    def intercepted(self) -> bool:
        return False


MatchResult = Union[Intercept, PassThrough]
