"""
MockGate Service

Owner of one mock registry and one logging configuration, and the public
API host applications and tests use to register mocks, configure request
logging and build interception transports.

A MockGate is constructed explicitly (typically once per test session)
and passed to whatever needs it; there is no module-level instance.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..capture.request_log import LogCallback, LoggingConfiguration, LogMode
from ..common.utils import split_env_paths
from .interceptor import InterceptedRequest, InterceptionFacade
from .models import (
    BodyPredicate,
    DirectKey,
    GraphQLKey,
    MatchResult,
    MockResponse,
    PayloadSource,
    RequestMethod,
    as_payload_source,
)
from .registry import MockRegistry
from .resources import ResourceLoader
from .suite import MockSuite

PayloadArg = Union[PayloadSource, str, Path]

DEFAULT_BYPASS_MARKER = "mockgate.bypass"


@dataclass
class MockConfig:
    """Configuration for a MockGate."""

    # Payload lookup
    resource_dirs: List[str] = field(default_factory=list)
    test_resource_dirs: List[str] = field(default_factory=list)
    resource_extension: str = ".json"

    # Response behavior
    content_type: str = "application/json"

    # Interception
    bypass_marker: str = DEFAULT_BYPASS_MARKER

    # Logging level of the "mockgate" logger
    log_level: str = "warning"

    @classmethod
    def from_env(cls) -> 'MockConfig':
        """
        Build a configuration from environment variables.

        - MOCKGATE_RESOURCE_DIRS: os.pathsep-separated application directories
        - MOCKGATE_TEST_RESOURCE_DIRS: os.pathsep-separated test directories
        - MOCKGATE_LOG_LEVEL: level name for the "mockgate" logger
        """
        return cls(
            resource_dirs=split_env_paths('MOCKGATE_RESOURCE_DIRS'),
            test_resource_dirs=split_env_paths('MOCKGATE_TEST_RESOURCE_DIRS'),
            log_level=os.environ.get('MOCKGATE_LOG_LEVEL', 'warning')
        )


class MockGate:
    """
    Request-mocking engine for HTTP and GraphQL-over-HTTP requests.

    Example:
        gate = MockGate(MockConfig(test_resource_dirs=['tests/fixtures']))
        gate.register_mock('https://api.example.com/users', 200,
                           method=RequestMethod.GET, payload='users_success')

        client = httpx.Client(transport=gate.transport())
        response = client.get('https://api.example.com/users')   # served from users_success.json

        gate.clear_all_mocks()
    """

    def __init__(
        self,
        config: Optional[MockConfig] = None,
        registry: Optional[MockRegistry] = None,
        logging_config: Optional[LoggingConfiguration] = None,
        loader: Optional[ResourceLoader] = None
    ):
        """
        Initialize a MockGate.

        Args:
            config: Optional MockConfig
            registry: Optional MockRegistry (created if None)
            logging_config: Optional LoggingConfiguration (created if None)
            loader: Optional ResourceLoader (built from config if None)
        """
        self.config = config or MockConfig()

        self.logger = logging.getLogger("mockgate")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.registry = registry or MockRegistry()
        self.logging_config = logging_config or LoggingConfiguration()
        self.loader = loader or ResourceLoader(
            resource_dirs=self.config.resource_dirs,
            test_resource_dirs=self.config.test_resource_dirs,
            extension=self.config.resource_extension
        )
        self.facade = InterceptionFacade(self.registry, self.logging_config)

    def register_mock(
        self,
        url: str,
        status_code: int,
        method: Union[RequestMethod, str] = RequestMethod.ALL,
        payload: Optional[PayloadArg] = None,
        response_delay: float = 0.0,
        body_matches: Optional[BodyPredicate] = None,
        identifier: Optional[str] = None
    ) -> MockResponse:
        """
        Register a mock response for a URL and method.

        Args:
            url: Absolute URL the mock applies to
            status_code: Status code served with the mock
            method: Request method, or ALL for any method
            payload: NamedResource/DirectLocation, a resource name or a Path
            response_delay: Seconds to wait before delivering the response
            body_matches: Predicate over the raw request body
            identifier: Label used in logs

        Returns:
            The registered descriptor
        """
        if payload is None:
            raise TypeError("register_mock() requires a payload")

        response = MockResponse(
            source=as_payload_source(payload),
            response_delay=response_delay,
            body_matches=body_matches,
            identifier=identifier
        )
        self.registry.register(DirectKey(url, RequestMethod.coerce(method)), status_code, response)
        return response

    def register_graphql_mock(
        self,
        operation_name: str,
        url: str,
        status_code: int,
        payload: PayloadArg,
        response_delay: float = 0.0,
        body_matches: Optional[BodyPredicate] = None,
        identifier: Optional[str] = None
    ) -> MockResponse:
        """Register a mock response for a GraphQL operation posted to ``url``."""
        response = MockResponse(
            source=as_payload_source(payload),
            response_delay=response_delay,
            body_matches=body_matches,
            identifier=identifier or operation_name
        )
        self.registry.register(GraphQLKey(url, operation_name), status_code, response)
        return response

    def load_suite(self, suite: Union[MockSuite, str, Path]) -> int:
        """
        Register every mock of a suite.

        Args:
            suite: MockSuite or path to a YAML suite file

        Returns:
            Number of mocks registered
        """
        if not isinstance(suite, MockSuite):
            suite = MockSuite.from_yaml(suite)

        for mock in suite.mocks:
            if mock.operation:
                self.register_graphql_mock(
                    mock.operation,
                    mock.url,
                    mock.status,
                    mock.source,
                    response_delay=mock.delay,
                    body_matches=mock.body_predicate(),
                    identifier=mock.id
                )
            else:
                self.register_mock(
                    mock.url,
                    mock.status,
                    method=mock.method,
                    payload=mock.source,
                    response_delay=mock.delay,
                    body_matches=mock.body_predicate(),
                    identifier=mock.id
                )

        self.logger.info(f"Loaded {len(suite.mocks)} mocks from suite '{suite.name}'")
        return len(suite.mocks)

    def clear_all_mocks(self) -> None:
        """Remove every registered mock; logging configuration is kept."""
        self.registry.clear_all()

    def configure_logging(
        self,
        mode: LogMode,
        urls: Iterable[str] = (),
        callback: Optional[LogCallback] = None
    ) -> None:
        """Set the request logging mode, URL filter and callback."""
        self.logging_config.configure(mode, urls, callback)

    def should_intercept(self, request: InterceptedRequest) -> bool:
        return self.facade.should_intercept(request)

    def resolve(self, request: InterceptedRequest) -> MatchResult:
        return self.facade.resolve(request)

    def load_payload(self, response: MockResponse) -> bytes:
        """Load the bytes of a mock response; raises MockDataUnavailable."""
        return self.loader.load(response.source)

    def transport(self, wrapped=None):
        """Build an httpx transport routing requests through this gate."""
        from ..transport.httpx_transport import MockTransport

        return MockTransport(self, wrapped=wrapped)

    def async_transport(self, wrapped=None):
        """Build an async httpx transport routing requests through this gate."""
        from ..transport.httpx_transport import AsyncMockTransport

        return AsyncMockTransport(self, wrapped=wrapped)

    def adapter(self, **kwargs):
        """Build a requests transport adapter routing requests through this gate."""
        from ..transport.requests_adapter import MockAdapter

        return MockAdapter(self, **kwargs)

    def close(self) -> None:
        """Clear mocks and stop the logging worker."""
        self.registry.clear_all()
        self.logging_config.close()

    def __enter__(self) -> 'MockGate':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
