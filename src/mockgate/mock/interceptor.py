"""
MockGate Interception Facade

Boundary used by transport hooks: decides whether a request is handled by
MockGate and resolves it to a mock response or a pass-through decision.
"""

import logging
import threading
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ..capture.request_log import LoggingConfiguration
from ..common.errors import MalformedURL
from ..common.utils import extract_operation_name
from .matcher import RequestMatcher
from .models import MatchResult, RequestMethod
from .registry import MockRegistry

logger = logging.getLogger("mockgate.interceptor")

BodySource = Union[bytes, bytearray, str, Iterable[bytes], Any, None]


class InterceptedRequest:
    """
    Transport-neutral view of an outgoing request.

    The body may be given as bytes, text, a file-like object or an
    iterable of byte chunks. It is read once, on first access, and the
    captured bytes are reused by logging and body predicates.
    """

    def __init__(
        self,
        method: Optional[str],
        url: Optional[str],
        headers: Optional[Mapping[str, str]] = None,
        body: BodySource = None,
        bypass: bool = False
    ):
        self.method = (method or "GET").upper()
        self.url = url
        self.headers: Dict[str, str] = dict(headers or {})
        self.bypass = bypass
        self._body_source = body
        self._body: Optional[bytes] = None
        self._captured = False
        self._capture_lock = threading.Lock()

    @property
    def body(self) -> Optional[bytes]:
        """Request body bytes, captured on first access."""
        if not self._captured:
            with self._capture_lock:
                if not self._captured:
                    self._body = self._read_body(self._body_source)
                    self._body_source = None
                    self._captured = True
        return self._body

    @staticmethod
    def _read_body(source: BodySource) -> Optional[bytes]:
        """Read a body source to bytes; an empty body is None for every hook."""
        if source is None:
            return None
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
        elif isinstance(source, str):
            data = source.encode('utf-8')
        elif hasattr(source, 'read'):
            data = source.read()
            if isinstance(data, str):
                data = data.encode('utf-8')
        else:
            data = b"".join(
                chunk.encode('utf-8') if isinstance(chunk, str) else bytes(chunk)
                for chunk in source
            )
        return data or None

    @property
    def operation_name(self) -> Optional[str]:
        return extract_operation_name(self.body)

    def __repr__(self) -> str:
        return f"InterceptedRequest({self.method} {self.url})"


class InterceptionFacade:
    """
    Entry point for interception hooks.

    Example:
        facade = InterceptionFacade(registry, logging_config)

        if facade.should_intercept(request):
            result = facade.resolve(request)
            if result.intercepted:
                ...  # serve result.response with result.status_code
            else:
                ...  # send the request for real, marked as bypass
    """

    def __init__(self, registry: MockRegistry, logging_config: LoggingConfiguration):
        self.registry = registry
        self.logging_config = logging_config
        self.matcher = RequestMatcher(registry)

    def should_intercept(self, request: InterceptedRequest) -> bool:
        """
        Decide whether the hook should route a request through MockGate.

        Requests re-issued by MockGate itself carry the bypass marker and are
        never intercepted again.
        """
        if request.bypass or not request.url:
            return False

        method = RequestMethod.from_http(request.method)
        if self.matcher.has_mock(request.url, method, request.operation_name):
            return True
        return self.logging_config.should_log(request.url)

    def resolve(self, request: InterceptedRequest) -> MatchResult:
        """
        Resolve a request to Intercept(status_code, response) or PassThrough.

        The request is passed to the logging configuration exactly once,
        whatever the outcome.

        Raises:
            MalformedURL: If the request has no URL
        """
        if not request.url:
            raise MalformedURL()

        body = request.body
        try:
            return self.matcher.find_match(
                request.method,
                request.url,
                body=body,
                operation_name=request.operation_name
            )
        finally:
            self.logging_config.emit(request)
