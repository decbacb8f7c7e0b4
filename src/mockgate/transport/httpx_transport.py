"""
MockGate httpx Transports

httpx transports that route requests through a MockGate. Mocked requests
are answered from their payload files; every other request is forwarded
to the wrapped transport, marked so that it is not intercepted again.

Example:
    client = httpx.Client(transport=MockTransport(gate))
    async_client = httpx.AsyncClient(transport=AsyncMockTransport(gate))
"""

import asyncio
import logging
from typing import Optional

import httpx

from ..common.errors import DeliveryCancelled, MalformedURL, MockDataUnavailable
from ..mock.delivery import MockDelivery, ResponseCollector
from ..mock.interceptor import InterceptedRequest
from ..mock.models import Intercept

logger = logging.getLogger("mockgate.transport")

CANCEL_EXTENSION = "mockgate.cancel"


class MockTransportError(httpx.TransportError):
    """
    A mocked request could not be delivered.

    Raised for requests without a URL and for mock payloads that cannot be
    loaded; ``cause`` holds the underlying MockGate error.
    """

    def __init__(self, message: str, *, request: httpx.Request, cause: Exception):
        super().__init__(message, request=request)
        self.cause = cause


def _intercepted_request(request: httpx.Request, marker: str, body) -> InterceptedRequest:
    return InterceptedRequest(
        method=request.method,
        url=str(request.url) if request.url else None,
        headers=dict(request.headers),
        body=body,
        bypass=bool(request.extensions.get(marker))
    )


def _to_response(request: httpx.Request, collector: ResponseCollector) -> httpx.Response:
    return httpx.Response(
        status_code=collector.status_code,
        headers=collector.headers,
        content=collector.content,
        request=request
    )


def _raise_for_failure(request: httpx.Request, error: Exception) -> None:
    if isinstance(error, MockDataUnavailable):
        raise MockTransportError(str(error), request=request, cause=error) from error
    raise error


class MockTransport(httpx.BaseTransport):
    """Synchronous httpx transport backed by a MockGate."""

    def __init__(self, gate, wrapped: Optional[httpx.BaseTransport] = None):
        """
        Initialize transport.

        Args:
            gate: MockGate providing mocks, logging and payloads
            wrapped: Real transport for passed-through requests
                (httpx.HTTPTransport if None)
        """
        self.gate = gate
        self.wrapped = wrapped or httpx.HTTPTransport()
        self.marker = gate.config.bypass_marker

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        intercepted = _intercepted_request(request, self.marker, request)

        if not self.gate.should_intercept(intercepted):
            return self.wrapped.handle_request(request)

        try:
            result = self.gate.resolve(intercepted)
        except MalformedURL as e:
            raise MockTransportError(str(e), request=request, cause=e) from e

        if not isinstance(result, Intercept):
            return self._pass_through(request)

        collector = ResponseCollector()
        delivery = MockDelivery(
            result,
            lambda: self.gate.load_payload(result.response),
            collector,
            content_type=self.gate.config.content_type,
            cancel_event=request.extensions.get(CANCEL_EXTENSION)
        )
        delivery.start()
        delivery.wait()

        if collector.error is not None:
            _raise_for_failure(request, collector.error)
        if not collector.finished:
            raise DeliveryCancelled(f"Mock delivery for {request.method} {request.url} was cancelled")

        return _to_response(request, collector)

    def _pass_through(self, request: httpx.Request) -> httpx.Response:
        logger.debug(f"Forwarding {request.method} {request.url} to the real transport")
        request.extensions = {**request.extensions, self.marker: True}
        return self.wrapped.handle_request(request)

    def close(self) -> None:
        self.wrapped.close()


class AsyncMockTransport(httpx.AsyncBaseTransport):
    """
    Asynchronous httpx transport backed by a MockGate.

    Response delays are awaited with asyncio.sleep, so cancelling the task
    that sends the request cancels the delivery. Body predicates and payload
    loading run on the event loop's default executor.
    """

    def __init__(self, gate, wrapped: Optional[httpx.AsyncBaseTransport] = None):
        self.gate = gate
        self.wrapped = wrapped or httpx.AsyncHTTPTransport()
        self.marker = gate.config.bypass_marker

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        body = await request.aread()
        intercepted = _intercepted_request(request, self.marker, body)

        if not self.gate.should_intercept(intercepted):
            return await self.wrapped.handle_async_request(request)

        loop = asyncio.get_running_loop()

        try:
            result = await loop.run_in_executor(None, self.gate.resolve, intercepted)
        except MalformedURL as e:
            raise MockTransportError(str(e), request=request, cause=e) from e

        if not isinstance(result, Intercept):
            logger.debug(f"Forwarding {request.method} {request.url} to the real transport")
            request.extensions = {**request.extensions, self.marker: True}
            return await self.wrapped.handle_async_request(request)

        if result.response.response_delay > 0:
            await asyncio.sleep(result.response.response_delay)

        collector = ResponseCollector()
        delivery = MockDelivery(
            result,
            lambda: self.gate.load_payload(result.response),
            collector,
            content_type=self.gate.config.content_type
        )
        try:
            await loop.run_in_executor(None, delivery.deliver_now)
        except asyncio.CancelledError:
            delivery.cancel()
            raise

        if collector.error is not None:
            _raise_for_failure(request, collector.error)

        return _to_response(request, collector)

    async def aclose(self) -> None:
        await self.wrapped.aclose()
