"""
MockGate requests Adapter

Transport adapter for ``requests`` sessions that routes requests through a
MockGate.

Example:
    session = requests.Session()
    adapter = MockAdapter(gate)
    session.mount('https://', adapter)
    session.mount('http://', adapter)
"""

import io
import logging
from http.client import responses as http_reasons

import requests
from requests.adapters import HTTPAdapter
from urllib3.response import HTTPResponse

from ..common.errors import DeliveryCancelled, MalformedURL, MockDataUnavailable
from ..mock.delivery import MockDelivery, ResponseCollector
from ..mock.interceptor import InterceptedRequest
from ..mock.models import Intercept

logger = logging.getLogger("mockgate.transport")


def _replace_body(request, intercepted: InterceptedRequest) -> None:
    """Put the captured body back on a request whose body was a one-shot stream."""
    if request.body is None or isinstance(request.body, (bytes, str)):
        return

    request.body = intercepted.body
    request.headers.pop('Transfer-Encoding', None)
    request.prepare_content_length(request.body)


class MockAdapter(HTTPAdapter):
    """
    HTTPAdapter answering mocked requests from a MockGate.

    Requests that pass through are sent by the regular HTTPAdapter
    machinery. The bypass marker travels as a request header and is removed
    before the request leaves the process.
    """

    def __init__(self, gate, **kwargs):
        """
        Initialize adapter.

        Args:
            gate: MockGate providing mocks, logging and payloads
            **kwargs: Passed to HTTPAdapter (pool sizes, max_retries, ...)
        """
        super().__init__(**kwargs)
        self.gate = gate
        self.marker = gate.config.bypass_marker

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        bypass = request.headers.pop(self.marker, None) is not None
        intercepted = InterceptedRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            body=request.body,
            bypass=bypass
        )

        if not self.gate.should_intercept(intercepted):
            _replace_body(request, intercepted)
            return super().send(request, stream=stream, timeout=timeout, verify=verify,
                                cert=cert, proxies=proxies)

        try:
            result = self.gate.resolve(intercepted)
        except MalformedURL as e:
            raise requests.exceptions.InvalidURL(str(e), request=request) from e

        _replace_body(request, intercepted)

        if not isinstance(result, Intercept):
            logger.debug(f"Forwarding {request.method} {request.url} to the real transport")
            return super().send(request, stream=stream, timeout=timeout, verify=verify,
                                cert=cert, proxies=proxies)

        collector = ResponseCollector()
        delivery = MockDelivery(
            result,
            lambda: self.gate.load_payload(result.response),
            collector,
            content_type=self.gate.config.content_type
        )
        delivery.start()
        delivery.wait()

        if collector.error is not None:
            if isinstance(collector.error, MockDataUnavailable):
                raise requests.exceptions.ConnectionError(collector.error, request=request) from collector.error
            raise collector.error
        if not collector.finished:
            raise DeliveryCancelled(f"Mock delivery for {request.method} {request.url} was cancelled")

        raw = HTTPResponse(
            body=io.BytesIO(collector.content),
            headers=collector.headers,
            status=collector.status_code,
            reason=http_reasons.get(collector.status_code, ''),
            preload_content=False,
            decode_content=False
        )
        return self.build_response(request, raw)
