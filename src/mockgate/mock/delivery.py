"""
MockGate Response Delivery

Delivers a resolved mock response to a client, honouring the response's
delay without holding any lock. A cancelled delivery stops at its next
cancellation check.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from .models import Intercept

logger = logging.getLogger("mockgate.delivery")


class DeliveryClient:
    """
    Receiver of a mock delivery.

    Subclasses override the callbacks they need. On success the order is
    did_receive_response, did_load, did_finish; on failure only did_fail.
    """

    def did_receive_response(self, status_code: int, headers: Dict[str, str]) -> None:
        pass

    def did_load(self, data: bytes) -> None:
        pass

    def did_finish(self) -> None:
        pass

    def did_fail(self, error: Exception) -> None:
        pass


class ResponseCollector(DeliveryClient):
    """Client that keeps what it receives, for transports that return a response object."""

    def __init__(self):
        self.status_code: Optional[int] = None
        self.headers: Dict[str, str] = {}
        self.content = b""
        self.error: Optional[Exception] = None
        self.finished = False

    def did_receive_response(self, status_code: int, headers: Dict[str, str]) -> None:
        self.status_code = status_code
        self.headers = dict(headers)

    def did_load(self, data: bytes) -> None:
        self.content += data

    def did_finish(self) -> None:
        self.finished = True

    def did_fail(self, error: Exception) -> None:
        self.error = error


class MockDelivery:
    """
    One delivery of a resolved mock response.

    When the response has a delay, the delivery waits on its own thread for
    that long; ``cancel()`` wakes it up and nothing is delivered. The
    cancellation flag is checked again before the headers, before the body
    and before completion.

    Example:
        delivery = MockDelivery(result, lambda: loader.load(result.response.source), client)
        delivery.start()
        ...
        delivery.cancel()   # if the owning request is aborted
    """

    def __init__(
        self,
        result: Intercept,
        load_payload: Callable[[], bytes],
        client: DeliveryClient,
        content_type: str = "application/json",
        cancel_event: Optional[threading.Event] = None
    ):
        """
        Initialize a delivery.

        Args:
            result: Intercept decision from the matcher
            load_payload: Returns the payload bytes; may raise MockDataUnavailable
            client: Receiver of the delivery callbacks
            content_type: Content-Type header served with the payload
            cancel_event: Optional event shared with the owner of the request
        """
        self.result = result
        self.load_payload = load_payload
        self.client = client
        self.content_type = content_type
        self._cancelled = cancel_event or threading.Event()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        """Deliver now, or after the response delay on a background thread."""
        delay = self.result.response.response_delay
        if delay <= 0:
            self._run(0.0)
            return

        self._thread = threading.Thread(
            target=self._run,
            args=(delay,),
            name="mockgate-delivery",
            daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """
        Cancel the delivery.

        A delayed delivery wakes up and delivers nothing. A delivery already in
        progress stops at its next cancellation check; a callback that is
        running when cancel() is called still completes.
        """
        self._cancelled.set()

    def deliver_now(self) -> None:
        """Deliver on the calling thread, ignoring the delay (already awaited by the caller)."""
        self._run(0.0)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the delivery finished, failed or was cancelled."""
        return self._done.wait(timeout)

    def _run(self, delay: float) -> None:
        try:
            if delay and self._cancelled.wait(delay):
                logger.debug(f"Delivery of {self.result.response.describe()} cancelled during delay")
                return
            self._deliver()
        finally:
            self._done.set()

    def _deliver(self) -> None:
        if self.cancelled:
            return

        try:
            data = self.load_payload()
        except Exception as e:
            if not self.cancelled:
                self.client.did_fail(e)
            return

        if self.cancelled:
            return
        self.client.did_receive_response(
            self.result.status_code,
            {"Content-Type": self.content_type}
        )

        if self.cancelled:
            return
        self.client.did_load(data)

        if self.cancelled:
            return
        self.client.did_finish()
