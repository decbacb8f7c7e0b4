"""
MockGate Request Logging

Observes intercepted requests and hands their metadata to a user callback
without blocking the request path.

Logging has its own lock, separate from the mock registry, so
reconfiguring logging never stalls mock registration or request
resolution. Callbacks run on a background worker, outside the lock, so a
callback may call back into the configuration API.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Optional

from ..common.rwlock import ReadWriteLock
from ..common.utils import canonical_url

logger = logging.getLogger("mockgate.requestlog")


class LogMode(Enum):
    """
    Level of detail for request logging.

    - NONE: no request logging (default)
    - COMPACT: method, URL and body
    - VERBOSE: method, URL, headers and body
    """

    NONE = "none"
    COMPACT = "compact"
    VERBOSE = "verbose"


@dataclass(frozen=True)
class RequestLogInfo:
    """Metadata of one observed request, passed to the logging callback."""

    method: str
    url: str
    headers: Optional[Dict[str, str]] = None
    body: Optional[bytes] = None


LogCallback = Callable[[RequestLogInfo], None]


@dataclass(frozen=True)
class _LoggingPolicy:
    mode: LogMode = LogMode.NONE
    urls: FrozenSet[str] = frozenset()
    callback: Optional[LogCallback] = None

    def applies_to(self, url: str) -> bool:
        if self.mode is LogMode.NONE:
            return False
        return not self.urls or canonical_url(url) in self.urls


class LoggingConfiguration:
    """
    Holds the current request logging policy.

    Example:
        config = LoggingConfiguration()
        config.configure(LogMode.COMPACT, urls=['https://api.example.com/users'],
                         callback=lambda info: print(info.method, info.url))

        if config.should_log(url):
            config.emit(request)
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._policy = _LoggingPolicy()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    @property
    def mode(self) -> LogMode:
        with self._lock.read_locked():
            return self._policy.mode

    @property
    def urls(self) -> FrozenSet[str]:
        with self._lock.read_locked():
            return self._policy.urls

    def configure(
        self,
        mode: LogMode,
        urls: Iterable[str] = (),
        callback: Optional[LogCallback] = None
    ) -> None:
        """
        Replace the logging policy.

        Args:
            mode: Logging level
            urls: URLs to log (compared in canonical form); empty means every intercepted request
            callback: Receives a RequestLogInfo per logged request
        """
        policy = _LoggingPolicy(
            mode=LogMode(mode),
            urls=frozenset(canonical_url(url) for url in urls),
            callback=callback
        )
        with self._lock.write_locked():
            self._policy = policy

        logger.debug(f"Request logging set to {policy.mode.value} for {len(policy.urls) or 'all'} URLs")

    def reset(self) -> None:
        """Turn request logging off."""
        self.configure(LogMode.NONE)

    def should_log(self, url: str) -> bool:
        """Check whether a request to ``url`` is logged under the current policy."""
        with self._lock.read_locked():
            return self._policy.applies_to(url)

    def emit(self, request) -> Optional[Future]:
        """
        Log a request if the current policy covers its URL.

        The callback is scheduled on the logging worker; this call returns
        without waiting for it.

        Args:
            request: Object with ``method``, ``url``, ``headers`` and ``body``

        Returns:
            Future of the scheduled callback, or None if nothing was logged
        """
        url = request.url
        if not url:
            return None

        with self._lock.read_locked():
            policy = self._policy

        if not policy.applies_to(url) or policy.callback is None:
            return None

        headers = None
        if policy.mode is LogMode.VERBOSE:
            headers = dict(request.headers or {})

        info = RequestLogInfo(
            method=request.method or "GET",
            url=url,
            headers=headers,
            body=request.body
        )
        return self._worker().submit(self._deliver, policy.callback, info)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait until every callback scheduled so far has run."""
        with self._executor_lock:
            executor = self._executor
        if executor is not None:
            executor.submit(lambda: None).result(timeout=timeout)

    def close(self) -> None:
        """Stop the logging worker after running pending callbacks."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _worker(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mockgate-log")
            return self._executor

    @staticmethod
    def _deliver(callback: LogCallback, info: RequestLogInfo) -> None:
        try:
            callback(info)
        except Exception as e:
            logger.warning(f"Request log callback failed for {info.method} {info.url}: {e}")
