"""
API Manager
Shared HTTP transport with per-API-class rate limiting, proxy rotation and status validation
"""

import random
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Dict, List, Optional, Union

import requests
from requests.structures import CaseInsensitiveDict

from ..sdk_logging import Logger
from ..utils.rwlock import ReadWriteLock
from .context import RequestContext
from .errors import CancelledError, NetworkError, RateLimitError
from .models import APIType
from .rate_limiter import RateLimiter

DEFAULT_TIMEOUT = 30.0

# Connect timeout when dialing through a proxy, separate from the read timeout
PROXY_CONNECT_TIMEOUT = 10.0

# Shorter waits are not logged
_RATE_LIMIT_LOG_THRESHOLD = 0.001

# How often an in-flight request checks its context
_CANCEL_POLL_INTERVAL = 0.05

_DISPATCH_WORKERS = 8

Body = Optional[Union[bytes, str]]


class APIManager:
    """
    API Request Manager

    Holds the configuration shared by every request of a client: default
    headers, proxy pool, one rate limiter per API class, the logger and an
    optional custom requests.Session. Mutations take the write side of a
    reader/writer lock; requests work on snapshots taken under the read side.
    No request is ever retried.

    Requests made with a RequestContext run on a small worker pool so the
    caller can stop waiting as soon as the context is cancelled or expires.
    An abandoned request finishes in the background and its response is
    dropped.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, logger: Optional[Logger] = None):
        """
        Initialize API Manager

        Args:
            timeout: Read timeout in seconds for every request
            logger: Logger instance (defaults to a quiet logger)
        """
        self.timeout = timeout

        self._lock = ReadWriteLock()
        self._session = requests.Session()
        self._custom_session: Optional[requests.Session] = None
        self._headers: Dict[str, str] = {}
        self._proxies: List[str] = []
        self._limiters: Dict[APIType, Optional[RateLimiter]] = {
            APIType.PUBLIC: None,
            APIType.PRIVATE: None,
        }
        self._logger = logger or Logger.null()

        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    # ===== Configuration =====

    def set_rate_limit(self, api_type: APIType, requests_per_interval: int, interval: float):
        """
        Replace the rate limiter for an API class

        Args:
            api_type: Public or private API class
            requests_per_interval: Bucket capacity (0 or less removes the limit)
            interval: Refill period in seconds
        """
        limiter = None
        if requests_per_interval > 0:
            limiter = RateLimiter(requests_per_interval, interval)

        with self._lock.write_locked():
            self._limiters[api_type] = limiter

    def set_logger(self, logger: Logger):
        with self._lock.write_locked():
            self._logger = logger

    def set_http_client(self, session: Optional[requests.Session]):
        """Send requests through a caller-supplied session (None restores the default)"""
        with self._lock.write_locked():
            self._custom_session = session

    def set_headers(self, headers: Dict[str, str]):
        """Merge headers into the defaults, last write wins"""
        with self._lock.write_locked():
            self._headers.update(headers)

    def set_proxies(self, proxies: List[str]):
        """Replace the proxy pool (empty list = direct connection)"""
        with self._lock.write_locked():
            self._proxies = list(proxies)

    def get_headers(self) -> Dict[str, str]:
        with self._lock.read_locked():
            return dict(self._headers)

    def get_proxies(self) -> List[str]:
        with self._lock.read_locked():
            return list(self._proxies)

    def get_rate_limiter(self, api_type: APIType) -> Optional[RateLimiter]:
        with self._lock.read_locked():
            return self._limiters.get(api_type)

    @property
    def logger(self) -> Logger:
        with self._lock.read_locked():
            return self._logger

    # ===== Requests =====

    def get(self, url: str, ctx: Optional[RequestContext] = None) -> bytes:
        """Send a GET request (public API)"""
        return self.request('GET', url, api_type=APIType.PUBLIC, ctx=ctx)

    def post(self, url: str, body: Body = None, ctx: Optional[RequestContext] = None) -> bytes:
        """Send a POST request (private API)"""
        return self.request('POST', url, body=body, api_type=APIType.PRIVATE, ctx=ctx)

    def get_with_type(self, url: str, api_type: APIType,
                      ctx: Optional[RequestContext] = None) -> bytes:
        """Send a GET request against the given API class"""
        return self.request('GET', url, api_type=api_type, ctx=ctx)

    def post_with_headers(self, url: str, body: Body, headers: Dict[str, str],
                          api_type: APIType, ctx: Optional[RequestContext] = None) -> bytes:
        """Send a POST request whose headers override the defaults"""
        return self.request('POST', url, body=body, api_type=api_type, headers=headers, ctx=ctx)

    def request(self, method: str, url: str, body: Body = None,
                api_type: APIType = APIType.PUBLIC,
                headers: Optional[Dict[str, str]] = None,
                ctx: Optional[RequestContext] = None) -> bytes:
        """
        Rate-limit, dispatch and validate one HTTP request

        Args:
            method: HTTP method
            url: Full URL
            body: Raw request body (None = no body)
            api_type: API class whose rate limiter applies
            headers: Per-request headers, taking precedence over the defaults
            ctx: Cancellation context bounding the rate-limit wait and the call

        Returns:
            Raw response body

        Raises:
            RateLimitError: ctx cancelled or expired while waiting for a token
            NetworkError: connection failure, timeout, non-200 status, or ctx
                cancelled or expired before the response arrived
        """
        with self._lock.read_locked():
            logger = self._logger
            limiter = self._limiters.get(api_type)

        logger.debug("Sending HTTP request", method=method, url=url, api_type=api_type.value)

        if limiter is not None:
            wait_start = time.monotonic()
            try:
                limiter.wait(ctx)
            except CancelledError as e:
                logger.error("Rate limit error", api_type=api_type.value, error=str(e))
                raise RateLimitError("rate limit error", cause=e) from e
            waited = time.monotonic() - wait_start
            if waited > _RATE_LIMIT_LOG_THRESHOLD:
                logger.rate_limited(api_type.value, waited, url=url)

        with self._lock.read_locked():
            merged = CaseInsensitiveDict(self._headers)
            proxies = list(self._proxies)
            session = self._custom_session or self._session

        if headers:
            merged.update(headers)
        if body is not None and 'Content-Type' not in merged:
            merged['Content-Type'] = 'application/json'

        read_timeout = self.timeout
        if ctx is not None:
            if ctx.cancelled:
                raise self._cancelled_error(ctx.reason)
            remaining = ctx.remaining()
            if remaining is not None:
                # The deadline may pass between the two checks
                if remaining <= 0:
                    raise self._cancelled_error("context deadline exceeded")
                read_timeout = min(read_timeout, remaining)

        request_kwargs = {
            'data': body,
            'headers': dict(merged),
            'timeout': read_timeout,
        }
        proxy = None
        if proxies:
            proxy = random.choice(proxies)
            request_kwargs['proxies'] = {'http': proxy, 'https': proxy}
            request_kwargs['timeout'] = (min(PROXY_CONNECT_TIMEOUT, read_timeout), read_timeout)

        start_time = time.monotonic()
        try:
            response = self._dispatch(session, method, url, request_kwargs, ctx)
        except CancelledError as e:
            duration = time.monotonic() - start_time
            logger.error("Request cancelled", url=url, reason=str(e),
                         duration_ms=f"{duration*1000:.2f}")
            raise NetworkError("request cancelled", cause=e) from e
        except requests.exceptions.RequestException as e:
            duration = time.monotonic() - start_time
            logger.error("Request failed", url=url, proxy=proxy, error=str(e),
                         duration_ms=f"{duration*1000:.2f}")
            raise NetworkError("request failed", cause=e) from e
        duration = time.monotonic() - start_time

        logger.api_call(method=method, url=url, status=response.status_code,
                        duration=duration, api_type=api_type.value)

        if response.status_code != 200:
            logger.error("HTTP error response", status=response.status_code, body=response.text)
            raise NetworkError(
                f"HTTP error: {response.status_code}",
                details=response.text,
                status_code=response.status_code,
            )

        logger.debug("Request completed successfully", body_size=len(response.content))
        return response.content

    @staticmethod
    def _cancelled_error(reason: str) -> NetworkError:
        error = CancelledError(reason)
        return NetworkError("request cancelled", cause=error)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=_DISPATCH_WORKERS,
                                                    thread_name_prefix='cex_sdk-http')
            return self._executor

    def _dispatch(self, session: requests.Session, method: str, url: str,
                  request_kwargs: Dict, ctx: Optional[RequestContext]) -> requests.Response:
        """
        Send the request, giving up as soon as ctx is cancelled or expires

        Raises:
            CancelledError: ctx was cancelled or its deadline passed mid-call
            requests.exceptions.RequestException: transport failure
        """
        if ctx is None:
            return session.request(method, url, **request_kwargs)

        future: Future = self._get_executor().submit(session.request, method, url,
                                                     **request_kwargs)
        while True:
            try:
                return future.result(timeout=_CANCEL_POLL_INTERVAL)
            except FutureTimeoutError:
                if ctx.cancelled:
                    future.cancel()
                    raise CancelledError(ctx.reason)
            except requests.exceptions.RequestException as e:
                # A read timeout cut to the deadline reports the deadline
                if ctx.cancelled:
                    raise CancelledError(ctx.reason) from e
                raise

    def close(self):
        """Close the default session and stop the dispatch workers"""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False)
        self._session.close()
