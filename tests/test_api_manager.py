"""Unit tests for the shared HTTP transport."""
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock

import pytest
import requests

from cex_sdk.exchange.api_manager import APIManager, PROXY_CONNECT_TIMEOUT
from cex_sdk.exchange.context import RequestContext
from cex_sdk.exchange.errors import CancelledError, NetworkError, RateLimitError, is_cancellation
from cex_sdk.exchange.models import APIType

from conftest import make_response, sent_request


class TestConfiguration:
    """Tests for shared transport configuration."""

    def test_headers_merge(self, api_manager):
        """set_headers merges, last write wins per key."""
        api_manager.set_headers({'A': '1', 'B': '1'})
        api_manager.set_headers({'B': '2'})
        assert api_manager.get_headers() == {'A': '1', 'B': '2'}

    def test_proxies_replaced(self, api_manager):
        """set_proxies replaces the pool and copies the list."""
        proxies = ['http://p1:8080']
        api_manager.set_proxies(proxies)
        proxies.append('http://p2:8080')
        assert api_manager.get_proxies() == ['http://p1:8080']

    def test_zero_rate_limit_disables(self, api_manager):
        """A non-positive request count removes the limiter."""
        api_manager.set_rate_limit(APIType.PUBLIC, 10, 1.0)
        assert api_manager.get_rate_limiter(APIType.PUBLIC).capacity == 10
        api_manager.set_rate_limit(APIType.PUBLIC, 0, 1.0)
        assert api_manager.get_rate_limiter(APIType.PUBLIC) is None

    def test_custom_session_used(self, fake_session):
        """Requests go through the session given to set_http_client."""
        manager = APIManager()
        manager.set_http_client(fake_session)
        manager.get('https://example.com/v1/symbols')
        fake_session.request.assert_called_once()


class TestDispatch:
    """Tests for request construction."""

    def test_get_returns_body(self, api_manager, fake_session):
        """GET returns the raw response body."""
        fake_session.request.return_value = make_response(['btcusd'])
        body = api_manager.get('https://example.com/v1/symbols')

        assert body == b'["btcusd"]'
        method, url, kwargs = sent_request(fake_session)
        assert method == 'GET'
        assert url == 'https://example.com/v1/symbols'
        assert kwargs['data'] is None
        assert kwargs['timeout'] == 30.0
        assert 'proxies' not in kwargs

    def test_default_headers_sent(self, api_manager, fake_session):
        """Default headers are attached to every request."""
        api_manager.set_headers({'User-Agent': 'CEX-SDK/1.0'})
        api_manager.get('https://example.com/v1/symbols')
        _, _, kwargs = sent_request(fake_session)
        assert kwargs['headers']['User-Agent'] == 'CEX-SDK/1.0'

    def test_request_headers_override_defaults(self, api_manager, fake_session):
        """Per-request headers win over defaults, case-insensitively."""
        api_manager.set_headers({'Content-Type': 'application/json', 'X-Default': 'yes'})
        api_manager.post_with_headers('https://example.com/v1/balances', None,
                                      {'content-type': 'text/plain'}, APIType.PRIVATE)

        _, _, kwargs = sent_request(fake_session)
        content_types = [v for k, v in kwargs['headers'].items() if k.lower() == 'content-type']
        assert content_types == ['text/plain']
        assert kwargs['headers']['X-Default'] == 'yes'

    def test_body_gets_json_content_type(self, api_manager, fake_session):
        """A body without Content-Type is sent as JSON."""
        api_manager.post('https://example.com/v1/thing', b'{"a":1}')
        method, _, kwargs = sent_request(fake_session)
        assert method == 'POST'
        assert kwargs['data'] == b'{"a":1}'
        assert kwargs['headers']['Content-Type'] == 'application/json'

    def test_single_proxy(self, api_manager, fake_session):
        """A configured proxy handles both schemes with a bounded connect timeout."""
        api_manager.set_proxies(['http://proxy:8080'])
        api_manager.get('https://example.com/v1/symbols')

        _, _, kwargs = sent_request(fake_session)
        assert kwargs['proxies'] == {'http': 'http://proxy:8080', 'https': 'http://proxy:8080'}
        assert kwargs['timeout'] == (PROXY_CONNECT_TIMEOUT, 30.0)

    def test_proxy_chosen_from_pool(self, api_manager, fake_session):
        """Every request uses a proxy from the current pool."""
        pool = ['http://p1:8080', 'http://p2:8080', 'http://p3:8080']
        api_manager.set_proxies(pool)
        for _ in range(20):
            api_manager.get('https://example.com/v1/symbols')

        used = {call.kwargs['proxies']['https'] for call in fake_session.request.call_args_list}
        assert used <= set(pool)

    def test_timeout_bounded_by_context(self, api_manager, fake_session):
        """The read timeout never exceeds the context's remaining time."""
        api_manager.get('https://example.com/v1/symbols', RequestContext.with_timeout(5))
        _, _, kwargs = sent_request(fake_session)
        assert kwargs['timeout'] <= 5


class TestErrors:
    """Tests for transport failures."""

    def test_non_200_status(self, api_manager, fake_session):
        """Any status other than 200 is a network error carrying the body."""
        fake_session.request.return_value = make_response(raw=b'server exploded', status_code=500)

        with pytest.raises(NetworkError) as exc_info:
            api_manager.get('https://example.com/v1/symbols')

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == 'server exploded'
        assert 'HTTP error: 500' in str(exc_info.value)

    def test_created_status_is_error(self, api_manager, fake_session):
        """Only 200 counts as success."""
        fake_session.request.return_value = make_response({}, status_code=201)
        with pytest.raises(NetworkError):
            api_manager.get('https://example.com/v1/symbols')

    def test_connection_error(self, api_manager, fake_session):
        """requests failures become network errors with the cause kept."""
        failure = requests.exceptions.ConnectionError('refused')
        fake_session.request.side_effect = failure

        with pytest.raises(NetworkError) as exc_info:
            api_manager.get('https://example.com/v1/symbols')

        assert exc_info.value.cause is failure
        assert exc_info.value.__cause__ is failure

    def test_cancelled_context_skips_dispatch(self, api_manager, fake_session):
        """A context cancelled before dispatch sends nothing."""
        ctx = RequestContext.background()
        ctx.cancel()

        with pytest.raises(NetworkError) as exc_info:
            api_manager.get('https://example.com/v1/symbols', ctx)

        assert isinstance(exc_info.value.cause, CancelledError)
        fake_session.request.assert_not_called()


class TestRateLimiting:
    """Tests for rate limiting inside the request pipeline."""

    def test_exhausted_limit_with_deadline(self, api_manager, fake_session):
        """A deadline expiring while waiting for a token is a rate limit error."""
        api_manager.set_rate_limit(APIType.PUBLIC, 1, 60)
        api_manager.get('https://example.com/v1/symbols')

        with pytest.raises(RateLimitError) as exc_info:
            api_manager.get('https://example.com/v1/symbols', RequestContext.with_timeout(0.05))

        assert isinstance(exc_info.value.cause, CancelledError)
        assert fake_session.request.call_count == 1

    def test_second_call_waits_one_interval(self, api_manager):
        """With one request per interval the second call blocks about an interval."""
        api_manager.set_rate_limit(APIType.PUBLIC, 1, 0.2)
        api_manager.get('https://example.com/v1/symbols')

        start = time.monotonic()
        api_manager.get('https://example.com/v1/symbols')
        elapsed = time.monotonic() - start

        assert 0.15 <= elapsed < 2.0

    def test_api_classes_are_independent(self, api_manager, fake_session):
        """Exhausting the public budget leaves private calls unaffected."""
        api_manager.set_rate_limit(APIType.PUBLIC, 1, 60)
        api_manager.set_rate_limit(APIType.PRIVATE, 1, 60)
        api_manager.get('https://example.com/v1/symbols')

        start = time.monotonic()
        api_manager.post('https://example.com/v1/balances')
        assert time.monotonic() - start < 0.5
        assert fake_session.request.call_count == 2

    def test_replaced_limiter_takes_effect(self, api_manager):
        """A new limiter starts with a full bucket."""
        api_manager.set_rate_limit(APIType.PUBLIC, 1, 60)
        api_manager.get('https://example.com/v1/symbols')
        api_manager.set_rate_limit(APIType.PUBLIC, 5, 60)

        start = time.monotonic()
        api_manager.get('https://example.com/v1/symbols')
        assert time.monotonic() - start < 0.5


def test_logger_receives_api_call(fake_session):
    """Each completed request is reported to the logger."""
    logger = MagicMock()
    manager = APIManager(logger=logger)
    manager.set_http_client(fake_session)
    manager.get('https://example.com/v1/symbols')

    logger.api_call.assert_called_once()
    assert logger.api_call.call_args.kwargs['status'] == 200


@pytest.fixture
def slow_server():
    """Local HTTP server whose responses are held until the test releases them."""
    release = threading.Event()

    class SlowHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            release.wait(5)
            body = b'[]'
            self.send_response(200)
            self.send_header('Content-Type', 'application/json')
            self.send_header('Content-Length', str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            pass

    server = ThreadingHTTPServer(('127.0.0.1', 0), SlowHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f'http://127.0.0.1:{server.server_address[1]}/v1/symbols'

    release.set()
    server.shutdown()
    server.server_close()


@pytest.fixture
def local_manager():
    """Transport with a real session that ignores proxy environment variables."""
    session = requests.Session()
    session.trust_env = False
    manager = APIManager(timeout=30.0)
    manager.set_http_client(session)
    yield manager
    manager.close()
    session.close()


class TestInFlightCancellation:
    """Tests for cancellation while the HTTP call is in progress."""

    def test_cancel_during_call(self, local_manager, slow_server):
        """Cancelling mid-call returns promptly with a cancelled network error."""
        ctx = RequestContext.background()
        timer = threading.Timer(0.2, ctx.cancel)
        timer.start()

        start = time.monotonic()
        try:
            with pytest.raises(NetworkError, match='request cancelled') as exc_info:
                local_manager.get(slow_server, ctx)
        finally:
            timer.cancel()

        assert time.monotonic() - start < 2.0
        assert isinstance(exc_info.value.cause, CancelledError)

    def test_deadline_during_call(self, local_manager, slow_server):
        """A deadline passing mid-call ends the call at the deadline."""
        start = time.monotonic()
        with pytest.raises(NetworkError) as exc_info:
            local_manager.get(slow_server, RequestContext.with_timeout(0.3))

        assert time.monotonic() - start < 2.0
        assert is_cancellation(exc_info.value)

    def test_deadline_reached_before_dispatch(self, api_manager, fake_session, monkeypatch):
        """A deadline that runs out after the cancelled check still sends nothing."""
        ctx = RequestContext.with_timeout(5)
        monkeypatch.setattr(ctx, 'remaining', lambda: 0.0)

        with pytest.raises(NetworkError, match='request cancelled') as exc_info:
            api_manager.get('https://example.com/v1/symbols', ctx)

        assert isinstance(exc_info.value.cause, CancelledError)
        assert str(exc_info.value.cause) == 'context deadline exceeded'
        fake_session.request.assert_not_called()

    def test_transport_error_with_context(self, api_manager, fake_session):
        """Failures inside a context-bounded call keep their own cause."""
        failure = requests.exceptions.ConnectionError('refused')
        fake_session.request.side_effect = failure

        with pytest.raises(NetworkError, match='request failed') as exc_info:
            api_manager.get('https://example.com/v1/symbols', RequestContext.with_timeout(5))

        assert exc_info.value.cause is failure
        assert not is_cancellation(exc_info.value)
