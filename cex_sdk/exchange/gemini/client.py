"""
Gemini Exchange Client
Composes the shared transport and request signer behind market, order and fund APIs
"""

import json
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import requests

from ...sdk_logging import Logger
from ...utils.helpers import extract_base_currency, extract_quote_currency
from ..api_manager import APIManager, DEFAULT_TIMEOUT
from ..base_client import BaseExchangeClient
from ..context import RequestContext
from ..errors import (
    APIError,
    DataParsingError,
    InvalidInputError,
    NetworkError,
    RateLimitError,
    SDKError,
)
from ..models import APIType, ExchangeConfig, RateLimit, TradingPair
from ..signer import RequestSigner
from .fund import FundAPI
from .market import MarketAPI
from .order import OrderAPI
from .types import ErrorResponse, Symbol

BASE_URL_PROD = "https://api.gemini.com"
BASE_URL_SANDBOX = "https://api.sandbox.gemini.com"
EXCHANGE_NAME = "gemini"
USER_AGENT = "CEX-SDK/1.0"

# Gemini documented limits
DEFAULT_PUBLIC_RATE_LIMIT = RateLimit(requests=120, interval=60.0)
DEFAULT_PRIVATE_RATE_LIMIT = RateLimit(requests=600, interval=60.0)

T = TypeVar('T')


class GeminiClient(BaseExchangeClient):
    """
    Gemini exchange client

    Public data lives on `market`, order management on `order` and balances
    and deposit addresses on `fund`. Credentials and the base URL are read
    as one consistent snapshot per request, so they may be changed while
    other threads are issuing requests.
    """

    def __init__(self, config: Optional[ExchangeConfig] = None):
        """
        Initialize Gemini client

        Args:
            config: Exchange configuration (None = production, no credentials, defaults)
        """
        config = config or ExchangeConfig()

        self._state_lock = threading.Lock()
        self._sandbox = config.use_sandbox
        self._base_url = config.base_url or (BASE_URL_SANDBOX if self._sandbox else BASE_URL_PROD)
        self._api_key = config.api_key
        self._api_secret = config.secret_key
        self.user_agent = USER_AGENT

        self.logger: Logger = config.logger or Logger.null()
        self.api = APIManager(timeout=config.timeout if config.timeout > 0 else DEFAULT_TIMEOUT,
                              logger=self.logger)
        self.signer = RequestSigner()

        if config.http_client is not None:
            self.api.set_http_client(config.http_client)

        public_limit = config.rate_limit.public if config.rate_limit.public.enabled else DEFAULT_PUBLIC_RATE_LIMIT
        private_limit = config.rate_limit.private if config.rate_limit.private.enabled else DEFAULT_PRIVATE_RATE_LIMIT
        self.api.set_rate_limit(APIType.PUBLIC, public_limit.requests, public_limit.interval)
        self.api.set_rate_limit(APIType.PRIVATE, private_limit.requests, private_limit.interval)

        self.api.set_headers({
            'User-Agent': self.user_agent,
            'Content-Type': 'application/json',
        })
        if config.headers:
            self.api.set_headers(config.headers)
        if config.proxies:
            self.api.set_proxies(config.proxies)

        # API categories
        self.market = MarketAPI(self)
        self.order = OrderAPI(self)
        self.fund = FundAPI(self)

        self.logger.system("Gemini exchange initialized", base_url=self._base_url)

    # ===== Session state =====

    @property
    def base_url(self) -> str:
        with self._state_lock:
            return self._base_url

    @property
    def sandbox(self) -> bool:
        with self._state_lock:
            return self._sandbox

    @property
    def api_key(self) -> str:
        with self._state_lock:
            return self._api_key

    def get_name(self) -> str:
        return EXCHANGE_NAME

    def set_api_credentials(self, api_key: str, api_secret: str):
        """Replace the API key and secret atomically"""
        with self._state_lock:
            self._api_key = api_key
            self._api_secret = api_secret

    def set_sandbox(self, sandbox: bool):
        """Switch between the sandbox and production endpoint sets"""
        with self._state_lock:
            self._sandbox = sandbox
            self._base_url = BASE_URL_SANDBOX if sandbox else BASE_URL_PROD

    def _private_state(self) -> Tuple[str, str, str]:
        """(api_key, api_secret, base_url) read under one lock"""
        with self._state_lock:
            return self._api_key, self._api_secret, self._base_url

    # ===== Transport configuration =====

    def set_rate_limit(self, api_type: APIType, limit: RateLimit):
        self.api.set_rate_limit(api_type, limit.requests, limit.interval)
        self.logger.system("Rate limit updated", api_type=api_type.value,
                           requests=limit.requests, interval=limit.interval)

    def set_logger(self, logger: Logger):
        self.logger = logger
        self.api.set_logger(logger)
        self.logger.system("Logger updated")

    def set_http_client(self, session: Optional[requests.Session]):
        self.api.set_http_client(session)
        self.logger.system("Custom HTTP client set")

    def set_headers(self, headers: Dict[str, str]):
        """Merge custom headers, keeping User-Agent and Content-Type populated"""
        headers = dict(headers)
        if not headers.get('User-Agent'):
            headers['User-Agent'] = self.user_agent
        if not headers.get('Content-Type'):
            headers['Content-Type'] = 'application/json'
        self.api.set_headers(headers)

    def set_proxies(self, proxies: List[str]):
        self.api.set_proxies(proxies)

    # ===== Request plumbing shared by the sub-APIs =====

    @staticmethod
    def decode_response(body: bytes, operation: str) -> Any:
        """
        Parse a response body, surfacing the exchange error envelope first

        Args:
            body: Raw response body
            operation: Description used in error messages

        Returns:
            Decoded JSON value

        Raises:
            APIError: body is an error envelope
            DataParsingError: body is not valid JSON
        """
        try:
            data = json.loads(body)
        except ValueError as e:
            raise DataParsingError("failed to parse response", details=operation, cause=e) from e

        if isinstance(data, dict):
            envelope = ErrorResponse.from_dict(data)
            if envelope.is_error:
                raise APIError(envelope.reason, envelope.message)
        return data

    @staticmethod
    def parse_object(data: Any, factory: Callable[[Dict[str, Any]], T], what: str) -> T:
        """Build a typed result from a JSON object"""
        if not isinstance(data, dict):
            raise DataParsingError(f"failed to parse {what} response",
                                   details=f"expected object, got {type(data).__name__}")
        try:
            return factory(data)
        except (TypeError, ValueError) as e:
            raise DataParsingError(f"failed to parse {what} response", cause=e) from e

    @classmethod
    def parse_list(cls, data: Any, factory: Callable[[Dict[str, Any]], T], what: str) -> List[T]:
        """Build typed results from a JSON array of objects"""
        if not isinstance(data, list):
            raise DataParsingError(f"failed to parse {what} response",
                                   details=f"expected array, got {type(data).__name__}")
        return [cls.parse_object(item, factory, what) for item in data]

    def public_get(self, path: str, operation: str,
                   ctx: Optional[RequestContext] = None) -> Any:
        """
        GET a public endpoint and decode the response

        Args:
            path: Endpoint path, e.g. '/v1/symbols'
            operation: Description used in error messages
            ctx: Optional cancellation context
        """
        url = f"{self.base_url}{path}"
        try:
            body = self.api.get_with_type(url, APIType.PUBLIC, ctx)
        except RateLimitError:
            raise
        except SDKError as e:
            raise NetworkError(f"failed to {operation}", cause=e) from e
        return self.decode_response(body, operation)

    def private_post(self, endpoint: str, fields: Optional[Dict[str, Any]], operation: str,
                     ctx: Optional[RequestContext] = None) -> Any:
        """
        Sign and POST a private endpoint, then decode the response

        Args:
            endpoint: Endpoint path, also the signed 'request' field
            fields: Request-specific payload fields
            operation: Description used in error messages
            ctx: Optional cancellation context

        Raises:
            InvalidInputError: API key or secret missing (no request is sent)
        """
        api_key, api_secret, base_url = self._private_state()
        if not api_key or not api_secret:
            raise InvalidInputError("API key and secret are required for private endpoints")

        signed = self.signer.sign(api_secret, endpoint, fields)
        headers = self.signer.build_headers(api_key, signed)
        self.logger.request_signed(endpoint, signed.nonce)

        try:
            body = self.api.post_with_headers(f"{base_url}{endpoint}", None, headers,
                                              APIType.PRIVATE, ctx)
        except RateLimitError:
            raise
        except SDKError as e:
            raise NetworkError(f"failed to {operation}", cause=e) from e
        return self.decode_response(body, operation)

    # ===== Exchange-level operations =====

    def get_trading_pairs(self, ctx: Optional[RequestContext] = None) -> List[TradingPair]:
        """
        Fetch every trading pair

        Symbols without an entry in the details listing get base/quote
        currencies guessed from the symbol string.
        """
        symbols = self.public_get('/v1/symbols', 'fetch symbols', ctx)
        if not isinstance(symbols, list):
            raise DataParsingError("failed to parse symbols response")

        details_data = self.public_get('/v1/symbols/details', 'fetch symbol details', ctx)
        details = self.parse_list(details_data, Symbol.from_dict, 'symbol details')
        details_map = {detail.symbol.lower(): detail for detail in details}

        pairs = []
        for symbol in symbols:
            symbol = str(symbol)
            detail = details_map.get(symbol.lower())
            if detail is None:
                pairs.append(TradingPair(
                    symbol=symbol.upper(),
                    base_asset=extract_base_currency(symbol),
                    quote_asset=extract_quote_currency(symbol),
                    status="TRADING",
                ))
                continue

            try:
                min_qty = detail.min_order_size_value
            except ValueError:
                min_qty = 0.0

            pairs.append(TradingPair(
                symbol=detail.symbol.upper(),
                base_asset=detail.base_currency.upper(),
                quote_asset=detail.quote_currency.upper(),
                status=detail.status,
                min_qty=min_qty,
                tick_size=detail.tick_size,
            ))

        self.logger.debug("Fetched trading pairs", count=len(pairs))
        return pairs

    def validate_config(self, ctx: Optional[RequestContext] = None):
        """
        Validate the base URL and probe connectivity

        Raises:
            InvalidInputError: base URL missing or not http(s)
            NetworkError: the symbols endpoint could not be reached
        """
        base_url = self.base_url
        if not base_url:
            raise InvalidInputError("base URL is required")
        if not base_url.startswith(("http://", "https://")):
            raise InvalidInputError("invalid base URL format")

        try:
            self.api.get(f"{base_url}/v1/symbols", ctx)
        except RateLimitError:
            raise
        except SDKError as e:
            raise NetworkError("failed to connect to Gemini API", cause=e) from e

    def close(self):
        self.api.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
