"""
Exchange Module
Rate-limited, signed REST transport and exchange clients
"""

from .api_manager import APIManager
from .base_client import BaseExchangeClient
from .context import RequestContext
from .errors import (
    APIError,
    CancelledError,
    DataParsingError,
    ErrorCode,
    ExchangeNotSupportedError,
    InvalidInputError,
    NetworkError,
    RateLimitError,
    SDKError,
    get_code,
    is_cancellation,
    is_sdk_error,
)
from .exchange_manager import ExchangeManager
from .models import APIType, ExchangeConfig, RateLimit, RateLimitConfig, TradingPair
from .rate_limiter import RateLimiter
from .signer import RequestSigner, SignedPayload
from .gemini import GeminiClient

__all__ = [
    'APIManager',
    'BaseExchangeClient',
    'ExchangeManager',
    'GeminiClient',
    'RateLimiter',
    'RequestContext',
    'RequestSigner',
    'SignedPayload',
    'APIType',
    'ExchangeConfig',
    'RateLimit',
    'RateLimitConfig',
    'TradingPair',
    'ErrorCode',
    'SDKError',
    'InvalidInputError',
    'NetworkError',
    'RateLimitError',
    'DataParsingError',
    'APIError',
    'ExchangeNotSupportedError',
    'CancelledError',
    'get_code',
    'is_cancellation',
    'is_sdk_error',
]
