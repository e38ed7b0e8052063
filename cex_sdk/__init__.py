"""
CEX SDK
Rate-limited, HMAC-signed REST client for centralized crypto exchanges
"""

from .exchange import (
    APIType,
    ExchangeConfig,
    GeminiClient,
    RateLimit,
    RateLimitConfig,
    RequestContext,
)
from .sdk import SDK, new_gemini

__version__ = "1.0.0"

__all__ = [
    'SDK',
    'new_gemini',
    'GeminiClient',
    'ExchangeConfig',
    'RateLimit',
    'RateLimitConfig',
    'APIType',
    'RequestContext',
]
