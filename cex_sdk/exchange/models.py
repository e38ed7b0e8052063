"""
Exchange Models
Exchange-agnostic types shared by the transport, the registry and every client
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class APIType(Enum):
    """API class, each with an independent rate budget"""
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class RateLimit:
    """Allow `requests` calls per `interval` seconds"""
    requests: int = 0
    interval: float = 60.0

    @property
    def enabled(self) -> bool:
        return self.requests > 0


@dataclass
class RateLimitConfig:
    """Rate limits for public and private APIs"""
    public: RateLimit = field(default_factory=RateLimit)
    private: RateLimit = field(default_factory=RateLimit)


@dataclass
class TradingPair:
    """Trading pair information"""
    symbol: str
    base_asset: str
    quote_asset: str
    status: str
    min_qty: float = 0.0
    max_qty: float = 0.0
    step_size: float = 0.0
    tick_size: float = 0.0


@dataclass
class ExchangeConfig:
    """
    Exchange client configuration

    `logger` is a cex_sdk.sdk_logging.Logger and `http_client` a
    requests.Session that replaces the transport's own session.
    `sandbox` is an alias for `testnet`.
    """
    api_key: str = ""
    secret_key: str = ""
    base_url: str = ""
    timeout: float = 0.0
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    headers: Dict[str, str] = field(default_factory=dict)
    proxies: List[str] = field(default_factory=list)
    testnet: bool = False
    sandbox: bool = False
    logger: Optional[Any] = None
    http_client: Optional[Any] = None

    @property
    def use_sandbox(self) -> bool:
        return self.testnet or self.sandbox
