"""
Base Exchange Client
Abstract base class defining interface for all exchange implementations
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .context import RequestContext
from .models import APIType, RateLimit, TradingPair


class BaseExchangeClient(ABC):
    """
    Abstract base class for exchange clients
    Defines common interface that all exchange implementations must follow
    """

    @abstractmethod
    def get_name(self) -> str:
        """Lower-case exchange name"""
        pass

    @abstractmethod
    def get_trading_pairs(self, ctx: Optional[RequestContext] = None) -> List[TradingPair]:
        """
        Fetch all trading pairs

        Args:
            ctx: Optional cancellation context

        Returns:
            List of trading pairs
        """
        pass

    @abstractmethod
    def set_rate_limit(self, api_type: APIType, limit: RateLimit):
        """
        Set rate limiting for an API class

        Args:
            api_type: Public or private
            limit: Requests per interval
        """
        pass

    @abstractmethod
    def set_headers(self, headers: Dict[str, str]):
        """Merge custom request headers into the defaults"""
        pass

    @abstractmethod
    def set_proxies(self, proxies: List[str]):
        """Replace the proxy list used for multi-IP requests"""
        pass

    @abstractmethod
    def set_logger(self, logger):
        """Replace the logger"""
        pass

    @abstractmethod
    def set_http_client(self, session):
        """Send requests through a custom requests.Session"""
        pass
