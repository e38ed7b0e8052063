"""
SDK Entry Point
Creates exchange clients by name
"""

from typing import List, Optional

from .exchange.base_client import BaseExchangeClient
from .exchange.exchange_manager import ExchangeManager
from .exchange.gemini import GeminiClient
from .exchange.models import ExchangeConfig


class SDK:
    """
    Main SDK object

    Usage:
        sdk = SDK()
        gemini = sdk.new_exchange('gemini', ExchangeConfig(sandbox=True))
    """

    def __init__(self, logger=None):
        self.manager = ExchangeManager(logger)
        self._register_exchanges()

    def _register_exchanges(self):
        self.manager.register('gemini', GeminiClient)

    def new_exchange(self, exchange_name: str,
                     config: Optional[ExchangeConfig] = None) -> BaseExchangeClient:
        """Create a client for a registered exchange (case-insensitive)"""
        return self.manager.create(exchange_name, config)

    def supported_exchanges(self) -> List[str]:
        return self.manager.get_supported_exchanges()


def new_gemini(config: Optional[ExchangeConfig] = None) -> GeminiClient:
    """Gemini client with production defaults unless a config is given"""
    return GeminiClient(config)
