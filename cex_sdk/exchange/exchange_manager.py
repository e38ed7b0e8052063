"""
Exchange Manager
Registry mapping exchange names to client constructors
"""

from typing import Callable, Dict, List, Optional

from .base_client import BaseExchangeClient
from .errors import ExchangeNotSupportedError
from .models import ExchangeConfig

ExchangeConstructor = Callable[[Optional[ExchangeConfig]], BaseExchangeClient]


class ExchangeManager:
    """
    Creates exchange clients by case-insensitive name
    """

    def __init__(self, logger=None):
        """
        Initialize exchange manager

        Args:
            logger: Logger instance (optional)
        """
        self.logger = logger
        self._constructors: Dict[str, ExchangeConstructor] = {}

    def register(self, exchange_name: str, constructor: ExchangeConstructor):
        """
        Register an exchange constructor

        Args:
            exchange_name: Exchange identifier, stored lower-cased
            constructor: Callable taking an ExchangeConfig and returning a client
        """
        self._constructors[exchange_name.lower()] = constructor
        if self.logger:
            self.logger.system(f"Registered exchange: {exchange_name.lower()}")

    def create(self, exchange_name: str, config: Optional[ExchangeConfig] = None) -> BaseExchangeClient:
        """
        Create an exchange client by name

        Args:
            exchange_name: Exchange identifier (case-insensitive)
            config: Client configuration

        Returns:
            Exchange client instance

        Raises:
            ExchangeNotSupportedError: no constructor registered under that name
        """
        constructor = self._constructors.get(exchange_name.lower())
        if constructor is None:
            raise ExchangeNotSupportedError(f"exchange '{exchange_name}' not supported")
        return constructor(config)

    def get_supported_exchanges(self) -> List[str]:
        """Names of all registered exchanges"""
        return sorted(self._constructors)
