"""
Gemini Market API
Public market data endpoints
"""

from typing import TYPE_CHECKING, List, Optional

from ..context import RequestContext
from ..errors import CancelledError, DataParsingError, NetworkError, SDKError, is_cancellation
from .types import SymbolDetails, TickerV2

if TYPE_CHECKING:
    from .client import GeminiClient


class MarketAPI:
    """Public market data (no credentials required)"""

    def __init__(self, client: "GeminiClient"):
        self.client = client

    def list_symbols(self, ctx: Optional[RequestContext] = None) -> List[str]:
        """
        Fetch all trading symbols

        Returns:
            Lower-case symbol strings, e.g. ['btcusd', 'ethusd']
        """
        self.client.logger.debug("Fetching symbols")
        data = self.client.public_get('/v1/symbols', 'fetch symbols', ctx)
        if not isinstance(data, list):
            raise DataParsingError("failed to parse symbols response",
                                   details=f"expected array, got {type(data).__name__}")

        symbols = [str(symbol) for symbol in data]
        self.client.logger.debug("Fetched symbols", count=len(symbols))
        return symbols

    def get_symbol_details(self, symbol: str, ctx: Optional[RequestContext] = None) -> SymbolDetails:
        """
        Fetch details for one symbol

        Args:
            symbol: Trading symbol, e.g. 'btcusd'

        Returns:
            SymbolDetails
        """
        self.client.logger.debug("Fetching symbol details", symbol=symbol)
        data = self.client.public_get(f'/v1/symbols/details/{symbol}', 'fetch symbol details', ctx)
        return self.client.parse_object(data, SymbolDetails.from_dict, 'symbol details')

    def get_all_symbol_details(self, ctx: Optional[RequestContext] = None) -> List[SymbolDetails]:
        """
        Fetch details for every symbol, one request per symbol

        Symbols whose details cannot be fetched are logged and skipped.
        Cancellation of ctx is not a per-symbol failure: it stops the loop
        and reaches the caller.
        """
        symbols = self.list_symbols(ctx)

        all_details = []
        for symbol in symbols:
            if ctx is not None and ctx.cancelled:
                error = CancelledError(ctx.reason)
                raise NetworkError("failed to fetch symbol details", cause=error) from error
            try:
                all_details.append(self.get_symbol_details(symbol, ctx))
            except SDKError as e:
                if is_cancellation(e):
                    raise
                self.client.logger.warning("Failed to fetch details for symbol",
                                           symbol=symbol, error=str(e))

        self.client.logger.debug("Fetched all symbol details", count=len(all_details))
        return all_details

    def get_ticker_v2(self, symbol: str, ctx: Optional[RequestContext] = None) -> TickerV2:
        """
        Fetch 24h ticker data for a symbol

        Args:
            symbol: Trading symbol, e.g. 'btcusd'

        Returns:
            TickerV2 with open/high/low/close, hourly changes and best bid/ask
        """
        self.client.logger.debug("Fetching ticker", symbol=symbol)
        data = self.client.public_get(f'/v2/ticker/{symbol}', 'fetch ticker data', ctx)
        return self.client.parse_object(data, TickerV2.from_dict, 'ticker')
