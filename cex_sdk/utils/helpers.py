"""
Utility Helper Functions
Common utility functions used across the SDK
"""

from typing import Optional

# Quote currencies listed by Gemini
KNOWN_QUOTE_CURRENCIES = ["usd", "btc", "eth", "eur", "gbp", "sgd", "gusd", "dai"]

DEFAULT_QUOTE_CURRENCY = "USD"


def _match_quote(symbol: str) -> Optional[str]:
    """Longest known quote currency that `symbol` ends with"""
    # A bare quote such as 'usd' is not split, so the base is never empty
    matches = [quote for quote in KNOWN_QUOTE_CURRENCIES
               if symbol.endswith(quote) and len(symbol) > len(quote)]
    if not matches:
        return None
    return max(matches, key=len)


def extract_base_currency(symbol: str) -> str:
    """
    Extract the base currency from a symbol such as 'btcusd'

    Falls back to the first three characters for symbols of six or more
    characters, and to the whole symbol otherwise.
    """
    symbol = symbol.lower()

    quote = _match_quote(symbol)
    if quote:
        return symbol[:-len(quote)].upper()

    if len(symbol) >= 6:
        return symbol[:3].upper()

    return symbol.upper()


def extract_quote_currency(symbol: str) -> str:
    """
    Extract the quote currency from a symbol such as 'btcusd'

    Falls back to the last three characters for symbols of six or more
    characters, and to USD otherwise.
    """
    symbol = symbol.lower()

    quote = _match_quote(symbol)
    if quote:
        return quote.upper()

    if len(symbol) >= 6:
        return symbol[-3:].upper()

    return DEFAULT_QUOTE_CURRENCY


def parse_float_from_string(value: Optional[str]) -> float:
    """
    Convert a decimal string to float, treating empty input as zero

    Raises:
        ValueError: value is not a number
    """
    if value is None:
        return 0.0
    value = value.strip()
    if not value:
        return 0.0
    return float(value)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format"""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{int(seconds/60)}m"
    else:
        return f"{seconds/3600:.1f}h"
