"""
Gemini Exchange Module
"""

from .client import GeminiClient, BASE_URL_PROD, BASE_URL_SANDBOX
from .fund import FundAPI
from .market import MarketAPI
from .order import OrderAPI
from .types import (
    Balance,
    DepositAddress,
    ErrorResponse,
    NewOrderRequest,
    NotionalBalance,
    Order,
    OrderSide,
    OrderStatus,
    OrderType,
    Symbol,
    SymbolDetails,
    TickerV2,
)

__all__ = [
    'GeminiClient',
    'BASE_URL_PROD',
    'BASE_URL_SANDBOX',
    'MarketAPI',
    'OrderAPI',
    'FundAPI',
    'Balance',
    'DepositAddress',
    'ErrorResponse',
    'NewOrderRequest',
    'NotionalBalance',
    'Order',
    'OrderSide',
    'OrderStatus',
    'OrderType',
    'Symbol',
    'SymbolDetails',
    'TickerV2',
]
