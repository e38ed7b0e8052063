"""
Gemini Types
Request and response shapes for the Gemini REST API
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ...utils.helpers import parse_float_from_string


class OrderSide(Enum):
    """Order side"""
    BUY = "buy"
    SELL = "sell"


class OrderType(Enum):
    """Order types accepted by /v1/order/new"""
    EXCHANGE_LIMIT = "exchange limit"
    AUCTION_ONLY = "auction-only"
    MARKET_BUY = "market buy"
    MARKET_SELL = "market sell"
    IMMEDIATE_OR_CANCEL = "immediate-or-cancel"
    FILL_OR_KILL = "fill-or-kill"
    INDICATION_OF_INTEREST = "indication-of-interest"


class OrderStatus(Enum):
    """Order lifecycle status"""
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _float(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None or value == "":
        return 0.0
    return float(value)


@dataclass
class ErrorResponse:
    """Application error envelope returned inside a 200 response"""
    result: str
    reason: str
    message: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorResponse":
        return cls(
            result=_str(data, 'result'),
            reason=_str(data, 'reason'),
            message=_str(data, 'message'),
        )

    @property
    def is_error(self) -> bool:
        return self.result == "error"


@dataclass
class Symbol:
    """Entry of /v1/symbols/details"""
    symbol: str
    base_currency: str
    quote_currency: str
    tick_size: float = 0.0
    quote_increment: float = 0.0
    min_order_size: str = ""
    status: str = ""
    wrap_enabled: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Symbol":
        return cls(
            symbol=_str(data, 'symbol'),
            base_currency=_str(data, 'base_currency'),
            quote_currency=_str(data, 'quote_currency'),
            tick_size=_float(data, 'tick_size'),
            quote_increment=_float(data, 'quote_increment'),
            min_order_size=_str(data, 'min_order_size'),
            status=_str(data, 'status'),
            wrap_enabled=bool(data.get('wrap_enabled', False)),
        )

    @property
    def min_order_size_value(self) -> float:
        return parse_float_from_string(self.min_order_size)


@dataclass
class SymbolDetails(Symbol):
    """Response of /v1/symbols/details/{symbol}"""
    product_type: str = ""
    contract_type: str = ""
    contract_price_currency: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SymbolDetails":
        base = Symbol.from_dict(data)
        return cls(
            **base.__dict__,
            product_type=_str(data, 'product_type'),
            contract_type=_str(data, 'contract_type'),
            contract_price_currency=_str(data, 'contract_price_currency'),
        )


@dataclass
class TickerV2:
    """Response of /v2/ticker/{symbol}"""
    symbol: str
    open: str
    high: str
    low: str
    close: str
    changes: List[str] = field(default_factory=list)
    bid: str = ""
    ask: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TickerV2":
        return cls(
            symbol=_str(data, 'symbol'),
            open=_str(data, 'open'),
            high=_str(data, 'high'),
            low=_str(data, 'low'),
            close=_str(data, 'close'),
            changes=[str(change) for change in data.get('changes') or []],
            bid=_str(data, 'bid'),
            ask=_str(data, 'ask'),
        )


@dataclass
class NewOrderRequest:
    """Fields of a /v1/order/new request; request and nonce are stamped by the signer"""
    symbol: str
    amount: str
    side: OrderSide
    type: OrderType = OrderType.EXCHANGE_LIMIT
    price: str = ""
    client_order_id: str = ""
    options: List[str] = field(default_factory=list)
    account: str = ""

    def to_fields(self) -> Dict[str, Any]:
        """Signed payload fields in wire order"""
        return {
            'client_order_id': self.client_order_id,
            'symbol': self.symbol,
            'amount': self.amount,
            'price': self.price,
            'side': self.side.value,
            'type': self.type.value,
            'options': list(self.options),
            'account': self.account,
        }


@dataclass
class Order:
    """Order as returned by the order endpoints"""
    order_id: str
    id: str = ""
    symbol: str = ""
    exchange: str = ""
    avg_execution_price: str = ""
    side: str = ""
    type: str = ""
    timestamp: str = ""
    timestampms: int = 0
    is_live: bool = False
    is_cancelled: bool = False
    is_hidden: bool = False
    was_forced: bool = False
    executed_amount: str = ""
    remaining_amount: str = ""
    options: List[str] = field(default_factory=list)
    price: str = ""
    original_amount: str = ""
    client_order_id: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            order_id=_str(data, 'order_id'),
            id=_str(data, 'id'),
            symbol=_str(data, 'symbol'),
            exchange=_str(data, 'exchange'),
            avg_execution_price=_str(data, 'avg_execution_price'),
            side=_str(data, 'side'),
            type=_str(data, 'type'),
            timestamp=_str(data, 'timestamp'),
            timestampms=int(data.get('timestampms') or 0),
            is_live=bool(data.get('is_live', False)),
            is_cancelled=bool(data.get('is_cancelled', False)),
            is_hidden=bool(data.get('is_hidden', False)),
            was_forced=bool(data.get('was_forced', False)),
            executed_amount=_str(data, 'executed_amount'),
            remaining_amount=_str(data, 'remaining_amount'),
            options=[str(option) for option in data.get('options') or []],
            price=_str(data, 'price'),
            original_amount=_str(data, 'original_amount'),
            client_order_id=_str(data, 'client_order_id'),
            raw=dict(data),
        )

    @property
    def status(self) -> OrderStatus:
        if self.is_cancelled:
            return OrderStatus.CANCELLED
        if self.is_live:
            return OrderStatus.OPEN
        return OrderStatus.CLOSED


@dataclass
class Balance:
    """Entry of /v1/balances"""
    type: str
    currency: str
    amount: str = ""
    available: str = ""
    available_for_withdrawal: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Balance":
        return cls(
            type=_str(data, 'type'),
            currency=_str(data, 'currency'),
            amount=_str(data, 'amount'),
            available=_str(data, 'available'),
            available_for_withdrawal=_str(data, 'availableForWithdrawal'),
        )


@dataclass
class NotionalBalance:
    """Entry of /v1/notionalbalances/{currency}"""
    currency: str
    amount: str = ""
    amount_notional: str = ""
    available: str = ""
    available_notional: str = ""
    available_for_withdrawal: str = ""
    available_for_withdrawal_notional: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotionalBalance":
        return cls(
            currency=_str(data, 'currency'),
            amount=_str(data, 'amount'),
            amount_notional=_str(data, 'amountNotional'),
            available=_str(data, 'available'),
            available_notional=_str(data, 'availableNotional'),
            available_for_withdrawal=_str(data, 'availableForWithdrawal'),
            available_for_withdrawal_notional=_str(data, 'availableForWithdrawalNotional'),
        )


@dataclass
class DepositAddress:
    """Entry of /v1/addresses/{network}"""
    address: str
    network: str = ""
    timestamp: int = 0
    label: Optional[str] = None
    memo: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DepositAddress":
        return cls(
            address=_str(data, 'address'),
            network=_str(data, 'network'),
            timestamp=int(data.get('timestamp') or 0),
            label=data.get('label'),
            memo=data.get('memo'),
        )
