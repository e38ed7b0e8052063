"""
Gemini Order API
Private order placement and management endpoints
"""

from typing import TYPE_CHECKING, List, Optional

from ..context import RequestContext
from .types import NewOrderRequest, Order

if TYPE_CHECKING:
    from .client import GeminiClient


class OrderAPI:
    """Order management (requires API key and secret)"""

    def __init__(self, client: "GeminiClient"):
        self.client = client

    def place_order(self, request: NewOrderRequest,
                    ctx: Optional[RequestContext] = None) -> Order:
        """
        Place a new order

        Args:
            request: Order parameters
            ctx: Optional cancellation context

        Returns:
            The accepted order
        """
        self.client.logger.debug("Placing order", symbol=request.symbol,
                                 side=request.side.value, type=request.type.value)

        data = self.client.private_post('/v1/order/new', request.to_fields(), 'place order', ctx)
        order = self.client.parse_object(data, Order.from_dict, 'order')

        self.client.logger.info("Order placed", order_id=order.order_id, symbol=order.symbol)
        return order

    def cancel_order(self, order_id: str, account: str = "",
                     ctx: Optional[RequestContext] = None) -> Order:
        """
        Cancel an order

        Args:
            order_id: Exchange order id
            account: Sub-account name (master API keys only)
        """
        self.client.logger.debug("Cancelling order", order_id=order_id)
        fields = {'order_id': order_id, 'account': account}
        data = self.client.private_post('/v1/order/cancel', fields, 'cancel order', ctx)
        return self.client.parse_object(data, Order.from_dict, 'cancel order')

    def get_active_orders(self, account: str = "",
                          ctx: Optional[RequestContext] = None) -> List[Order]:
        """Fetch all live orders"""
        data = self.client.private_post('/v1/orders', {'account': account},
                                        'fetch active orders', ctx)
        orders = self.client.parse_list(data, Order.from_dict, 'active orders')
        self.client.logger.debug("Fetched active orders", count=len(orders))
        return orders

    def get_order_status(self, order_id: str, client_order_id: str = "",
                         include_trades: bool = False, account: str = "",
                         ctx: Optional[RequestContext] = None) -> Order:
        """
        Fetch the status of one order

        Args:
            order_id: Exchange order id
            client_order_id: Client-assigned id (optional)
            include_trades: Ask the exchange to include fills
            account: Sub-account name (master API keys only)
        """
        fields = {
            'order_id': order_id,
            'client_order_id': client_order_id,
            'include_trades': include_trades,
            'account': account,
        }
        data = self.client.private_post('/v1/order/status', fields, 'fetch order status', ctx)
        return self.client.parse_object(data, Order.from_dict, 'order status')
