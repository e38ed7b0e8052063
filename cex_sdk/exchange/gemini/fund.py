"""
Gemini Fund API
Private balance and deposit address endpoints
"""

from typing import TYPE_CHECKING, List, Optional

from ..context import RequestContext
from .types import Balance, DepositAddress, NotionalBalance

if TYPE_CHECKING:
    from .client import GeminiClient


class FundAPI:
    """Fund management (requires API key and secret)"""

    def __init__(self, client: "GeminiClient"):
        self.client = client

    def get_available_balances(self, account: str = "",
                               ctx: Optional[RequestContext] = None) -> List[Balance]:
        """
        Fetch available balances per currency

        Args:
            account: Sub-account name (master API keys only)
            ctx: Optional cancellation context

        Returns:
            List of Balance entries
        """
        data = self.client.private_post('/v1/balances', {'account': account},
                                        'fetch available balances', ctx)
        balances = self.client.parse_list(data, Balance.from_dict, 'balances')
        self.client.logger.debug("Fetched balances", count=len(balances))
        return balances

    def get_notional_balances(self, currency: str, account: str = "",
                              ctx: Optional[RequestContext] = None) -> List[NotionalBalance]:
        """
        Fetch balances valued in a notional currency

        Args:
            currency: Notional currency, e.g. 'usd'
            account: Sub-account name (master API keys only)
        """
        data = self.client.private_post(f'/v1/notionalbalances/{currency}', {'account': account},
                                        'fetch notional balances', ctx)
        return self.client.parse_list(data, NotionalBalance.from_dict, 'notional balances')

    def list_deposit_addresses(self, network: str, account: str = "",
                               ctx: Optional[RequestContext] = None) -> List[DepositAddress]:
        """Fetch deposit addresses on a network, e.g. 'bitcoin' or 'ethereum'"""
        data = self.client.private_post(f'/v1/addresses/{network}', {'account': account},
                                        'list deposit addresses', ctx)
        return self.client.parse_list(data, DepositAddress.from_dict, 'deposit addresses')
