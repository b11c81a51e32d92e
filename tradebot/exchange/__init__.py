"""
Exchange collaborators.

Interface consumed by the trading controller plus the Upbit REST adapter.
"""

from .base import Account, ExchangeClient, Market, MarketEvent, Order, OrderSide
from .markets import filter_safe_markets, is_market_safe
from .upbit import UpbitClient

__all__ = [
    "Account",
    "ExchangeClient",
    "Market",
    "MarketEvent",
    "Order",
    "OrderSide",
    "UpbitClient",
    "filter_safe_markets",
    "is_market_safe",
]
