"""
Price feed services
"""

from .price_feed import CoinGeckoPriceClient, PollingHandle, PriceFeedPoller

__all__ = [
    'CoinGeckoPriceClient',
    'PollingHandle',
    'PriceFeedPoller'
]
