"""
Market data providers.
"""

from .yahoo_finance import YahooFinancePriceProvider

__all__ = ["YahooFinancePriceProvider"]
