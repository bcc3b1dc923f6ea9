"""
Application services: the portfolio store and its tabular reports.
"""

from .portfolio_store import PortfolioStore, RecommendationBatch
from .reports import holdings_frame, transactions_frame

__all__ = ["PortfolioStore", "RecommendationBatch", "holdings_frame", "transactions_frame"]
