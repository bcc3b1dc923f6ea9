"""
JSON file persistence for portfolios, transactions and recommendations.
"""

from .json_store import JsonCollectionFile
from .records import (
    CriteriaRecord,
    HoldingRecord,
    PortfolioRecord,
    RecommendationRecord,
    TransactionRecord,
)

__all__ = [
    "JsonCollectionFile",
    "CriteriaRecord",
    "HoldingRecord",
    "PortfolioRecord",
    "RecommendationRecord",
    "TransactionRecord",
]
