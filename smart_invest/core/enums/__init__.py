"""
Core enumerations for the investment tracker.
"""

from .actions import RecommendationAction, TransactionType

__all__ = ["RecommendationAction", "TransactionType"]
