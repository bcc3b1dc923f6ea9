"""
Research and recommendation domain models.

A CompanyResearch is the research provider's verdict on one symbol; an
InvestmentRecommendation is a persisted, executable proposal built from it.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from smart_invest.core.constants import MAX_SCORE, MIN_SCORE
from smart_invest.core.enums import RecommendationAction
from smart_invest.core.exceptions.portfolio import (
    RecommendationAlreadyExecutedError,
    ValidationError,
)
from smart_invest.core.utils.validation import validate_range, validate_symbol


@dataclass
class CompanyResearch:
    """Research result for one company."""

    symbol: str
    company_name: str
    analysis: str
    score: float
    reasoning: str
    timestamp: datetime

    def __post_init__(self) -> None:
        self.symbol = validate_symbol(self.symbol)
        validate_range(self.score, MIN_SCORE, MAX_SCORE, "score")


@dataclass
class InvestmentRecommendation:
    """A proposed BUY/SELL/HOLD action for a portfolio.

    Lifecycle: created with ``executed=False``; ``mark_executed`` flips it
    exactly once and stamps ``executed_at``.
    """

    id: str
    portfolio_id: str
    symbol: str
    action: RecommendationAction
    reasoning: str
    score: float
    confidence: float
    created_at: datetime
    quantity: int | None = None
    target_price: float | None = None
    executed: bool = False
    executed_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate and normalize recommendation data after initialization."""
        self.symbol = validate_symbol(self.symbol)
        if not isinstance(self.action, RecommendationAction):
            try:
                self.action = RecommendationAction.from_string(str(self.action))
            except ValueError as e:
                raise ValidationError(str(e)) from e
        validate_range(self.score, MIN_SCORE, MAX_SCORE, "score")
        validate_range(self.confidence, 0, 1, "confidence")
        if self.quantity is not None and (
            not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity <= 0
        ):
            raise ValidationError(f"Quantity must be a positive integer, got {self.quantity!r}")

    @classmethod
    def create(
        cls,
        portfolio_id: str,
        symbol: str,
        action: RecommendationAction,
        reasoning: str,
        score: float,
        confidence: float,
        quantity: int | None = None,
        target_price: float | None = None,
    ) -> "InvestmentRecommendation":
        """Factory method for a new, unexecuted recommendation."""
        return cls(
            id=f"rec_{uuid.uuid4().hex[:12]}",
            portfolio_id=portfolio_id,
            symbol=symbol,
            action=action,
            reasoning=reasoning,
            score=score,
            confidence=confidence,
            created_at=datetime.now(UTC),
            quantity=quantity,
            target_price=target_price,
        )

    @property
    def is_pending(self) -> bool:
        """True until the recommendation has been executed."""
        return not self.executed

    def mark_executed(self, timestamp: datetime | None = None) -> None:
        """Record execution.

        Raises:
            RecommendationAlreadyExecutedError: On a second call
        """
        if self.executed:
            raise RecommendationAlreadyExecutedError(self.id)
        self.executed = True
        self.executed_at = timestamp if timestamp is not None else datetime.now(UTC)
