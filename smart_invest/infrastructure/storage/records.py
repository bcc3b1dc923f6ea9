"""
Pydantic record models for the persisted JSON collections.

Records use camelCase keys and ISO-8601 timestamps on disk and convert to and
from the domain dataclasses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smart_invest.core.enums import RecommendationAction, TransactionType
from smart_invest.core.models.criteria import InvestmentCriteria
from smart_invest.core.models.holding import Holding
from smart_invest.core.models.portfolio import Portfolio
from smart_invest.core.models.recommendation import InvestmentRecommendation
from smart_invest.core.models.transaction import Transaction


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HoldingRecord(_Record):
    """Persisted holding."""

    symbol: str
    quantity: int
    average_cost: float
    current_price: float | None = None
    last_updated: datetime

    @classmethod
    def from_domain(cls, holding: Holding) -> "HoldingRecord":
        return cls(
            symbol=holding.symbol,
            quantity=holding.quantity,
            average_cost=holding.average_cost,
            current_price=holding.current_price,
            last_updated=holding.last_updated,
        )

    def to_domain(self) -> Holding:
        return Holding(
            symbol=self.symbol,
            quantity=self.quantity,
            average_cost=self.average_cost,
            last_updated=self.last_updated,
            current_price=self.current_price,
        )


class CriteriaRecord(_Record):
    """Persisted investment criterion."""

    id: str
    description: str
    weight: float = 1
    active: bool = True

    @classmethod
    def from_domain(cls, criteria: InvestmentCriteria) -> "CriteriaRecord":
        return cls(
            id=criteria.id,
            description=criteria.description,
            weight=criteria.weight,
            active=criteria.active,
        )

    def to_domain(self) -> InvestmentCriteria:
        return InvestmentCriteria(
            id=self.id, description=self.description, weight=self.weight, active=self.active
        )


class PortfolioRecord(_Record):
    """Persisted portfolio, holdings stored as an array."""

    id: str
    name: str
    initial_capital: float
    current_cash: float
    created_at: datetime
    criteria: list[CriteriaRecord] = Field(default_factory=list)
    holdings: list[HoldingRecord] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, portfolio: Portfolio) -> "PortfolioRecord":
        return cls(
            id=portfolio.id,
            name=portfolio.name,
            initial_capital=portfolio.initial_capital,
            current_cash=portfolio.current_cash,
            created_at=portfolio.created_at,
            criteria=[CriteriaRecord.from_domain(c) for c in portfolio.criteria],
            holdings=[HoldingRecord.from_domain(h) for h in portfolio.holdings.values()],
        )

    def to_domain(self) -> Portfolio:
        holdings = [record.to_domain() for record in self.holdings]
        return Portfolio(
            id=self.id,
            name=self.name,
            initial_capital=self.initial_capital,
            current_cash=self.current_cash,
            created_at=self.created_at,
            criteria=[record.to_domain() for record in self.criteria],
            holdings={holding.symbol: holding for holding in holdings},
        )


class TransactionRecord(_Record):
    """Persisted transaction."""

    id: str
    portfolio_id: str
    symbol: str
    type: TransactionType
    quantity: int
    price: float
    timestamp: datetime
    reasoning: str

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionRecord":
        return cls(
            id=transaction.id,
            portfolio_id=transaction.portfolio_id,
            symbol=transaction.symbol,
            type=transaction.type,
            quantity=transaction.quantity,
            price=transaction.price,
            timestamp=transaction.timestamp,
            reasoning=transaction.reasoning,
        )

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            portfolio_id=self.portfolio_id,
            symbol=self.symbol,
            type=self.type,
            quantity=self.quantity,
            price=self.price,
            timestamp=self.timestamp,
            reasoning=self.reasoning,
        )


class RecommendationRecord(_Record):
    """Persisted investment recommendation."""

    id: str
    portfolio_id: str
    symbol: str
    action: RecommendationAction
    quantity: int | None = None
    reasoning: str
    score: float
    confidence: float
    target_price: float | None = None
    created_at: datetime
    executed: bool = False
    executed_at: datetime | None = None

    @classmethod
    def from_domain(cls, recommendation: InvestmentRecommendation) -> "RecommendationRecord":
        return cls(
            id=recommendation.id,
            portfolio_id=recommendation.portfolio_id,
            symbol=recommendation.symbol,
            action=recommendation.action,
            quantity=recommendation.quantity,
            reasoning=recommendation.reasoning,
            score=recommendation.score,
            confidence=recommendation.confidence,
            target_price=recommendation.target_price,
            created_at=recommendation.created_at,
            executed=recommendation.executed,
            executed_at=recommendation.executed_at,
        )

    def to_domain(self) -> InvestmentRecommendation:
        return InvestmentRecommendation(
            id=self.id,
            portfolio_id=self.portfolio_id,
            symbol=self.symbol,
            action=self.action,
            reasoning=self.reasoning,
            score=self.score,
            confidence=self.confidence,
            created_at=self.created_at,
            quantity=self.quantity,
            target_price=self.target_price,
            executed=self.executed,
            executed_at=self.executed_at,
        )
