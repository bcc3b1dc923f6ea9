"""
Collaborator interfaces consumed by the portfolio store.

PriceProvider supplies quotes; ResearchProvider turns investment criteria
into researched, scored companies. Concrete transports live in
smart_invest.infrastructure.
"""

from abc import ABC, abstractmethod

from smart_invest.core.constants import (
    MAX_REASONING_LENGTH,
    MAX_RECOMMENDATION_POSITIONS,
    MAX_SCORE,
    MIN_RECOMMENDATION_SCORE,
    REASONING_EXCERPT_LENGTH,
)
from smart_invest.core.enums import RecommendationAction
from smart_invest.core.models.criteria import InvestmentCriteria
from smart_invest.core.models.market import BatchPriceResult, PriceQuote
from smart_invest.core.models.recommendation import CompanyResearch, InvestmentRecommendation


class PriceProvider(ABC):
    """Abstract source of current market prices."""

    @abstractmethod
    async def get_current_price(self, symbol: str) -> PriceQuote:
        """Quote for one symbol.

        Raises:
            ProviderError: If the symbol is unknown or the lookup fails
        """
        pass

    @abstractmethod
    async def get_batch_prices(self, symbols: list[str]) -> BatchPriceResult:
        """Best-effort prices for many symbols.

        Must not raise for an individual symbol; failures are recorded in
        the result instead.
        """
        pass


def truncate_reasoning(text: str, limit: int = MAX_REASONING_LENGTH) -> str:
    """Cap text at limit characters, marking the cut with an ellipsis."""
    text = text.strip()
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class ResearchProvider(ABC):
    """Abstract company-research collaborator.

    Subclasses supply candidate discovery and per-company research; turning
    researches into recommendations is shared.
    """

    @abstractmethod
    async def find_companies_for_criteria(
        self, criteria: list[InvestmentCriteria], limit: int
    ) -> list[str]:
        """Candidate symbols matching the active criteria."""
        pass

    @abstractmethod
    async def research_company(
        self, symbol: str, criteria: list[InvestmentCriteria]
    ) -> CompanyResearch:
        """Score one company against the criteria.

        Raises:
            ProviderError: If the research call fails
        """
        pass

    async def summarize(self, research: CompanyResearch) -> str:
        """Short reasoning for a recommendation; override to use a model."""
        excerpt = research.analysis[:REASONING_EXCERPT_LENGTH]
        return truncate_reasoning(f"Score: {research.score}/100. {excerpt}")

    async def generate_recommendations(
        self,
        portfolio_id: str,
        researches: list[CompanyResearch],
        available_cash: float,
        max_positions: int = MAX_RECOMMENDATION_POSITIONS,
    ) -> list[InvestmentRecommendation]:
        """Turn the best-scoring researches into BUY recommendations.

        Researches scoring below the threshold are dropped; the rest are
        ranked by score and capped at max_positions. Quantity is left unset
        and sized at execution time against the cash available then, so
        available_cash is only a hint for subclasses that size positions.
        """
        ranked = sorted(
            (r for r in researches if r.score >= MIN_RECOMMENDATION_SCORE),
            key=lambda r: r.score,
            reverse=True,
        )[:max_positions]

        recommendations = []
        for research in ranked:
            reasoning = truncate_reasoning(await self.summarize(research))
            recommendations.append(
                InvestmentRecommendation.create(
                    portfolio_id=portfolio_id,
                    symbol=research.symbol,
                    action=RecommendationAction.BUY,
                    reasoning=reasoning,
                    score=research.score,
                    confidence=research.score / MAX_SCORE,
                )
            )
        return recommendations
