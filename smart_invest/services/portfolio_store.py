"""
Portfolio store: the portfolios, the transaction log and the recommendations,
with JSON persistence and the trading workflows that touch the price provider.

State is owned by a PortfolioStore instance; there are no module-level maps.
Every trade runs in a fixed order: fetch price, mutate the ledger, append
the transaction, persist. A provider failure therefore aborts before any
state changes.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from smart_invest.config import Settings, get_settings
from smart_invest.core.constants import (
    COMPANY_SEARCH_LIMIT,
    MANUAL_BUY_REASONING,
    MANUAL_SELL_REASONING,
    MAX_RECOMMENDATION_POSITIONS,
    RECOMMENDATION_CASH_FRACTION,
)
from smart_invest.core.enums import TransactionType
from smart_invest.core.exceptions.portfolio import (
    InsufficientFundsError,
    InvalidActionError,
    InvestmentException,
    PortfolioNotFoundError,
    RecommendationAlreadyExecutedError,
    RecommendationNotFoundError,
    ValidationError,
)
from smart_invest.core.interfaces.providers import PriceProvider, ResearchProvider
from smart_invest.core.models.criteria import InvestmentCriteria
from smart_invest.core.models.market import PriceQuote
from smart_invest.core.models.portfolio import Portfolio
from smart_invest.core.models.portfolio_metrics import PerformanceMetrics
from smart_invest.core.models.recommendation import InvestmentRecommendation
from smart_invest.core.models.transaction import Transaction
from smart_invest.core.types.financial import calculate_notional_value
from smart_invest.core.utils.decorators import log_operation, validate_trade_inputs
from smart_invest.infrastructure.storage import (
    JsonCollectionFile,
    PortfolioRecord,
    RecommendationRecord,
    TransactionRecord,
)


@dataclass
class RecommendationBatch:
    """Outcome of one recommendation run: what was produced and what failed."""

    recommendations: list[InvestmentRecommendation] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)


class PortfolioStore:
    """Collection of portfolio ledgers plus the append-only transaction log."""

    def __init__(
        self,
        data_dir: Path,
        price_provider: PriceProvider,
        *,
        portfolios_file: str = "portfolios.json",
        transactions_file: str = "transactions.json",
        recommendations_file: str = "recommendations.json",
    ) -> None:
        self.data_dir = Path(data_dir)
        self.price_provider = price_provider

        self._portfolios_file = JsonCollectionFile(self.data_dir / portfolios_file, PortfolioRecord)
        self._transactions_file = JsonCollectionFile(
            self.data_dir / transactions_file, TransactionRecord
        )
        self._recommendations_file = JsonCollectionFile(
            self.data_dir / recommendations_file, RecommendationRecord
        )

        self.portfolios: dict[str, Portfolio] = {}
        self.transactions: list[Transaction] = []
        self.recommendations: dict[str, InvestmentRecommendation] = {}

    @classmethod
    def from_settings(
        cls, price_provider: PriceProvider, settings: Settings | None = None
    ) -> "PortfolioStore":
        """Build a store whose files live where the settings say."""
        settings = settings or get_settings()
        return cls(
            settings.data_path,
            price_provider,
            portfolios_file=settings.portfolios_file,
            transactions_file=settings.transactions_file,
            recommendations_file=settings.recommendations_file,
        )

    # Persistence

    def load(self) -> None:
        """Load all collections; missing or malformed files load as empty."""
        self.portfolios = {p.id: p for p in self._load_domain(self._portfolios_file)}
        self.transactions = self._load_domain(self._transactions_file)
        self.recommendations = {r.id: r for r in self._load_domain(self._recommendations_file)}
        logger.info(
            f"Loaded {len(self.portfolios)} portfolios, {len(self.transactions)} transactions, "
            f"{len(self.recommendations)} recommendations from {self.data_dir}"
        )

    @staticmethod
    def _load_domain(collection: JsonCollectionFile) -> list:
        records = collection.load()
        try:
            return [record.to_domain() for record in records]
        except ValidationError as e:
            logger.warning(f"Invalid entry in {collection.path.name}, starting fresh: {e}")
            return []

    def save_portfolios(self) -> None:
        self._portfolios_file.save(
            [PortfolioRecord.from_domain(p) for p in self.portfolios.values()]
        )

    def save_transactions(self) -> None:
        self._transactions_file.save([TransactionRecord.from_domain(t) for t in self.transactions])

    def save_recommendations(self) -> None:
        self._recommendations_file.save(
            [RecommendationRecord.from_domain(r) for r in self.recommendations.values()]
        )

    # Portfolios

    def create_portfolio(self, name: str, initial_capital: float) -> str:
        """Create a portfolio funded with initial_capital and return its id."""
        portfolio = Portfolio.create(name, initial_capital)
        self.portfolios[portfolio.id] = portfolio
        self.save_portfolios()
        logger.info(f"Created portfolio {portfolio.name} ({portfolio.id}) with {initial_capital:.2f}")
        return portfolio.id

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """Resolve a portfolio.

        Raises:
            PortfolioNotFoundError: If the id is unknown
        """
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(portfolio_id)
        return portfolio

    def list_portfolios(self) -> list[Portfolio]:
        return list(self.portfolios.values())

    def delete_portfolio(self, portfolio_id: str) -> bool:
        """Delete a portfolio with its transactions and recommendations.

        Returns:
            False if the id was unknown (nothing is written)
        """
        if portfolio_id not in self.portfolios:
            return False

        del self.portfolios[portfolio_id]
        self.transactions = [t for t in self.transactions if t.portfolio_id != portfolio_id]
        self.recommendations = {
            rec_id: rec
            for rec_id, rec in self.recommendations.items()
            if rec.portfolio_id != portfolio_id
        }
        self.save_portfolios()
        self.save_transactions()
        self.save_recommendations()
        logger.info(f"Deleted portfolio {portfolio_id}")
        return True

    def add_criteria(
        self, portfolio_id: str, description: str, weight: float = 1
    ) -> InvestmentCriteria:
        """Attach a criterion to a portfolio and persist it."""
        criteria = self.get_portfolio(portfolio_id).add_criteria(description, weight)
        self.save_portfolios()
        return criteria

    # Trading

    def _record_transaction(
        self,
        portfolio: Portfolio,
        symbol: str,
        type: TransactionType,
        quantity: int,
        price: float,
        reasoning: str,
    ) -> Transaction:
        """Append a transaction for an already-applied ledger change and persist.

        Portfolios are written before the log. If saving the log fails, the
        PersistenceError propagates with the trade kept in memory and in
        portfolios.json but missing from transactions.json.
        """
        transaction = Transaction.record(
            portfolio_id=portfolio.id,
            symbol=symbol,
            type=type,
            quantity=quantity,
            price=price,
            reasoning=reasoning,
        )
        self.transactions.append(transaction)
        self.save_portfolios()
        self.save_transactions()
        return transaction

    def _buy_at(
        self,
        portfolio: Portfolio,
        symbol: str,
        quantity: int,
        quote: PriceQuote,
        reasoning: str,
    ) -> Transaction:
        total_cost = calculate_notional_value(quantity, quote.price)
        if total_cost > portfolio.current_cash:
            raise InsufficientFundsError(
                required=total_cost,
                available=portfolio.current_cash,
                operation=f"buying {quantity} {symbol}",
            )

        portfolio.add_holding(symbol, quantity, quote.price)
        return self._record_transaction(
            portfolio, symbol, TransactionType.BUY, quantity, quote.price, reasoning
        )

    @log_operation
    @validate_trade_inputs
    async def buy_stock(
        self,
        portfolio_id: str,
        symbol: str,
        quantity: int,
        reasoning: str = MANUAL_BUY_REASONING,
    ) -> Transaction:
        """Buy shares at the current market price.

        Raises:
            PortfolioNotFoundError: If the portfolio is unknown
            ProviderError: If the price lookup fails (nothing is changed)
            InsufficientFundsError: If the cost exceeds current cash
            PersistenceError: If saving fails
        """
        portfolio = self.get_portfolio(portfolio_id)
        quote = await self.price_provider.get_current_price(symbol)
        return self._buy_at(portfolio, symbol, quantity, quote, reasoning)

    @log_operation
    @validate_trade_inputs
    async def sell_stock(
        self,
        portfolio_id: str,
        symbol: str,
        quantity: int,
        reasoning: str = MANUAL_SELL_REASONING,
    ) -> Transaction:
        """Sell shares at the current market price.

        Raises:
            PortfolioNotFoundError: If the portfolio is unknown
            ProviderError: If the price lookup fails (nothing is changed)
            HoldingNotFoundError: If the symbol is not held
            InsufficientSharesError: If quantity exceeds shares held
            PersistenceError: If saving fails
        """
        portfolio = self.get_portfolio(portfolio_id)
        quote = await self.price_provider.get_current_price(symbol)

        portfolio.remove_holding(symbol, quantity, quote.price)
        return self._record_transaction(
            portfolio, symbol, TransactionType.SELL, quantity, quote.price, reasoning
        )

    async def get_portfolio_performance(self, portfolio_id: str) -> PerformanceMetrics:
        """Value a portfolio at current prices.

        A portfolio without holdings is valued from cash alone and the price
        provider is not called.
        """
        portfolio = self.get_portfolio(portfolio_id)
        if not portfolio.holdings:
            return portfolio.cash_only_metrics()

        batch = await self.price_provider.get_batch_prices(list(portfolio.holdings))
        for symbol, reason in batch.failures.items():
            logger.warning(f"Valuing {symbol} at average cost, no current price: {reason}")
        return portfolio.calculate_total_value(batch.as_mapping())

    def get_transaction_history(self, portfolio_id: str) -> list[Transaction]:
        """Transactions of one portfolio, newest first."""
        # Later log entries win timestamp ties
        return sorted(
            (t for t in reversed(self.transactions) if t.portfolio_id == portfolio_id),
            key=lambda t: t.timestamp,
            reverse=True,
        )

    # Recommendations

    def add_recommendations(self, recommendations: list[InvestmentRecommendation]) -> None:
        """Persist recommendations produced by a research run."""
        for recommendation in recommendations:
            self.get_portfolio(recommendation.portfolio_id)
            self.recommendations[recommendation.id] = recommendation
        self.save_recommendations()

    def get_recommendation(self, recommendation_id: str) -> InvestmentRecommendation:
        """Resolve a recommendation.

        Raises:
            RecommendationNotFoundError: If the id is unknown
        """
        recommendation = self.recommendations.get(recommendation_id)
        if recommendation is None:
            raise RecommendationNotFoundError(recommendation_id)
        return recommendation

    def list_recommendations(
        self, portfolio_id: str, pending_only: bool = False
    ) -> list[InvestmentRecommendation]:
        """Recommendations for one portfolio, best score first."""
        recommendations = [
            r
            for r in self.recommendations.values()
            if r.portfolio_id == portfolio_id and (r.is_pending or not pending_only)
        ]
        return sorted(recommendations, key=lambda r: r.score, reverse=True)

    async def _size_recommended_buy(
        self, portfolio: Portfolio, symbol: str
    ) -> tuple[int, PriceQuote]:
        """Whole shares affordable with a fixed fraction of current cash.

        Returns the quote used for sizing so the trade executes at the same price.
        """
        quote = await self.price_provider.get_current_price(symbol)
        budget = portfolio.current_cash * RECOMMENDATION_CASH_FRACTION
        quantity = math.floor(budget / quote.price)
        if quantity < 1:
            raise ValidationError(
                f"{RECOMMENDATION_CASH_FRACTION:.0%} of cash ({budget:.2f}) "
                f"does not buy one share of {symbol} at {quote.price:.2f}"
            )
        return quantity, quote

    @log_operation
    async def execute_recommendation(self, recommendation_id: str) -> Transaction:
        """Execute a pending recommendation through the ledger, exactly once.

        A BUY without a quantity is sized at 10% of current cash and filled at
        the price used for sizing. SELL needs an explicit quantity and HOLD
        cannot be executed.

        Raises:
            RecommendationNotFoundError: If the id is unknown
            RecommendationAlreadyExecutedError: If it already ran
            InvalidActionError: For HOLD, or SELL without a quantity
        """
        recommendation = self.get_recommendation(recommendation_id)
        if recommendation.executed:
            raise RecommendationAlreadyExecutedError(recommendation.id)
        if not recommendation.action.is_tradable:
            raise InvalidActionError(recommendation.action, "HOLD carries no trade")
        portfolio = self.get_portfolio(recommendation.portfolio_id)
        symbol = recommendation.symbol
        quantity = recommendation.quantity

        if recommendation.action.transaction_type() == TransactionType.BUY:
            if quantity is None:
                quantity, quote = await self._size_recommended_buy(portfolio, symbol)
                transaction = self._buy_at(
                    portfolio, symbol, quantity, quote, recommendation.reasoning
                )
            else:
                transaction = await self.buy_stock(
                    portfolio.id, symbol, quantity, reasoning=recommendation.reasoning
                )
        else:
            if quantity is None:
                raise InvalidActionError(recommendation.action, "SELL needs a quantity")
            transaction = await self.sell_stock(
                portfolio.id, symbol, quantity, reasoning=recommendation.reasoning
            )

        recommendation.mark_executed(transaction.timestamp)
        self.save_recommendations()
        return transaction

    async def generate_recommendations(
        self, portfolio_id: str, research_provider: ResearchProvider
    ) -> RecommendationBatch:
        """Research candidates for a portfolio's criteria and persist recommendations.

        A symbol whose research fails is logged, recorded in the batch
        failures and skipped.
        """
        portfolio = self.get_portfolio(portfolio_id)
        criteria = portfolio.active_criteria()
        batch = RecommendationBatch()
        if not criteria:
            logger.info(f"Portfolio {portfolio_id} has no active criteria, nothing to research")
            return batch

        symbols = await research_provider.find_companies_for_criteria(
            criteria, COMPANY_SEARCH_LIMIT
        )
        researches = []
        for symbol in symbols:
            try:
                researches.append(await research_provider.research_company(symbol, criteria))
            except InvestmentException as e:
                logger.warning(f"Failed to research {symbol}: {e}")
                batch.failures[symbol] = str(e)

        batch.recommendations = await research_provider.generate_recommendations(
            portfolio.id, researches, portfolio.current_cash, MAX_RECOMMENDATION_POSITIONS
        )
        self.add_recommendations(batch.recommendations)
        logger.info(
            f"Generated {len(batch.recommendations)} recommendations for {portfolio_id} "
            f"({len(batch.failures)} symbols failed)"
        )
        return batch
