"""
Custom exception hierarchy for the investment tracker.

Errors raised by the ledger, the store and the price and research providers.
"""


class InvestmentException(Exception):
    """Base exception for all investment-tracker errors."""

    pass


class ValidationError(InvestmentException):
    """Raised when input validation fails."""

    pass


class InvalidActionError(ValidationError):
    """Raised when a recommendation action cannot be turned into a trade."""

    def __init__(self, action: str, reason: str = "unsupported action"):
        self.action = action
        self.reason = reason
        super().__init__(f"Invalid action {action}: {reason}")


class RecommendationAlreadyExecutedError(ValidationError):
    """Raised when a recommendation is executed a second time."""

    def __init__(self, recommendation_id: str):
        self.recommendation_id = recommendation_id
        super().__init__(f"Recommendation already executed: {recommendation_id}")


class NotFoundError(InvestmentException):
    """Raised when a portfolio, holding or recommendation does not exist."""

    pass


class PortfolioNotFoundError(NotFoundError):
    """Raised when a portfolio id is unknown."""

    def __init__(self, portfolio_id: str):
        self.portfolio_id = portfolio_id
        super().__init__(f"Portfolio not found: {portfolio_id}")


class HoldingNotFoundError(NotFoundError):
    """Raised when trying to sell a symbol the portfolio does not hold."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"No holding found for symbol: {symbol}")


class RecommendationNotFoundError(NotFoundError):
    """Raised when a recommendation id is unknown."""

    def __init__(self, recommendation_id: str):
        self.recommendation_id = recommendation_id
        super().__init__(f"Recommendation not found: {recommendation_id}")


class PortfolioError(InvestmentException):
    """Raised when portfolio operations fail."""

    pass


class InsufficientFundsError(PortfolioError):
    """Raised when there are insufficient funds for an operation."""

    def __init__(self, required: float, available: float, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )


class InsufficientSharesError(PortfolioError):
    """Raised when a sell asks for more shares than are held."""

    def __init__(self, symbol: str, requested: int, held: int):
        self.symbol = symbol
        self.requested = requested
        self.held = held
        super().__init__(
            f"Insufficient shares to sell {symbol}: requested={requested}, held={held}"
        )


class ProviderError(InvestmentException):
    """Raised when the price or research provider fails (network or data shape)."""

    def __init__(self, message: str, symbol: str | None = None):
        self.symbol = symbol
        super().__init__(message)


class PersistenceError(InvestmentException):
    """Raised when saving a collection to disk fails."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)
