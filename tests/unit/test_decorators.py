"""
Unit tests for utility decorators.
Testing trade input validation and operation logging on plain and async functions.
"""
# ruff: noqa: ARG001

from unittest.mock import Mock, patch

import pytest

from smart_invest.core.exceptions.portfolio import ValidationError
from smart_invest.core.utils.decorators import log_operation, validate_trade_inputs


class TestValidateTradeInputsDecorator:
    """Test suite for @validate_trade_inputs decorator."""

    def test_should_normalize_symbol_parameter(self) -> None:
        """Test that symbol is upper-cased before the call."""

        @validate_trade_inputs
        def test_function(symbol: str, quantity: int) -> str:
            return symbol

        assert test_function("aapl", 1) == "AAPL"

        with pytest.raises(ValidationError, match="symbol must not be empty"):
            test_function("  ", 1)

    def test_should_validate_quantity_parameter(self) -> None:
        """Test that quantity must be a positive integer."""

        @validate_trade_inputs
        def test_function(symbol: str, quantity: int) -> bool:
            return True

        assert test_function("AAPL", 5) is True

        with pytest.raises(ValidationError, match="quantity must be positive"):
            test_function("AAPL", 0)

        with pytest.raises(ValidationError, match="quantity must be an integer"):
            test_function("AAPL", 2.5)

    def test_should_validate_price_parameter(self) -> None:
        """Test that price must be positive."""

        @validate_trade_inputs
        def test_function(symbol: str, quantity: int, price: float) -> bool:
            return True

        assert test_function("AAPL", 1, 150.0) is True

        with pytest.raises(ValidationError, match="price must be positive"):
            test_function("AAPL", 1, 0.0)

    def test_should_skip_none_values(self) -> None:
        """Test optional parameters left as None are not validated."""

        @validate_trade_inputs
        def test_function(symbol: str, quantity: int | None = None) -> int | None:
            return quantity

        assert test_function("AAPL") is None

    def test_should_reject_bad_call_signature(self) -> None:
        """Test binding errors surface as validation errors."""

        @validate_trade_inputs
        def test_function(symbol: str) -> bool:
            return True

        with pytest.raises(ValidationError, match="Invalid arguments for test_function"):
            test_function("AAPL", 1, 2)  # type: ignore[call-arg]

    @pytest.mark.asyncio
    async def test_should_validate_coroutine_functions(self) -> None:
        """Test the decorator awaits async functions after validation."""

        @validate_trade_inputs
        async def test_function(symbol: str, quantity: int) -> tuple[str, int]:
            return symbol, quantity

        assert await test_function("msft", 3) == ("MSFT", 3)

        with pytest.raises(ValidationError, match="quantity must be positive"):
            await test_function("MSFT", -3)

    def test_should_preserve_function_metadata(self) -> None:
        """Test functools.wraps keeps name and docstring."""

        @validate_trade_inputs
        def original_function(symbol: str) -> bool:
            """Original docstring."""
            return True

        assert original_function.__name__ == "original_function"
        assert original_function.__doc__ == "Original docstring."


class TestLogOperationDecorator:
    """Test suite for @log_operation decorator."""

    @patch("smart_invest.core.utils.decorators.logger")
    def test_should_log_function_entry_and_success(self, mock_logger: Mock) -> None:
        """Test logging of a successful operation with its context."""

        @log_operation
        def test_function(portfolio_id: str, symbol: str, quantity: int) -> bool:
            return True

        result = test_function("p-1", "AAPL", 10)

        assert result is True
        assert mock_logger.info.call_count == 1
        assert mock_logger.success.call_count == 1

        entry_call = mock_logger.info.call_args
        assert "Operation started: test_function" in entry_call[0][0]
        entry_context = entry_call[1]["extra"]
        assert "correlation_id" in entry_context
        assert entry_context["portfolio_id"] == "p-1"
        assert entry_context["symbol"] == "AAPL"
        assert entry_context["quantity"] == 10

        success_context = mock_logger.success.call_args[1]["extra"]
        assert success_context["success"] is True
        assert "execution_time_ms" in success_context
        assert success_context["result"] is True

    @patch("smart_invest.core.utils.decorators.logger")
    def test_should_log_function_failure_and_reraise(self, mock_logger: Mock) -> None:
        """Test logging of a failing operation."""

        @log_operation
        def test_function(symbol: str) -> bool:
            raise ValueError("Test error")

        with pytest.raises(ValueError, match="Test error"):
            test_function("AAPL")

        assert mock_logger.info.call_count == 1
        assert mock_logger.error.call_count == 1
        assert mock_logger.success.call_count == 0

        error_context = mock_logger.error.call_args[1]["extra"]
        assert error_context["success"] is False
        assert error_context["error_type"] == "ValueError"
        assert error_context["error_message"] == "Test error"

    @pytest.mark.asyncio
    async def test_should_log_coroutine_functions(self) -> None:
        """Test async operations are awaited and logged."""

        @log_operation
        async def test_function(recommendation_id: str) -> str:
            return recommendation_id

        with patch("smart_invest.core.utils.decorators.logger") as mock_logger:
            assert await test_function("rec_1") == "rec_1"

        entry_context = mock_logger.info.call_args[1]["extra"]
        assert entry_context["recommendation_id"] == "rec_1"
        assert mock_logger.success.call_count == 1

    @patch("smart_invest.core.utils.decorators.logger")
    def test_should_generate_unique_correlation_ids(self, mock_logger: Mock) -> None:
        """Test each call gets its own correlation id."""

        @log_operation
        def test_function(symbol: str) -> bool:
            return True

        test_function("AAPL")
        test_function("AAPL")

        call1_context = mock_logger.info.call_args_list[0][1]["extra"]
        call2_context = mock_logger.info.call_args_list[1][1]["extra"]
        assert call1_context["correlation_id"] != call2_context["correlation_id"]
        assert len(call1_context["correlation_id"]) == 8

    @patch("smart_invest.core.utils.decorators.logger")
    def test_should_work_when_decorators_combined(self, mock_logger: Mock) -> None:
        """Test logging wraps validation."""

        @log_operation
        @validate_trade_inputs
        def test_function(symbol: str, quantity: int) -> str:
            return symbol

        assert test_function("aapl", 1) == "AAPL"
        assert mock_logger.success.call_count == 1

        with pytest.raises(ValidationError):
            test_function("AAPL", 0)
        assert mock_logger.error.call_count == 1
