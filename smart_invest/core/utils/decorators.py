"""
Utility decorators for input validation and operation logging.

Both decorators accept plain and coroutine functions.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

from smart_invest.core.exceptions.portfolio import ValidationError
from smart_invest.core.utils.validation import (
    validate_positive,
    validate_quantity,
    validate_symbol,
)

F = TypeVar("F", bound=Callable[..., Any])

_CONTEXT_PARAMS = ["portfolio_id", "recommendation_id", "symbol", "quantity", "price"]

# Trade parameters checked by validate_trade_inputs, by argument name
_TRADE_VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "symbol": validate_symbol,
    "quantity": validate_quantity,
    "price": lambda value: validate_positive(value, "price"),
}


def _bind_arguments(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> inspect.BoundArguments:
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    return bound_args


def _normalized_trade_arguments(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> inspect.BoundArguments:
    """Bind the call and replace symbol/quantity/price with validated values.

    Arguments left as None are skipped so optional parameters stay optional.
    """
    try:
        bound_args = _bind_arguments(func, args, kwargs)
    except TypeError as e:
        raise ValidationError(f"Invalid arguments for {func.__name__}: {e}") from e

    for param_name, validator in _TRADE_VALIDATORS.items():
        value = bound_args.arguments.get(param_name)
        if value is not None:
            bound_args.arguments[param_name] = validator(value)
    return bound_args


def validate_trade_inputs(func: F) -> F:
    """Decorator to validate trading inputs (symbol, quantity, price).

    The symbol is normalized to upper case before the wrapped call.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            bound_args = _normalized_trade_arguments(func, args, kwargs)
            return await func(*bound_args.args, **bound_args.kwargs)

        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = _normalized_trade_arguments(func, args, kwargs)
        return func(*bound_args.args, **bound_args.kwargs)

    return wrapper  # type: ignore


class _OperationLog:
    """Start/finish log records for one ledger operation call."""

    def __init__(
        self, func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        self.name = func.__name__
        self.context: dict[str, Any] = {"correlation_id": uuid.uuid4().hex[:8]}
        try:
            arguments = _bind_arguments(func, args, kwargs).arguments
        except TypeError:
            arguments = {}  # the call itself reports the bad signature
        for param_name in _CONTEXT_PARAMS:
            if arguments.get(param_name) is not None:
                value = arguments[param_name]
                self.context[param_name] = str(value) if isinstance(value, Enum) else value
        self._started = time.perf_counter()

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._started) * 1000, 2)

    def started(self) -> None:
        logger.info(f"Operation started: {self.name}", extra=self.context)

    def succeeded(self, result: Any) -> None:
        extra = {**self.context, "success": True, "execution_time_ms": self._elapsed_ms()}
        extra["result_type"] = type(result).__name__
        if isinstance(result, bool | int | float | str):
            extra["result"] = result
        logger.success(f"Operation completed: {self.name}", extra=extra)

    def failed(self, error: Exception) -> None:
        extra = {
            **self.context,
            "success": False,
            "execution_time_ms": self._elapsed_ms(),
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        logger.error(f"Operation failed: {self.name}: {error}", extra=extra)


def log_operation(func: F) -> F:
    """Decorator to log ledger operations with correlation IDs.

    Logs entry with the portfolio/recommendation/trade arguments, then either
    a success record with the elapsed time or an error record before
    re-raising.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            operation = _OperationLog(func, args, kwargs)
            operation.started()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                operation.failed(e)
                raise
            operation.succeeded(result)
            return result

        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        operation = _OperationLog(func, args, kwargs)
        operation.started()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            operation.failed(e)
            raise
        operation.succeeded(result)
        return result

    return wrapper  # type: ignore
