"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from typing import Any

from smart_invest.core.exceptions.portfolio import ValidationError


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate a ticker symbol and normalize it to upper case.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The stripped, upper-cased symbol

    Raises:
        ValidationError: If symbol is not a non-empty string
    """
    if not isinstance(symbol, str):
        raise ValidationError(f"{param_name} must be a string, got {type(symbol).__name__}")
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} must not be empty")
    return normalized


def validate_positive(value: Any, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not a positive number
    """
    if not _is_number(value):
        raise ValidationError(f"{param_name} must be numeric, got {type(value).__name__}")
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_quantity(value: Any, param_name: str = "quantity") -> int:
    """Validate a share count: a positive integer.

    Raises:
        ValidationError: If value is not an int or not positive
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{param_name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_numeric(value: Any, param_name: str) -> float:
    """Validate that a value is a number, without any range check."""
    if not _is_number(value):
        raise ValidationError(f"{param_name} must be numeric, got {type(value).__name__}")
    return value


def validate_range(value: Any, low: float, high: float, param_name: str) -> float:
    """Validate that a number lies in the closed interval [low, high].

    Raises:
        ValidationError: If value is not numeric or outside the interval
    """
    validate_numeric(value, param_name)
    if value < low or value > high:
        raise ValidationError(f"{param_name} must be between {low} and {high}, got {value}")
    return value


def validate_non_empty(value: Any, param_name: str) -> str:
    """Validate a free-text field is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{param_name} must be a non-empty string")
    return value.strip()
