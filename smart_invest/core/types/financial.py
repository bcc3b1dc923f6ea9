"""
Financial arithmetic for the portfolio ledger.

All ledger values are plain floats and are never rounded on the way into
the ledger: cash must equal initial capital minus buy costs plus sell
proceeds exactly, so rounding is reserved for display-oriented reports.
"""

# Display precision (number of decimal places)
PRICE_DECIMALS = 2  # USD prices and amounts
PERCENTAGE_DECIMALS = 4

# Common financial values as float constants
ZERO = 0.0
HUNDRED = 100.0


def calculate_notional_value(quantity: int, price: float) -> float:
    """Total cost (or proceeds) of trading quantity shares at price."""
    return quantity * price


def weighted_average_cost(
    held_quantity: int, average_cost: float, added_quantity: int, price: float
) -> float:
    """Average cost per share after adding shares to an existing holding.

    Args:
        held_quantity: Shares already held
        average_cost: Current average cost of the held shares
        added_quantity: Shares being bought
        price: Price paid for the new shares

    Returns:
        New per-share average cost

    Raises:
        ValueError: If the resulting quantity is not positive

    Examples:
        >>> weighted_average_cost(10, 100.0, 10, 200.0)
        150.0
    """
    total_quantity = held_quantity + added_quantity
    if total_quantity <= 0:
        raise ValueError(f"Total quantity must be positive, got {total_quantity}")
    total_cost = (average_cost * held_quantity) + (price * added_quantity)
    return total_cost / total_quantity


def calculate_percentage_return(total_returns: float, initial_capital: float) -> float:
    """Return as a percentage of initial capital; 0 when capital is 0.

    Examples:
        >>> calculate_percentage_return(500.0, 10000.0)
        5.0
        >>> calculate_percentage_return(500.0, 0.0)
        0.0
    """
    if initial_capital == ZERO:
        return ZERO
    return total_returns / initial_capital * HUNDRED
