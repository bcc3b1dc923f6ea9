"""
Tabular views of portfolio state.

Builds pandas DataFrames for holdings and transaction history. Values are
rounded here for display; the ledger itself keeps full precision.
"""

import pandas as pd

from smart_invest.core.models.portfolio import Portfolio
from smart_invest.core.models.transaction import Transaction
from smart_invest.core.types.financial import (
    HUNDRED,
    PERCENTAGE_DECIMALS,
    PRICE_DECIMALS,
    ZERO,
)

HOLDING_COLUMNS = [
    "symbol",
    "quantity",
    "average_cost",
    "current_price",
    "market_value",
    "cost_basis",
    "gain",
    "gain_pct",
]

TRANSACTION_COLUMNS = [
    "id",
    "symbol",
    "type",
    "quantity",
    "price",
    "total",
    "timestamp",
    "reasoning",
]


def holdings_frame(portfolio: Portfolio) -> pd.DataFrame:
    """
    One row per holding, sorted by symbol.

    Holdings never valued fall back to their average cost as current price.

    Args:
        portfolio: Portfolio to tabulate

    Returns:
        DataFrame with HOLDING_COLUMNS
    """
    if not portfolio.holdings:
        return pd.DataFrame(columns=HOLDING_COLUMNS)

    frame = pd.DataFrame(
        [
            {
                "symbol": holding.symbol,
                "quantity": holding.quantity,
                "average_cost": holding.average_cost,
                "current_price": (
                    holding.current_price
                    if holding.current_price is not None
                    else holding.average_cost
                ),
            }
            for holding in portfolio.holdings.values()
        ]
    )

    frame["market_value"] = frame["quantity"] * frame["current_price"]
    frame["cost_basis"] = frame["quantity"] * frame["average_cost"]
    frame["gain"] = frame["market_value"] - frame["cost_basis"]
    frame["gain_pct"] = (frame["gain"] / frame["cost_basis"]).fillna(ZERO) * HUNDRED

    money = ["average_cost", "current_price", "market_value", "cost_basis", "gain"]
    frame[money] = frame[money].round(PRICE_DECIMALS)
    frame["gain_pct"] = frame["gain_pct"].round(PERCENTAGE_DECIMALS)

    return frame.sort_values("symbol").reset_index(drop=True)[HOLDING_COLUMNS]


def transactions_frame(transactions: list[Transaction]) -> pd.DataFrame:
    """One row per transaction, in the order given."""
    if not transactions:
        return pd.DataFrame(columns=TRANSACTION_COLUMNS)

    frame = pd.DataFrame(
        [
            {
                "id": transaction.id,
                "symbol": transaction.symbol,
                "type": str(transaction.type),
                "quantity": transaction.quantity,
                "price": transaction.price,
                "total": transaction.notional_value(),
                "timestamp": transaction.timestamp,
                "reasoning": transaction.reasoning,
            }
            for transaction in transactions
        ]
    )
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
    frame[["price", "total"]] = frame[["price", "total"]].round(PRICE_DECIMALS)
    return frame[TRANSACTION_COLUMNS]
