"""
Portfolio metrics: market value, unrealized P/L, return on investment.

Per-holding P/L is (current price - average buy price) * quantity owned.
Holdings with no current price are valued at cost (zero P/L).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np
import pandas as pd

from stocksim_core.account import Account
from reporting.frames import holdings_frame


@dataclass
class PortfolioMetrics:
    """Snapshot of an account's value at given prices."""

    cash: float
    cost_basis: float
    market_value: float
    equity: float
    unrealized_pnl: float
    unrealized_pnl_pct: float
    total_investment: float
    total_return_pct: float


def valued_holdings(account: Account, prices: Mapping[str, float]) -> pd.DataFrame:
    """
    holdings_frame plus current_price, market_value and profit_loss columns.
    prices maps symbol -> latest price; symbols are matched upper-cased.
    """
    df = holdings_frame(account.portfolio)
    upper = {str(k).strip().upper(): float(v) for k, v in prices.items()}
    current = df["symbol"].map(upper).astype(float)
    df["current_price"] = current.fillna(df["average_buy_price"])
    df["market_value"] = df["current_price"] * df["quantity_owned"]
    df["profit_loss"] = (df["current_price"] - df["average_buy_price"]) * df["quantity_owned"]
    return df


def compute_portfolio_metrics(account: Account, prices: Mapping[str, float]) -> PortfolioMetrics:
    """
    Value the account at prices.

    Returns
    -------
    PortfolioMetrics
        equity = cash + market value; total_return_pct compares equity with
        total investment (initial cash plus deposits).
    """
    df = valued_holdings(account, prices)
    cash = float(account.cash)
    cost_basis = float(np.sum(df["cost_basis"].to_numpy(dtype=float)))
    market_value = float(np.sum(df["market_value"].to_numpy(dtype=float)))
    unrealized = float(np.sum(df["profit_loss"].to_numpy(dtype=float)))
    equity = cash + market_value
    total_investment = float(account.total_investment)
    return PortfolioMetrics(
        cash=cash,
        cost_basis=cost_basis,
        market_value=market_value,
        equity=equity,
        unrealized_pnl=unrealized,
        unrealized_pnl_pct=(unrealized / cost_basis * 100.0) if cost_basis > 0 else 0.0,
        total_investment=total_investment,
        total_return_pct=((equity - total_investment) / total_investment * 100.0) if total_investment > 0 else 0.0,
    )
