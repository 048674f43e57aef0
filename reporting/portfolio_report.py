"""
Portfolio report: print an account summary and its holdings.
"""

from __future__ import annotations

from collections.abc import Mapping

from stocksim_core.account import Account
from reporting.metrics import PortfolioMetrics, compute_portfolio_metrics, valued_holdings


def print_report(account: Account, prices: Mapping[str, float]) -> PortfolioMetrics:
    """
    Compute metrics at prices and print a summary for account.

    Returns
    -------
    PortfolioMetrics
        The computed metrics (e.g. for programmatic use).
    """
    metrics = compute_portfolio_metrics(account, prices)
    print(f"--- Account {account.user_id} ---")
    print(f"Buying power:     {metrics.cash:,.2f}")
    print(f"Market value:     {metrics.market_value:,.2f}")
    print(f"Equity:           {metrics.equity:,.2f}")
    print(f"Unrealized P/L:   {metrics.unrealized_pnl:,.2f} ({metrics.unrealized_pnl_pct:.2f}%)")
    print(f"Total invested:   {metrics.total_investment:,.2f}")
    print(f"Total return:     {metrics.total_return_pct:.2f}%")
    print(f"Transactions:     {len(account.transactions)}")
    holdings = valued_holdings(account, prices)
    for row in holdings.itertuples(index=False):
        print(
            f"  {row.symbol:<6} {row.quantity_owned:>10g} @ {row.average_buy_price:,.2f}"
            f"  now {row.current_price:,.2f}  P/L {row.profit_loss:,.2f}"
        )
    print("------------------------------")
    return metrics
