"""
Reporting on top of stocksim-core.

Holdings and transaction history as DataFrames, transaction filters,
valuation metrics, and a printed account summary.
"""

from reporting.frames import filter_transactions, holdings_frame, transactions_frame
from reporting.metrics import PortfolioMetrics, compute_portfolio_metrics, valued_holdings
from reporting.portfolio_report import print_report

__all__ = [
    "holdings_frame",
    "transactions_frame",
    "filter_transactions",
    "PortfolioMetrics",
    "compute_portfolio_metrics",
    "valued_holdings",
    "print_report",
]
