"""
Execution layer: quote sources, account storage, trading service.

QuoteSource interface with static and Alpha Vantage implementations;
AccountStore interface with a version-checked in-memory store;
TradingService running trades and deposits against them.
"""

from stocksim_core.execution.alpha_vantage import AlphaVantageQuoteSource, QuoteDetails, SymbolMatch
from stocksim_core.execution.quotes import QuoteSource, StaticQuoteSource
from stocksim_core.execution.service import RejectedTradeLog, TradingService
from stocksim_core.execution.store import AccountStore, InMemoryAccountStore

__all__ = [
    "QuoteSource",
    "StaticQuoteSource",
    "AlphaVantageQuoteSource",
    "QuoteDetails",
    "SymbolMatch",
    "AccountStore",
    "InMemoryAccountStore",
    "TradingService",
    "RejectedTradeLog",
]
