"""
stocksim-core: paper stock-trading account core.

Buy/sell portfolio mutation, append-only transaction history, and the
account aggregate that ties them to a cash balance.
"""

__version__ = "0.1.0"

from stocksim_core.ticker import Ticker
from stocksim_core.trade import Side, TradeRequest
from stocksim_core.portfolio import Holding, Portfolio
from stocksim_core.mutator import MutationResult, RejectionKind
from stocksim_core.recorder import TransactionLog, TransactionRecord
from stocksim_core.account import Account, TradeOutcome

__all__ = [
    "Ticker",
    "Side",
    "TradeRequest",
    "Holding",
    "Portfolio",
    "MutationResult",
    "RejectionKind",
    "TransactionLog",
    "TransactionRecord",
    "Account",
    "TradeOutcome",
]
