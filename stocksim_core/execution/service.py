"""
Trading service: runs buy/sell/deposit/reset against stored accounts.

Flow for a trade: validate request → quote → (per-user lock) load account →
apply_trade → save with version check. Rejected trades are logged and never
written. The quote is fetched before the lock so slow quote I/O does not
hold up other requests for the same user.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from stocksim_core.account import Account, TradeOutcome
from stocksim_core.config import Settings, load_settings
from stocksim_core.errors import AccountNotFound, StockSimError
from stocksim_core.execution.quotes import QuoteSource
from stocksim_core.execution.store import AccountStore
from stocksim_core.numeric import NumberLike
from stocksim_core.portfolio import Portfolio
from stocksim_core.recorder import TransactionRecord
from stocksim_core.ticker import Ticker
from stocksim_core.trade import Side, TradeRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RejectedTradeLog:
    """One rejected trade: who, what, why, when."""

    user_id: str
    request: TradeRequest
    reason: str
    message: str | None
    timestamp: datetime


class TradingService:
    """
    Paper-trading operations for many users over one AccountStore and one
    QuoteSource. Mutations for the same user are serialized; the store's
    version check catches writers outside this service.
    """

    def __init__(
        self,
        store: AccountStore,
        quotes: QuoteSource,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.quotes = quotes
        self.settings = settings if settings is not None else load_settings()
        self._user_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._rejected_log: list[RejectedTradeLog] = []

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._user_locks.get(user_id)
            if lock is None:
                lock = self._user_locks[user_id] = threading.Lock()
            return lock

    def _mutate(self, user_id: str, change: Callable[[Account], None]) -> Account:
        """Load, apply change, save; all under the user's lock."""
        if not self.store.exists(user_id):
            raise AccountNotFound(f"User not found: {user_id}")
        with self._lock_for(user_id):
            account = self.store.load(user_id)
            loaded_version = account.version
            change(account)
            try:
                return self.store.save(account, loaded_version)
            except StockSimError:
                logger.exception("Saving account failed: user=%s", user_id)
                raise

    # --- Accounts ---

    def open_account(self, user_id: str) -> Account:
        """Create an account holding settings.initial_cash. Raises AccountExists."""
        account = self.store.create(Account.open(user_id, self.settings.initial_cash))
        logger.info("Account opened: user=%s cash=%s", user_id, account.cash)
        return account

    def get_account(self, user_id: str) -> Account:
        return self.store.load(user_id)

    def get_portfolio(self, user_id: str) -> Portfolio:
        return self.store.load(user_id).portfolio

    def get_transactions(self, user_id: str) -> list[TransactionRecord]:
        """Trade history, oldest first."""
        return self.store.load(user_id).transactions.records()

    def deposit(self, user_id: str, amount: NumberLike) -> Account:
        """Add funds. Raises InvalidAmount or DepositRejected; nothing saved then."""
        return self._mutate(
            user_id,
            lambda account: account.deposit(
                amount,
                max_deposit=self.settings.max_deposit,
                max_buying_power=self.settings.max_buying_power,
            ),
        )

    def reset_account(self, user_id: str) -> Account:
        """Empty portfolio and history; buying power back to the initial amount."""
        return self._mutate(user_id, lambda account: account.reset(self.settings.initial_cash))

    # --- Trading ---

    def buy(self, user_id: str, symbol: str | Ticker, quantity: NumberLike) -> TradeOutcome:
        return self.execute(user_id, TradeRequest.parse(Side.BUY, symbol, quantity))

    def sell(self, user_id: str, symbol: str | Ticker, quantity: NumberLike) -> TradeOutcome:
        return self.execute(user_id, TradeRequest.parse(Side.SELL, symbol, quantity))

    def execute(self, user_id: str, request: TradeRequest) -> TradeOutcome:
        """
        Execute one trade at the current quote.

        Returns the outcome; a rejected outcome leaves the stored account
        untouched. Raises AccountNotFound, QuoteUnavailable, or
        ConcurrentModification.
        """
        if not self.store.exists(user_id):
            raise AccountNotFound(f"User not found: {user_id}")
        price = self.quotes.get_quote(request.symbol)

        with self._lock_for(user_id):
            account = self.store.load(user_id)
            loaded_version = account.version
            outcome = account.apply_trade(request, price)
            if not outcome.accepted:
                self._rejected_log.append(
                    RejectedTradeLog(
                        user_id=user_id,
                        request=request,
                        reason=outcome.rejection.value,
                        message=outcome.message,
                        timestamp=datetime.now(timezone.utc),
                    )
                )
                return outcome
            try:
                self.store.save(account, loaded_version)
            except StockSimError:
                logger.exception(
                    "Saving trade failed: user=%s %s %s %s",
                    user_id,
                    request.side.value,
                    request.quantity,
                    request.symbol,
                )
                raise
        return outcome

    def get_rejected_log(self) -> list[RejectedTradeLog]:
        """Rejected trades since this service was created, oldest first."""
        return list(self._rejected_log)
