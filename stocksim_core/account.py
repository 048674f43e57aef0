"""
Account: aggregate root for one user's money and positions.

Cash, portfolio and transaction history change only through the methods
here: apply_trade (one per buy/sell), deposit and reset. Callers load an
Account, call one of these, then persist it; the store's version check
makes that read-modify-write a single unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, localcontext
from typing import Any

from stocksim_core import mutator
from stocksim_core.errors import DepositRejected
from stocksim_core.mutator import RejectionKind
from stocksim_core.numeric import ARITHMETIC_CONTEXT, NumberLike, parse_amount, parse_balance, parse_price
from stocksim_core.portfolio import Holding, Portfolio
from stocksim_core.recorder import TransactionLog, TransactionRecord
from stocksim_core.ticker import Ticker
from stocksim_core.trade import Side, TradeRequest

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_CASH = Decimal("1000")


@dataclass(frozen=True)
class TradeOutcome:
    """Result of Account.apply_trade. record is set only for executed trades."""

    request: TradeRequest
    price: Decimal
    cash: Decimal
    holding: Holding | None
    rejection: RejectionKind | None = None
    message: str | None = None
    record: TransactionRecord | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


@dataclass
class Account:
    """One user's buying power, total investment, portfolio and history."""

    user_id: str
    cash: Decimal = DEFAULT_INITIAL_CASH
    total_investment: Decimal = DEFAULT_INITIAL_CASH
    portfolio: Portfolio = field(default_factory=Portfolio)
    transactions: TransactionLog = field(default_factory=TransactionLog)
    version: int = 0

    @classmethod
    def open(cls, user_id: str, initial_cash: NumberLike = DEFAULT_INITIAL_CASH) -> Account:
        """New account with initial_cash as both buying power and total investment."""
        cash = parse_balance(initial_cash)
        return cls(user_id=user_id, cash=cash, total_investment=cash)

    def apply_trade(
        self,
        request: TradeRequest,
        price: NumberLike,
        *,
        timestamp: datetime | None = None,
    ) -> TradeOutcome:
        """
        Execute request at price. On success the portfolio and cash are
        updated and the trade is recorded; on rejection nothing changes.
        """
        exec_price = parse_price(price)
        symbol = request.symbol
        holding = self.portfolio.holding(symbol)
        op = mutator.buy if request.side == Side.BUY else mutator.sell
        result = op(self.cash, holding, symbol, request.quantity, exec_price)

        if not result.accepted:
            logger.warning(
                "Trade rejected: user=%s %s %s %s @ %s: %s",
                self.user_id,
                request.side.value,
                request.quantity,
                symbol,
                exec_price,
                result.rejection.value,
            )
            return TradeOutcome(
                request=request,
                price=exec_price,
                cash=result.cash,
                holding=result.holding,
                rejection=result.rejection,
                message=result.message,
            )

        self.portfolio.put(symbol, result.holding)
        self.cash = result.cash
        entry = self.transactions.record(request.side, symbol, request.quantity, exec_price, timestamp)
        logger.info(
            "Trade executed: user=%s %s %s %s @ %s, cash=%s",
            self.user_id,
            request.side.value,
            request.quantity,
            symbol,
            exec_price,
            self.cash,
        )
        return TradeOutcome(
            request=request,
            price=exec_price,
            cash=self.cash,
            holding=result.holding,
            record=entry,
        )

    def deposit(
        self,
        amount: NumberLike,
        *,
        max_deposit: Decimal,
        max_buying_power: Decimal,
    ) -> Decimal:
        """Add amount to buying power and total investment. Returns the new cash."""
        value = parse_amount(amount)
        if value > max_deposit:
            raise DepositRejected(f"The max amount you can deposit at one time is ${max_deposit:,}")
        with localcontext(ARITHMETIC_CONTEXT):
            new_cash = self.cash + value
        if new_cash > max_buying_power:
            allowed = max(max_buying_power - self.cash, Decimal("0"))
            raise DepositRejected(
                f"The max amount you can have in buying power is ${max_buying_power:,}. "
                f"The most you can deposit is {allowed:.2f}"
            )
        with localcontext(ARITHMETIC_CONTEXT):
            self.total_investment += value
        self.cash = new_cash
        logger.info("Deposit: user=%s amount=%s cash=%s", self.user_id, value, self.cash)
        return self.cash

    def reset(self, initial_cash: NumberLike = DEFAULT_INITIAL_CASH) -> None:
        """Wipe portfolio and history; cash and total investment back to initial_cash."""
        cash = parse_balance(initial_cash)
        self.portfolio.clear()
        self.transactions.clear()
        self.cash = cash
        self.total_investment = cash
        logger.info("Account reset: user=%s cash=%s", self.user_id, cash)

    # --- Persistence document ---

    def to_document(self) -> dict[str, Any]:
        """Plain dict form for storage. Decimals as strings, timestamps ISO-8601."""
        return {
            "user_id": self.user_id,
            "buying_power": str(self.cash),
            "total_investment": str(self.total_investment),
            "portfolio": {
                str(h.symbol): {
                    "quantity_owned": str(h.quantity_owned),
                    "average_buy_price": str(h.average_buy_price),
                }
                for h in self.portfolio
            },
            "transactions": [
                {
                    "transaction_type": r.type.value,
                    "symbol": str(r.symbol),
                    "quantity": str(r.quantity),
                    "price": str(r.price_per_share),
                    "total_price": str(r.total_price),
                    "timestamp": r.timestamp.isoformat(),
                }
                for r in self.transactions
            ],
            "version": self.version,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Account:
        holdings: dict[Ticker, Holding] = {}
        for sym, h in (doc.get("portfolio") or {}).items():
            ticker = Ticker(sym)
            holdings[ticker] = Holding(
                symbol=ticker,
                quantity_owned=Decimal(h["quantity_owned"]),
                average_buy_price=Decimal(h["average_buy_price"]),
            )
        records = [
            TransactionRecord(
                type=Side(t["transaction_type"]),
                symbol=Ticker(t["symbol"]),
                quantity=Decimal(t["quantity"]),
                price_per_share=Decimal(t["price"]),
                total_price=Decimal(t["total_price"]),
                timestamp=datetime.fromisoformat(t["timestamp"]),
            )
            for t in doc.get("transactions") or []
        ]
        return cls(
            user_id=doc["user_id"],
            cash=Decimal(doc["buying_power"]),
            total_investment=Decimal(doc["total_investment"]),
            portfolio=Portfolio(holdings=holdings),
            transactions=TransactionLog(records),
            version=int(doc.get("version", 0)),
        )
