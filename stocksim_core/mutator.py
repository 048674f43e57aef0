"""
Portfolio mutator: pure buy/sell state transitions.

Given cash and the current holding for a symbol, produce the new holding and
new cash, or a rejection. All checks run before anything is computed, so a
rejected trade hands back its inputs untouched. No I/O, no persistence.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum

from stocksim_core.numeric import ARITHMETIC_CONTEXT
from stocksim_core.portfolio import Holding
from stocksim_core.ticker import Ticker


class RejectionKind(Enum):
    """Why a trade was not executed."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_SHARES = "insufficient_shares"
    NO_SUCH_HOLDING = "no_such_holding"


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of a buy or sell. When rejection is set, holding and cash are
    the values passed in; otherwise they are the post-trade state
    (holding None means the position is closed or never existed).
    """

    holding: Holding | None
    cash: Decimal
    rejection: RejectionKind | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def _reject(
    holding: Holding | None,
    cash: Decimal,
    kind: RejectionKind,
    message: str,
) -> MutationResult:
    return MutationResult(holding=holding, cash=cash, rejection=kind, message=message)


def buy(
    cash: Decimal,
    holding: Holding | None,
    symbol: Ticker,
    quantity: Decimal,
    price: Decimal,
) -> MutationResult:
    """
    Buy quantity shares at price.

    New position: quantity at price. Existing position: quantity added and
    average buy price re-weighted by cost, at full precision.
    """
    with localcontext(ARITHMETIC_CONTEXT):
        total_cost = price * quantity
    if total_cost > cash:
        return _reject(
            holding,
            cash,
            RejectionKind.INSUFFICIENT_FUNDS,
            "Insufficient buying power to complete the transaction.",
        )

    with localcontext(ARITHMETIC_CONTEXT):
        if holding is None:
            new_holding = Holding(symbol=symbol, quantity_owned=quantity, average_buy_price=price)
        else:
            new_quantity = holding.quantity_owned + quantity
            new_average = (holding.average_buy_price * holding.quantity_owned + total_cost) / new_quantity
            new_holding = Holding(symbol=symbol, quantity_owned=new_quantity, average_buy_price=new_average)
        new_cash = cash - total_cost
    return MutationResult(holding=new_holding, cash=new_cash)


def sell(
    cash: Decimal,
    holding: Holding | None,
    symbol: Ticker,
    quantity: Decimal,
    price: Decimal,
) -> MutationResult:
    """
    Sell quantity shares at price.

    Average buy price never changes on a sell. Selling the whole position
    removes it. Cash is credited either way.
    """
    if holding is None:
        return _reject(
            holding,
            cash,
            RejectionKind.NO_SUCH_HOLDING,
            f"You do not own any {symbol}.",
        )
    if quantity > holding.quantity_owned:
        return _reject(
            holding,
            cash,
            RejectionKind.INSUFFICIENT_SHARES,
            f"You only own {holding.quantity_owned} of {symbol} you cannot sell more than that.",
        )

    with localcontext(ARITHMETIC_CONTEXT):
        new_quantity = holding.quantity_owned - quantity
        new_cash = cash + price * quantity
    if new_quantity == 0:
        new_holding = None
    else:
        new_holding = Holding(
            symbol=symbol,
            quantity_owned=new_quantity,
            average_buy_price=holding.average_buy_price,
        )
    return MutationResult(holding=new_holding, cash=new_cash)
