"""
Trade request: what the user asked for, already validated.

Immutable. No price here; the execution price comes from a quote source
at execution time.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from stocksim_core.numeric import NumberLike, parse_quantity
from stocksim_core.ticker import Ticker


class Side(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: str | Side) -> Side:
        """Accept a Side or its name in any case ("buy", "SELL")."""
        if isinstance(value, Side):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown trade side: {value!r}") from None


@dataclass(frozen=True)
class TradeRequest:
    """A buy or sell of quantity shares of symbol."""

    side: Side
    symbol: Ticker
    quantity: Decimal

    @classmethod
    def parse(
        cls,
        side: str | Side,
        symbol: str | Ticker,
        quantity: NumberLike,
    ) -> TradeRequest:
        """Validate raw input once; raises InvalidTicker / InvalidQuantity / ValueError."""
        return cls(
            side=Side.parse(side),
            symbol=Ticker.parse(symbol),
            quantity=parse_quantity(quantity),
        )
