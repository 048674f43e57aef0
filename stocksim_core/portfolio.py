"""
Portfolio: holdings keyed by ticker. Owned by one Account.

A holding with zero shares is never stored; selling out removes the entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal

from stocksim_core.errors import InvalidTicker
from stocksim_core.ticker import Ticker


@dataclass(frozen=True)
class Holding:
    """Position in one symbol: shares owned and their average cost."""

    symbol: Ticker
    quantity_owned: Decimal
    average_buy_price: Decimal

    def __post_init__(self) -> None:
        if self.quantity_owned <= 0:
            raise ValueError(f"Holding quantity must be positive, got {self.quantity_owned}")
        if self.average_buy_price <= 0:
            raise ValueError(f"Average buy price must be positive, got {self.average_buy_price}")

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity_owned * self.average_buy_price


@dataclass
class Portfolio:
    """
    Mapping of Ticker -> Holding. Mutable; updated by the Account on
    successful trades only.
    """

    holdings: dict[Ticker, Holding] = field(default_factory=dict)

    def holding(self, symbol: str | Ticker) -> Holding | None:
        """Holding for symbol, or None if nothing is owned."""
        return self.holdings.get(Ticker.parse(symbol))

    def quantity(self, symbol: str | Ticker) -> Decimal:
        """Shares held in symbol. 0 if not present."""
        h = self.holding(symbol)
        return h.quantity_owned if h is not None else Decimal("0")

    def put(self, symbol: Ticker, holding: Holding | None) -> None:
        """Store holding for symbol; None removes the entry."""
        if holding is None:
            self.holdings.pop(symbol, None)
        else:
            self.holdings[symbol] = holding

    def clear(self) -> None:
        self.holdings.clear()

    def symbols(self) -> list[Ticker]:
        return sorted(self.holdings)

    def __iter__(self) -> Iterator[Holding]:
        return iter(self.holdings.values())

    def __len__(self) -> int:
        return len(self.holdings)

    def __contains__(self, symbol: object) -> bool:
        if isinstance(symbol, Ticker):
            return symbol in self.holdings
        if isinstance(symbol, str):
            try:
                return Ticker(symbol) in self.holdings
            except InvalidTicker:
                return False
        return False
