"""
Quote source abstraction.

QuoteSource ABC: get_quote for the execution price of one symbol,
get_market_data for a one-row-per-symbol DataFrame used by reporting.
StaticQuoteSource serves prices from memory for paper trading and tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from decimal import Decimal

import pandas as pd

from stocksim_core.errors import QuoteUnavailable
from stocksim_core.numeric import NumberLike, parse_price
from stocksim_core.ticker import Ticker

logger = logging.getLogger(__name__)

MARKET_DATA_COLUMNS = ["symbol", "close"]


class QuoteSource(ABC):
    """Where execution prices come from. Same interface for static and live data."""

    @abstractmethod
    def get_quote(self, symbol: Ticker) -> Decimal:
        """
        Latest price for symbol, always > 0.
        Raises QuoteUnavailable if the source has no usable price.
        """
        ...

    def get_market_data(self, symbols: Iterable[str | Ticker]) -> pd.DataFrame:
        """
        Latest close per symbol as a DataFrame (columns: symbol, close).
        Quotes are fetched one symbol at a time; symbols without a quote are
        left out.
        """
        rows = []
        for sym in symbols:
            ticker = Ticker.parse(sym)
            try:
                price = self.get_quote(ticker)
            except QuoteUnavailable as e:
                logger.warning("No quote for %s: %s", ticker, e)
                continue
            rows.append({"symbol": ticker.value, "close": float(price)})
        return pd.DataFrame(rows) if rows else pd.DataFrame(columns=MARKET_DATA_COLUMNS)


class StaticQuoteSource(QuoteSource):
    """In-memory prices (symbol -> price). Update with set_price between trades."""

    def __init__(self, latest_prices: Mapping[str, NumberLike] | None = None) -> None:
        self._prices: dict[Ticker, Decimal] = {}
        for sym, price in (latest_prices or {}).items():
            self.set_price(sym, price)

    def set_price(self, symbol: str | Ticker, price: NumberLike) -> None:
        self._prices[Ticker.parse(symbol)] = parse_price(price)

    def get_quote(self, symbol: Ticker) -> Decimal:
        price = self._prices.get(Ticker.parse(symbol))
        if price is None:
            raise QuoteUnavailable(f"No price for {symbol}")
        return price
