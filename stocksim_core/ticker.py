"""
Ticker: validated stock symbol used as the portfolio key.

Immutable. Input is stripped and upper-cased once, so "aapl" and "AAPL"
always name the same holding.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from stocksim_core.errors import InvalidTicker

MAX_TICKER_LENGTH = 5

_TICKER_RE = re.compile(r"^[A-Z][A-Z0-9]*([.\-][A-Z0-9]+)?$")


@dataclass(frozen=True, order=True)
class Ticker:
    """Uppercase exchange symbol, 1-5 characters."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidTicker(f"Ticker must be a string, got {type(self.value).__name__}")
        normalized = self.value.strip().upper()
        if not normalized:
            raise InvalidTicker("Symbol is required.")
        if len(normalized) > MAX_TICKER_LENGTH:
            raise InvalidTicker(
                f"Symbol {normalized!r} exceeds the maximum length of {MAX_TICKER_LENGTH}."
            )
        if not _TICKER_RE.match(normalized):
            raise InvalidTicker(f"Symbol {normalized!r} contains invalid characters.")
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse(cls, symbol: str | Ticker) -> Ticker:
        """Return symbol as a Ticker; Ticker instances pass through."""
        if isinstance(symbol, Ticker):
            return symbol
        return cls(symbol)

    def __str__(self) -> str:
        return self.value
