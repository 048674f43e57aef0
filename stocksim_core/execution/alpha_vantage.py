"""
Alpha Vantage quote source: GLOBAL_QUOTE and SYMBOL_SEARCH over HTTP.

One GET per call. Any transport error, missing "Global Quote" block or
unparseable/non-positive price becomes QuoteUnavailable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from stocksim_core.config import DEFAULT_ALPHA_VANTAGE_URL, Settings
from stocksim_core.errors import QuoteUnavailable
from stocksim_core.execution.quotes import QuoteSource
from stocksim_core.ticker import Ticker

logger = logging.getLogger(__name__)

GLOBAL_QUOTE_FUNCTION = "GLOBAL_QUOTE"
GLOBAL_QUOTE_KEY = "Global Quote"
PRICE_FIELD = "05. price"
OPEN_FIELD = "02. open"
HIGH_FIELD = "03. high"
LOW_FIELD = "04. low"
VOLUME_FIELD = "06. volume"
PREVIOUS_CLOSE_FIELD = "08. previous close"
CHANGE_PERCENT_FIELD = "10. change percent"

SYMBOL_SEARCH_FUNCTION = "SYMBOL_SEARCH"
BEST_MATCHES_KEY = "bestMatches"
SEARCH_REGION = "United States"
MAX_SEARCH_RESULTS = 4


@dataclass(frozen=True)
class QuoteDetails:
    """Day summary for one symbol from GLOBAL_QUOTE."""

    symbol: Ticker
    price: Decimal
    open: Decimal
    high: Decimal
    low: Decimal
    previous_close: Decimal
    volume: int
    change_percent: Decimal


@dataclass(frozen=True)
class SymbolMatch:
    """One SYMBOL_SEARCH hit."""

    symbol: str
    name: str
    region: str


class AlphaVantageQuoteSource(QuoteSource):
    """Latest trade price from the Alpha Vantage GLOBAL_QUOTE endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_ALPHA_VANTAGE_URL,
        *,
        timeout_s: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Alpha Vantage API key is required")
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> AlphaVantageQuoteSource:
        if not settings.alpha_vantage_api_key:
            raise ValueError("ALPHA_VANTAGE_API_KEY is not set")
        return cls(
            settings.alpha_vantage_api_key,
            settings.alpha_vantage_base_url,
            timeout_s=settings.quote_timeout_s,
        )

    def _fetch(self, function: str, subject: str, **params: str) -> Any:
        query = {"function": function, **params, "apikey": self._api_key}
        try:
            r = self._session.get(self._base_url, params=query, timeout=self._timeout_s)
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            raise QuoteUnavailable(f"Quote request for {subject} failed: {e!s}") from e

    def _global_quote(self, symbol: Ticker) -> dict[str, Any]:
        data = self._fetch(GLOBAL_QUOTE_FUNCTION, str(symbol), symbol=symbol.value)
        quote = data.get(GLOBAL_QUOTE_KEY) if isinstance(data, dict) else None
        if not quote or not isinstance(quote, dict):
            raise QuoteUnavailable(f"Stock symbol {symbol} not found or data not available from API.")
        return quote

    @staticmethod
    def _field(quote: dict[str, Any], key: str, symbol: Ticker) -> Decimal:
        raw = quote.get(key)
        try:
            value = Decimal(str(raw).strip().rstrip("%"))
        except InvalidOperation:
            raise QuoteUnavailable(f"Unparseable {key!r} value {raw!r} for {symbol}") from None
        if not value.is_finite():
            raise QuoteUnavailable(f"Invalid {key!r} value {raw!r} for {symbol}")
        return value

    def get_quote(self, symbol: Ticker) -> Decimal:
        symbol = Ticker.parse(symbol)
        price = self._field(self._global_quote(symbol), PRICE_FIELD, symbol)
        if price <= 0:
            raise QuoteUnavailable(f"Invalid price {price} for {symbol}")
        logger.debug("Alpha Vantage quote: %s=%s", symbol, price)
        return price

    def get_quote_details(self, symbol: Ticker | str) -> QuoteDetails:
        """Price, open, high, low, previous close, volume and change percent."""
        symbol = Ticker.parse(symbol)
        quote = self._global_quote(symbol)
        price = self._field(quote, PRICE_FIELD, symbol)
        if price <= 0:
            raise QuoteUnavailable(f"Invalid price {price} for {symbol}")
        volume = self._field(quote, VOLUME_FIELD, symbol)
        return QuoteDetails(
            symbol=symbol,
            price=price,
            open=self._field(quote, OPEN_FIELD, symbol),
            high=self._field(quote, HIGH_FIELD, symbol),
            low=self._field(quote, LOW_FIELD, symbol),
            previous_close=self._field(quote, PREVIOUS_CLOSE_FIELD, symbol),
            volume=int(volume),
            change_percent=self._field(quote, CHANGE_PERCENT_FIELD, symbol),
        )

    def search_symbols(self, keywords: str) -> list[SymbolMatch]:
        """First MAX_SEARCH_RESULTS US-listed matches for keywords, in API order."""
        keywords = (keywords or "").strip()
        if not keywords:
            raise ValueError("Search keywords are required")
        data = self._fetch(SYMBOL_SEARCH_FUNCTION, repr(keywords), keywords=keywords)
        matches = data.get(BEST_MATCHES_KEY) if isinstance(data, dict) else None
        if not isinstance(matches, list):
            raise QuoteUnavailable(f"Symbol search for {keywords!r} returned no results block.")
        results = []
        for match in matches:
            if not isinstance(match, dict) or match.get("4. region") != SEARCH_REGION:
                continue
            results.append(
                SymbolMatch(
                    symbol=match.get("1. symbol", ""),
                    name=match.get("2. name", ""),
                    region=match["4. region"],
                )
            )
            if len(results) == MAX_SEARCH_RESULTS:
                break
        return results
