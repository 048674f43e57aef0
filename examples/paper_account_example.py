"""
Paper account example: open an account, trade at static prices, report.

Shows: TradingService over InMemoryAccountStore and StaticQuoteSource,
rejections, deposit, transaction filters, and the printed summary.
Set ALPHA_VANTAGE_API_KEY to price trades from Alpha Vantage instead.
"""

from __future__ import annotations

import logging
import os

from stocksim_core.config import ALPHA_VANTAGE_KEY_ENV, load_settings
from stocksim_core.execution import (
    AlphaVantageQuoteSource,
    InMemoryAccountStore,
    StaticQuoteSource,
    TradingService,
)
from reporting import filter_transactions, print_report, transactions_frame


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    if os.environ.get(ALPHA_VANTAGE_KEY_ENV):
        quotes = AlphaVantageQuoteSource.from_settings(settings)
    else:
        quotes = StaticQuoteSource({"AAPL": 100, "MSFT": 250})
    service = TradingService(InMemoryAccountStore(), quotes, settings)

    user = "demo"
    service.open_account(user)

    print("--- Buy 10 AAPL ---")
    outcome = service.buy(user, "aapl", 10)
    print(f"accepted={outcome.accepted} cash={outcome.cash}")

    print("\n--- Buy 5 MSFT with no cash left ---")
    outcome = service.buy(user, "MSFT", 5)
    print(f"accepted={outcome.accepted} reason={outcome.rejection.value}: {outcome.message}")

    print("\n--- Deposit 2,000 and retry ---")
    service.deposit(user, "2000")
    outcome = service.buy(user, "MSFT", 5)
    print(f"accepted={outcome.accepted} cash={outcome.cash}")

    if isinstance(quotes, StaticQuoteSource):
        quotes.set_price("AAPL", 150)
    print("\n--- Sell all AAPL ---")
    outcome = service.sell(user, "AAPL", 10)
    print(f"accepted={outcome.accepted} cash={outcome.cash} holding={outcome.holding}")

    account = service.get_account(user)
    prices = quotes.get_market_data(account.portfolio.symbols()).set_index("symbol")["close"].to_dict()
    print()
    print_report(account, prices)

    print("\n--- Buys only ---")
    history = transactions_frame(account.transactions)
    print(filter_transactions(history, side="BUY"))

    print("\n--- Rejected log ---")
    for entry in service.get_rejected_log():
        print(f"  {entry.request.side.value} {entry.request.quantity} {entry.request.symbol}: {entry.reason}")


if __name__ == "__main__":
    main()
