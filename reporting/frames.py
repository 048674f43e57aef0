"""
Portfolio and transaction history as pandas DataFrames.

Decimals become floats here; these frames are for display and analysis, the
account itself stays exact.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timezone

import pandas as pd

from stocksim_core.portfolio import Portfolio
from stocksim_core.recorder import TransactionRecord
from stocksim_core.trade import Side

HOLDING_COLUMNS = ["symbol", "quantity_owned", "average_buy_price", "cost_basis"]
TRANSACTION_COLUMNS = ["type", "symbol", "quantity", "price_per_share", "total_price"]


def holdings_frame(portfolio: Portfolio) -> pd.DataFrame:
    """One row per holding, sorted by symbol."""
    rows = [
        {
            "symbol": str(h.symbol),
            "quantity_owned": float(h.quantity_owned),
            "average_buy_price": float(h.average_buy_price),
            "cost_basis": float(h.cost_basis),
        }
        for h in sorted(portfolio, key=lambda h: h.symbol)
    ]
    return pd.DataFrame(rows, columns=HOLDING_COLUMNS)


def transactions_frame(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    """
    Transaction history indexed by timestamp (UTC), newest first.

    Returns
    -------
    pd.DataFrame
        Columns type ('BUY'/'SELL'), symbol, quantity, price_per_share,
        total_price. Index name is 'timestamp'.
    """
    rows = [
        {
            "timestamp": r.timestamp,
            "type": r.type.value,
            "symbol": str(r.symbol),
            "quantity": float(r.quantity),
            "price_per_share": float(r.price_per_share),
            "total_price": float(r.total_price),
        }
        for r in records
    ]
    if not rows:
        out = pd.DataFrame(columns=TRANSACTION_COLUMNS, index=pd.DatetimeIndex([], tz="UTC"))
        out.index.name = "timestamp"
        return out
    out = pd.DataFrame(rows)
    out["timestamp"] = pd.to_datetime(out["timestamp"], utc=True)
    out = out.set_index("timestamp").sort_index(ascending=False, kind="stable")
    return out[TRANSACTION_COLUMNS]


def _as_utc_timestamp(value: date | datetime, *, end_of_day: bool) -> pd.Timestamp:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.max if end_of_day else time.min)
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize(timezone.utc)
    return ts.tz_convert(timezone.utc)


def filter_transactions(
    frame: pd.DataFrame,
    *,
    side: Side | str | None = None,
    ticker: str | None = None,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
) -> pd.DataFrame:
    """
    Filter a transactions_frame.

    Parameters
    ----------
    side : Side or str, optional
        Keep only BUY or SELL rows.
    ticker : str, optional
        Case-insensitive substring match on symbol ("aa" matches AAPL).
    start, end : date or datetime, optional
        Inclusive bounds. A bare date for end covers that whole day.
        Naive datetimes are taken as UTC.
    """
    mask = pd.Series(True, index=frame.index)
    if side:
        mask &= frame["type"] == Side.parse(side).value
    if ticker:
        needle = ticker.strip().upper()
        mask &= frame["symbol"].str.upper().str.contains(needle, regex=False)
    if start is not None:
        mask &= frame.index >= _as_utc_timestamp(start, end_of_day=False)
    if end is not None:
        mask &= frame.index <= _as_utc_timestamp(end, end_of_day=True)
    return frame[mask]
