"""
Transaction recorder: append-only history of executed trades.

Records are immutable. The log only grows; clear() exists for account reset
and nothing else removes entries.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, localcontext

from stocksim_core.numeric import ARITHMETIC_CONTEXT
from stocksim_core.ticker import Ticker
from stocksim_core.trade import Side


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TransactionRecord:
    """One executed trade."""

    type: Side
    symbol: Ticker
    quantity: Decimal
    price_per_share: Decimal
    total_price: Decimal
    timestamp: datetime


class TransactionLog:
    """Ordered per-user trade history. Insertion order; no dedup, no merging."""

    def __init__(self, records: Iterable[TransactionRecord] = ()) -> None:
        self._records: list[TransactionRecord] = list(records)

    def record(
        self,
        side: Side,
        symbol: Ticker,
        quantity: Decimal,
        price: Decimal,
        timestamp: datetime | None = None,
    ) -> TransactionRecord:
        """Append a record for an executed trade and return it."""
        with localcontext(ARITHMETIC_CONTEXT):
            total = price * quantity
        entry = TransactionRecord(
            type=side,
            symbol=symbol,
            quantity=quantity,
            price_per_share=price,
            total_price=total,
            timestamp=timestamp or _utc_now(),
        )
        self._records.append(entry)
        return entry

    def records(self) -> list[TransactionRecord]:
        """Copy of all records, oldest first."""
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
