"""
Exceptions raised by stocksim-core.

Trade rejections (insufficient funds/shares, no holding) are not exceptions;
they come back as RejectionKind values on a MutationResult. These types cover
bad input and faults around the core (quotes, storage).
"""


class StockSimError(Exception):
    """Base class for all stocksim-core errors."""


class InvalidTicker(StockSimError, ValueError):
    """Symbol is empty, too long, or has characters a ticker cannot have."""


class InvalidQuantity(StockSimError, ValueError):
    """Share quantity or price is not a positive finite number."""


class InvalidAmount(StockSimError, ValueError):
    """Deposit amount is not a positive finite number."""


class DepositRejected(StockSimError):
    """Deposit is a valid number but exceeds a configured limit."""


class QuoteUnavailable(StockSimError):
    """No usable price could be obtained for a symbol."""


class AccountNotFound(StockSimError, KeyError):
    """No account stored for the given user id."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class AccountExists(StockSimError):
    """An account for the given user id is already stored."""


class ConcurrentModification(StockSimError):
    """Stored account changed since it was loaded; the write was refused."""
