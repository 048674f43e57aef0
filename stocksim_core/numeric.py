"""
Boundary parsing for quantities, prices and amounts.

Everything numeric inside the core is a Decimal. Values are parsed here once,
at the edge, and never coerced again further in.

Parsed values are below MAX_MAGNITUDE with at most MAX_DECIMAL_PLACES
fractional digits. Under ARITHMETIC_CONTEXT, products and sums of such
values (and of cash built from them) are exact; only the average-price
division can round.
"""

from __future__ import annotations

from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_EVEN,
)
from typing import Union

from stocksim_core.errors import InvalidAmount, InvalidQuantity

NumberLike = Union[Decimal, int, float, str]

ZERO = Decimal("0")
MAX_MAGNITUDE = Decimal("1e12")
MAX_DECIMAL_PLACES = 8

ARITHMETIC_CONTEXT = Context(
    prec=60,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

_QUANTUM = Decimal(1).scaleb(-MAX_DECIMAL_PLACES)


def _to_decimal(value: NumberLike, error: type[ValueError], what: str) -> Decimal:
    # bool is an int subclass; True shares is not a quantity.
    if isinstance(value, bool):
        raise error(f"{what} must be a number, got {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, int):
            result = Decimal(value)
        elif isinstance(value, float):
            result = Decimal(str(value))
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            raise error(f"{what} must be a number, got {type(value).__name__}")
    except ArithmeticError:
        raise error(f"{what} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise error(f"{what} must be finite, got {value!r}")
    if abs(result) >= MAX_MAGNITUDE:
        raise error(f"{what} must be below {MAX_MAGNITUDE:,f}, got {value!r}")
    try:
        bounded = result.quantize(_QUANTUM, context=ARITHMETIC_CONTEXT)
    except ArithmeticError:
        raise error(f"{what} is out of range: {value!r}") from None
    if bounded != result:
        raise error(f"{what} has more than {MAX_DECIMAL_PLACES} decimal places: {value!r}")
    # keep the caller's scale ("10" stays "10") when it is already within bounds
    return result if result.as_tuple().exponent >= -MAX_DECIMAL_PLACES else bounded


def _positive(value: NumberLike, error: type[ValueError], what: str) -> Decimal:
    result = _to_decimal(value, error, what)
    if result <= ZERO:
        raise error(f"{what} must be greater than zero, got {value!r}")
    return result


def parse_quantity(value: NumberLike) -> Decimal:
    """Share count: positive, whole or fractional."""
    return _positive(value, InvalidQuantity, "Quantity")


def parse_price(value: NumberLike) -> Decimal:
    """Price per share: positive."""
    return _positive(value, InvalidQuantity, "Price")


def parse_amount(value: NumberLike) -> Decimal:
    """Cash amount for a deposit: positive."""
    return _positive(value, InvalidAmount, "Amount")


def parse_balance(value: NumberLike) -> Decimal:
    """Starting cash balance: zero or positive."""
    result = _to_decimal(value, InvalidAmount, "Balance")
    if result < ZERO:
        raise InvalidAmount(f"Balance cannot be negative, got {value!r}")
    return result
