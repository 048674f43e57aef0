"""
Tests for stocksim_core: Ticker, numeric parsing, TradeRequest, Portfolio, mutator, recorder.
"""

from datetime import datetime, timezone
from decimal import Decimal, localcontext
from fractions import Fraction

import pytest

from stocksim_core import Holding, Portfolio, RejectionKind, Side, Ticker, TradeRequest, TransactionLog
from stocksim_core import mutator
from stocksim_core.errors import InvalidAmount, InvalidQuantity, InvalidTicker
from stocksim_core.numeric import ARITHMETIC_CONTEXT, parse_amount, parse_balance, parse_price, parse_quantity

D = Decimal
AAPL = Ticker("AAPL")


def _holding(qty, avg, symbol=AAPL) -> Holding:
    return Holding(symbol=symbol, quantity_owned=D(qty), average_buy_price=D(avg))


# --- Ticker ---


def test_ticker_normalizes_case_and_whitespace():
    assert Ticker(" aapl ").value == "AAPL"
    assert Ticker("aapl") == Ticker("AAPL")
    assert hash(Ticker("msft")) == hash(Ticker("MSFT"))
    assert str(Ticker("brk.b")) == "BRK.B"


@pytest.mark.parametrize("raw", ["", "   ", "TOOLONG", "A B", "$AAP", "1ABC", "A-", "A..", "B.-", "A.B.C", "BRK."])
def test_ticker_rejects_invalid(raw):
    with pytest.raises(InvalidTicker):
        Ticker(raw)


def test_ticker_parse_passes_through_instances():
    t = Ticker("SPY")
    assert Ticker.parse(t) is t
    assert Ticker.parse("spy") == t


def test_ticker_immutable():
    t = Ticker("SPY")
    with pytest.raises(AttributeError):
        t.value = "QQQ"


# --- Numeric parsing ---


def test_parse_quantity_accepts_numbers_and_strings():
    assert parse_quantity(10) == D("10")
    assert parse_quantity("2.5") == D("2.5")
    assert parse_quantity(D("0.001")) == D("0.001")
    assert parse_quantity(0.1) == D("0.1")


@pytest.mark.parametrize("raw", [0, -1, "0", "-2.5", "abc", "", "NaN", "Infinity", True, None, [1]])
def test_parse_quantity_rejects_bad_input(raw):
    with pytest.raises(InvalidQuantity):
        parse_quantity(raw)


def test_parse_price_rejects_zero():
    with pytest.raises(InvalidQuantity):
        parse_price("0")


def test_parse_amount_raises_invalid_amount():
    assert parse_amount("100.50") == D("100.50")
    with pytest.raises(InvalidAmount):
        parse_amount("ten dollars")
    with pytest.raises(InvalidAmount):
        parse_amount(-5)


def test_parse_balance_allows_zero():
    assert parse_balance(0) == D("0")
    with pytest.raises(InvalidAmount):
        parse_balance("-0.01")


@pytest.mark.parametrize(
    "raw",
    [
        "1e999999",
        "-1e999999",
        "1e12",
        "1000000000000",
        "1.2345678901234567890123",
        "12345678901234567890123456789",
        "0.000000001",
        D("1e-999999"),
        10**40,
    ],
)
def test_parse_quantity_rejects_out_of_range(raw):
    with pytest.raises(InvalidQuantity):
        parse_quantity(raw)


def test_parse_quantity_range_edges():
    assert parse_quantity("999999999999.99999999") == D("999999999999.99999999")
    assert parse_quantity("0.00000001") == D("0.00000001")
    assert parse_quantity("1.50000000000") == D("1.5")
    assert parse_quantity("1E+3") == D("1000")


def test_parse_amount_rejects_out_of_range():
    with pytest.raises(InvalidAmount):
        parse_amount("1e999999")
    with pytest.raises(InvalidAmount):
        parse_amount("0.123456789")


# --- TradeRequest ---


def test_trade_request_parse():
    req = TradeRequest.parse("buy", "aapl", "3")
    assert req.side == Side.BUY
    assert req.symbol == AAPL
    assert req.quantity == D("3")


def test_trade_request_rejects_unknown_side():
    with pytest.raises(ValueError):
        TradeRequest.parse("short", "AAPL", 1)


# --- Portfolio ---


def test_portfolio_initial_state():
    p = Portfolio()
    assert len(p) == 0
    assert p.holding("SPY") is None
    assert p.quantity("SPY") == D("0")
    assert "SPY" not in p


def test_portfolio_lookup_is_case_insensitive():
    p = Portfolio()
    p.put(AAPL, _holding(10, 100))
    assert p.holding("aapl") == _holding(10, 100)
    assert "aapl" in p
    assert "not-a-ticker" not in p


def test_portfolio_put_none_removes_entry():
    p = Portfolio()
    p.put(AAPL, _holding(10, 100))
    p.put(AAPL, None)
    assert AAPL not in p
    assert p.holdings == {}


def test_holding_rejects_zero_quantity():
    with pytest.raises(ValueError):
        _holding(0, 100)


# --- Mutator: buy ---


def test_buy_creates_holding():
    result = mutator.buy(D("1000"), None, AAPL, D("10"), D("100"))
    assert result.accepted
    assert result.holding == _holding(10, 100)
    assert result.cash == D("0")


@pytest.mark.parametrize(
    "q1, p1, q2, p2",
    [
        ("3", "10.07", "7", "13.33"),
        ("1", "10", "2", "11"),
        ("0.5", "200", "1.25", "180.40"),
        ("2.75", "0.3333", "0.125", "99.99"),
        ("1", "33.33", "1", "33.33"),
    ],
)
def test_buy_accumulates_weighted_average(q1, p1, q2, p2):
    q1, p1, q2, p2 = D(q1), D(p1), D(q2), D(p2)
    first = mutator.buy(D("1000"), None, AAPL, q1, p1)
    second = mutator.buy(first.cash, first.holding, AAPL, q2, p2)
    assert second.holding.quantity_owned == q1 + q2
    with localcontext(ARITHMETIC_CONTEXT):
        assert second.holding.average_buy_price == (q1 * p1 + q2 * p2) / (q1 + q2)
    exact = (Fraction(q1) * Fraction(p1) + Fraction(q2) * Fraction(p2)) / (Fraction(q1) + Fraction(q2))
    assert abs(Fraction(second.holding.average_buy_price) - exact) < Fraction(1, 10**50)
    assert Fraction(second.cash) == Fraction(1000) - Fraction(q1) * Fraction(p1) - Fraction(q2) * Fraction(p2)


def test_buy_average_does_not_drift_over_repeated_buys():
    cash, holding = D("100000"), None
    for _ in range(30):
        r = mutator.buy(cash, holding, AAPL, D("1"), D("33.33"))
        cash, holding = r.cash, r.holding
    assert holding.quantity_owned == D("30")
    assert holding.average_buy_price == D("33.33")


def test_buy_exact_cash_is_allowed():
    result = mutator.buy(D("1000"), None, AAPL, D("10"), D("100"))
    assert result.accepted
    assert result.cash == 0


def test_buy_insufficient_funds_leaves_state_untouched():
    holding = _holding(10, 100)
    cash = D("0")
    result = mutator.buy(cash, holding, AAPL, D("5"), D("200"))
    assert not result.accepted
    assert result.rejection == RejectionKind.INSUFFICIENT_FUNDS
    assert result.message == "Insufficient buying power to complete the transaction."
    assert result.holding is holding
    assert result.cash is cash


def test_buy_fractional_shares():
    result = mutator.buy(D("100"), None, AAPL, D("0.5"), D("150"))
    assert result.holding.quantity_owned == D("0.5")
    assert result.cash == D("25")


def test_buy_and_sell_large_precise_values_conserve_cash_exactly():
    cash, qty, price = D("99999999999.99"), D("12345678901.12345678"), D("3.33333333")
    bought = mutator.buy(cash, None, AAPL, qty, price)
    assert bought.accepted
    assert Fraction(bought.cash) == Fraction(cash) - Fraction(qty) * Fraction(price)

    sold = mutator.sell(bought.cash, bought.holding, AAPL, qty, price)
    assert sold.holding is None
    assert sold.cash == cash


def test_buy_high_precision_average():
    first = mutator.buy(D("99999999.99"), None, AAPL, D("1.23456789"), D("3.33333333"))
    second = mutator.buy(first.cash, first.holding, AAPL, D("0.00000001"), D("999.99999999"))
    exact = (Fraction("1.23456789") * Fraction("3.33333333") + Fraction("0.00000001") * Fraction("999.99999999")) / Fraction("1.23456790")
    assert abs(Fraction(second.holding.average_buy_price) - exact) < Fraction(1, 10**50)
    assert Fraction(second.cash) == (
        Fraction("99999999.99") - Fraction("1.23456789") * Fraction("3.33333333") - Fraction("0.00000001") * Fraction("999.99999999")
    )


# --- Mutator: sell ---


def test_sell_partial_keeps_average_price():
    holding = _holding(10, "123.456")
    result = mutator.sell(D("0"), holding, AAPL, D("4"), D("150"))
    assert result.accepted
    assert result.holding.quantity_owned == D("6")
    assert result.holding.average_buy_price == D("123.456")
    assert result.cash == D("600")


def test_sell_full_liquidation_removes_holding_and_credits_cash():
    result = mutator.sell(D("0"), _holding(10, 100), AAPL, D("10"), D("150"))
    assert result.accepted
    assert result.holding is None
    assert result.cash == D("1500")


def test_sell_more_than_owned_rejected():
    holding = _holding(10, 100)
    cash = D("0")
    result = mutator.sell(cash, holding, AAPL, D("15"), D("150"))
    assert result.rejection == RejectionKind.INSUFFICIENT_SHARES
    assert result.message == "You only own 10 of AAPL you cannot sell more than that."
    assert result.holding is holding
    assert result.cash is cash


def test_sell_without_holding_rejected():
    result = mutator.sell(D("50"), None, AAPL, D("1"), D("150"))
    assert result.rejection == RejectionKind.NO_SUCH_HOLDING
    assert result.message == "You do not own any AAPL."
    assert result.holding is None
    assert result.cash == D("50")


# --- Recorder ---


def test_recorder_appends_in_order():
    log = TransactionLog()
    ts = datetime(2024, 1, 24, 15, 30, tzinfo=timezone.utc)
    r1 = log.record(Side.BUY, AAPL, D("10"), D("100"), ts)
    r2 = log.record(Side.BUY, AAPL, D("10"), D("100"), ts)
    assert log.records() == [r1, r2]
    assert r1.total_price == D("1000")
    assert r1.price_per_share == D("100")
    assert r1.timestamp == ts


def test_recorder_stamps_utc_time_when_not_given():
    log = TransactionLog()
    before = datetime.now(timezone.utc)
    r = log.record(Side.SELL, AAPL, D("2"), D("7.5"))
    assert before <= r.timestamp <= datetime.now(timezone.utc)
    assert r.total_price == D("15.0")


def test_transaction_record_immutable():
    r = TransactionLog().record(Side.BUY, AAPL, D("1"), D("1"))
    with pytest.raises(AttributeError):
        r.quantity = D("2")


def test_records_returns_copy():
    log = TransactionLog()
    log.record(Side.BUY, AAPL, D("1"), D("1"))
    log.records().clear()
    assert len(log) == 1
