"""
Tests for load_settings.
"""

from decimal import Decimal

import pytest

from stocksim_core.config import DEFAULT_ALPHA_VANTAGE_URL, Settings, load_settings


def test_defaults_from_empty_environment():
    s = load_settings({})
    assert s == Settings()
    assert s.initial_cash == Decimal("1000")
    assert s.max_deposit == Decimal("100000")
    assert s.max_buying_power == Decimal("100000000")
    assert s.alpha_vantage_api_key is None
    assert s.alpha_vantage_base_url == DEFAULT_ALPHA_VANTAGE_URL


def test_overrides_from_environment():
    s = load_settings(
        {
            "STOCKSIM_INITIAL_CASH": "5000",
            "STOCKSIM_MAX_DEPOSIT": "250.50",
            "STOCKSIM_MAX_BUYING_POWER": "1e6",
            "STOCKSIM_QUOTE_TIMEOUT_S": "2",
            "ALPHA_VANTAGE_API_KEY": " secret ",
            "ALPHA_VANTAGE_BASE_URL": "https://proxy.test/query",
        }
    )
    assert s.initial_cash == Decimal("5000")
    assert s.max_deposit == Decimal("250.50")
    assert s.max_buying_power == Decimal("1000000")
    assert s.quote_timeout_s == 2.0
    assert s.alpha_vantage_api_key == "secret"
    assert s.alpha_vantage_base_url == "https://proxy.test/query"


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("STOCKSIM_INITIAL_CASH", "42")
    assert load_settings().initial_cash == Decimal("42")


def test_invalid_number():
    with pytest.raises(ValueError):
        load_settings({"STOCKSIM_MAX_DEPOSIT": "lots"})
