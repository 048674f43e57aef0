"""
Settings read from the environment.

Limits and defaults match the paper-trading app: every account starts with
$1,000, a single deposit is capped at $100,000 and buying power at
$100,000,000.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

INITIAL_CASH_ENV = "STOCKSIM_INITIAL_CASH"
MAX_DEPOSIT_ENV = "STOCKSIM_MAX_DEPOSIT"
MAX_BUYING_POWER_ENV = "STOCKSIM_MAX_BUYING_POWER"
QUOTE_TIMEOUT_ENV = "STOCKSIM_QUOTE_TIMEOUT_S"
ALPHA_VANTAGE_KEY_ENV = "ALPHA_VANTAGE_API_KEY"
ALPHA_VANTAGE_URL_ENV = "ALPHA_VANTAGE_BASE_URL"

DEFAULT_ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"


@dataclass(frozen=True)
class Settings:
    initial_cash: Decimal = Decimal("1000")
    max_deposit: Decimal = Decimal("100000")
    max_buying_power: Decimal = Decimal("100000000")
    alpha_vantage_api_key: str | None = None
    alpha_vantage_base_url: str = DEFAULT_ALPHA_VANTAGE_URL
    quote_timeout_s: float = 10.0


def _decimal_env(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return Decimal(raw)
    except ArithmeticError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environ (defaults to os.environ); unset keys keep defaults."""
    env = os.environ if environ is None else environ
    timeout_raw = (env.get(QUOTE_TIMEOUT_ENV) or "").strip()
    return Settings(
        initial_cash=_decimal_env(env, INITIAL_CASH_ENV, Settings.initial_cash),
        max_deposit=_decimal_env(env, MAX_DEPOSIT_ENV, Settings.max_deposit),
        max_buying_power=_decimal_env(env, MAX_BUYING_POWER_ENV, Settings.max_buying_power),
        alpha_vantage_api_key=(env.get(ALPHA_VANTAGE_KEY_ENV) or "").strip() or None,
        alpha_vantage_base_url=(env.get(ALPHA_VANTAGE_URL_ENV) or "").strip() or DEFAULT_ALPHA_VANTAGE_URL,
        quote_timeout_s=float(timeout_raw) if timeout_raw else Settings.quote_timeout_s,
    )
