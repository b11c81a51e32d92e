"""Pytest configuration and shared fixtures."""

import threading
from dataclasses import replace
from typing import Optional

import pytest
import structlog

from tradebot.config.defaults import AppConfig, get_default_config
from tradebot.data.models import SignalKind
from tradebot.errors import ExternalFetchError
from tradebot.exchange.base import Account, ExchangeClient, Order, order_side_for


class FakeExchange(ExchangeClient):
    """Scripted exchange: serves queued prices and records every call."""

    def __init__(self, prices=None, balances=None, order_error: Optional[Exception] = None):
        self.prices = list(prices or [])
        self.balances = balances if balances is not None else [
            Account(currency="KRW", balance="100000"),
        ]
        self.order_error = order_error
        self.price_calls = 0
        self.balance_calls = 0
        self.orders: list[dict] = []
        self.lock = threading.Lock()

    def fetch_current_price(self, market: str) -> float:
        with self.lock:
            self.price_calls += 1
            if not self.prices:
                raise ExternalFetchError("No scripted price left", resource="ticker")
            price = self.prices.pop(0)
        if isinstance(price, Exception):
            raise price
        return price

    def fetch_balance(self) -> list[Account]:
        with self.lock:
            self.balance_calls += 1
        if isinstance(self.balances, Exception):
            raise self.balances
        return list(self.balances)

    def submit_order(self, side: SignalKind, market: str, price: float, volume: float) -> Order:
        order_side = order_side_for(side)
        with self.lock:
            self.orders.append({
                "side": side,
                "market": market,
                "price": price,
                "volume": volume,
            })
        if self.order_error is not None:
            raise self.order_error
        return Order(
            uuid=f"order-{len(self.orders)}",
            side=order_side.value,
            ord_type="limit",
            price=f"{price:.2f}",
            state="wait",
            market=market,
            volume=f"{volume:.8f}",
        )


@pytest.fixture
def default_config() -> AppConfig:
    """Default application configuration."""
    return get_default_config()


@pytest.fixture
def fast_config(default_config: AppConfig) -> AppConfig:
    """Default configuration with a short controller interval."""
    return replace(
        default_config,
        controller=replace(default_config.controller, interval_seconds=0.01),
    )


@pytest.fixture
def fake_exchange_factory():
    """Factory for scripted exchanges."""
    return FakeExchange


@pytest.fixture
def buy_prices() -> list[float]:
    """
    21 prices ending in a buy setup for the default strategy.

    Quiet base, a spike, a steady decline and a final crash:
    shortMA(10) > longMA(20), RSI(14) == 0 and the last price sits
    below the lower band (20, 2.0).
    """
    return [100.0] * 6 + [200.0 - i for i in range(14)] + [50.0]


@pytest.fixture
def sell_prices() -> list[float]:
    """
    21 prices ending in a sell setup for the default strategy.

    High base, a drop, a steady climb and a final spike:
    shortMA(10) < longMA(20), RSI(14) == 100 and the last price sits
    above the upper band (20, 2.0).
    """
    return [300.0] * 6 + [200.0 + i for i in range(14)] + [450.0]


@pytest.fixture
def flat_prices() -> list[float]:
    """21 identical prices; no setup of any kind."""
    return [100.0] * 21


CONFIG_ENV_VARS = (
    "TRADING_MARKET",
    "UPBIT_OPEN_API_SERVER_URL",
    "TRADING_INTERVAL_SECONDS",
    "LOG_LEVEL",
    "UPBIT_OPEN_API_ACCESS_KEY",
    "UPBIT_OPEN_API_SECRET_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset configuration variables; anything a test or .env sets is restored afterwards."""
    for name in CONFIG_ENV_VARS:
        # setenv first so the original value (or its absence) is recorded for undo
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test that configures logging."""
    yield
    structlog.reset_defaults()
