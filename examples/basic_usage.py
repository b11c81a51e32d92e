#!/usr/bin/env python3
"""
Basic Usage Example - Tradebot Signal and Risk Engine

This script runs the trading controller against a simulated exchange
instead of Upbit. It shows how to:
- Build a controller from the default configuration
- Drive evaluation cycles one at a time
- Read the cycle outcomes and submitted orders
- Run the periodic background loop and stop it

Run: python examples/basic_usage.py
"""

import math
import time
from dataclasses import replace

from tradebot.config.defaults import get_default_config
from tradebot.controller import CycleOutcome, TradingController
from tradebot.data.models import SignalKind
from tradebot.exchange.base import Account, ExchangeClient, Order, order_side_for
from tradebot.logging.config import configure_logging


class SimulatedExchange(ExchangeClient):
    """In-memory exchange replaying a scripted price path."""

    def __init__(self, prices, krw_balance=1_000_000.0):
        self.prices = list(prices)
        self.krw_balance = krw_balance
        self.last_price = self.prices[0] if self.prices else 1.0
        self.orders = []

    def fetch_current_price(self, market):
        if not self.prices:
            # hold the last price once the script runs out
            return self.last_price
        self.last_price = self.prices.pop(0)
        return self.last_price

    def fetch_balance(self):
        return [Account(currency="KRW", balance=str(self.krw_balance))]

    def submit_order(self, side, market, price, volume):
        order = Order(
            uuid=f"sim-{len(self.orders) + 1}",
            side=order_side_for(side).value,
            ord_type="limit",
            price=f"{price:.2f}",
            state="done",
            market=market,
            volume=f"{volume:.8f}",
        )
        self.orders.append(order)
        return order


def create_price_path():
    """Calm market, a rally, a slow bleed and a capitulation candle."""
    prices = [100_000.0 + 500 * math.sin(i / 3) for i in range(10)]
    prices += [100_000.0] * 6 + [200_000.0 - 1_000 * i for i in range(14)] + [50_000.0]
    return prices


def demonstrate_single_cycles():
    """Step through cycles manually and print each outcome."""
    print("=" * 60)
    print("📈 Single-cycle evaluation")
    print("=" * 60)

    exchange = SimulatedExchange(create_price_path())
    controller = TradingController(exchange, get_default_config())

    for i in range(len(create_price_path())):
        result = controller.run_cycle()
        if result.outcome != CycleOutcome.INSUFFICIENT_DATA:
            signal = result.signal
            print(f"  cycle {i + 1:2d}: {result.outcome.value:<17} "
                  f"price={controller.window_snapshot()[-1]:>10.2f}"
                  + (f" confidence={signal.confidence:.3f}" if signal else ""))

    for order in exchange.orders:
        side = "BUY " if order.side == order_side_for(SignalKind.BUY).value else "SELL"
        print(f"  📝 {side} {order.volume} {order.market} @ {order.price} ({order.uuid})")

    print(f"\n  status: {controller.current_status()}")


def demonstrate_background_loop():
    """Run the periodic worker for a short while."""
    print("\n" + "=" * 60)
    print("⏱️  Background loop")
    print("=" * 60)

    config = get_default_config()
    config = replace(config, controller=replace(config.controller, interval_seconds=0.02))

    exchange = SimulatedExchange(create_price_path())
    controller = TradingController(exchange, config)

    controller.start()
    time.sleep(1.0)
    controller.stop()
    controller.join(timeout=1.0)

    print(f"  window size: {len(controller.window_snapshot())}")
    print(f"  orders placed: {len(exchange.orders)}")
    print(f"  last outcome: {controller.current_status()['last_outcome']}")


def main():
    configure_logging(level="WARNING")
    demonstrate_single_cycles()
    demonstrate_background_loop()
    print("\n✅ Example complete")


if __name__ == "__main__":
    main()
