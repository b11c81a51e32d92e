"""
Tradebot - Indicator Signal and Risk Engine

Evaluates a rolling window of market prices against moving averages, RSI
and Bollinger Bands, emits buy/sell/hold signals with a confidence score,
sizes positions against account balance and hands orders to an exchange
adapter on a periodic, cancellable schedule.
"""

__version__ = "0.1.0"
__author__ = "Tradebot Team"
