"""Confidence scoring for directional signals."""

import math

MA_WEIGHT = 0.4
RSI_WEIGHT = 0.3
BAND_WEIGHT = 0.3

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


def _relative_distance(value: float, reference: float) -> float:
    """|value - reference| / reference, unbounded when reference is zero."""
    distance = abs(value - reference)
    if reference == 0:
        return 0.0 if distance == 0 else math.inf
    return distance / abs(reference)


def rsi_strength(rsi: float) -> float:
    """How far RSI sits beyond the oversold/overbought thresholds, scaled by 30."""
    if rsi < RSI_OVERSOLD:
        return (RSI_OVERSOLD - rsi) / 30.0
    if rsi > RSI_OVERBOUGHT:
        return (rsi - RSI_OVERBOUGHT) / 30.0
    return 0.0


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1]; NaN maps to 0."""
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


def calculate_confidence(short_ma: float, long_ma: float, rsi: float,
                         price: float, band: float) -> float:
    """
    Weighted signal strength in [0, 1].

    confidence = 0.4 * |shortMA - longMA| / longMA
               + 0.3 * rsiStrength
               + 0.3 * |price - band| / band

    Args:
        short_ma: Fast moving average
        long_ma: Slow moving average
        rsi: Current RSI reading
        price: Latest price
        band: Breached Bollinger band (lower for buys, upper for sells)

    Returns:
        Confidence clamped to [0, 1]
    """
    ma_signal = _relative_distance(short_ma, long_ma)
    band_signal = _relative_distance(price, band)

    # Any infinite component saturates the score
    if math.isinf(ma_signal) or math.isinf(band_signal):
        return 1.0

    confidence = (ma_signal * MA_WEIGHT +
                  rsi_strength(rsi) * RSI_WEIGHT +
                  band_signal * BAND_WEIGHT)

    return clamp_unit(confidence)
