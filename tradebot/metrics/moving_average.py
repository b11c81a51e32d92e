"""Simple moving average calculations"""

from collections.abc import Sequence


def calculate_moving_average(prices: Sequence[float], period: int) -> float:
    """
    Calculate the arithmetic mean of the last ``period`` prices

    Args:
        prices: Price samples in chronological order
        period: Number of trailing samples to average

    Returns:
        Moving average, or 0.0 if fewer than ``period`` samples are available
    """
    if period <= 0:
        raise ValueError(f"Moving average period must be positive, got {period}")

    if len(prices) < period:
        return 0.0

    recent = prices[len(prices) - period:]
    return sum(recent) / period
