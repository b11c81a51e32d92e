"""Bollinger Bands calculations"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .moving_average import calculate_moving_average


@dataclass(frozen=True)
class BollingerBands:
    """Middle band with upper and lower envelopes"""
    middle: float
    upper: float
    lower: float
    std_dev: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


EMPTY_BANDS = BollingerBands(middle=0.0, upper=0.0, lower=0.0, std_dev=0.0)


def calculate_bollinger_bands(prices: Sequence[float], period: int = 20,
                              std_dev_multiplier: float = 2.0) -> BollingerBands:
    """
    Calculate Bollinger Bands using the population standard deviation

    middle = SMA(period)
    upper  = middle + sd * multiplier
    lower  = middle - sd * multiplier

    Args:
        prices: Price samples in chronological order
        period: Lookback period (default 20)
        std_dev_multiplier: Band width in standard deviations (default 2.0)

    Returns:
        BollingerBands; all values 0.0 if fewer than ``period`` samples
    """
    if period <= 0:
        raise ValueError(f"Bollinger period must be positive, got {period}")

    if len(prices) < period:
        return EMPTY_BANDS

    middle = calculate_moving_average(prices, period)

    variance = 0.0
    for price in prices[len(prices) - period:]:
        variance += (price - middle) ** 2
    sd = math.sqrt(variance / period)

    return BollingerBands(
        middle=middle,
        upper=middle + sd * std_dev_multiplier,
        lower=middle - sd * std_dev_multiplier,
        std_dev=sd,
    )
