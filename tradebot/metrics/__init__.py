"""Technical indicator calculations over the rolling price window"""

from .bollinger import BollingerBands, calculate_bollinger_bands
from .calculator import IndicatorCalculator
from .moving_average import calculate_moving_average
from .rsi import calculate_rsi

__all__ = [
    "IndicatorCalculator",
    "BollingerBands",
    "calculate_bollinger_bands",
    "calculate_moving_average",
    "calculate_rsi",
]
