"""Indicator calculator coordinating the per-cycle indicator snapshot"""

from collections.abc import Sequence
from typing import Optional

from ..config.defaults import StrategyParams
from ..errors import InsufficientDataError, MetricsCalculationError
from ..models.indicators import IndicatorSnapshot
from .bollinger import calculate_bollinger_bands
from .moving_average import calculate_moving_average
from .rsi import calculate_rsi


class IndicatorCalculator:
    """
    Computes moving averages, RSI and Bollinger Bands over a price sequence.

    Holds no state beyond its parameters; every call recomputes from the
    samples it is given.
    """

    def __init__(self, params: Optional[StrategyParams] = None):
        self.params = params or StrategyParams()

    def calculate(self, prices: Sequence[float]) -> IndicatorSnapshot:
        """
        Calculate the indicator snapshot for the given prices

        Args:
            prices: Price samples in chronological order

        Returns:
            IndicatorSnapshot with all indicator readings
        """
        if not prices:
            raise InsufficientDataError(
                "No price samples available for indicator calculation",
                required_count=self.get_warmup_period(),
                available_count=0
            )

        try:
            short_ma = calculate_moving_average(prices, self.params.short_ma_period)
            long_ma = calculate_moving_average(prices, self.params.long_ma_period)
            rsi = calculate_rsi(prices, self.params.rsi_period)
            bands = calculate_bollinger_bands(
                prices, self.params.bb_period, self.params.bb_std_dev
            )
        except (ValueError, TypeError, ArithmeticError) as e:
            raise MetricsCalculationError(
                f"Indicator calculation failed: {e}",
                metric_name="indicators",
                calculation_input={"sample_count": len(prices)}
            ) from e

        return IndicatorSnapshot(
            short_ma=short_ma,
            long_ma=long_ma,
            rsi=rsi,
            bb_middle=bands.middle,
            bb_upper=bands.upper,
            bb_lower=bands.lower,
        )

    def get_warmup_period(self) -> int:
        """Minimum samples needed before a signal may be generated"""
        return self.params.min_data_points
