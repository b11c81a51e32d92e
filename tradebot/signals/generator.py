"""
Signal generation from the indicator snapshot.

Buy and sell conditions are evaluated independently against the latest
price. The sell check runs after the buy check and replaces its result
when both hold (last match wins).
"""

from collections.abc import Sequence
from typing import Optional

import structlog

from ..config.defaults import StrategyParams
from ..data.models import SignalKind, TradeSignal
from ..errors import InsufficientDataError
from ..metrics.calculator import IndicatorCalculator
from ..models.indicators import IndicatorSnapshot
from .confidence import RSI_OVERBOUGHT, RSI_OVERSOLD, calculate_confidence

logger = structlog.get_logger(__name__)


def is_buy_condition(snapshot: IndicatorSnapshot, price: float) -> bool:
    """Uptrend, oversold and trading below the lower band."""
    return (snapshot.short_ma > snapshot.long_ma and
            snapshot.rsi < RSI_OVERSOLD and
            price < snapshot.bb_lower)


def is_sell_condition(snapshot: IndicatorSnapshot, price: float) -> bool:
    """Downtrend, overbought and trading above the upper band."""
    return (snapshot.short_ma < snapshot.long_ma and
            snapshot.rsi > RSI_OVERBOUGHT and
            price > snapshot.bb_upper)


class SignalGenerator:
    """Combines indicator readings into a classified signal with confidence."""

    def __init__(self, params: Optional[StrategyParams] = None,
                 calculator: Optional[IndicatorCalculator] = None):
        self.params = params or StrategyParams()
        self.calculator = calculator or IndicatorCalculator(self.params)
        self.logger = logger

    @property
    def min_data_points(self) -> int:
        return self.params.min_data_points

    def analyze(self, prices: Sequence[float]) -> TradeSignal:
        """
        Classify the latest price in the window.

        Args:
            prices: Price window contents, newest last

        Returns:
            TradeSignal with zero volume; Hold while any indicator the
            decision uses is not yet computable

        Raises:
            InsufficientDataError: fewer than ``min_data_points`` samples
        """
        if len(prices) < self.min_data_points:
            raise InsufficientDataError(
                f"Not enough price data for analysis. Have {len(prices)}, "
                f"need {self.min_data_points}",
                required_count=self.min_data_points,
                available_count=len(prices)
            )

        snapshot = self.calculator.calculate(prices)
        current_price = prices[-1]
        signal = TradeSignal(kind=SignalKind.HOLD, price=current_price)

        # RSI of 0.0 is also a real reading, so its readiness goes by sample count
        rsi_ready = len(prices) > self.params.rsi_period
        if not snapshot.has_sufficient_data() or not rsi_ready:
            self.logger.debug(
                "Indicators not yet computable, holding",
                sample_count=len(prices),
                indicators=snapshot.to_dict()
            )
            return signal

        if is_buy_condition(snapshot, current_price):
            signal = TradeSignal(
                kind=SignalKind.BUY,
                price=current_price,
                confidence=calculate_confidence(
                    snapshot.short_ma, snapshot.long_ma, snapshot.rsi,
                    current_price, snapshot.bb_lower
                )
            )

        if is_sell_condition(snapshot, current_price):
            signal = TradeSignal(
                kind=SignalKind.SELL,
                price=current_price,
                confidence=calculate_confidence(
                    snapshot.short_ma, snapshot.long_ma, snapshot.rsi,
                    current_price, snapshot.bb_upper
                )
            )

        self.logger.debug(
            "Signal analyzed",
            signal=signal.kind.value,
            confidence=signal.confidence,
            price=current_price,
            indicators=snapshot.to_dict()
        )

        return signal
