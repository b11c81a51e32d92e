"""Data models for indicator calculations"""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorSnapshot:
    """
    Indicator values derived from the price window at evaluation time.

    A value of 0.0 means the indicator could not be computed from the
    available samples; it is never a valid trend reading.
    """
    short_ma: float
    long_ma: float
    rsi: float
    bb_middle: float
    bb_upper: float
    bb_lower: float

    def has_sufficient_data(self) -> bool:
        """
        Check that the moving averages and bands produced a reading.

        RSI is not covered: 0.0 is a valid RSI when every delta is a loss.
        """
        return (self.short_ma > 0 and
                self.long_ma > 0 and
                self.bb_middle > 0)

    def to_dict(self) -> dict:
        return {
            "short_ma": self.short_ma,
            "long_ma": self.long_ma,
            "rsi": self.rsi,
            "bb_middle": self.bb_middle,
            "bb_upper": self.bb_upper,
            "bb_lower": self.bb_lower,
        }
