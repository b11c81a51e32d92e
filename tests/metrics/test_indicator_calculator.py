"""Tests for the indicator snapshot calculator"""

import pytest

from tradebot.config.defaults import StrategyParams
from tradebot.errors import InsufficientDataError, MetricsCalculationError
from tradebot.metrics.calculator import IndicatorCalculator


class TestIndicatorCalculator:
    """Test per-cycle indicator snapshots"""

    def test_buy_setup_snapshot(self, buy_prices):
        """Test snapshot values for a known price sequence"""
        snapshot = IndicatorCalculator().calculate(buy_prices)

        assert snapshot.short_ma == pytest.approx(176.9)
        assert snapshot.long_ma == pytest.approx(162.95)
        assert snapshot.rsi == pytest.approx(0.0)
        assert snapshot.bb_middle == pytest.approx(162.95)
        assert snapshot.bb_lower == pytest.approx(67.17, abs=0.05)
        assert snapshot.bb_upper == pytest.approx(258.73, abs=0.05)
        assert snapshot.has_sufficient_data()

    def test_partial_data_uses_sentinels(self):
        """Test indicators without enough samples report zero"""
        prices = [float(i) for i in range(1, 12)]  # 11 samples
        snapshot = IndicatorCalculator().calculate(prices)

        assert snapshot.short_ma == pytest.approx(6.5)
        assert snapshot.long_ma == 0.0
        assert snapshot.rsi == 0.0
        assert snapshot.bb_middle == 0.0
        assert not snapshot.has_sufficient_data()

    def test_empty_prices(self):
        """Test empty input is reported as insufficient data"""
        with pytest.raises(InsufficientDataError) as exc_info:
            IndicatorCalculator().calculate([])
        assert exc_info.value.available_count == 0
        assert exc_info.value.required_count == 21

    def test_invalid_params_wrapped(self):
        """Test calculation failures surface as MetricsCalculationError"""
        calculator = IndicatorCalculator(StrategyParams(short_ma_period=0))
        with pytest.raises(MetricsCalculationError) as exc_info:
            calculator.calculate([1.0, 2.0, 3.0])
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_warmup_period(self):
        """Test warmup follows the slowest indicator"""
        assert IndicatorCalculator().get_warmup_period() == 21
        params = StrategyParams(long_ma_period=30, bb_period=25)
        assert IndicatorCalculator(params).get_warmup_period() == 31

    def test_snapshot_to_dict(self, flat_prices):
        """Test snapshot serialization"""
        data = IndicatorCalculator().calculate(flat_prices).to_dict()
        assert set(data) == {"short_ma", "long_ma", "rsi", "bb_middle", "bb_upper", "bb_lower"}
        assert data["short_ma"] == pytest.approx(100.0)
