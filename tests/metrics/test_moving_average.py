"""Tests for simple moving average calculations"""

import pytest

from tradebot.metrics.moving_average import calculate_moving_average


class TestMovingAverage:
    """Test trailing arithmetic mean"""

    def test_uses_last_period_samples(self):
        """Test only the trailing window is averaged"""
        prices = [1.0, 2.0, 3.0, 4.0, 5.0]
        assert calculate_moving_average(prices, 3) == pytest.approx(4.0)

    def test_exact_period(self):
        """Test average when sample count equals the period"""
        prices = [10.0, 20.0, 30.0]
        assert calculate_moving_average(prices, 3) == pytest.approx(20.0)

    def test_insufficient_data_returns_zero(self):
        """Test sentinel value when fewer samples than the period"""
        assert calculate_moving_average([1.0, 2.0], 3) == 0.0
        assert calculate_moving_average([], 1) == 0.0

    def test_accepts_tuple_input(self):
        """Test window snapshots (tuples) are accepted"""
        assert calculate_moving_average((2.0, 4.0), 2) == pytest.approx(3.0)

    @pytest.mark.parametrize("period", [0, -1])
    def test_invalid_period(self, period):
        """Test non-positive period is rejected"""
        with pytest.raises(ValueError):
            calculate_moving_average([1.0, 2.0, 3.0], period)
