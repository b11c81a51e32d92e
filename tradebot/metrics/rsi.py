"""RSI (Relative Strength Index) calculations"""

from collections.abc import Sequence


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Calculate RSI from summed gains and losses over the last ``period`` deltas

    RSI = 100 - 100 / (1 + gains / losses)

    Args:
        prices: Price samples in chronological order
        period: Number of trailing price deltas (default 14)

    Returns:
        RSI in [0, 100]; 0.0 if fewer than ``period + 1`` samples are
        available, 100.0 if no delta in the lookback is negative
    """
    if period <= 0:
        raise ValueError(f"RSI period must be positive, got {period}")

    if len(prices) < period + 1:
        return 0.0

    gains = 0.0
    losses = 0.0
    for i in range(len(prices) - period, len(prices)):
        change = prices[i] - prices[i - 1]
        if change > 0:
            gains += change
        else:
            losses -= change

    if losses == 0:
        return 100.0

    relative_strength = gains / losses
    return 100.0 - (100.0 / (1.0 + relative_strength))
