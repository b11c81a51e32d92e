"""
Core data models for the price window and trade signals.

PriceWindow is the only mutable structure in the evaluation path; it is
owned by the trading controller and mutated only under the controller lock.
"""

import math
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..errors import InvalidPriceError

DEFAULT_WINDOW_CAPACITY = 100


class SignalKind(str, Enum):
    """Classified trading decision."""
    HOLD = "hold"
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class TradeSignal:
    """Signal produced by the generator; volume is filled in by the risk step."""
    kind: SignalKind
    price: float
    volume: float = 0.0
    confidence: float = 0.0

    @property
    def is_directional(self) -> bool:
        """True for buy and sell signals."""
        return self.kind in (SignalKind.BUY, SignalKind.SELL)

    def with_volume(self, volume: float) -> 'TradeSignal':
        """Create a copy carrying the sized volume."""
        return replace(self, volume=volume)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "price": self.price,
            "volume": self.volume,
            "confidence": self.confidence,
        }


class PriceWindow:
    """Fixed-capacity ordered buffer of recent prices, newest last."""

    def __init__(self, capacity: int = DEFAULT_WINDOW_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self._prices: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._prices.maxlen  # type: ignore[return-value]

    def append(self, price: float) -> None:
        """Push a price sample, evicting the oldest once capacity is exceeded."""
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise InvalidPriceError(f"Price must be a number, got {price!r}", price=None)
        if not math.isfinite(price) or price <= 0:
            raise InvalidPriceError(f"Price must be positive and finite, got {price}", price=price)
        self._prices.append(float(price))

    def as_slice(self) -> tuple[float, ...]:
        """Read-only ordered view of the current samples."""
        return tuple(self._prices)

    @property
    def latest(self) -> Optional[float]:
        """Newest sample, None while empty."""
        return self._prices[-1] if self._prices else None

    def __len__(self) -> int:
        return len(self._prices)

    def __repr__(self) -> str:
        return f"PriceWindow(size={len(self._prices)}, capacity={self.capacity})"
