"""
Risk-bounded position sizing and open-position checks.

Sizing never commits more than 2% of the account balance, whatever the
configured maximum position size.
"""

import math
from enum import Enum
from typing import Optional

import structlog

from ..config.defaults import RiskParams
from ..data.models import TradeSignal
from ..errors import InvalidPriceError
from ..signals.confidence import clamp_unit

logger = structlog.get_logger(__name__)

BALANCE_RISK_FRACTION = 0.02


class ExitReason(str, Enum):
    """Why an open position should be closed."""
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"


class RiskManager:
    """Converts signals into bounded volumes and checks open positions."""

    def __init__(self, params: Optional[RiskParams] = None):
        self.params = params or RiskParams()
        self.logger = logger

    def size_position(self, signal: TradeSignal, balance: float, current_price: float) -> float:
        """
        Calculate the trade volume for a signal.

        1. base = balance * 2%
        2. scale by signal confidence
        3. cap at max_position_size
        4. cap at (balance * 2%) / (current_price * stop_loss_pct / 100)

        Args:
            signal: Directional signal with confidence
            balance: Available settlement-currency balance
            current_price: Latest market price

        Returns:
            Non-negative volume; 0.0 means do not trade this cycle
        """
        if balance <= 0 or not math.isfinite(balance):
            return 0.0

        base_size = balance * BALANCE_RISK_FRACTION
        confidence = clamp_unit(signal.confidence)
        sized = base_size * confidence

        sized = min(sized, self.params.max_position_size)

        risk_amount = current_price * (self.params.stop_loss_pct / 100.0)
        if risk_amount > 0:
            max_size_by_risk = base_size / risk_amount
            sized = min(sized, max_size_by_risk)

        volume = max(sized, 0.0)
        self.logger.debug(
            "Position sized",
            signal=signal.kind.value,
            confidence=signal.confidence,
            balance=balance,
            current_price=current_price,
            volume=volume
        )
        return volume

    def evaluate_exit(self, current_price: float, entry_price: float) -> Optional[ExitReason]:
        """
        Determine whether an open position has crossed an exit threshold.

        Args:
            current_price: Latest market price
            entry_price: Average entry price of the position

        Returns:
            ExitReason if the position should be closed, None if safe to hold
        """
        if entry_price <= 0:
            raise InvalidPriceError(
                f"Entry price must be positive, got {entry_price}", price=entry_price
            )

        loss_pct = (entry_price - current_price) / entry_price * 100.0
        if loss_pct > self.params.stop_loss_pct:
            return ExitReason.STOP_LOSS

        profit_pct = (current_price - entry_price) / entry_price * 100.0
        if profit_pct > self.params.take_profit_pct:
            return ExitReason.TAKE_PROFIT

        return None

    def check_risk(self, position: float, current_price: float, entry_price: float) -> bool:
        """
        Check whether an open position is safe to hold.

        Args:
            position: Open position volume
            current_price: Latest market price
            entry_price: Average entry price of the position

        Returns:
            True if safe to hold; False on stop-loss or take-profit
        """
        reason = self.evaluate_exit(current_price, entry_price)
        if reason is not None:
            self.logger.info(
                "Position risk threshold crossed",
                reason=reason.value,
                position=position,
                current_price=current_price,
                entry_price=entry_price
            )
            return False
        return True
