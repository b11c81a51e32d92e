"""
Risk management module.

Position sizing against account balance and stop-loss / take-profit checks.
"""

from .manager import BALANCE_RISK_FRACTION, ExitReason, RiskManager

__all__ = ["RiskManager", "ExitReason", "BALANCE_RISK_FRACTION"]
