"""Default configuration parameters for the signal and risk engine."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StrategyParams:
    """Indicator periods used by the signal generator."""
    short_ma_period: int = 10           # Fast moving average
    long_ma_period: int = 20            # Slow moving average
    rsi_period: int = 14                # RSI lookback in price deltas
    bb_period: int = 20                 # Bollinger Bands lookback
    bb_std_dev: float = 2.0             # Band width in standard deviations

    @property
    def min_data_points(self) -> int:
        """Samples required before a cycle may run the signal generator."""
        return max(self.long_ma_period, self.bb_period) + 1


@dataclass(frozen=True)
class RiskParams:
    """Position sizing and exit thresholds."""
    max_position_size: float = 1000.0   # Absolute volume cap
    stop_loss_pct: float = 2.0          # Loss % that marks a position unsafe
    take_profit_pct: float = 3.0        # Profit % that triggers an exit
    max_drawdown_pct: float = 5.0
    daily_limit: float = 10000.0


@dataclass(frozen=True)
class WindowParams:
    """Rolling price window parameters."""
    capacity: int = 100


@dataclass(frozen=True)
class ExchangeParams:
    """Exchange endpoint and market selection."""
    server_url: str = "https://api.upbit.com"
    market: str = "KRW-BTC"
    settlement_currency: str = "KRW"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class ControllerParams:
    """Periodic evaluation schedule."""
    interval_seconds: float = 30.0


@dataclass(frozen=True)
class LoggingParams:
    """Log output parameters."""
    level: str = "INFO"
    format_json: bool = False
    log_file: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    strategy: StrategyParams
    risk: RiskParams
    window: WindowParams
    exchange: ExchangeParams
    controller: ControllerParams
    logging: LoggingParams


def get_default_config() -> AppConfig:
    """Get the default configuration instance."""
    return AppConfig(
        strategy=StrategyParams(),
        risk=RiskParams(),
        window=WindowParams(),
        exchange=ExchangeParams(),
        controller=ControllerParams(),
        logging=LoggingParams(),
    )
