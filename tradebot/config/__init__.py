"""Configuration records, loading and validation."""

from .defaults import (
    AppConfig,
    ControllerParams,
    ExchangeParams,
    LoggingParams,
    RiskParams,
    StrategyParams,
    WindowParams,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "ControllerParams",
    "ExchangeParams",
    "LoggingParams",
    "RiskParams",
    "StrategyParams",
    "WindowParams",
    "get_default_config",
]
