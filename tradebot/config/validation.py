"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from .defaults import StrategyParams

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SECTIONS = ("strategy", "risk", "window", "exchange", "controller", "logging")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_positive_int(params: dict[str, Any], field: str, prefix: str) -> list[ValidationError]:
    if field not in params:
        return []
    value = params[field]
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return [ValidationError(
            field=f"{prefix}.{field}",
            message="Must be a positive integer",
            value=value
        )]
    return []


def _check_positive_number(params: dict[str, Any], field: str, prefix: str) -> list[ValidationError]:
    if field not in params:
        return []
    value = params[field]
    if not _is_number(value) or value <= 0:
        return [ValidationError(
            field=f"{prefix}.{field}",
            message="Must be a positive number",
            value=value
        )]
    return []


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_strategy_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator periods and band multiplier."""
        errors = []

        for field in ("short_ma_period", "long_ma_period", "rsi_period", "bb_period"):
            errors.extend(_check_positive_int(params, field, "strategy"))

        errors.extend(_check_positive_number(params, "bb_std_dev", "strategy"))

        return errors

    @staticmethod
    def validate_risk_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate risk thresholds."""
        errors = []

        for field in ("max_position_size", "stop_loss_pct", "take_profit_pct",
                      "max_drawdown_pct", "daily_limit"):
            errors.extend(_check_positive_number(params, field, "risk"))

        return errors

    @staticmethod
    def validate_window_params(
        params: dict[str, Any],
        strategy: dict[str, Any]
    ) -> list[ValidationError]:
        """Validate window capacity against the samples the strategy needs."""
        errors = _check_positive_int(params, "capacity", "window")
        if errors or "capacity" not in params:
            return errors

        # Fall back to defaults for periods that are missing or invalid
        defaults = StrategyParams()
        long_ma = strategy.get("long_ma_period", defaults.long_ma_period)
        bb_period = strategy.get("bb_period", defaults.bb_period)
        if not isinstance(long_ma, int) or not isinstance(bb_period, int):
            return errors

        required = max(long_ma, bb_period) + 1
        if params["capacity"] < required:
            errors.append(ValidationError(
                field="window.capacity",
                message=f"Must hold at least {required} samples for the configured periods",
                value=params["capacity"]
            ))

        return errors

    @staticmethod
    def validate_exchange_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate exchange endpoint settings."""
        errors = []

        for field in ("server_url", "market", "settlement_currency"):
            if field in params:
                value = params[field]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=f"exchange.{field}",
                        message="Must be a non-empty string",
                        value=value
                    ))

        if "server_url" in params and isinstance(params["server_url"], str):
            if not params["server_url"].startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="exchange.server_url",
                    message="Must be an http(s) URL",
                    value=params["server_url"]
                ))

        errors.extend(_check_positive_number(params, "timeout_seconds", "exchange"))

        return errors

    @staticmethod
    def validate_controller_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate the evaluation schedule."""
        return _check_positive_number(params, "interval_seconds", "controller")

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate log output settings."""
        if "level" not in params:
            return []
        level = params["level"]
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            return [ValidationError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}",
                value=level
            )]
        return []

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        # A section left empty in YAML arrives as None
        for section in SECTIONS:
            if section in config and not isinstance(config[section], dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=config[section]
                ))
        if errors:
            return errors

        strategy = config.get("strategy", {})

        if "strategy" in config:
            errors.extend(ConfigValidator.validate_strategy_params(strategy))

        if "risk" in config:
            errors.extend(ConfigValidator.validate_risk_params(config["risk"]))

        if "window" in config:
            errors.extend(ConfigValidator.validate_window_params(config["window"], strategy))

        if "exchange" in config:
            errors.extend(ConfigValidator.validate_exchange_params(config["exchange"]))

        if "controller" in config:
            errors.extend(ConfigValidator.validate_controller_params(config["controller"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
