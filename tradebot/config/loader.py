"""Configuration loader with layered parameter precedence."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from dotenv import load_dotenv

from ..errors import ConfigurationError
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
from .validation import ConfigValidator

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "tradebot.yaml"

ACCESS_KEY_ENV = "UPBIT_OPEN_API_ACCESS_KEY"
SECRET_KEY_ENV = "UPBIT_OPEN_API_SECRET_KEY"

# Environment variable -> (section, field, converter)
ENV_OVERRIDES = {
    "TRADING_MARKET": ("exchange", "market", str),
    "UPBIT_OPEN_API_SERVER_URL": ("exchange", "server_url", str),
    "TRADING_INTERVAL_SECONDS": ("controller", "interval_seconds", float),
    "LOG_LEVEL": ("logging", "level", str),
}

_SECTION_TYPES = {
    "strategy": StrategyParams,
    "risk": RiskParams,
    "window": WindowParams,
    "exchange": ExchangeParams,
    "controller": ControllerParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ExchangeCredentials:
    """API key pair used to sign private exchange requests."""
    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with layered precedence."""

    config_dir: Path
    defaults: AppConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_dotenv(self) -> None:
        """Load ``.env`` from the config directory without overriding the environment."""
        env_path = self.config_dir / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        try:
            with open(config_file) as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse {config_file}: {e}",
                context={"path": str(config_file)}
            ) from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping at the top level",
                context={"path": str(config_file)}
            )

        return file_config

    def load_env_config(self) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        env_config: dict[str, Any] = {}

        for env_name, (section, field_name, converter) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                value = converter(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Environment variable {env_name} has invalid value {raw!r}",
                    context={"variable": env_name}
                ) from e
            env_config.setdefault(section, {})[field_name] = value

        return env_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration layers.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Environment variables
        3. YAML config file
        4. Built-in defaults (lowest priority)
        """
        self.load_dotenv()

        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> AppConfig:
        """Build a validated, immutable configuration record."""
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            messages = [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
            raise ConfigurationError(
                "Configuration validation failed: " + "; ".join(messages),
                errors=errors
            )

        sections = {}
        for section, params_type in _SECTION_TYPES.items():
            values = merged.get(section, {})
            try:
                sections[section] = params_type(**values)
            except TypeError as e:
                raise ConfigurationError(
                    f"Invalid keys in configuration section '{section}': {e}",
                    context={"section": section}
                ) from e

        config = AppConfig(**sections)
        logger.info(
            "Loaded configuration",
            market=config.exchange.market,
            interval_seconds=config.controller.interval_seconds,
            config_dir=str(self.config_dir)
        )
        return config

    def load_credentials(self) -> ExchangeCredentials:
        """Read the exchange API key pair from the environment."""
        self.load_dotenv()

        access_key = os.environ.get(ACCESS_KEY_ENV, "")
        secret_key = os.environ.get(SECRET_KEY_ENV, "")

        if not access_key or not secret_key:
            missing = [name for name, value in ((ACCESS_KEY_ENV, access_key),
                                                (SECRET_KEY_ENV, secret_key)) if not value]
            raise ConfigurationError(
                "Required environment variables are not set: " + ", ".join(missing),
                context={"missing": missing}
            )

        return ExchangeCredentials(access_key=access_key, secret_key=secret_key)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
