"""Configuration management for Gift Tracker."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import GiftStatus


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path
    db_name: str = "gifts.db"

    @property
    def db_path(self) -> Path:
        return self.storage_dir / self.db_name


@dataclass
class DefaultsConfig:
    """Default values for new gift items and purchases."""

    priority: int = 1
    status: GiftStatus = GiftStatus.NEEDED
    payment_method: str | None = None


@dataclass
class BudgetConfig:
    """Budget display configuration."""

    currency_symbol: str = "$"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    defaults: DefaultsConfig
    budget: BudgetConfig
    logging: LoggingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    @property
    def budget(self) -> BudgetConfig:
        """Get budget configuration."""
        return self._config.budget

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "gift-tracker" / "config.toml",
            Path.home() / ".gift-tracker" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "gift-tracker" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        defaults_section = data.get("defaults", {})

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/gift-tracker/data")
                ).expanduser(),
                db_name=data_section.get("db_name", "gifts.db"),
            ),
            defaults=DefaultsConfig(
                priority=defaults_section.get("priority", 1),
                status=GiftStatus(defaults_section.get("status", GiftStatus.NEEDED.value)),
                payment_method=defaults_section.get("payment_method"),
            ),
            budget=BudgetConfig(
                currency_symbol=data.get("budget", {}).get("currency_symbol", "$"),
            ),
            logging=LoggingConfig(
                level=data.get("logging", {}).get("level", "WARNING"),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "gift-tracker" / "data"),
            defaults=DefaultsConfig(),
            budget=BudgetConfig(),
            logging=LoggingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'data.storage_dir'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
