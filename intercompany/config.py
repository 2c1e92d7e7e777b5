"""
Configuration loader for the Intercompany Allocation Engine.

Loads settings from intercompany_config.yaml and provides typed access
to all configuration sections.
"""
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
from functools import lru_cache

import yaml

from intercompany.domain.entities import CalculationMode


DEFAULT_CONFIG_PATH = Path(__file__).parent / "intercompany_config.yaml"
DATABASE_URL_ENV = "INTERCOMPANY_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///./intercompany.db"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class IntercompanyConfig:
    """
    Configuration manager for the allocation engine.

    Loads YAML configuration and provides typed access to all sections.
    Use get_config() to obtain the singleton instance.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config_path = config_path or DEFAULT_CONFIG_PATH
        self._config: dict = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path, 'r') as f:
                self._config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(self._config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping")

        self._validate()

    def _validate(self) -> None:
        multiplier = self.salary_buffer_multiplier
        if multiplier < 0:
            raise ConfigurationError(f"salary_buffer_multiplier must not be negative: {multiplier}")
        if not 1 <= self.fiscal_year_start_month <= 12:
            raise ConfigurationError(
                f"fiscal_year.start_month must be 1-12: {self.fiscal_year_start_month}"
            )
        # raises on unknown names
        self.default_mode

    @property
    def version(self) -> str:
        """Configuration file version."""
        return str(self._config.get("version", "unknown"))

    # =========================================================================
    # Allocation
    # =========================================================================

    @property
    def allocation(self) -> dict:
        """Allocation settings."""
        return self._config.get("allocation", {}) or {}

    @property
    def salary_buffer_multiplier(self) -> Decimal:
        """Multiplier applied to the staff salary baseline (pension etc.)."""
        raw = self.allocation.get("salary_buffer_multiplier", "1.02")
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            raise ConfigurationError(f"Invalid salary_buffer_multiplier: {raw!r}")

    @property
    def default_mode(self) -> CalculationMode:
        """Calculation mode used when callers do not pick one."""
        raw = self.allocation.get("default_mode", CalculationMode.DISTRIBUTION_LEGACY.value)
        try:
            return CalculationMode(str(raw).lower())
        except ValueError:
            raise ConfigurationError(f"Unknown calculation mode: {raw!r}")

    # =========================================================================
    # Periods
    # =========================================================================

    @property
    def fiscal_year_start_month(self) -> int:
        """Calendar month the fiscal year starts in (July by default)."""
        return int((self._config.get("fiscal_year", {}) or {}).get("start_month", 7))

    @property
    def min_year(self) -> int:
        """Earliest year accepted for monthly distributions."""
        return int((self._config.get("periods", {}) or {}).get("min_year", 2010))

    # =========================================================================
    # Cache
    # =========================================================================

    @property
    def availability_cache_enabled(self) -> bool:
        """Whether availability query results are memoized."""
        return bool((self._config.get("cache", {}) or {}).get("availability_enabled", True))

    # =========================================================================
    # Database
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Database URL from the environment, falling back to local SQLite."""
        return os.getenv(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)


@lru_cache(maxsize=1)
def get_config(config_path: Optional[str] = None) -> IntercompanyConfig:
    """
    Get the singleton configuration instance.

    Args:
        config_path: Optional path to config file. Only used on first call.

    Returns:
        IntercompanyConfig singleton instance
    """
    path = Path(config_path) if config_path else None
    return IntercompanyConfig(path)


def reload_config() -> IntercompanyConfig:
    """Reload configuration from disk and return new instance."""
    get_config.cache_clear()
    return get_config()
