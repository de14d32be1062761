"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, cast

import yaml
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "RRULEKIT_"

# ~4 years; bounds windowed expansion of rules with neither UNTIL nor COUNT
DEFAULT_FALLBACK_HORIZON_SECONDS = 126230400


class RRuleSettings(BaseSettings):
    """Expansion and logging settings with environment variable support."""

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    # Expansion limits
    fallback_horizon_seconds: int = Field(
        default=DEFAULT_FALLBACK_HORIZON_SECONDS,
        gt=0,
        description="Scan horizon past the anchor for rules without UNTIL or COUNT",
    )
    max_occurrences: Optional[int] = Field(
        default=None, gt=0, description="Cap on occurrences returned by one expansion"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")

    # File Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "rrulekit")
    config_file: Optional[Path] = Field(default=None, description="Explicit YAML config path")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
    )

    def __init__(self, **kwargs: Any) -> None:
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower() for key in os.environ if key.startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        # Explicit arguments and environment variables take precedence over YAML
        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file, preferring an explicit path over the config directory."""
        if self.config_file is not None:
            return self.config_file if self.config_file.exists() else None

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_basic_settings(config_data)

        except Exception as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logger.warning(f"Could not load YAML config from {config_file}: {e}")

    def _load_basic_settings(self, config_data: dict) -> None:
        """Load expansion and logging settings from YAML data."""
        basic_settings = ["fallback_horizon_seconds", "max_occurrences", "log_level"]

        for setting in basic_settings:
            if (
                setting in config_data
                and setting not in self._explicit_args
                and setting not in self._env_vars_set
            ):
                setattr(self, setting, config_data[setting])


# Global settings management
_settings_instance: Optional[RRuleSettings] = None


def get_settings() -> RRuleSettings:
    """Get the global settings instance, creating it lazily if needed.

    Returns:
        RRuleSettings: The global settings instance
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = RRuleSettings()
    return cast(RRuleSettings, globals()["_settings_instance"])


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
