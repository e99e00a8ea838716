"""Configuration settings for deepmail using pydantic-settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_core import ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from deepmail.defaults import (
    DEFAULT_GENERATION_TIMEOUT,
    DEFAULT_REPLY_MAX_TOKENS,
    DEFAULT_REPLY_MODEL,
)
from deepmail.exceptions import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads configuration from a YAML file.

    Looks for config file in the following order:
    1. DEEPMAIL_CONFIG_FILE environment variable
    2. ./deepmail.yaml (current directory)
    3. $XDG_CONFIG_HOME/deepmail/config.yaml (defaults to ~/.config)
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML config."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load and cache YAML config file."""
        if not hasattr(self, "_yaml_data"):
            self._yaml_data = self._read_yaml_file()
        return self._yaml_data

    def _read_yaml_file(self) -> dict[str, Any]:
        """Read YAML config from file with readable error messages."""
        xdg_config = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        config_paths = [
            os.environ.get("DEEPMAIL_CONFIG_FILE"),
            Path.cwd() / "deepmail.yaml",
            Path(xdg_config) / "deepmail" / "config.yaml",
        ]

        for path in config_paths:
            if not path:
                continue
            path_obj = Path(path)
            if not path_obj.exists():
                continue
            try:
                with open(path_obj) as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                raise ConfigError(
                    f"Invalid YAML syntax: {getattr(e, 'problem', None) or e}",
                    file_path=str(path_obj),
                    line=mark.line + 1 if mark else None,
                    col=mark.column + 1 if mark else None,
                ) from e
            except PermissionError as e:
                raise ConfigError(
                    "Cannot read config file, permission denied",
                    file_path=str(path_obj),
                ) from e
            except OSError as e:
                raise ConfigError(
                    f"Cannot read config file: {e}",
                    file_path=str(path_obj),
                ) from e

            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError(
                    "Top level of the config file must be a mapping",
                    file_path=str(path_obj),
                )
            return data

        return {}


def _parse_validation_error(error: ValidationError) -> str:
    """Convert a pydantic ValidationError to a readable message."""
    errors = error.errors()
    if not errors:
        return "Unknown validation error"

    err = errors[0]
    loc = err.get("loc", ())
    msg = err.get("msg", "")
    field_name = ".".join(str(part) for part in loc)

    if err.get("type") == "missing" and loc:
        return f"Missing required field '{field_name}'"
    if field_name:
        return f"Invalid value for '{field_name}': {msg}"
    return str(error)


class AutoreplySettings(BaseModel):
    """Settings for reply generation.

    Attributes:
        model: Anthropic model ID used to write replies.
        max_tokens: Upper bound on generated tokens.
        timeout: Seconds to wait for a reply before giving up.
    """

    model: str = Field(default=DEFAULT_REPLY_MODEL, min_length=1)
    max_tokens: int = Field(default=DEFAULT_REPLY_MAX_TOKENS, gt=0)
    timeout: float = Field(default=DEFAULT_GENERATION_TIMEOUT, gt=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with DEEPMAIL_ prefix.

    Example YAML configuration:
        autoreply:
          model: "claude-sonnet-4-5-20250929"
          max_tokens: 1024
          timeout: 60
        log_level: "DEBUG"

    Nested values can be overridden from the environment with a double
    underscore, e.g. DEEPMAIL_AUTOREPLY__TIMEOUT=30.
    """

    model_config = SettingsConfigDict(env_prefix="DEEPMAIL_", env_nested_delimiter="__")

    autoreply: AutoreplySettings = Field(default_factory=AutoreplySettings)

    # Empty means the Anthropic SDK falls back to ANTHROPIC_API_KEY
    anthropic_api_key: SecretStr = SecretStr("")

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


def get_settings_eager() -> Settings:
    """Load settings, failing fast with a readable message when invalid.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(_parse_validation_error(e)) from e
