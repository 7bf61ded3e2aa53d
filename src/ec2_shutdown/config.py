"""Configuration management for EC2 Shutdown Manager.

Provides loading and validation of the instance list and AWS connection
settings from a JSON or YAML file, backfilled from environment variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .models import is_instance_id

CONFIG_ENV_VAR = "EC2_SHUTDOWN_CONFIG"
DEFAULT_CONFIG_NAMES = ("config.json", "config.yml", "config.yaml")

# Environment variables consulted when a field is not set in the file
ENV_FIELDS = {
    "aws_region": ("AWS_REGION", "AWS_DEFAULT_REGION"),
    "aws_access_key_id": ("AWS_ACCESS_KEY_ID",),
    "aws_secret_access_key": ("AWS_SECRET_ACCESS_KEY",),
    "connect_timeout": ("EC2_SHUTDOWN_CONNECT_TIMEOUT",),
    "read_timeout": ("EC2_SHUTDOWN_READ_TIMEOUT",),
    "log_level": ("EC2_SHUTDOWN_LOG_LEVEL",),
}


class ShutdownConfig(BaseModel):
    """Main configuration class for EC2 Shutdown Manager."""

    # Instances stopped or checked when none are given on the command line
    instances: list[str] = Field(default_factory=list, description="EC2 instance ids")

    # AWS connection
    aws_region: str | None = Field(None, description="AWS region")
    aws_access_key_id: str | None = Field(None, description="AWS access key id")
    aws_secret_access_key: str | None = Field(None, description="AWS secret access key")
    connect_timeout: float = Field(10.0, gt=0, description="Connect timeout in seconds")
    read_timeout: float = Field(30.0, gt=0, description="Read timeout in seconds")

    # Behaviour
    strict_arguments: bool = Field(False, description="Reject unusable command-line tokens")
    log_level: str = Field("WARNING", description="Logging level")

    source_path: Path | None = Field(None, exclude=True, description="File the config was read from")

    @field_validator("instances")
    @classmethod
    def validate_instances(cls, v: list[str]) -> list[str]:
        """Validate instance id shape."""
        invalid = [instance_id for instance_id in v if not is_instance_id(instance_id)]
        if invalid:
            raise ValueError(f"Invalid instance ids: {invalid}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of: {allowed_levels}")
        return v.upper()

    @classmethod
    def from_env(cls) -> "ShutdownConfig":
        """Load configuration from environment variables."""
        try:
            return cls(**_env_values())
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in environment: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "ShutdownConfig":
        """Load configuration from a JSON or YAML file.

        Args:
            path: Path to the configuration file

        Returns:
            ShutdownConfig instance loaded from the file

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        data = _read_file(config_path)

        for key, value in _env_values().items():
            data.setdefault(key, value)
        data["source_path"] = config_path

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


def _env_values() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field, names in ENV_FIELDS.items():
        for name in names:
            value = os.environ.get(name)
            if value:
                values[field] = value
                break
    return values


def _read_file(config_path: Path) -> dict[str, Any]:
    suffix = config_path.suffix.lower()
    try:
        with open(config_path, encoding="utf-8") as f:
            if suffix in (".yml", ".yaml"):
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported configuration format: {config_path.name}",
                    config_key="path",
                )
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
    return data


def find_config_file(directory: Path | None = None) -> Path | None:
    """Locate the configuration file.

    ``EC2_SHUTDOWN_CONFIG`` wins when set; otherwise the first of
    ``config.json``, ``config.yml`` and ``config.yaml`` in ``directory``
    (the working directory by default).
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    base = directory or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Path | None = None) -> ShutdownConfig:
    """Load configuration.

    Args:
        config_path: Optional explicit config file path

    Returns:
        Loaded configuration object; built from the environment alone when
        no path is given and no default file exists

    Raises:
        ConfigurationError: If the file is missing or its content is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return ShutdownConfig.from_env()

    return ShutdownConfig.from_file(config_path)
