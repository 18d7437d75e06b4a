"""Configuration loading with YAML parsing and validation."""

import os
from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import ServiceConfig

# Worker processes spawned by uvicorn re-read the config from this variable
CONFIG_ENV_VAR = "GSA_API_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/default.yaml")


def load_config(config_path: Path | str) -> ServiceConfig:
    """
    Load and validate service configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ServiceConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    return pydantic_yaml.parse_yaml_raw_as(ServiceConfig, yaml_content)


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> ServiceConfig:
    """
    Load config from YAML and apply dictionary overrides.

    Useful for CLI flags that override config file values.

    Args:
        config_path: Path to YAML configuration file
        overrides: Values to override; dotted keys address nested
            sections (e.g. "server.port"). None values are ignored.

    Returns:
        Validated ServiceConfig with overrides applied

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    config = load_config(config_path)
    config_dict = config.model_dump()

    for key, value in overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            target = config_dict
            for part in parts[:-1]:
                target = target[part]
            target[parts[-1]] = value
        else:
            config_dict[key] = value

    return ServiceConfig.model_validate(config_dict)


def load_config_from_env() -> ServiceConfig:
    """Load the config named by GSA_API_CONFIG, falling back to config/default.yaml."""
    return load_config(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
