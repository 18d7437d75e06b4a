from .loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    load_config,
    load_config_from_env,
    load_config_with_overrides,
)
from .schema import GSARunConfig, ServerConfig, ServiceConfig

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "load_config_from_env",
    "load_config_with_overrides",
    "ServiceConfig",
    "GSARunConfig",
    "ServerConfig",
]
