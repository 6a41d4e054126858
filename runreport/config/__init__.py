"""Configuration management for pipeline runs."""

from .loader import DEFAULT_CONFIG_NAME, Config, load_config, save_config
from .models import ConfigModel, NotifyConfig, Recipient, RunDefaults, RunnerConfig, StorageConfig

__all__ = [
    "Config",
    "ConfigModel",
    "NotifyConfig",
    "Recipient",
    "RunDefaults",
    "RunnerConfig",
    "StorageConfig",
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "save_config",
]
