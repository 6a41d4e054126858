"""Configuration loader."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel

DEFAULT_CONFIG_NAME = "runreport.yaml"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def project_dir(self) -> Path:
        """Get the task runner project directory, relative to the config file."""
        path = Path(self.config.runner.project_dir).expanduser()
        if not path.is_absolute():
            path = self.config_path.parent / path
        return path.resolve()

    def get_webhook_url(self) -> Optional[str]:
        """Get the webhook URL, preferring the environment variable."""
        notify = self.config.notify
        if notify.webhook_url_env:
            url = os.environ.get(notify.webhook_url_env)
            if url:
                return url
        return notify.webhook_url

    def get_container_url(self) -> Optional[str]:
        """Get the blob container URL, preferring the environment variable."""
        storage = self.config.storage
        if storage.container_url_env:
            url = os.environ.get(storage.container_url_env)
            if url:
                return url
        return storage.container_url


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
