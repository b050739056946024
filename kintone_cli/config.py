"""
Configuration management for kintone CLI.

Settings are stored as JSON in the configuration directory and can be
overridden with environment variables:

    KINTONE_BASE_URL     - Base URL of the kintone domain
    KINTONE_API_TOKEN    - API token (comma-separated for several apps)
    KINTONE_USERNAME     - Login name for password authentication
    KINTONE_PASSWORD     - Password for password authentication
    KINTONE_CONFIG_DIR   - Custom configuration directory
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional, Dict, Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "KINTONE_"
DEFAULT_CONFIG_DIR = Path.home() / ".kintone"
CONFIG_FILE_NAME = "config.json"
DEFAULT_TIMEOUT = 60
DEFAULT_MAX_RETRIES = 3


@dataclass
class KintoneConfig:
    """Settings used to build an API client."""

    base_url: str = ""
    api_token: str = ""
    username: str = ""
    password: str = ""
    guest_space_id: Optional[int] = None
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    max_retries: int = DEFAULT_MAX_RETRIES

    def is_configured(self) -> bool:
        """Check whether a host and some form of credentials are set."""
        return bool(self.base_url) and (
            bool(self.api_token) or bool(self.username and self.password)
        )

    def get_partial_auth(self) -> Dict[str, str]:
        """Build the partial credentials accepted by the API client."""
        if self.username:
            return {"username": self.username, "password": self.password}
        if self.api_token:
            return {"apiToken": self.api_token}
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KintoneConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ConfigManager:
    """Loads, saves and overlays the CLI configuration."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Configuration directory. Defaults to KINTONE_CONFIG_DIR
                or ~/.kintone.
        """
        env_dir = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
        self.config_dir = Path(config_dir or env_dir or DEFAULT_CONFIG_DIR)
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self._config: Optional[KintoneConfig] = None

    def load(self) -> KintoneConfig:
        """Load configuration from file, then apply environment overrides."""
        config = KintoneConfig()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = KintoneConfig.from_dict(json.load(f))
            except (OSError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot read configuration file {self.config_file}: {e}"
                )

        self._apply_env(config)
        self._config = config
        return config

    def _apply_env(self, config: KintoneConfig) -> None:
        overrides = {
            "base_url": os.environ.get(f"{ENV_PREFIX}BASE_URL"),
            "api_token": os.environ.get(f"{ENV_PREFIX}API_TOKEN"),
            "username": os.environ.get(f"{ENV_PREFIX}USERNAME"),
            "password": os.environ.get(f"{ENV_PREFIX}PASSWORD"),
        }
        for key, value in overrides.items():
            if value:
                logger.debug(f"Using {ENV_PREFIX}{key.upper()} from environment")
                setattr(config, key, value)

    def get(self) -> KintoneConfig:
        """Get the current configuration, loading it on first use."""
        if self._config is None:
            return self.load()
        return self._config

    def save(self, config: KintoneConfig) -> None:
        """Persist configuration to disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
        try:
            os.chmod(self.config_file, 0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.config_file)
        self._config = config

    def update(self, **kwargs: Any) -> KintoneConfig:
        """
        Update selected settings and save.

        Setting an API token alone drops stored username/password, and
        setting a username alone drops a stored API token, so the new
        credentials are the ones used.
        """
        config = self.get()
        if kwargs.get("api_token") and "username" not in kwargs and "password" not in kwargs:
            kwargs.update(username="", password="")
        elif kwargs.get("username") and "api_token" not in kwargs:
            kwargs["api_token"] = ""
        for key, value in kwargs.items():
            if not hasattr(config, key):
                raise ConfigurationError(f"Unknown configuration key: {key}")
            setattr(config, key, value)
        self.save(config)
        return config

    def clear(self) -> None:
        """Remove the stored configuration file."""
        if self.config_file.exists():
            self.config_file.unlink()
        self._config = None


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get the shared configuration manager."""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config() -> KintoneConfig:
    """Get the current configuration."""
    return get_config_manager().get()
