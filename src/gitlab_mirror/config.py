"""
Configuration module for GitLab Mirror.

Settings come from three places, highest precedence first: command-line
flags, an optional JSON configuration file and the built-in defaults.
"""

import os
import json
from dataclasses import dataclass
from typing import Optional, Dict, Any

from .errors import ConfigError


DEFAULT_CONFIG = {
    "host": "gitlab.com",
    "destination": ".",
    "ssh_private_key": "~/.ssh/id_rsa",
    "personal_access_token": None,
    "access_level": 0,
    "clone": False,
    "use_ssh": False,
    "fail_on_clone_error": False,
}


@dataclass
class MirrorSettings:
    """Fully resolved settings for one mirror run."""

    host: str = DEFAULT_CONFIG["host"]
    destination: str = DEFAULT_CONFIG["destination"]
    ssh_private_key: str = DEFAULT_CONFIG["ssh_private_key"]
    personal_access_token: Optional[str] = None
    access_level: int = 0
    clone: bool = False
    use_ssh: bool = False
    fail_on_clone_error: bool = False

    @property
    def gitlab_url(self) -> str:
        """Base URL for the API client; ``https://`` is assumed for bare host names."""
        host = self.host.rstrip('/')
        if host.lower().startswith(('http://', 'https://')):
            return host
        return f"https://{host}"


class Config:
    """Configuration file manager for GitLab Mirror."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file (optional)

        Raises:
            ConfigError: If the file exists but is not a JSON object
        """
        self.config_file = config_file or self._get_default_config_path()
        self.config = self._load_config()

    def _get_default_config_path(self) -> str:
        """Get default configuration file path."""
        return os.path.join(os.path.expanduser("~"), ".gitlab_mirror_config.json")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file."""
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Cannot read configuration file {self.config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self.config_file} must contain a JSON object")
        unknown = sorted(set(data) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(f"Unknown configuration keys in {self.config_file}: {', '.join(unknown)}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.config[key] = value

    def validate_host(self, host: str) -> bool:
        """
        Validate a GitLab host name or URL.

        Args:
            host: ``gitlab.example.com`` or ``https://gitlab.example.com``

        Returns:
            True if valid, False otherwise
        """
        if not host or not host.strip():
            return False
        if '://' in host:
            return host.lower().startswith(('http://', 'https://'))
        return ' ' not in host.strip()

    def resolve(self, **overrides: Any) -> MirrorSettings:
        """
        Merge command-line values over file values over defaults.

        Args:
            **overrides: Values given on the command line; ``None`` means unset,
                and an ``access_level`` of 0 means no ``-A`` was given.
                ``False`` is an explicit value and overrides the file.

        Returns:
            Resolved MirrorSettings

        Raises:
            ConfigError: On an unknown key or an invalid host
        """
        unknown = sorted(set(overrides) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        values = {}
        for key, default in DEFAULT_CONFIG.items():
            value = overrides.get(key)
            if value is None or (key == 'access_level' and value == 0):
                value = self.get(key, default)
            values[key] = value

        settings = MirrorSettings(**values)
        if not self.validate_host(settings.host):
            raise ConfigError(f"Invalid GitLab host: {settings.host!r}")
        return settings
