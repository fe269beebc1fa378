"""
Configuration for the DaData client.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CLEAN_URL = "https://dadata.ru/api/v2"
DEFAULT_SUGGESTIONS_URL = "https://suggestions.dadata.ru/suggestions/api/4_1/rs"


@dataclass
class ClientConfig:
    """Connection and credential settings for DaDataClient."""

    token: str | None = None
    secret: str | None = None
    token_env: str | None = "DADATA_TOKEN"
    secret_env: str | None = "DADATA_SECRET"
    clean_url: str = DEFAULT_CLEAN_URL
    suggestions_url: str = DEFAULT_SUGGESTIONS_URL
    connect_timeout: float = 5.0
    read_timeout: float = 5.0

    def get_token(self) -> str | None:
        """Get API token from config or environment."""
        if self.token:
            return self.token
        if self.token_env:
            return os.environ.get(self.token_env)
        return None

    def get_secret(self) -> str | None:
        """Get API secret from config or environment."""
        if self.secret:
            return self.secret
        if self.secret_env:
            return os.environ.get(self.secret_env)
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "token" in data:
            config.token = data["token"]
        if "secret" in data:
            config.secret = data["secret"]
        if "token_env" in data:
            config.token_env = data["token_env"]
        if "secret_env" in data:
            config.secret_env = data["secret_env"]
        if "clean_url" in data:
            config.clean_url = data["clean_url"]
        if "suggestions_url" in data:
            config.suggestions_url = data["suggestions_url"]
        if "connect_timeout" in data:
            config.connect_timeout = float(data["connect_timeout"])
        if "read_timeout" in data:
            config.read_timeout = float(data["read_timeout"])

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "ClientConfig":
        """Load config from the `dadata:` section of a YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("dadata", {}) or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary. Credentials are never included."""
        return {
            "token_env": self.token_env,
            "secret_env": self.secret_env,
            "clean_url": self.clean_url,
            "suggestions_url": self.suggestions_url,
            "connect_timeout": self.connect_timeout,
            "read_timeout": self.read_timeout,
        }
