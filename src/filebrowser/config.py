"""Configuration management for filebrowser."""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    Path("filebrowser.yaml"),
    Path("filebrowser.yml"),
    Path.home() / ".config" / "filebrowser" / "config.yaml",
    Path.home() / ".config" / "filebrowser" / "config.yml",
]

# Explicit config file requested by the CLI (--config)
_config_file: Path | None = None


def _load_yaml_config(config_file: Path | None = None) -> dict[str, Any]:
    """Load YAML config file if it exists.

    Args:
        config_file: Explicit file to load instead of the default locations

    Raises:
        FileNotFoundError: If an explicit config file does not exist
    """
    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        candidates = [config_file]
    else:
        candidates = DEFAULT_CONFIG_PATHS

    for path in candidates:
        if path.exists():
            logger.debug(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


class Settings(BaseSettings):
    """Application settings loaded from YAML + environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FILEBROWSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    root_dir: Path = Path("files")

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3000
    request_timeout: int = 30
    max_upload_size: int = 100 * 1024 * 1024
    cors_origins: list[str] = Field(default=["*"])

    # Rate limiting (fixed window per client address)
    rate_limit_window: float = 60.0
    rate_limit_max_requests: int = 100

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path | None = Path("logs") / "app.log"

    @model_validator(mode="before")
    @classmethod
    def load_yaml_config(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load YAML config and merge with env vars.

        Priority: Environment Variables > YAML Config > Defaults
        """
        yaml_config = _load_yaml_config(_config_file)

        for key, val in yaml_config.items():
            if val is not None and key not in values:
                values[key] = val

        return values

    @model_validator(mode="after")
    def expand_paths(self) -> "Settings":
        """Expand ~ in paths to the user's home directory."""
        self.root_dir = Path(self.root_dir).expanduser().resolve()
        if self.log_file is not None:
            self.log_file = Path(self.log_file).expanduser().resolve()
        return self


def get_settings(config_file: str | Path | None = None) -> Settings:
    """Build settings, optionally from an explicit YAML config file.

    Raises:
        FileNotFoundError: If config_file is given but does not exist
    """
    global _config_file
    _config_file = Path(config_file).expanduser() if config_file else None
    return Settings()
