"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

SERVICE_NAME = "NetSuite External URL Proxy"
VERSION = "1.0.0"

CONFIG_DIR = Path.home() / ".config" / "netsuite-url-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ProxySettings(BaseModel):
    host: str = "localhost"
    port: int = Field(default=3000, ge=0, le=65535)
    debug: bool = False


class LimitsSettings(BaseModel):
    max_body_bytes: int = Field(default=50 * 1024 * 1024, gt=0)  # 50MB
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file (if any), then apply HOST/PORT from the environment."""
    config = Config()
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text())
            config = Config.model_validate(data)
        except (json.JSONDecodeError, ValidationError):
            # Backup corrupted config and fall back to defaults
            backup = config_file.with_suffix(".json.bak")
            config_file.rename(backup)

    return apply_env_overrides(config, os.environ)


def apply_env_overrides(config: Config, environ: Mapping[str, str]) -> Config:
    """Return a copy of ``config`` with HOST and PORT taken from ``environ``."""
    updates: dict[str, object] = {}
    if environ.get("HOST"):
        updates["host"] = environ["HOST"]
    if environ.get("PORT"):
        try:
            updates["port"] = ProxySettings(port=environ["PORT"]).port
        except ValidationError as e:
            raise ConfigurationError(f"Invalid PORT {environ['PORT']!r}") from e

    if not updates:
        return config
    proxy = config.proxy.model_copy(update=updates)
    return config.model_copy(update={"proxy": proxy})
