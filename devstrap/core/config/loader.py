"""
Configuration loader — optional devstrap.yml overrides.

Without a file the bootstrap is fully interactive.  A file lets a
machine be provisioned unattended by answering the git identity
prompts up front, and can add packages on top of the OS list:

    git:
      name: Ada Lovelace
      email: ada@example.com
    extra_packages:
      - jq
      - tmux
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Environment variable naming a config file when --config is absent
CONFIG_ENV_VAR = "DEVSTRAP_CONFIG"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing."""


class GitIdentity(BaseModel):
    name: str = ""
    email: str = ""


class Settings(BaseModel):
    """Validated contents of devstrap.yml."""

    git: GitIdentity = Field(default_factory=GitIdentity)
    extra_packages: list[str] = Field(default_factory=list)


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate the configuration file.

    Args:
        path: Path to devstrap.yml.  None → defaults.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info(
        "Loaded settings: git identity %s, %d extra packages",
        "set" if settings.git.name or settings.git.email else "unset",
        len(settings.extra_packages),
    )
    return settings
