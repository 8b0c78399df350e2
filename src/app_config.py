"""Load `config.toml` into typed settings and expose it as a config source."""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Optional

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    IdlePauseSettings,
    RuntimeSettings,
    SoundSettings,
    TimerSettings,
    UIServerSettings,
)
from pomodoro import SessionConfig

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AppConfig",
    "AppConfigurationError",
    "IdlePauseSettings",
    "RuntimeSettings",
    "SoundSettings",
    "TimerSettings",
    "TomlConfigSource",
    "UIServerSettings",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Frozen builds ship config.toml next to the executable.
    if config_path is None and env_path is None and getattr(sys, "frozen", False):
        bundled_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if bundled_path.exists():
            return bundled_path

    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists():
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


class TomlConfigSource:
    """Config source that re-reads the session settings from a TOML file."""

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("config")

    @property
    def path(self) -> Path:
        return self._path

    def modified_at(self) -> Optional[float]:
        try:
            return self._path.stat().st_mtime
        except OSError:
            return None

    def read_app_config(self) -> AppConfig:
        return load_app_config(str(self._path))

    def read(self) -> SessionConfig:
        app_config = self.read_app_config()
        self._logger.debug("Read session settings from %s", self._path)
        return app_config.session_config()
