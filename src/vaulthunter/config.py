"""Configuration loading for vaulthunter.

Settings come from a TOML file (flat keys); ``VAULTHUNTER_*`` environment
variables fill in whatever the file leaves unset. File locations are
resolved once at startup into an ``AppPaths`` value and passed around
explicitly.
"""

from __future__ import annotations

import getpass
import os
import platform
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "vaulthunter"
CONFIG_FILENAME = "config.toml"
RUNTIME_INFO_FILENAME = "runtime-info.json"


class ConfigError(Exception):
    """Configuration file is invalid."""

    pass


class ConfigNotFoundError(ConfigError):
    """Configuration file not found."""

    pass


@dataclass(frozen=True)
class AppPaths:
    """Where vaulthunter keeps its files."""

    config_file: Path
    runtime_info: Path

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppPaths:
        """Resolve paths following the XDG base directory layout."""
        environ = os.environ if environ is None else environ
        home = Path(environ.get("HOME") or Path.home())
        config_home = Path(environ.get("XDG_CONFIG_HOME") or home / ".config")
        cache_home = Path(environ.get("XDG_CACHE_HOME") or home / ".cache")
        return cls(
            config_file=config_home / APP_NAME / CONFIG_FILENAME,
            runtime_info=cache_home / APP_NAME / RUNTIME_INFO_FILENAME,
        )


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return ""


class HunterSettings(BaseSettings):
    """User settings."""

    model_config = SettingsConfigDict(env_prefix="VAULTHUNTER_", extra="ignore")

    # End point of the vault HTTP API
    end_point: str = "https://localhost/"
    username: str = Field(default_factory=_login_name)
    # Extra CA certificate files for HTTPS
    ca_certs: list[str] = Field(default_factory=list)
    # Program copying stdin to the clipboard; the password is piped to it
    clipboard_prog: str | None = None
    mount: str = "passwords"
    token_max_ttl: int = 3600 * 24
    timeout: float = 30.0
    max_workers: int = Field(default=1, ge=1)
    # Encrypted local copy of every entry, refreshed by `find`
    local_xml: Path | None = None
    gpg_recipient: str | None = None
    export_interval_hours: float = 24.0

    @field_validator("end_point")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"

    def effective_clipboard_prog(self) -> str | None:
        """Clipboard program to use, falling back to the platform default."""
        if self.clipboard_prog:
            return self.clipboard_prog
        return {"Linux": "xclip", "Darwin": "pbcopy"}.get(platform.system())


def find_config(paths: AppPaths) -> Path | None:
    """Return the config file if it exists."""
    return paths.config_file if paths.config_file.is_file() else None


def load_config(path: Path) -> dict[str, Any]:
    """Read a TOML config file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_settings(config_file: Path | None, paths: AppPaths) -> HunterSettings:
    """Build settings from an explicit file, the default file, or defaults.

    Raises:
        ConfigError: If the file is missing (when given explicitly),
            not valid TOML, or holds invalid values
    """
    path = config_file or find_config(paths)
    if path is None:
        data: dict[str, Any] = {}
    else:
        try:
            data = load_config(path)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"TOML syntax error in {path}: {e}") from e

    try:
        return HunterSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path or 'defaults'}: {e}") from e
