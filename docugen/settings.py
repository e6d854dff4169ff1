"""Configuration for the web API endpoint and logging.

Values come from a TOML or YAML file (``./docugen.toml`` unless another path
is given) and may be overridden by ``DOCUGEN_``-prefixed environment
variables, e.g. ``DOCUGEN_WEB_API__PORT=8080``.
"""

from __future__ import annotations

import logging
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("docugen.toml")


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    OFF = "off"


_PYTHON_LEVELS = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.OFF: logging.CRITICAL + 10,
}


class WebApiSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    host: str = Field(
        default="127.0.0.1",
        validation_alias=AliasChoices("host", "ip_address"),
        description="Web API host name or IP address",
    )
    port: int = Field(default=5001, ge=1, le=65535)
    use_https: bool = True
    verify_tls: bool = Field(
        default=True, description="Verify the server certificate over HTTPS"
    )
    timeout_seconds: float = Field(default=30.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1, description="Total attempts per fetch")
    retry_wait_seconds: float = Field(
        default=1.0, ge=0, description="Base delay of the exponential backoff"
    )

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_https else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{scheme}://{host}:{self.port}"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_level: LogLevel = LogLevel.INFO

    @property
    def python_level(self) -> int:
        return _PYTHON_LEVELS[self.log_level]


class DocugenSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCUGEN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="forbid",
    )

    web_api: WebApiSettings = Field(default_factory=WebApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; environment wins over them.
        return (env_settings, init_settings)


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a TOML or YAML configuration file into a dict.

    Raises:
        ConfigError: If the file cannot be read or decoded
    """
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        if suffix == ".toml":
            data = tomllib.loads(raw)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw) or {}
        else:
            raise ConfigError(
                f"Unsupported config file type '{suffix}' (use .toml, .yaml or .yml)"
            )
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Config file {path} is ill-formed: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_settings(config_path: Path | None = None) -> DocugenSettings:
    """Build settings from a config file plus environment overrides.

    Args:
        config_path: Explicit config file; must exist. When omitted,
            ``./docugen.toml`` is read if present.

    Returns:
        Validated settings

    Raises:
        ConfigError: If the file is missing, ill-formed or invalid
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        data = read_config_file(config_path)
        logger.debug(f"Read configuration from {config_path}")
    elif DEFAULT_CONFIG_PATH.exists():
        data = read_config_file(DEFAULT_CONFIG_PATH)
        logger.debug(f"Read configuration from {DEFAULT_CONFIG_PATH}")
    else:
        logger.debug("No config file found; using defaults")

    try:
        return DocugenSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
