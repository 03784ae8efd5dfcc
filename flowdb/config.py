"""Configuration - store options, logging level, YAML loading with env var expansion."""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_RE = re.compile(r"\$\{([^}]+)\}")

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _expand_env(value: str) -> str:
    """Replace ${VAR} patterns with environment variable values."""
    def _replace(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, "")
    return _ENV_RE.sub(_replace, value)


def _walk_expand(obj: Any) -> Any:
    """Recursively expand env vars in strings throughout a dict/list."""
    if isinstance(obj, str):
        return _expand_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_expand(i) for i in obj]
    return obj


def _empty_str_to_none(v: Any) -> Optional[str]:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def program_dir() -> Path:
    """Directory of the running program, or the cwd when there is none (REPL)."""
    main_file = getattr(sys.modules.get("__main__"), "__file__", None)
    if main_file:
        return Path(main_file).resolve().parent
    return Path.cwd()


# --- Pydantic models ---


class StoreConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_path: str = Field(default="database.json", alias="filePath")
    base_dir: Optional[str] = None

    @field_validator("file_path")
    @classmethod
    def _check_file_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("file_path must not be empty")
        return v

    @field_validator("base_dir", mode="before")
    @classmethod
    def _empty_to_none(cls, v: Any) -> Optional[str]:
        return _empty_str_to_none(v)

    def resolve_path(self) -> Path:
        """Absolute location of the backing file."""
        base = Path(self.base_dir).expanduser() if self.base_dir else program_dir()
        return (base / Path(self.file_path).expanduser()).resolve()


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _check_level(cls, v: str) -> str:
        v = v.upper()
        if v not in _VALID_LOG_LEVELS:
            raise ValueError(f"logging level must be one of {_VALID_LOG_LEVELS}")
        return v


class AppConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def coerce_store_config(config: StoreConfig | dict | None) -> StoreConfig:
    """Accept a StoreConfig, a plain dict of options, or None for defaults."""
    if config is None:
        return StoreConfig()
    if isinstance(config, StoreConfig):
        return config
    return StoreConfig.model_validate(config)


def load_config(path: str = "flowdb.yaml") -> AppConfig:
    """Load and validate config from YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    expanded = _walk_expand(raw or {})
    return AppConfig.model_validate(expanded)


def configure_logging(config: LoggingConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
