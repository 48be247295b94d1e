"""Typed configuration schema and loader for the payslips package."""

from __future__ import annotations

import codecs
import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, conint, field_validator

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class InputSettings(BaseModel):
    """How input exports are decoded."""

    encoding: str
    errors: Literal["strict", "replace", "ignore"]

    model_config = ConfigDict(extra="forbid")

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {value!r}") from exc
        return value


class OutputSettings(BaseModel):
    """Where generated PDFs are written."""

    suffix: str
    directory: Path | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("suffix")
    @classmethod
    def _non_empty_suffix(cls, value: str) -> str:
        if not value:
            raise ValueError("output suffix must not be empty")
        return value


class BackgroundSettings(BaseModel):
    """Background image override."""

    path: Path | None = None
    path_env: str

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(BaseModel):
    """Logging verbosity."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    input: InputSettings
    output: OutputSettings
    background: BackgroundSettings
    logging: LoggingSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    environment variable holding the background image path.
    """

    with (
        importlib_resources.files("payslips.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    cfg = ConfigModel.model_validate(merged)

    environ = env if env is not None else os.environ
    path_env = cfg.background.path_env
    if environ.get(path_env):
        cfg.background.path = Path(environ[path_env])

    return cfg


__all__ = [
    "ConfigModel",
    "InputSettings",
    "OutputSettings",
    "BackgroundSettings",
    "LoggingSettings",
    "deep_merge_dicts",
    "load_config",
]
