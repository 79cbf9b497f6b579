# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler settings and their YAML loader."""

from __future__ import annotations

import enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stache.errors import StacheError

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".stache.yaml"


class ConfigError(StacheError):
    """Raised when the settings file cannot be read or is invalid."""


class DuplicateAttributes(enum.Enum):
    """Policy for an attribute key supplied more than once."""

    ERROR = "error"
    LAST_WINS = "last-wins"


class CompilerConfig(BaseModel):
    """Settings for :class:`~stache.compiler.cache.ReferenceCompiler`.

    Attributes:
        duplicate_attributes: Policy for a repeated attribute key.
        cache_plans: Whether compiled plans are reused.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    duplicate_attributes: DuplicateAttributes = Field(alias="duplicate-attributes", default=DuplicateAttributes.ERROR)
    cache_plans: bool = Field(alias="cache-plans", default=True)


def load_compiler_config(path: Path) -> CompilerConfig:
    """Load and validate compiler settings from a YAML file.

    An empty file yields the defaults.

    Args:
        path: Path to the ``.stache.yaml`` file.

    Returns:
        A validated CompilerConfig.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML, or
            does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config must be a YAML mapping")

    try:
        return CompilerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc
