# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler configuration."""

from stache.config.settings import (
    CONFIG_FILE_NAME,
    CompilerConfig,
    ConfigError,
    DuplicateAttributes,
    load_compiler_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "CompilerConfig",
    "ConfigError",
    "DuplicateAttributes",
    "load_compiler_config",
]
