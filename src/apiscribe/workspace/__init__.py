# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration for apiscribe."""

from apiscribe.workspace.config import (
    CONFIG_FILE_NAMES,
    OUTPUT_FORMATS,
    ApiscribeConfig,
    ConfigError,
    find_config,
    load_config,
    load_project_config,
    parse_config,
)

__all__ = [
    "ApiscribeConfig",
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "OUTPUT_FORMATS",
    "find_config",
    "load_config",
    "load_project_config",
    "parse_config",
]
