# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration for xidl."""

from xidl.workspace.config import CONFIG_FILE_NAME, ConfigError, ProjectConfig, find_sources, load_config

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ProjectConfig",
    "find_sources",
    "load_config",
]
