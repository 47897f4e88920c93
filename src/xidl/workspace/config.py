# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the ``.xidl.yaml`` project configuration file."""

from __future__ import annotations

import fnmatch
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".xidl.yaml"


class ConfigError(Exception):
    """Raised when a project configuration file is invalid or cannot be loaded."""


class ProjectConfig(BaseModel):
    """The parsed configuration for an IDL project.

    Attributes:
        sources: Glob patterns, relative to the project root, selecting IDL files.
        exclude: Glob patterns for files to skip. ``*`` also matches ``/``.
        build_directory: Relative path (from the project root) for artifacts.
        max_diagnostics: Cap on diagnostics printed per file; 0 prints all.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    sources: list[str] = Field(default_factory=lambda: ["**/*.idl"])
    exclude: list[str] = Field(default_factory=list)
    build_directory: str = Field(alias="build-directory", default=".xidl-build")
    max_diagnostics: int = Field(alias="max-diagnostics", default=0, ge=0)


def load_config(path: Path) -> ProjectConfig:
    """Load and validate a project configuration file.

    A missing or empty file yields the default configuration.

    Args:
        path: Path to the ``.xidl.yaml`` file.

    Returns:
        A validated ProjectConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    if not path.exists():
        return ProjectConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: project config must be a YAML mapping")

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc


def find_sources(config: ProjectConfig, root: Path) -> list[Path]:
    """Return the sorted IDL files under *root* selected by *config*.

    Files inside the build directory are never returned.
    """
    build_dir = (root / config.build_directory).resolve()
    found: set[Path] = set()
    for pattern in config.sources:
        for candidate in root.glob(pattern):
            if not candidate.is_file():
                continue
            resolved = candidate.resolve()
            if build_dir == resolved.parent or build_dir in resolved.parents:
                continue
            rel = candidate.relative_to(root).as_posix()
            if any(fnmatch.fnmatch(rel, excluded) for excluded in config.exclude):
                continue
            found.add(candidate)
    return sorted(found)
