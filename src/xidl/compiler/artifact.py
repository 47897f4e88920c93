# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of parse tree artifacts.

Artifacts are stored as compact JSON files for portability and human-readability.
The format is versioned so future schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from xidl.model.declarations import IdlFile

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".xidl.json"


def serialize(tree: IdlFile) -> str:
    """Serialize a parse tree to a compact JSON string."""
    data = {"v": ARTIFACT_FORMAT_VERSION, **tree.model_dump(mode="json")}
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def deserialize(data: str) -> IdlFile:
    """Deserialize a parse tree from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`IdlFile`.

    Raises:
        ValueError: If the data is not a JSON object, the artifact format
            version is not recognised, or the tree does not match the schema.
    """
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError("Artifact must be a JSON object")
    version = obj.pop("v", None)
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    try:
        return IdlFile.model_validate(obj)
    except ValidationError as exc:
        raise ValueError(f"Invalid artifact: {exc}") from exc


def write_artifact(tree: IdlFile, path: Path) -> None:
    """Write an artifact to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(tree), encoding="utf-8")


def read_artifact(path: Path) -> IdlFile:
    """Read and deserialize an artifact from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))
