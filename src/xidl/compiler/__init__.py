# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Outer layer around the parser: file reading, artifact cache, and JSON artifacts."""

from xidl.compiler.artifact import ARTIFACT_SUFFIX, deserialize, read_artifact, serialize, write_artifact
from xidl.compiler.build import CompilerError, artifact_path, build_files, parse_file, parse_files

__all__ = [
    "serialize",
    "deserialize",
    "write_artifact",
    "read_artifact",
    "ARTIFACT_SUFFIX",
    "artifact_path",
    "build_files",
    "parse_file",
    "parse_files",
    "CompilerError",
]
