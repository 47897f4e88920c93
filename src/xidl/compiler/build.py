# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Multi-file driver: reads IDL files from disk and parses them.

The lexer and parser never touch the filesystem; this module owns file
reading and the artifact cache.

:func:`build_files` implements a CMake-style cache: an artifact is reused when
it already exists and is strictly newer than the corresponding source file.
Artifacts are only written for sources that parsed without diagnostics.
"""

from __future__ import annotations

from pathlib import Path

from xidl.compiler.artifact import ARTIFACT_SUFFIX, read_artifact, write_artifact
from xidl.parser.parser import ParseResult, parse

# ###############
# Public Interface
# ###############


class CompilerError(Exception):
    """Raised when a source file cannot be read or lies outside the project root,
    or when an artifact cannot be written.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


def parse_file(path: Path) -> ParseResult:
    """Read *path* as UTF-8 and parse it.

    Raises:
        CompilerError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        source_text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CompilerError(f"Source file '{path}' is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise CompilerError(f"Cannot read source file '{path}': {exc}") from exc
    return parse(source_text)


def parse_files(files: list[Path]) -> dict[Path, ParseResult]:
    """Parse each file independently, preserving the order of *files*."""
    return {f: parse_file(f) for f in files}


def build_files(files: list[Path], root: Path, build_dir: Path) -> dict[Path, ParseResult]:
    """Parse *files* and write an artifact for every error-free result.

    The artifact for ``root/a/b.idl`` is ``build_dir/a/b.xidl.json``. An
    up-to-date artifact is read back instead of reparsing the source; such a
    result has no diagnostics, since only clean parses are ever written.

    Args:
        files: Source files, all located under *root*.
        root: Project root used to mirror source paths into *build_dir*.
        build_dir: Root directory for artifacts.

    Returns:
        A mapping from each source path to its ParseResult.

    Raises:
        CompilerError: If a file cannot be read, is not under *root*, or its
            artifact cannot be written.
    """
    results: dict[Path, ParseResult] = {}
    for source_file in files:
        artifact = artifact_path(source_file, root, build_dir)
        if _is_up_to_date(source_file, artifact):
            try:
                results[source_file] = ParseResult(tree=read_artifact(artifact), diagnostics=())
                continue
            except ValueError:
                pass  # Stale or foreign artifact: fall through and rebuild it.
        result = parse_file(source_file)
        if result.error_count == 0:
            try:
                write_artifact(result.tree, artifact)
            except OSError as exc:
                raise CompilerError(f"Cannot write artifact '{artifact}': {exc}") from exc
        results[source_file] = result
    return results


def artifact_path(source_file: Path, root: Path, build_dir: Path) -> Path:
    """Return the artifact path for *source_file* under *build_dir*.

    Raises:
        CompilerError: If *source_file* is not located under *root*.
    """
    try:
        rel = source_file.resolve().relative_to(root.resolve())
    except ValueError:
        raise CompilerError(f"Source file '{source_file}' is not under the project root '{root}'") from None
    return build_dir / rel.parent / (rel.stem + ARTIFACT_SUFFIX)


# ################
# Implementation
# ################


def _is_up_to_date(source_file: Path, artifact: Path) -> bool:
    """Return True if *artifact* exists and is strictly newer than *source_file*."""
    if not artifact.exists():
        return False
    try:
        return artifact.stat().st_mtime > source_file.stat().st_mtime
    except OSError as exc:
        raise CompilerError(f"Cannot stat source file '{source_file}': {exc}") from exc
