# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic records for lexical and syntactic errors."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class Severity(enum.Enum):
    """Severity of a diagnostic. The front end only reports errors."""

    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found in IDL source text.

    Attributes:
        line: 1-based line number of the offending token or character.
        column: 1-based column number of the offending token or character.
        message: Human-readable description naming what was expected and found.
        severity: Always ``Severity.ERROR`` for the lexer and parser.
    """

    line: int
    column: int
    message: str
    severity: Severity = Severity.ERROR

    def __str__(self) -> str:
        return f"Line {self.line}, column {self.column}: {self.message}"


class DiagnosticCollector:
    """Append-only list of diagnostics for one parse invocation.

    Records are kept in the order they were reported. Identical messages at
    different positions are all kept.
    """

    def __init__(self) -> None:
        self._records: list[Diagnostic] = []

    def record(self, line: int, column: int, message: str) -> Diagnostic:
        """Append an error diagnostic and return it."""
        diagnostic = Diagnostic(line=line, column=column, message=message)
        self._records.append(diagnostic)
        return diagnostic

    def count(self) -> int:
        """Return the number of diagnostics recorded so far."""
        return len(self._records)

    def all(self) -> tuple[Diagnostic, ...]:
        """Return every recorded diagnostic in recording order."""
        return tuple(self._records)

    @property
    def has_errors(self) -> bool:
        return len(self._records) > 0

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._records))
