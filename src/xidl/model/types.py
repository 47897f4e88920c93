# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Building blocks shared by IDL declarations: spans, literals, types, and attributes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class Span(BaseModel):
    """Source region covered by a node.

    ``start`` and ``end`` are character offsets into the parsed text
    (``end`` is exclusive); ``line`` and ``column`` locate ``start``.
    """

    line: int
    column: int
    start: int
    end: int

    def contains(self, other: Span) -> bool:
        """Return True if *other* lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end


class LiteralKind(Enum):
    """Kinds of literal that may appear as attribute arguments or initializers."""

    UUID = "uuid"
    INTEGER = "integer"
    HEX = "hex"
    FLOAT = "float"
    STRING = "string"
    NAME = "name"


class ExpressionLiteral(BaseModel):
    """A literal value exactly as written in the source."""

    kind: LiteralKind
    text: str
    span: Span


class TypeRef(BaseModel):
    """Reference to a type by qualified name, e.g. ``Windows.Foundation.IReference<Int32>``.

    ``void`` is represented by the name ``"void"``.
    """

    name: str
    type_arguments: list[TypeRef] = _Field(default_factory=list)
    is_array: bool = False
    span: Span

    @property
    def is_void(self) -> bool:
        return self.name == "void"


class ParameterModifier(Enum):
    """Passing mode of a parameter."""

    REF = "ref"
    CONST_REF = "const ref"
    OUT = "out"


class Parameter(BaseModel):
    """A named, typed parameter of a delegate or method."""

    name: str
    type: TypeRef
    modifier: ParameterModifier | None = None
    span: Span


class AttributeApplication(BaseModel):
    """An attribute such as ``[uuid(...)]`` attached to the following declaration."""

    name: str
    arguments: list[ExpressionLiteral] = _Field(default_factory=list)
    span: Span


# Resolve forward references in self-referential models.
TypeRef.model_rebuild()
Parameter.model_rebuild()
