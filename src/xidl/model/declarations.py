# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration nodes of the IDL parse tree."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, field_validator
from pydantic import Field as _Field

from xidl.model.types import AttributeApplication, ExpressionLiteral, LiteralKind, Parameter, Span, TypeRef

# ###############
# Public Interface
# ###############


class EnumMember(BaseModel):
    """A named enumerator with an optional integer initializer."""

    name: str
    value: ExpressionLiteral | None = None
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span

    @field_validator("value")
    @classmethod
    def _integer_initializer(cls, value: ExpressionLiteral | None) -> ExpressionLiteral | None:
        if value is not None and value.kind not in (LiteralKind.INTEGER, LiteralKind.HEX):
            raise ValueError(f"enum initializer must be an integer literal, not {value.kind.value}")
        return value


class EnumDecl(BaseModel):
    """An enumeration declaration."""

    kind: Literal["enum"] = "enum"
    name: str
    members: list[EnumMember] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class DelegateDecl(BaseModel):
    """A delegate (callback signature) declaration."""

    kind: Literal["delegate"] = "delegate"
    name: str
    return_type: TypeRef
    parameters: list[Parameter] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class StructField(BaseModel):
    """A data member of a struct."""

    name: str
    type: TypeRef
    span: Span


class StructDecl(BaseModel):
    """A plain data structure declaration."""

    kind: Literal["struct"] = "struct"
    name: str
    fields: list[StructField] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class MethodDecl(BaseModel):
    """A method declared on an interface."""

    kind: Literal["method"] = "method"
    name: str
    return_type: TypeRef
    parameters: list[Parameter] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class PropertyDecl(BaseModel):
    """A property declared on an interface.

    A property written without an accessor block is read-write.
    """

    kind: Literal["property"] = "property"
    name: str
    type: TypeRef
    accessors: list[Literal["get", "set"]] = _Field(default_factory=lambda: ["get", "set"])
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class EventDecl(BaseModel):
    """An event declared on an interface."""

    kind: Literal["event"] = "event"
    name: str
    type: TypeRef
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


InterfaceMember = Annotated[MethodDecl | PropertyDecl | EventDecl, _Field(discriminator="kind")]


class InterfaceDecl(BaseModel):
    """An interface declaration with its methods, properties, and events."""

    kind: Literal["interface"] = "interface"
    name: str
    bases: list[TypeRef] = _Field(default_factory=list)
    members: list[InterfaceMember] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span


class NamespaceDecl(BaseModel):
    """A namespace and the declarations nested in it."""

    kind: Literal["namespace"] = "namespace"
    name: list[str]
    declarations: list[Declaration] = _Field(default_factory=list)
    attributes: list[AttributeApplication] = _Field(default_factory=list)
    span: Span

    @property
    def qualified_name(self) -> str:
        return ".".join(self.name)


# A declaration that may appear inside a namespace body.
Declaration = Annotated[
    NamespaceDecl | EnumDecl | StructDecl | DelegateDecl | InterfaceDecl,
    _Field(discriminator="kind"),
]


class ImportDirective(BaseModel):
    """An ``import "file.idl";`` directive. ``path`` holds the unquoted text."""

    path: str
    span: Span


class IdlFile(BaseModel):
    """Root of the parse tree for one IDL source unit."""

    imports: list[ImportDirective] = _Field(default_factory=list)
    namespaces: list[NamespaceDecl] = _Field(default_factory=list)


# Resolve forward references in self-referential models.
NamespaceDecl.model_rebuild()
IdlFile.model_rebuild()
