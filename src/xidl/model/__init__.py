# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parse tree for IDL source units (namespaces, enums, delegates, etc.)."""

from xidl.model.declarations import (
    Declaration,
    DelegateDecl,
    EnumDecl,
    EnumMember,
    EventDecl,
    IdlFile,
    ImportDirective,
    InterfaceDecl,
    InterfaceMember,
    MethodDecl,
    NamespaceDecl,
    PropertyDecl,
    StructDecl,
    StructField,
)
from xidl.model.types import (
    AttributeApplication,
    ExpressionLiteral,
    LiteralKind,
    Parameter,
    ParameterModifier,
    Span,
    TypeRef,
)
from xidl.model.walk import NameIndex, Visitor, collect_names, walk

__all__ = [
    # Building blocks
    "Span",
    "LiteralKind",
    "ExpressionLiteral",
    "TypeRef",
    "ParameterModifier",
    "Parameter",
    "AttributeApplication",
    # Declarations
    "EnumMember",
    "EnumDecl",
    "DelegateDecl",
    "StructField",
    "StructDecl",
    "MethodDecl",
    "PropertyDecl",
    "EventDecl",
    "InterfaceMember",
    "InterfaceDecl",
    "NamespaceDecl",
    "Declaration",
    "ImportDirective",
    "IdlFile",
    # Traversal
    "Visitor",
    "NameIndex",
    "walk",
    "collect_names",
]
