# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source-order traversal of a parse tree.

Consumers pass a :class:`Visitor` holding only the callbacks they need; the
walker calls them depth-first in the order the nodes appear in the source.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from xidl.model.declarations import (
    Declaration,
    DelegateDecl,
    EnumDecl,
    EnumMember,
    IdlFile,
    InterfaceDecl,
    NamespaceDecl,
    StructDecl,
)
from xidl.model.types import AttributeApplication

# ###############
# Public Interface
# ###############


@dataclass
class Visitor:
    """Optional callbacks invoked by :func:`walk`.

    ``on_attribute`` fires for every attribute, before the callback of the
    declaration or member it is attached to.
    """

    on_namespace: Callable[[NamespaceDecl], None] | None = None
    on_enum: Callable[[EnumDecl], None] | None = None
    on_enum_member: Callable[[EnumMember], None] | None = None
    on_delegate: Callable[[DelegateDecl], None] | None = None
    on_struct: Callable[[StructDecl], None] | None = None
    on_interface: Callable[[InterfaceDecl], None] | None = None
    on_attribute: Callable[[AttributeApplication], None] | None = None


@dataclass
class NameIndex:
    """Names and literal texts gathered from a parse tree.

    Attributes:
        namespaces: Qualified namespace names.
        enums: Enum names, enum member names, and enum member initializer texts.
        expressions: Verbatim attribute argument texts.
    """

    namespaces: set[str] = field(default_factory=set)
    enums: set[str] = field(default_factory=set)
    expressions: set[str] = field(default_factory=set)


def walk(tree: IdlFile, visitor: Visitor) -> None:
    """Visit every namespace and declaration of *tree* in source order."""
    for namespace in tree.namespaces:
        _walk_declaration(namespace, visitor)


def collect_names(tree: IdlFile) -> NameIndex:
    """Collect namespace names, enum names and values, and attribute arguments."""
    index = NameIndex()

    def on_enum_member(member: EnumMember) -> None:
        index.enums.add(member.name)
        if member.value is not None:
            index.enums.add(member.value.text)

    walk(
        tree,
        Visitor(
            on_namespace=lambda ns: index.namespaces.add(ns.qualified_name),
            on_enum=lambda enum: index.enums.add(enum.name),
            on_enum_member=on_enum_member,
            on_attribute=lambda attr: index.expressions.update(arg.text for arg in attr.arguments),
        ),
    )
    return index


# ################
# Implementation
# ################


def _walk_attributes(attributes: list[AttributeApplication], visitor: Visitor) -> None:
    if visitor.on_attribute is None:
        return
    for attribute in attributes:
        visitor.on_attribute(attribute)


def _walk_declaration(decl: Declaration, visitor: Visitor) -> None:
    _walk_attributes(decl.attributes, visitor)
    if isinstance(decl, NamespaceDecl):
        if visitor.on_namespace is not None:
            visitor.on_namespace(decl)
        for child in decl.declarations:
            _walk_declaration(child, visitor)
    elif isinstance(decl, EnumDecl):
        if visitor.on_enum is not None:
            visitor.on_enum(decl)
        for member in decl.members:
            _walk_attributes(member.attributes, visitor)
            if visitor.on_enum_member is not None:
                visitor.on_enum_member(member)
    elif isinstance(decl, DelegateDecl):
        if visitor.on_delegate is not None:
            visitor.on_delegate(decl)
    elif isinstance(decl, StructDecl):
        if visitor.on_struct is not None:
            visitor.on_struct(decl)
    elif isinstance(decl, InterfaceDecl):
        if visitor.on_interface is not None:
            visitor.on_interface(decl)
        for member in decl.members:
            _walk_attributes(member.attributes, visitor)
