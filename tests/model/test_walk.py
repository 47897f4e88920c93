# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for parse tree traversal."""

from xidl.model.walk import NameIndex, Visitor, collect_names, walk
from xidl.parser.parser import parse

_SOURCE = """
import "base.idl";

[version(1)]
namespace Outer
{
    [flags]
    enum Mode { [old] Off = 0, On = 0x1 }
    struct Pair { Int32 a; Int32 b; }
    namespace Inner
    {
        [uuid(b7de5527-4c8f-42dd-84da-5ec493abdb9a)]
        delegate void Callback(Int32 value);
        interface IThing { [overload("Go2")] void Go(); }
    }
}
"""


def test_walk_visits_in_source_order() -> None:
    events: list[str] = []
    visitor = Visitor(
        on_namespace=lambda ns: events.append(f"namespace {ns.qualified_name}"),
        on_enum=lambda enum: events.append(f"enum {enum.name}"),
        on_enum_member=lambda member: events.append(f"member {member.name}"),
        on_delegate=lambda delegate: events.append(f"delegate {delegate.name}"),
        on_struct=lambda struct: events.append(f"struct {struct.name}"),
        on_interface=lambda interface: events.append(f"interface {interface.name}"),
        on_attribute=lambda attr: events.append(f"attribute {attr.name}"),
    )
    walk(parse(_SOURCE).tree, visitor)
    assert events == [
        "attribute version",
        "namespace Outer",
        "attribute flags",
        "enum Mode",
        "attribute old",
        "member Off",
        "member On",
        "struct Pair",
        "namespace Inner",
        "attribute uuid",
        "delegate Callback",
        "interface IThing",
        "attribute overload",
    ]


def test_walk_with_empty_visitor() -> None:
    walk(parse(_SOURCE).tree, Visitor())


def test_collect_names() -> None:
    index = collect_names(parse(_SOURCE).tree)
    assert index.namespaces == {"Outer", "Inner"}
    assert index.enums == {"Mode", "Off", "On", "0", "0x1"}
    assert index.expressions == {"1", "b7de5527-4c8f-42dd-84da-5ec493abdb9a", '"Go2"'}


def test_collect_names_on_empty_tree() -> None:
    assert collect_names(parse("").tree) == NameIndex()
