"""Walker tests: breadth-first order, identity-based deduplication, and field descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from lib_fromenv.application.coercion import CoercionRegistry
from lib_fromenv.application.walker import FieldConfigurer, FieldRef, is_dataclass_instance, walk
from lib_fromenv.adapters.env.default import MappingLookup
from lib_fromenv.domain.errors import UnsupportedType
from tests.support import CacheSettings


@dataclass
class Leaf:
    name: str = ""


@dataclass
class Branch:
    label: str = ""
    leaf: Optional[Leaf] = None


@dataclass
class Root:
    first: Branch = field(default_factory=lambda: Branch("first", Leaf("deep")))
    second: Leaf = field(default_factory=lambda: Leaf("shallow"))
    nothing: Optional[Leaf] = None


@dataclass
class Equal:
    value: int = 0


@dataclass
class Pair:
    a: Equal = field(default_factory=Equal)
    b: Equal = field(default_factory=Equal)


@dataclass(frozen=True)
class Frozen:
    value: int = 0


@dataclass
class Tagged:
    port: int = field(default=0, metadata={"fromenv": "PORT"})
    other: int = field(default=0, metadata={"custom": "OTHER"})


def _names(root: object) -> list[str]:
    seen: list[str] = []
    walk(root, lambda ref: seen.append(f"{ref.struct_name}.{ref.name}"))
    return seen


def test_breadth_first_declaration_order() -> None:
    assert _names(Root()) == [
        "Root.first",
        "Root.second",
        "Root.nothing",
        "Branch.label",
        "Branch.leaf",
        "Leaf.name",
        "Leaf.name",
    ]


def test_structurally_equal_instances_are_both_visited() -> None:
    assert walk(Pair(), lambda ref: None) == 3


def test_aliased_instance_visited_once() -> None:
    shared = Equal()
    assert walk(Pair(a=shared, b=shared), lambda ref: None) == 2


def test_non_dataclass_root_visits_nothing() -> None:
    assert walk(object(), lambda ref: None) == 0
    assert walk(Leaf, lambda ref: None) == 0


def test_visitor_can_replace_value_before_traversal() -> None:
    seen: list[str] = []

    def visit(ref: FieldRef) -> None:
        seen.append(f"{ref.struct_name}.{ref.name}")
        if ref.name == "nothing":
            ref.assign(Leaf("allocated"))

    walk(Root(), visit)
    assert seen.count("Leaf.name") == 3


def test_field_ref_settability() -> None:
    refs: list[FieldRef] = []
    walk(Frozen(), refs.append)
    assert refs[0].settable is False
    assert refs[0].declared is int


def test_is_dataclass_instance() -> None:
    assert is_dataclass_instance(Leaf())
    assert not is_dataclass_instance(Leaf)
    assert not is_dataclass_instance(None)


def test_configurer_reads_configured_tag_name() -> None:
    target = Tagged()
    configurer = FieldConfigurer(MappingLookup({"PORT": "1", "OTHER": "2"}), CoercionRegistry(), tag_name="custom")
    walk(target, configurer)
    assert (target.port, target.other) == (0, 2)
    assert configurer.fields_set == 1


@dataclass
class Hidden:
    _leaf: Leaf = field(default_factory=Leaf)
    leaf: Leaf = field(default_factory=Leaf)


def test_values_of_unsettable_fields_are_not_traversed() -> None:
    assert _names(Hidden()) == ["Hidden._leaf", "Hidden.leaf", "Leaf.name"]


def test_unresolvable_annotation_only_affects_its_own_field() -> None:
    refs: dict[str, FieldRef] = {}
    walk(CacheSettings(), lambda ref: refs.setdefault(ref.name, ref))
    assert refs["port"].declared is int
    assert refs["cache"].declared == "Decimal | None"


def test_unresolvable_type_on_tagged_field_is_unsupported() -> None:
    @dataclass
    class Local:
        when: Missing = field(default=None, metadata={"fromenv": "WHEN"})  # noqa: F821
        port: int = field(default=0, metadata={"fromenv": "PORT"})

    target = Local()
    with pytest.raises(UnsupportedType, match="unsupported type: Missing"):
        walk(target, FieldConfigurer(MappingLookup({"WHEN": "now", "PORT": "1"}), CoercionRegistry()))
