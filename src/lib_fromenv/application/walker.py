"""Breadth-first traversal of dataclass graphs and per-field configuration.

Purpose
-------
Discover every field reachable from a root dataclass instance, hand each one to
a visitor, and apply the tag → lookup → coercion pipeline to the tagged ones.

Contents
--------
* :class:`FieldRef` – ephemeral descriptor of one field on one instance.
* :func:`walk` – queue-driven traversal with an identity-keyed visited set.
* :class:`FieldConfigurer` – the visitor that resolves and assigns values.

System Role
-----------
Driven by :func:`lib_fromenv.core.unmarshal`. Traversal order is breadth-first
and declaration order within a structure; the first exception aborts the walk
and fields already assigned keep their new values.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections import deque
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from ..domain.errors import CoercionError, InvalidTag, LookupFailed, UnsettableField, UnsupportedType
from ..domain.tags import DEFAULT_SEPARATOR, DEFAULT_TAG_NAME, parse_tag
from ..observability import log_debug, make_event
from .coercion import CoercionRegistry, FieldType, type_name
from .ports import ValueSource


@dataclass(slots=True)
class FieldRef:
    """One field of one dataclass instance, as seen during a single visit."""

    owner: Any
    field: dataclasses.Field
    declared: Any

    @property
    def struct_name(self) -> str:
        return type(self.owner).__name__

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def value(self) -> Any:
        return getattr(self.owner, self.field.name, None)

    @property
    def settable(self) -> bool:
        """``False`` for private (underscore) names and fields of frozen dataclasses."""

        if self.field.name.startswith("_"):
            return False
        params = getattr(type(self.owner), "__dataclass_params__", None)
        return not (params is not None and params.frozen)

    def assign(self, value: Any) -> None:
        setattr(self.owner, self.field.name, value)


def is_dataclass_instance(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def walk(root: Any, visit: Callable[[FieldRef], None]) -> int:
    """Call *visit* for every field of every dataclass instance reachable from *root*.

    Each distinct instance (by identity) is visited once, so cyclic and aliased
    references terminate. Field values are enqueued after all fields of their
    owner were visited, which lets a visitor allocate or replace a nested value
    before it is traversed. ``None`` and non-dataclass values are skipped, and so
    are the values of private fields and of fields on frozen dataclasses.

    Returns the number of instances visited.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Node:
    ...     name: str = ""
    ...     next: "Node | None" = None
    >>> a, b = Node("a"), Node("b")
    >>> a.next, b.next = b, a
    >>> seen = []
    >>> walk(a, lambda ref: seen.append(f"{ref.owner.name}.{ref.name}"))
    2
    >>> seen
    ['a.name', 'a.next', 'b.name', 'b.next']
    """

    visited: set[int] = set()
    queue: deque[Any] = deque([root])
    while queue:
        candidate = queue.popleft()
        if not is_dataclass_instance(candidate) or id(candidate) in visited:
            continue
        visited.add(id(candidate))
        hints = _type_hints(type(candidate))
        refs = [FieldRef(candidate, f, hints.get(f.name, f.type)) for f in dataclasses.fields(candidate)]
        for ref in refs:
            visit(ref)
        queue.extend(ref.value for ref in refs if ref.settable)
    return len(visited)


@lru_cache(maxsize=256)
def _type_hints(cls: type) -> dict[str, Any]:
    """Resolve annotations of *cls*, falling back to one field at a time.

    A name that only exists for type checkers (``if TYPE_CHECKING:`` imports)
    leaves that one field with its raw ``Field.type``; the others still resolve.
    """

    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        return {f.name: _field_hint(cls, f) for f in dataclasses.fields(cls)}


def _field_hint(cls: type, f: dataclasses.Field) -> Any:
    owner = _declaring_class(cls, f.name)
    holder = type(owner.__name__, (), {"__annotations__": {f.name: f.type}, "__module__": owner.__module__})
    try:
        return typing.get_type_hints(holder, localns=dict(vars(owner)), include_extras=True)[f.name]
    except (NameError, TypeError):
        return f.type


def _declaring_class(cls: type, name: str) -> type:
    for base in cls.__mro__:
        try:
            own = inspect.get_annotations(base)
        except NameError:
            continue
        if name in own:
            return base
    return cls


class FieldConfigurer:
    """Visitor applying tag parsing, value lookup and coercion to one field.

    Order of checks for a tagged field: settability, strategy resolution, lookup,
    default resolution, coercion. Structural errors therefore win over lookup
    errors. Untagged fields and fields with an empty key are never touched.
    """

    def __init__(
        self,
        source: ValueSource,
        registry: CoercionRegistry,
        *,
        tag_name: str = DEFAULT_TAG_NAME,
        separator: str = DEFAULT_SEPARATOR,
    ) -> None:
        self._source = source
        self._registry = registry
        self._tag_name = tag_name
        self._separator = separator
        self.fields_set = 0

    def __call__(self, ref: FieldRef) -> None:
        raw_tag = ref.field.metadata.get(self._tag_name)
        if raw_tag is None:
            return
        field_type = FieldType.of(ref.declared)
        where = {"struct_name": ref.struct_name, "field_name": ref.name, "kind": field_type.kind}
        if not isinstance(raw_tag, str):
            raise InvalidTag(f"tag {self._tag_name!r} must be a string, got {type(raw_tag).__name__}", **where)
        tag = parse_tag(raw_tag, self._separator)
        if tag.is_empty:
            return

        if not ref.settable:
            raise UnsettableField("unsettable field", **where)
        coercer = self._registry.resolve(field_type)
        if coercer is None:
            raise UnsupportedType(f"unsupported type: {type_name(ref.declared)}", **where)

        try:
            raw = self._source.lookup(tag.key)
        except Exception as exc:  # noqa: BLE001 - any source failure is attributed to the field
            raise LookupFailed(f"lookup failed for {tag.key}: {exc}", key=tag.key, **where) from exc
        if raw is not None and not isinstance(raw, str):
            raise LookupFailed(
                f"lookup failed for {tag.key}: expected str or None, got {type(raw).__name__}", key=tag.key, **where
            )

        origin = "lookup"
        if raw is None:
            if tag.default is None:
                log_debug("field_skipped", **make_event(ref.struct_name, ref.name, {"key": tag.key}))
                return
            raw, origin = tag.default, "default"

        try:
            value = coercer(ref.value, raw)
        except Exception as exc:  # noqa: BLE001 - custom coercions and set() may raise anything
            raise CoercionError(f"failed to configure from {tag.key}: {exc}", key=tag.key, raw=raw, **where) from exc
        ref.assign(value)
        self.fields_set += 1
        log_debug("field_configured", **make_event(ref.struct_name, ref.name, {"key": tag.key, "origin": origin}))
