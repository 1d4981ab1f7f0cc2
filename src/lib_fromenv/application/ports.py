"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the walker and the orchestrator depend on, so
the composition root can swap value sources and coercions without the
application layer knowing concrete implementations.

Contents
--------
* :data:`LookupFunc` – plain callable form of a value source.
* :class:`ValueSource` – resolves a lookup key to an optional string.
* :class:`Coercer` – converts a resolved string into a field value.

System Role
-----------
These protocols enforce Dependency Inversion. Adapters under
``lib_fromenv.adapters`` implement :class:`ValueSource`; the coercion registry
produces :class:`Coercer` callables.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

LookupFunc = Callable[[str], "str | None"]
"""Caller-supplied lookup: returns the value, ``None`` when absent, raises on failure."""


@runtime_checkable
class ValueSource(Protocol):
    """Resolve a lookup key to a string value.

    Why
    ----
    Keep the process environment an implementation detail so tests, defaults-only
    runs, and secret stores can feed the same traversal.

    Contract
    --------
    Return the value when the key is present (an empty string is a present
    value), ``None`` when it is absent, and raise to signal a failure. A raised
    exception aborts the whole unmarshal call.
    """

    def lookup(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None``."""


class Coercer(Protocol):
    """Turn a resolved string into the value stored on a field.

    ``current`` is the field's value before the call; strategies that mutate in
    place return the same object, others return a fresh value. Raising
    :class:`ValueError` or :class:`OverflowError` reports a parse failure.
    """

    def __call__(self, current: Any, raw: str) -> Any: ...
