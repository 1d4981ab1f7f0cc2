"""Value source adapters.

Purpose
-------
Resolve lookup keys for the walker. The process environment is the default
source; the other adapters serve tests, defaults-only runs, and callers that
keep configuration elsewhere (secret stores, CLI flags).

Key behaviours
--------------
* A present key yields its value verbatim, including the empty string.
* An absent key yields ``None`` and never raises.
* :class:`FunctionLookup` forwards exceptions from the wrapped callable; the
  walker attributes them to the field being processed.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...application.ports import LookupFunc
from ...observability import log_debug


class EnvironLookup:
    """Look keys up in the process environment.

    Examples
    --------
    >>> source = EnvironLookup(environ={"PORT": "8080"})
    >>> source.lookup("PORT"), source.lookup("MISSING")
    ('8080', None)
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the source with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`, read at
            lookup time so later ``os.environ`` changes are visible.
        """

        self._environ = environ

    def lookup(self, key: str) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(key)


class MappingLookup:
    """Look keys up in a fixed in-memory mapping.

    Examples
    --------
    >>> MappingLookup({"k1": ""}).lookup("k1")
    ''
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def lookup(self, key: str) -> str | None:
        return self._mapping.get(key)


class DefaultsOnlyLookup:
    """Report every key as absent so only tag defaults apply."""

    def lookup(self, key: str) -> str | None:
        log_debug("lookup_suppressed", key=key)
        return None


class FunctionLookup:
    """Adapt a plain ``lookup(key) -> str | None`` callable to :class:`ValueSource`."""

    def __init__(self, func: LookupFunc) -> None:
        if not callable(func):
            raise TypeError(f"lookup function must be callable, got {type(func).__name__}")
        self._func = func

    def lookup(self, key: str) -> str | None:
        return self._func(key)


__all__ = ["EnvironLookup", "MappingLookup", "DefaultsOnlyLookup", "FunctionLookup"]
