"""Value types understood by the coercion registry.

Purpose
-------
Python integers and floats are unbounded or double precision; configuration
structures sometimes need the narrower ranges a downstream system expects.
This module offers ``Annotated`` aliases that tag a field with a bit width, the
:class:`Settable` capability protocol, and the :class:`URL` convenience type
that implements it.

Contents
--------
* :class:`IntBits` / :class:`FloatBits` – width markers read by the registry.
* ``Int8`` … ``Int64``, ``UInt`` … ``UInt64``, ``Float32``, ``Float64`` – aliases.
* :class:`Settable` – structural protocol for "parse this string into myself".
* :class:`URL` – request-URI value implementing :class:`Settable`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Protocol, runtime_checkable
from urllib.parse import SplitResult, urlsplit, urlunsplit


@dataclass(frozen=True, slots=True)
class IntBits:
    """Bit width and signedness of an integer field."""

    width: int
    signed: bool = True

    @property
    def label(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.width}"

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive ``(low, high)`` range representable at this width.

        >>> IntBits(8).bounds
        (-128, 127)
        >>> IntBits(8, signed=False).bounds
        (0, 255)
        """

        if self.signed:
            return -(1 << (self.width - 1)), (1 << (self.width - 1)) - 1
        return 0, (1 << self.width) - 1


@dataclass(frozen=True, slots=True)
class FloatBits:
    """Precision of a floating point field (32 or 64)."""

    width: int

    def __post_init__(self) -> None:
        if self.width not in (32, 64):
            raise ValueError(f"unsupported float width {self.width}")

    @property
    def label(self) -> str:
        return f"float{self.width}"


Int8 = Annotated[int, IntBits(8)]
Int16 = Annotated[int, IntBits(16)]
Int32 = Annotated[int, IntBits(32)]
Int64 = Annotated[int, IntBits(64)]
UInt = Annotated[int, IntBits(64, signed=False)]
UInt8 = Annotated[int, IntBits(8, signed=False)]
UInt16 = Annotated[int, IntBits(16, signed=False)]
UInt32 = Annotated[int, IntBits(32, signed=False)]
UInt64 = Annotated[int, IntBits(64, signed=False)]
Float32 = Annotated[float, FloatBits(32)]
Float64 = Annotated[float, FloatBits(64)]


@runtime_checkable
class Settable(Protocol):
    """A value that can parse a string into itself.

    ``set`` mutates the instance and raises (typically :class:`ValueError`) when
    the string is not acceptable. Types implementing it need a no-argument
    constructor so optional fields can be allocated on demand.
    """

    def set(self, value: str) -> None: ...


class URL:
    """URL value parsed like an HTTP request target.

    Accepts an absolute URI (with a scheme) or an absolute path beginning with
    ``/``. A freshly constructed instance is empty and renders as ``""``.

    Examples
    --------
    >>> u = URL()
    >>> u.set("https://docker.com/path/foo")
    >>> u.hostname, u.path
    ('docker.com', '/path/foo')
    >>> str(u)
    'https://docker.com/path/foo'
    >>> u.set("not-a-url")
    Traceback (most recent call last):
    ...
    ValueError: parse not-a-url: invalid URI for request
    """

    __slots__ = ("_parts",)

    def __init__(self, value: str | None = None) -> None:
        self._parts = SplitResult("", "", "", "", "")
        if value is not None:
            self.set(value)

    def set(self, value: str) -> None:
        if not value:
            raise ValueError('parse "": empty url')
        try:
            parts = urlsplit(value)
        except ValueError as exc:
            raise ValueError(f"parse {value}: {exc}") from exc
        if not parts.scheme and not value.startswith("/"):
            raise ValueError(f"parse {value}: invalid URI for request")
        self._parts = parts

    @property
    def scheme(self) -> str:
        return self._parts.scheme

    @property
    def netloc(self) -> str:
        return self._parts.netloc

    @property
    def hostname(self) -> str | None:
        return self._parts.hostname

    @property
    def port(self) -> int | None:
        return self._parts.port

    @property
    def path(self) -> str:
        return self._parts.path

    @property
    def query(self) -> str:
        return self._parts.query

    @property
    def fragment(self) -> str:
        return self._parts.fragment

    def __str__(self) -> str:
        return urlunsplit(self._parts)

    def __repr__(self) -> str:
        return f"URL({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URL):
            return NotImplemented
        return self._parts == other._parts

    def __hash__(self) -> int:
        return hash(self._parts)


__all__ = [
    "IntBits",
    "FloatBits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
    "Settable",
    "URL",
]
