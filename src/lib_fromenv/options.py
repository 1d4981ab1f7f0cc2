"""Unmarshal options and the per-call effective configuration.

Purpose
-------
Express every knob of :func:`lib_fromenv.unmarshal` as a small immutable
command object applied in argument order to a fresh :class:`UnmarshalConfig`.
Later options override earlier ones for the value source, tag name and
separator; custom coercions accumulate per target type.

Contents
--------
* :class:`UnmarshalConfig` – effective configuration built once per call.
* :class:`Option` – protocol implemented by every option.
* :class:`UseMapping`, :class:`DefaultsOnly`, :class:`UseLookup` – value source
  selection.
* :class:`SetFunc` – custom coercion registration.
* :class:`Separator`, :class:`TagName` – tag syntax overrides.
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol

from .adapters.env.default import DefaultsOnlyLookup, EnvironLookup, FunctionLookup, MappingLookup
from .application.coercion import CoercionRegistry
from .application.ports import LookupFunc, ValueSource
from .domain.tags import DEFAULT_SEPARATOR, DEFAULT_TAG_NAME


@dataclass(slots=True)
class UnmarshalConfig:
    """Settings read by the walker; mutated only while options are applied."""

    source: ValueSource = field(default_factory=EnvironLookup)
    registry: CoercionRegistry = field(default_factory=CoercionRegistry)
    tag_name: str = DEFAULT_TAG_NAME
    separator: str = DEFAULT_SEPARATOR


class Option(Protocol):
    """A configuration command for :func:`lib_fromenv.unmarshal`."""

    def apply(self, config: UnmarshalConfig) -> None: ...


@dataclass(frozen=True, slots=True)
class UseMapping:
    """Resolve keys from *mapping* instead of the process environment."""

    mapping: Mapping[str, str]

    def apply(self, config: UnmarshalConfig) -> None:
        config.source = MappingLookup(self.mapping)


@dataclass(frozen=True, slots=True)
class DefaultsOnly:
    """Ignore every source; only tag defaults are applied."""

    def apply(self, config: UnmarshalConfig) -> None:
        config.source = DefaultsOnlyLookup()


@dataclass(frozen=True, slots=True)
class UseLookup:
    """Resolve keys through *func*; exceptions it raises abort the call."""

    func: LookupFunc

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise TypeError(f"lookup function must be callable, got {type(self.func).__name__}")

    def apply(self, config: UnmarshalConfig) -> None:
        config.source = FunctionLookup(self.func)


@dataclass(frozen=True, slots=True)
class SetFunc:
    """Register ``func(raw) -> T`` as the coercion for fields declared as ``T``.

    ``T`` is *target* when given, the class itself when *func* is a class, and
    otherwise the return annotation of *func*. Custom coercions take precedence
    over a type's own ``set`` method and over the builtin parsers.

    A malformed registration is a programmer error: construction raises
    :class:`TypeError` right away rather than failing during unmarshal.

    Examples
    --------
    >>> from datetime import timedelta
    >>> def seconds(raw: str) -> timedelta:
    ...     return timedelta(seconds=float(raw))
    >>> SetFunc(seconds).target
    <class 'datetime.timedelta'>
    >>> SetFunc("nope")
    Traceback (most recent call last):
    ...
    TypeError: coercion must be callable, got str
    """

    func: Callable[[str], Any]
    target: Any = None

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise TypeError(f"coercion must be callable, got {type(self.func).__name__}")
        _require_single_argument(self.func, explicit_target=self.target is not None or isinstance(self.func, type))
        target = self.target if self.target is not None else _infer_target(self.func)
        object.__setattr__(self, "target", target)

    def apply(self, config: UnmarshalConfig) -> None:
        config.registry.register(self.target, self.func)


@dataclass(frozen=True, slots=True)
class Separator:
    """Use *value* instead of ``","`` between key and default in tags."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("tag separator must be a non-empty string")

    def apply(self, config: UnmarshalConfig) -> None:
        config.separator = self.value


@dataclass(frozen=True, slots=True)
class TagName:
    """Read tags from ``field.metadata[value]`` instead of ``"fromenv"``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("tag name must be a non-empty string")

    def apply(self, config: UnmarshalConfig) -> None:
        config.tag_name = self.value


def build_config(options: typing.Iterable[Option]) -> UnmarshalConfig:
    """Apply *options* in order to a fresh :class:`UnmarshalConfig`.

    >>> build_config([UseMapping({}), DefaultsOnly()]).source.__class__.__name__
    'DefaultsOnlyLookup'
    """

    config = UnmarshalConfig()
    for option in options:
        option.apply(config)
    return config


def _require_single_argument(func: Callable[..., Any], *, explicit_target: bool) -> None:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        if explicit_target:
            return
        raise TypeError(f"cannot inspect coercion {func!r}; pass target= explicitly") from exc
    try:
        signature.bind("")
    except TypeError as exc:
        raise TypeError(f"coercion {func!r} must accept exactly one string argument: {exc}") from exc


def _infer_target(func: Callable[..., Any]) -> Any:
    if isinstance(func, type):
        return func
    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except (NameError, TypeError) as exc:
        raise TypeError(f"cannot resolve return annotation of {func!r}; pass target= explicitly") from exc
    target = hints.get("return")
    if target is None or target is type(None):
        raise TypeError(f"coercion {func!r} needs a return annotation naming its target type, or target=")
    return target


__all__ = [
    "UnmarshalConfig",
    "Option",
    "UseMapping",
    "DefaultsOnly",
    "UseLookup",
    "SetFunc",
    "Separator",
    "TagName",
    "build_config",
]
