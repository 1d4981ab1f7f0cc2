"""Type-directed string coercion.

Purpose
-------
Pick, once per field, the strategy that turns a resolved string into the
field's value, and implement the builtin strategies for primitive types.

Resolution order
----------------
1. A custom function registered for exactly the declared type (checked as
   declared, then with ``Optional`` stripped, then with ``Annotated`` stripped).
2. The type's own ``set(str)`` method (:class:`lib_fromenv.domain.types.Settable`).
3. Builtins: ``str``, ``bool``, ``int`` (optionally sized via
   :class:`~lib_fromenv.domain.types.IntBits`), ``float`` (optionally sized via
   :class:`~lib_fromenv.domain.types.FloatBits`).
4. Nothing applies: :meth:`CoercionRegistry.resolve` returns ``None``.

``Optional[T]`` resolves like ``T``. A ``None`` current value makes settable
strategies allocate ``T()`` first; a non-``None`` settable value is mutated in
place even when other objects share it.
"""

from __future__ import annotations

import math
import struct
import types
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Mapping, Union, get_args, get_origin

from ..domain.types import FloatBits, IntBits
from .ports import Coercer

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


@dataclass(frozen=True, slots=True)
class FieldType:
    """A declared field type taken apart for dispatch.

    ``base`` is the bare class (``Optional`` and ``Annotated`` removed),
    ``unwrapped`` keeps ``Annotated`` but drops ``Optional``, and ``bits`` is the
    first width marker found in the ``Annotated`` metadata.
    """

    declared: Any
    unwrapped: Any
    base: Any
    optional: bool = False
    bits: IntBits | FloatBits | None = None

    @classmethod
    def of(cls, declared: Any) -> FieldType:
        unwrapped, optional = _strip_optional(declared)
        base, bits = _strip_annotated(unwrapped)
        return cls(declared, unwrapped, base, optional, bits)

    @property
    def kind(self) -> str:
        """Short label used in error messages and logs.

        >>> FieldType.of(int).kind
        'int'
        >>> from typing import Optional
        >>> from lib_fromenv.domain.types import UInt8
        >>> FieldType.of(Optional[UInt8]).kind
        'optional[uint8]'
        """

        label = self.bits.label if self.bits is not None else type_name(self.base)
        return f"optional[{label}]" if self.optional else label


def type_name(tp: Any) -> str:
    """Render *tp* compactly: ``int``, ``URL``, ``Any``, ``list[str]``."""

    if isinstance(tp, str):
        return tp
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__name__
    return str(tp).replace("typing.", "")


class CoercionRegistry:
    """Map declared field types to coercion strategies.

    Examples
    --------
    >>> registry = CoercionRegistry()
    >>> registry.resolve(int)(0, "0x10")
    16
    >>> registry.register(int, lambda raw: len(raw))
    >>> registry.resolve(int)(0, "abc")
    3
    >>> registry.resolve(object) is None
    True
    """

    def __init__(self, custom: Mapping[Any, Callable[[str], Any]] | None = None) -> None:
        self._custom: dict[Any, Callable[[str], Any]] = dict(custom or {})

    def register(self, target: Any, func: Callable[[str], Any]) -> None:
        """Use *func* for fields declared as *target*, replacing any earlier registration."""

        self._custom[target] = func

    def resolve(self, declared: Any) -> Coercer | None:
        """Return the strategy for *declared* or ``None`` when the type is unsupported."""

        field_type = declared if isinstance(declared, FieldType) else FieldType.of(declared)
        custom = self._custom_for(field_type)
        if custom is not None:
            return _custom_coercer(custom)
        if _is_settable_class(field_type.base):
            return _settable_coercer(field_type.base)
        return _builtin_coercer(field_type)

    def _custom_for(self, field_type: FieldType) -> Callable[[str], Any] | None:
        for candidate in (field_type.declared, field_type.unwrapped, field_type.base):
            try:
                func = self._custom.get(candidate)
            except TypeError:
                continue
            if func is not None:
                return func
        return None


def _strip_optional(tp: Any) -> tuple[Any, bool]:
    origin = get_origin(tp)
    if origin is not Union and origin is not types.UnionType:
        return tp, False
    members = [arg for arg in get_args(tp) if arg is not type(None)]
    if len(members) == 1 and len(members) != len(get_args(tp)):
        return members[0], True
    return tp, False


def _strip_annotated(tp: Any) -> tuple[Any, IntBits | FloatBits | None]:
    if get_origin(tp) is not Annotated:
        return tp, None
    base = get_args(tp)[0]
    for marker in tp.__metadata__:
        if isinstance(marker, (IntBits, FloatBits)):
            return base, marker
    return base, None


def _is_settable_class(tp: Any) -> bool:
    return isinstance(tp, type) and callable(getattr(tp, "set", None))


def _custom_coercer(func: Callable[[str], Any]) -> Coercer:
    def coerce(current: Any, raw: str) -> Any:
        return func(raw)

    return coerce


def _settable_coercer(cls: type) -> Coercer:
    def coerce(current: Any, raw: str) -> Any:
        target = current if isinstance(current, cls) else cls()
        target.set(raw)
        return target

    return coerce


def _builtin_coercer(field_type: FieldType) -> Coercer | None:
    base, bits = field_type.base, field_type.bits
    if base is str:
        return lambda current, raw: raw
    if base is bool:
        return lambda current, raw: parse_bool(raw)
    if base is int and not isinstance(bits, FloatBits):
        return lambda current, raw: parse_int(raw, bits)
    if base is float and not isinstance(bits, IntBits):
        return lambda current, raw: parse_float(raw, bits)
    return None


def parse_bool(raw: str) -> bool:
    """Parse the canonical boolean literals.

    >>> parse_bool("T"), parse_bool("0")
    (True, False)
    """

    if raw in _TRUE_LITERALS:
        return True
    if raw in _FALSE_LITERALS:
        return False
    raise ValueError(f'parse bool "{raw}": invalid syntax')


def parse_int(raw: str, bits: IntBits | None = None) -> int:
    """Parse decimal or ``0x``/``0o``/``0b`` prefixed integers, range-checked to *bits*.

    A leading ``0`` followed by more digits reads as octal, so ``"010"`` is 8.

    >>> parse_int("0x1F"), parse_int("-0b11"), parse_int("1_000"), parse_int("010")
    (31, -3, 1000, 8)
    >>> parse_int("300", IntBits(8))
    Traceback (most recent call last):
    ...
    OverflowError: parse int8 "300": value out of range
    """

    label = bits.label if bits is not None else "int"
    if raw != raw.strip() or (bits is not None and not bits.signed and raw.startswith(("-", "+"))):
        raise ValueError(f'parse {label} "{raw}": invalid syntax')
    digits = raw.lstrip("+-")
    base = 8 if len(digits) > 1 and digits[0] == "0" and digits[1] not in "xXoObB" else 0
    try:
        value = int(raw, base)
    except ValueError:
        raise ValueError(f'parse {label} "{raw}": invalid syntax') from None
    if bits is not None:
        low, high = bits.bounds
        if not low <= value <= high:
            raise OverflowError(f'parse {label} "{raw}": value out of range')
    return value


def parse_float(raw: str, bits: FloatBits | None = None) -> float:
    """Parse a decimal or exponential float, rounded to single precision for ``float32``.

    >>> parse_float("1.5e3")
    1500.0
    >>> parse_float("1e39", FloatBits(32))
    Traceback (most recent call last):
    ...
    OverflowError: parse float32 "1e39": value out of range
    """

    label = bits.label if bits is not None else "float"
    if raw != raw.strip():
        raise ValueError(f'parse {label} "{raw}": invalid syntax')
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f'parse {label} "{raw}": invalid syntax') from None
    if math.isinf(value) and raw.lstrip("+-").lower() not in ("inf", "infinity"):
        raise OverflowError(f'parse {label} "{raw}": value out of range')
    if bits is not None and bits.width == 32 and math.isfinite(value):
        try:
            (value,) = struct.unpack("f", struct.pack("f", value))
        except OverflowError:
            raise OverflowError(f'parse {label} "{raw}": value out of range') from None
    return value
