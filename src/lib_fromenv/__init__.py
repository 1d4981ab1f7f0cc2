"""Populate dataclass fields from environment variables named in field metadata.

The public surface re-exports the entry points from :mod:`lib_fromenv.core`,
the options from :mod:`lib_fromenv.options`, the error taxonomy, the tag
helpers, and the value types understood by the coercion registry.
"""

from __future__ import annotations

from .core import load, unmarshal
from .domain.errors import (
    CoercionError,
    FieldError,
    FromEnvError,
    InvalidInput,
    InvalidTag,
    LookupFailed,
    UnsettableField,
    UnsupportedType,
)
from .domain.tags import Tag, env_field, parse_tag
from .domain.types import (
    URL,
    Float32,
    Float64,
    FloatBits,
    Int8,
    Int16,
    Int32,
    Int64,
    IntBits,
    Settable,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .observability import bind_trace_id, get_logger
from .options import DefaultsOnly, Separator, SetFunc, TagName, UseLookup, UseMapping

__all__ = [
    "unmarshal",
    "load",
    "UseMapping",
    "DefaultsOnly",
    "UseLookup",
    "SetFunc",
    "Separator",
    "TagName",
    "Tag",
    "parse_tag",
    "env_field",
    "FromEnvError",
    "InvalidInput",
    "FieldError",
    "InvalidTag",
    "UnsettableField",
    "UnsupportedType",
    "LookupFailed",
    "CoercionError",
    "URL",
    "Settable",
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
    "bind_trace_id",
    "get_logger",
]
