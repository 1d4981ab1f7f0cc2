"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the walker, the coercion registry,
the composition root, and consuming applications. The hierarchy lives in the
domain layer so outer layers may depend on it without creating import cycles.

Contents
--------
* :class:`FromEnvError` – umbrella base class for every failure raised by
  :func:`lib_fromenv.unmarshal`.
* :class:`InvalidInput` – the root argument is not a dataclass instance.
* :class:`FieldError` – base for failures attributed to one dataclass field.
* :class:`InvalidTag` / :class:`UnsettableField` / :class:`UnsupportedType` –
  structural problems detected before any lookup happens.
* :class:`LookupFailed` / :class:`CoercionError` – failures of the value source
  or of the string-to-value conversion for a specific key.

System Role
-----------
Every error aborts the traversal at first occurrence. Callers catch
:class:`FromEnvError` to treat any failure as "configuration incomplete".
Registration mistakes (a malformed custom coercion) are programmer errors and
surface as :class:`TypeError` instead.
"""

from __future__ import annotations


class FromEnvError(Exception):
    """Base type for all exceptions emitted by ``lib_fromenv``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidInput(FromEnvError):
    """Raised when :func:`lib_fromenv.unmarshal` receives something other than a dataclass instance."""


class FieldError(FromEnvError):
    """Failure attributed to one field of one dataclass.

    Why
    ----
    Operators need to know which field of which structure broke the load
    without re-running it under a debugger.

    What
    ----
    Carries the owning structure name, field name, field kind and (for lookup
    and coercion failures) the lookup key. ``str()`` renders
    ``<detail>: field <field> (<kind>) in struct <struct>``.

    Examples
    --------
    >>> str(UnsettableField("unsettable field", struct_name="S", field_name="_x", kind="int"))
    'unsettable field: field _x (int) in struct S'
    """

    def __init__(
        self,
        detail: str,
        *,
        struct_name: str,
        field_name: str,
        kind: str,
        key: str | None = None,
    ) -> None:
        self.detail = detail
        self.struct_name = struct_name
        self.field_name = field_name
        self.kind = kind
        self.key = key
        super().__init__(f"{detail}: field {field_name} ({kind}) in struct {struct_name}")


class InvalidTag(FieldError):
    """The field metadata under the tag name holds something other than a string."""


class UnsettableField(FieldError):
    """A tagged field cannot be written (private name or frozen dataclass)."""


class UnsupportedType(FieldError):
    """A tagged field's declared type has no coercion strategy."""


class LookupFailed(FieldError):
    """The active value source raised while resolving the field's key."""


class CoercionError(FieldError):
    """The resolved string could not be converted into the field's type.

    The parser's own exception is chained as ``__cause__``: :class:`ValueError`
    for malformed literals and :class:`OverflowError` for out-of-range values.
    """

    def __init__(
        self,
        detail: str,
        *,
        struct_name: str,
        field_name: str,
        kind: str,
        key: str | None = None,
        raw: str = "",
    ) -> None:
        self.raw = raw
        super().__init__(detail, struct_name=struct_name, field_name=field_name, kind=kind, key=key)


__all__ = [
    "FromEnvError",
    "InvalidInput",
    "FieldError",
    "InvalidTag",
    "UnsettableField",
    "UnsupportedType",
    "LookupFailed",
    "CoercionError",
]
