"""Logging for unmarshal calls.

Every record goes through the ``lib_fromenv`` logger, which carries a
``NullHandler`` so the library stays silent until the host application
configures logging. Records hold an ``extra={"context": {...}}`` mapping with
the bound trace id plus event fields (struct, field, lookup key, origin).
Field values are never part of a record; they may hold secrets.

Contents
    - ``TRACE_ID`` / ``bind_trace_id``: correlation id for the current context.
    - ``get_logger``: the package logger.
    - ``log_debug`` / ``log_info`` / ``log_error``: level-specific emitters.
    - ``make_event``: per-field event payload.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_fromenv_trace_id", default=None)
"""Trace id copied into every record emitted while it is bound."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_fromenv")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``lib_fromenv`` logger for attaching handlers or changing its level."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Tag subsequent unmarshal records with *trace_id*; ``None`` removes the tag.

    >>> bind_trace_id('req-42')
    >>> TRACE_ID.get()
    'req-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(struct: str, field: str, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Name the dataclass and field a record is about, plus any extra *payload* keys.

    >>> make_event('Settings', 'port', {'key': 'PORT'})
    {'struct': 'Settings', 'field': 'port', 'key': 'PORT'}
    """

    return {"struct": struct, "field": field, **(payload or {})}


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    _LOGGER.log(level, message, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
