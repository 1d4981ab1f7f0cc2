"""Composition root for ``lib_fromenv``.

Purpose
-------
Provide the entry points that validate the root object, build the effective
configuration from options, and drive the walker with the field configurer.

Contents
--------
* :func:`unmarshal` – populate an existing dataclass instance in place.
* :func:`load` – instantiate a dataclass with no arguments and populate it.

System Role
-----------
This module connects the value source adapters and the coercion registry
(selected through :mod:`lib_fromenv.options`) with the traversal in
:mod:`lib_fromenv.application.walker` while emitting structured observability
signals. There is no process-wide state: everything is rebuilt per call.
"""

from __future__ import annotations

from typing import TypeVar

from .application.walker import FieldConfigurer, is_dataclass_instance, walk
from .domain.errors import FromEnvError, InvalidInput
from .observability import log_error, log_info
from .options import Option, build_config

T = TypeVar("T")


def unmarshal(root: object, *options: Option) -> None:
    """Set tagged fields of *root* (and of dataclasses reachable from it) from a value source.

    Why
    ----
    Applications describe their configuration once, as dataclasses whose field
    metadata names the environment variable and an optional default, and let
    this function fill them in.

    What
    ----
    For every field whose ``metadata["fromenv"]`` holds ``"KEY"`` or
    ``"KEY,default"``: look ``KEY`` up (process environment unless an option
    selects another source), fall back to the default, and convert the string
    to the field's declared type. A key that is absent with no default leaves
    the field untouched.

    Parameters
    ----------
    root:
        Dataclass instance to populate in place.
    options:
        :mod:`lib_fromenv.options` commands applied in order; later ones win.

    Raises
    ------
    InvalidInput
        *root* is not a dataclass instance. Raised before options are applied.
    FieldError
        The first field that could not be configured. Fields assigned before
        the failure keep their new values.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> from lib_fromenv.options import UseMapping
    >>> @dataclass
    ... class Settings:
    ...     host: str = field(default="", metadata={"fromenv": "HOST,localhost"})
    ...     port: int = field(default=0, metadata={"fromenv": "PORT"})
    >>> settings = Settings()
    >>> unmarshal(settings, UseMapping({"PORT": "8080"}))
    >>> settings
    Settings(host='localhost', port=8080)
    """

    if not is_dataclass_instance(root):
        raise InvalidInput("passed non-dataclass or None")
    config = build_config(options)
    configurer = FieldConfigurer(
        config.source,
        config.registry,
        tag_name=config.tag_name,
        separator=config.separator,
    )
    struct = type(root).__name__
    log_info("unmarshal_started", struct=struct, source=type(config.source).__name__)
    try:
        visited = walk(root, configurer)
    except FromEnvError as exc:
        log_error("unmarshal_failed", struct=struct, error=str(exc), fields_set=configurer.fields_set)
        raise
    log_info("unmarshal_completed", struct=struct, structs=visited, fields_set=configurer.fields_set)


def load(cls: type[T], *options: Option) -> T:
    """Instantiate *cls* without arguments, :func:`unmarshal` into it, and return it.

    >>> from dataclasses import dataclass, field
    >>> from lib_fromenv.options import DefaultsOnly
    >>> @dataclass
    ... class Settings:
    ...     level: str = field(default="", metadata={"fromenv": "LOG_LEVEL,info"})
    >>> load(Settings, DefaultsOnly()).level
    'info'
    """

    instance = cls()
    unmarshal(instance, *options)
    return instance


__all__ = ["unmarshal", "load"]
