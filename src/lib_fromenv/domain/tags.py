"""Field tag micro-syntax.

Purpose
-------
Parse the string attached to a dataclass field into a lookup key and an
optional default. The syntax is ``key`` or ``key<sep>default``; only the first
separator splits, so defaults may themselves contain the separator (URLs,
comma-separated lists).

Contents
--------
* :data:`DEFAULT_TAG_NAME` / :data:`DEFAULT_SEPARATOR` – conventions used when
  no option overrides them.
* :class:`Tag` – parsed ``(key, default)`` pair.
* :func:`parse_tag` – the parser itself; never fails on any input string.
* :func:`env_field` – ``dataclasses.field`` wrapper attaching a tag.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Final

DEFAULT_TAG_NAME: Final[str] = "fromenv"
DEFAULT_SEPARATOR: Final[str] = ","


@dataclass(frozen=True, slots=True)
class Tag:
    """Parsed field tag.

    ``default`` is ``None`` when the tag carries no separator, which differs
    from an empty default (``"KEY,"``): the former leaves the field untouched
    when the key is absent, the latter sets it to ``""``.
    """

    key: str
    default: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.key


def parse_tag(raw: str, separator: str = DEFAULT_SEPARATOR) -> Tag:
    """Split *raw* at the first *separator* into key and default.

    Examples
    --------
    >>> parse_tag("PORT")
    Tag(key='PORT', default=None)
    >>> parse_tag("PORT,8080")
    Tag(key='PORT', default='8080')
    >>> parse_tag("nokey,def-val,with-sep")
    Tag(key='nokey', default='def-val,with-sep')
    >>> parse_tag("NAME,")
    Tag(key='NAME', default='')
    """

    if not separator:
        raise ValueError("tag separator must be a non-empty string")
    key, found, default = raw.partition(separator)
    if not found:
        return Tag(key)
    return Tag(key, default)


def env_field(tag: str, **kwargs: Any) -> Any:
    """Return a :func:`dataclasses.field` carrying *tag* under :data:`DEFAULT_TAG_NAME`.

    Keyword arguments are forwarded to :func:`dataclasses.field`; an existing
    ``metadata`` mapping is preserved.

    Examples
    --------
    >>> from dataclasses import dataclass, fields
    >>> @dataclass
    ... class Settings:
    ...     port: int = env_field("PORT,8080", default=0)
    >>> fields(Settings)[0].metadata["fromenv"]
    'PORT,8080'
    """

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DEFAULT_TAG_NAME] = tag
    return dataclasses.field(metadata=metadata, **kwargs)
