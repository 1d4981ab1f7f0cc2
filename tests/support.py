"""Shared dataclasses and helpers used across the test suites.

The structures live at module level so ``typing.get_type_hints`` can resolve
their postponed annotations, and so the CLI ``show`` command can import them by
``tests.support:ClassName``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING

from lib_fromenv import URL, env_field

if TYPE_CHECKING:
    from decimal import Decimal

_DURATION = re.compile(r"^(?P<amount>\d+(?:\.\d+)?)(?P<unit>ms|s|m|h)$")
_UNITS = {"ms": "milliseconds", "s": "seconds", "m": "minutes", "h": "hours"}


def parse_duration(raw: str) -> timedelta:
    """Parse ``1000ms`` / ``5s`` / ``2m`` / ``1h`` style durations."""

    match = _DURATION.match(raw)
    if match is None:
        raise ValueError(f"invalid duration {raw}")
    return timedelta(**{_UNITS[match["unit"]]: float(match["amount"])})


class FlagValue:
    """Settable test double accepting only the literal ``a-setter``."""

    def __init__(self) -> None:
        self.x = False

    def set(self, value: str) -> None:
        if value != "a-setter":
            raise ValueError("not-a-setter")
        self.x = True


@dataclass
class Database:
    host: str = env_field("DB_HOST,localhost", default="")
    port: int = env_field("DB_PORT,5432", default=0)


@dataclass
class ServiceSettings:
    name: str = env_field("SERVICE_NAME,demo", default="")
    port: int = env_field("SERVICE_PORT", default=0)
    debug: bool = env_field("SERVICE_DEBUG,false", default=False)
    endpoint: URL = env_field("SERVICE_ENDPOINT,https://api.example.com/v1", default_factory=URL)
    database: Database = field(default_factory=Database)


@dataclass
class AltTagSettings:
    level: str = field(default="", metadata={"env": "LOG_LEVEL=info"})


@dataclass
class CacheSettings:
    """``cache`` names a type that only exists for type checkers."""

    port: int = env_field("CACHE_PORT", default=0)
    cache: Decimal | None = None
