"""``python -m lib_fromenv`` runs the same CLI as the ``lib_fromenv`` console script."""

from __future__ import annotations

import sys

from .cli import main


def run() -> int:
    """Invoke :func:`lib_fromenv.cli.main` with the process arguments."""

    return main(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(run())
