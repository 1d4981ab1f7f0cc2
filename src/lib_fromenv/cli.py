"""CLI adapter for ``lib_fromenv`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check how a configuration dataclass resolves against the current
environment (or an explicit set of values) without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_parse_tag` – shows how a tag string splits into key and default.
* :func:`cli_show` – imports ``module:Class``, unmarshals a fresh instance and
  prints it as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It invokes the composition root
(:func:`lib_fromenv.core.unmarshal`) and never reaches into the walker directly.
``lib_cli_exit_tools`` centralises the exit code strategy so every command
behaves consistently across shells and CI.
"""

from __future__ import annotations

import dataclasses
import json
import sys
from importlib import import_module, metadata
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import unmarshal
from .domain.tags import DEFAULT_SEPARATOR, DEFAULT_TAG_NAME, parse_tag
from .options import DefaultsOnly, Option, Separator, TagName, UseMapping

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when metadata is unavailable."""

    try:
        return metadata.version("lib_fromenv")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Populate dataclasses from environment variables",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_fromenv",
    message="lib_fromenv version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_fromenv")
    except metadata.PackageNotFoundError:
        click.echo("lib_fromenv (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_fromenv')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("parse-tag", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("tag")
@click.option("--separator", default=DEFAULT_SEPARATOR, show_default=True, help="Key/default separator")
def cli_parse_tag(tag: str, separator: str) -> None:
    """Show the key and default encoded in *tag*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["parse-tag", "URL,http://a,b"])
    >>> result.output.strip()
    '{"key":"URL","default":"http://a,b"}'
    """

    if not separator:
        raise click.BadParameter("Separator must not be empty.", param_hint="--separator")
    parsed = parse_tag(tag, separator)
    click.echo(json.dumps({"key": parsed.key, "default": parsed.default}, separators=(",", ":")))


@cli.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("target")
@click.option(
    "--env",
    "pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Resolve keys from these pairs instead of the process environment (repeatable)",
)
@click.option(
    "--defaults-only/--no-defaults-only",
    default=False,
    help="Ignore every source and apply tag defaults only",
)
@click.option("--separator", default=DEFAULT_SEPARATOR, show_default=True, help="Key/default separator")
@click.option("--tag-name", default=DEFAULT_TAG_NAME, show_default=True, help="Field metadata key holding the tag")
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_show(
    target: str,
    pairs: Sequence[str],
    defaults_only: bool,
    separator: str,
    tag_name: str,
    indent: Optional[int],
) -> None:
    """Unmarshal a fresh ``module:Class`` instance and print it as JSON.

    The class must be a dataclass constructible without arguments. ``--env``
    pairs replace the process environment; ``--defaults-only`` wins over both.
    """

    cls = _import_target(target)
    options: list[Option] = [Separator(separator), TagName(tag_name)]
    if pairs:
        options.append(UseMapping(_parse_pairs(pairs)))
    if defaults_only:
        options.append(DefaultsOnly())
    instance = cls()
    unmarshal(instance, *options)
    click.echo(json.dumps(dataclasses.asdict(instance), indent=indent, separators=(",", ":"), default=str))


def _import_target(target: str) -> type:
    """Resolve ``module:Class`` (``module:Outer.Inner`` allowed) to a dataclass type."""

    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise click.BadParameter("Target must look like 'package.module:ClassName'.", param_hint="TARGET")
    try:
        obj: Any = import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"Cannot import {module_name}: {exc}", param_hint="TARGET") from exc
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise click.BadParameter(f"{module_name} has no attribute {qualname}", param_hint="TARGET") from exc
    if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
        raise click.BadParameter(f"{target} is not a dataclass", param_hint="TARGET")
    return obj


def _parse_pairs(values: Sequence[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a mapping; the last pair for a key wins."""

    mapping: dict[str, str] = {}
    for entry in values:
        key, sep, value = entry.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {entry!r}.", param_hint="--env")
        mapping[key] = value
    return mapping


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_fromenv",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
