"""CLI adapter for ``twiglet`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the event builder on the command line so operators can preview what a
given property bag turns into, and pipe structured lines from shell scripts.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_emit` – builds one event and writes it to stdout.
* :func:`cli_normalize` – prints the nested form of a dotted-key JSON object.
* :func:`cli_demo` – runs the pet shop walkthrough.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It only talks to the logger facade, the
composition root and the normaliser. ``lib_cli_exit_tools`` centralises the
exit code strategy, so a rejected message (for example an empty one) surfaces
as a non-zero exit with a short error summary.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import datetime
from importlib import metadata
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.clock.default import utc_now
from .adapters.env.default import DefaultEnvLoader, LoggerSettings
from .application.normalize import to_nested
from .core import create_logger
from .domain.error_info import ErrorInfo
from .examples import run_demo

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

LEVEL_CHOICES: Final[tuple[str, ...]] = ("debug", "info", "warn", "warning", "error", "fatal", "critical")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("twiglet")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Structured JSON logging core",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="twiglet",
    message="twiglet version %(version)s",
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
        meta = metadata.metadata("twiglet")
    except metadata.PackageNotFoundError:
        click.echo("twiglet (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'twiglet')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("emit", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--service", default=None, help="Service name written to service.name")
@click.option(
    "--level",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    default="info",
    show_default=True,
    help="Severity of the event",
)
@click.option("--message", "-m", required=True, help="Event message")
@click.option(
    "--property",
    "-p",
    "properties",
    multiple=True,
    metavar="KEY=VALUE",
    help="Call-site field; dotted keys nest, values are parsed as JSON when possible (repeatable)",
)
@click.option(
    "--context",
    "-c",
    "context",
    multiple=True,
    metavar="KEY=VALUE",
    help="Scoped default field, overridden by --property (repeatable)",
)
@click.option("--error", "error_message", default=None, help="Attach error.message to the event")
@click.option(
    "--timestamp",
    default=None,
    help="ISO-8601 instant to use instead of the current time",
)
@click.option(
    "--from-env/--no-from-env",
    default=False,
    help="Read service name, level and scoped properties from TWIGLET_* variables",
)
def cli_emit(
    service: Optional[str],
    level: str,
    message: str,
    properties: Sequence[str],
    context: Sequence[str],
    error_message: Optional[str],
    timestamp: Optional[str],
    from_env: bool,
) -> None:
    """Build one event and write it to stdout as a JSON line.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(
    ...     cli,
    ...     ["emit", "--service", "petshop", "-m", "hi", "--timestamp", "2020-05-11T15:01:01"],
    ... )
    >>> result.output
    '{"@timestamp":"2020-05-11T15:01:01.000Z","service":{"name":"petshop"},"log":{"level":"info"},"message":"hi"}\\n'
    """

    now = _fixed_clock(timestamp)
    settings = DefaultEnvLoader(environ=os.environ).settings() if from_env else LoggerSettings()
    logger = create_logger(
        service or settings.service_name or "",
        default_properties=settings.properties,
        level=settings.level,
        now=now,
    )

    if context:
        logger = logger.with_properties(_parse_pairs(context, "--context"))

    payload: Any = message
    if properties:
        payload = {**_parse_pairs(properties, "--property"), "message": message}
    error = ErrorInfo(error_message) if error_message else None
    logger.log(level, payload, error)


@cli.command("normalize", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("payload", required=False)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_normalize(payload: Optional[str], indent: Optional[int]) -> None:
    """Print the nested form of a JSON object whose keys may be dotted.

    PAYLOAD defaults to standard input.
    """

    raw = payload if payload is not None else click.get_text_stream("stdin").read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="PAYLOAD") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("Expected a JSON object.", param_hint="PAYLOAD")
    click.echo(json.dumps(to_nested(data), indent=indent, separators=(",", ":"), ensure_ascii=False))


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--service", default="petshop", show_default=True, help="Service name for the walkthrough")
def cli_demo(service: str) -> None:
    """Run the pet shop walkthrough and print its events."""

    run_demo(create_logger(service))


def _parse_pairs(values: Sequence[str], hint: str) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into a flat (possibly dotted) mapping."""

    pairs: dict[str, Any] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got {item!r}.", param_hint=hint)
        pairs[key.strip()] = _parse_value(value)
    return pairs


def _parse_value(value: str) -> Any:
    """Decode *value* as JSON, keeping it as text when that fails.

    Examples
    --------
    >>> _parse_value("200"), _parse_value("true"), _parse_value("Barker")
    (200, True, 'Barker')
    """

    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _fixed_clock(timestamp: Optional[str]):
    """Return a clock pinned to *timestamp*, or the real clock when ``None``."""

    if timestamp is None:
        return utc_now
    try:
        instant = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError as exc:
        raise click.BadParameter(f"Invalid ISO-8601 timestamp: {timestamp!r}", param_hint="--timestamp") from exc
    return lambda: instant


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="twiglet",
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
