"""Typer application and CLI entry point for dolphin.

This module wires together the top-level Typer application and registers
the built-in command groups (``droplet``, ``config``, ``cache``) and the
catalog listings (``images``, ``regions``, ``sizes``, ``keys``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~dolphin.exceptions.DolphinError` instances are reported on
stderr and turned into their exit code; any other exception is written to
a crash log under the data directory.

See Also:
    :mod:`dolphin.config`: Configuration and token resolution.
    :mod:`dolphin.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from dolphin import __version__
from dolphin.commands.cache import cache_app
from dolphin.commands.catalog import (
    images_command,
    keys_command,
    regions_command,
    sizes_command,
)
from dolphin.commands.config import config_app
from dolphin.commands.droplet import droplet_app
from dolphin.exit_codes import EXIT_GENERIC_FAILURE
from dolphin.models import ForceUpdate
from dolphin.output import OutputFormat

app = typer.Typer(
    name="dolphin",
    help="Manage DigitalOcean droplets from the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(droplet_app, name="droplet", help="Create, inspect and destroy droplets.")
app.add_typer(config_app, name="config", help="Configuration management.")
app.add_typer(cache_app, name="cache", help="Response cache management.")
app.command("images")(images_command)
app.command("regions")(regions_command)
app.command("sizes")(sizes_command)
app.command("keys")(keys_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"dolphin {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
    force_update: bool = typer.Option(
        False, "--force-update", "-u", help="Ignore cached responses and refresh them."
    ),
    cached: bool = typer.Option(
        False, "--cached", help="Use cached responses even if they have expired."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~dolphin.output.OutputManager` and the
    ``dolphin`` logger from CLI flags, and stores shared options in the
    Typer context so that sub-commands can read them via ``ctx.obj``.
    """
    from dolphin.output import OutputManager, set_output

    if force_update and cached:
        raise typer.BadParameter("--force-update and --cached are mutually exclusive.")

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.configure_logging()
    set_output(output)

    mode = ForceUpdate.USE_CACHE_IF_FRESH
    if force_update:
        mode = ForceUpdate.BYPASS_CACHE
    elif cached:
        mode = ForceUpdate.USE_CACHE_IF_PRESENT

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["force_update"] = mode


def _configured_format() -> OutputFormat:
    """Output format from the config file, or ``AUTO`` if the file is unusable.

    A broken config file must not prevent ``dolphin config reset``; the
    command that actually needs the config reports the error.
    """
    from dolphin.config import load_global_config
    from dolphin.exceptions import ConfigError

    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from dolphin.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``dolphin`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from dolphin.exceptions import DolphinError
        from dolphin.output import error

        if isinstance(exc, DolphinError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
