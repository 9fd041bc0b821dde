"""Typer application and CLI entry point for periodo.

This module wires the root Typer application, its global options, and the
subcommands from :mod:`periodo_cli.commands`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Usage errors (unknown subcommand, missing arguments)
print usage and exit with :data:`~periodo_cli.exit_codes.EXIT_INVALID_USAGE`.
Failures of the operation itself are printed by the command and the
process exits 0.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from periodo_cli import __version__
from periodo_cli.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="periodo",
    help="Submit, review and merge patches on a PeriodO server.",
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
    epilog="To pipe patches or JSON via stdin use the filename '-'.",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"periodo {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich when ``--verbose`` is set."""
    if not verbose:
        return
    from rich.logging import RichHandler

    from periodo_cli.output import get_output

    handler = RichHandler(console=get_output().stderr_console, show_path=False)
    root = logging.getLogger("periodo_cli")
    root.handlers = [handler]
    root.setLevel(logging.DEBUG)


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
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Server URL (default: $PERIODO_SERVER or canonical)."
    ),
    token_file: Optional[str] = typer.Option(
        None, "--token-file", help="Token file (default: $PERIODO_TOKEN_FILE or ~/.periodo-token)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress progress output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~periodo_cli.output.OutputManager`,
    resolves :class:`~periodo_cli.models.Settings` and stores them in
    ``ctx.obj``. Values already present in ``ctx.obj`` (an injected
    ``token_store``, ``transport`` or ``prompt``) are kept.

    Raises:
        typer.Exit: With :data:`EXIT_INVALID_USAGE` when no subcommand is given.
    """
    from periodo_cli.config import resolve_settings
    from periodo_cli.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = resolve_settings(server=server, token_file=token_file, timeout=timeout)
    logger.debug("Using server %s", ctx.obj["settings"].server_url)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from periodo_cli.commands.auth import list_permissions, refresh_token  # noqa: E402
from periodo_cli.commands.patches import (  # noqa: E402
    list_patches,
    merge_patch,
    reject_patch,
    submit_patch,
)
from periodo_cli.commands.resources import create_bag, delete_graph, update_graph  # noqa: E402

app.command("list-patches")(list_patches)
app.command("list-permissions")(list_permissions)
app.command("refresh-token")(refresh_token)
app.command("submit-patch")(submit_patch)
app.command("merge-patch")(merge_patch)
app.command("reject-patch")(reject_patch)
app.command("create-bag")(create_bag)
app.command("update-graph")(update_graph)
app.command("delete-graph")(delete_graph)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _show_parse_error(exc: typer.TyperException) -> None:
    """Print a parse error the way Typer's standalone mode does."""
    show = getattr(exc, "show", None)
    if show is not None:
        show()
    else:
        sys.stderr.write(f"Error: {exc.format_message()}\n")


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``periodo`` console script.

    Parse errors raised by Typer (unknown subcommand, missing argument,
    bad option) print usage and exit with :data:`EXIT_INVALID_USAGE`.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Raises:
        SystemExit: Always raised, carrying the exit status.
    """
    _setup_signal_handlers()
    try:
        rv = app(args=argv, prog_name="periodo", standalone_mode=False)
    except typer.TyperException as exc:
        _show_parse_error(exc)
        sys.exit(EXIT_INVALID_USAGE)
    except (typer.Abort, KeyboardInterrupt):
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from periodo_cli.exceptions import PeriodoError
        from periodo_cli.output import error

        if isinstance(exc, PeriodoError):
            error(exc.message)
            sys.exit(exc.exit_code)
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
    sys.exit(rv if isinstance(rv, int) else EXIT_SUCCESS)
