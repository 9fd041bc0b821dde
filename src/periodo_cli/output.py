"""Output formatting with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (new resource URLs, patch listings,
  identity details). This is what downstream tools pipe and parse.
* **stderr** -- all diagnostics (progress, ``OK`` / ``failed`` markers,
  warnings, errors, the token prompt text).
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and the quiet flag. Created once in
   :func:`~periodo_cli.app.main_callback` and installed via :func:`set_output`.
2. The module-level :func:`error` helper, which delegates to the global ``OutputManager``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the right stream.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress progress and informational messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def stderr_console(self) -> Console:
        """The Rich console bound to stderr (used for log handlers)."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Print *data* to stdout as indented JSON (used with ``--json``)."""
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_record(self, fields: list[tuple[str, str]]) -> None:
        """Print one labelled record (e.g. a patch) to stdout.

        Labels are right-aligned to the longest label so values line up.
        A blank line follows each record.

        Args:
            fields: ``(label, value)`` pairs in display order.
        """
        width = max((len(label) for label, _ in fields), default=0)
        for label, value in fields:
            padded = label.rjust(width)
            if self._format == OutputFormat.RICH:
                self._stdout.print(f"[bold]{padded}[/bold]: {escape(value)}", soft_wrap=True)
            else:
                self.print_data(f"{padded}: {value}")
        self.print_data("")

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(escape(message), soft_wrap=True)

    def begin(self, message: str) -> None:
        """Start a progress line on stderr, completed by :meth:`done` or :meth:`failed`.

        The line is written as ``<message> ... `` without a newline.
        """
        if self._quiet:
            return
        if self._no_color:
            print(f"{message} ... ", end="", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"{escape(message)} ... ", end="", soft_wrap=True)

    def done(self) -> None:
        """Print the green ``OK`` marker to stderr."""
        if self._quiet:
            return
        if self._no_color:
            print("OK", file=sys.stderr, flush=True)
        else:
            self._stderr.print("[green]OK[/green]")

    def failed(self) -> None:
        """Print the red ``failed`` marker to stderr. Never suppressed."""
        if self._no_color:
            print("failed", file=sys.stderr, flush=True)
        else:
            self._stderr.print("[red]failed[/red]")

    def error(self, message: str) -> None:
        """Print a red error message to stderr. Never suppressed."""
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[red]{escape(message)}[/red]", soft_wrap=True)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def error(message: str) -> None:
    get_output().error(message)


