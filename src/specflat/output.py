"""Output layer: documents and views on stdout, diagnostics on stderr.

Everything specflat prints goes through one :class:`OutputManager`:

* **stdout** -- the converted document, a view, a field tree or a table.
  Nothing else is ever written there, so output can be piped into ``jq``.
* **stderr** -- conversion warnings, errors and ``--verbose`` debug lines.
* ``auto`` format renders with Rich on an interactive terminal and falls back
  to plain JSON when piped. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``
  all disable colour.

The parser and view modules never hold a manager; they call the module-level
:func:`debug` and friends, which delegate to the instance installed by
:func:`set_output` (a default one is created lazily).
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree


class OutputFormat(str, Enum):
    """Supported output formats. ``AUTO`` resolves to ``RICH`` or ``JSON``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Desired output format. ``AUTO`` resolves on TTY detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages and conversion warnings.
        verbose: Show debug messages.
        output_file: Write data here instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color and output_file is None
            self._format = OutputFormat.RICH if interactive else OutputFormat.JSON
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # Data (stdout)
    # ------------------------------------------------------------------ #

    def emit(self, data: Any) -> None:
        """Write a JSON-compatible document in the active format.

        An ``output_file`` always receives indented JSON regardless of format.
        """
        if self._output_file or self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            syntax = Syntax(_to_json(data), "json", theme="monokai", word_wrap=True)
            self._stdout.print(syntax)

    def print_fields(self, fields: Any, title: str) -> None:
        """Write a projected field tree; Rich mode draws it as a tree."""
        if self._format != OutputFormat.RICH or self._output_file:
            self.emit(fields)
            return
        tree = Tree(f"[bold]{title}[/bold]")
        _add_branches(tree, fields)
        self._stdout.print(tree)

    def print_data(self, text: str) -> None:
        if self._output_file:
            with open(self._output_file, "a", encoding="utf-8") as f:
                f.write(text)
                if not text.endswith("\n"):
                    f.write("\n")
        else:
            print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, JSON records, or tab-separated lines."""
        if self._format == OutputFormat.JSON or self._output_file:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(_to_json(records))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning. Conversion warnings are routed through here."""
        if not self._quiet:
            self._diagnostic(
                f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}"
            )

    def error(self, message: str) -> None:
        """Print an error. Never suppressed."""
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=False)

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                rendered = json.dumps(value, ensure_ascii=False, default=str)
                self.print_data(f"{key}\t{rendered}")
        elif isinstance(data, list):
            for item in data:
                self.print_data(json.dumps(item, ensure_ascii=False, default=str))
        else:
            self.print_data(str(data))


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _add_branches(tree: Tree, fields: Any) -> None:
    if isinstance(fields, dict):
        for name, value in fields.items():
            if isinstance(value, (dict, list)):
                _add_branches(tree.add(f"[cyan]{name}[/cyan]"), value)
            else:
                tree.add(f"[cyan]{name}[/cyan]: {value}")
    elif isinstance(fields, list):
        for item in fields:
            if isinstance(item, (dict, list)):
                _add_branches(tree.add("[dim]\\[item][/dim]"), item)
            else:
                tree.add(f"[dim]\\[item][/dim]: {item}")
    else:
        tree.add(str(fields))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global manager. Used by the test suite between tests."""
    global _output
    _output = None


def emit(data: Any) -> None:
    get_output().emit(data)


def print_fields(fields: Any, title: str) -> None:
    get_output().print_fields(fields, title)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
