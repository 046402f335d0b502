"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.  Without Rich, markup such
as ``[bold]`` is stripped and plain text goes to stderr.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from lagoon_wrap.exceptions import DependencyError, LagoonWrapError

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z0-9 _.#-]*\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``DependencyError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


def escape(text: str) -> str:
    """Escape user/remote data (environment names, output) for Rich markup."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return text
    return rich_escape(text)


def strip_markup(text: str) -> str:
    """Remove Rich style tags for plain-text fallback output."""
    return _MARKUP_TAG.sub("", text)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except DependencyError:
            print(
                *(strip_markup(obj) if isinstance(obj, str) else obj for obj in objects),
                file=sys.stderr,
            )
            return
        rich_console.print(*objects)

    def echo_command(self, display: str) -> None:
        """Show a command about to run (wired as the executor's ``on_execute``)."""
        self.print(f"[blue]Executing: [bold]{escape(display)}[/bold][/blue]")

    def print_error(self, exc: LagoonWrapError) -> None:
        """Render a domain error and its optional hint."""
        self.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            self.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")


console = _ConsoleProxy()
