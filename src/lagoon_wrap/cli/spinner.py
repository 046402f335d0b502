"""Rich-based activity spinner shown while a wrapped command runs.

Design
------
* :class:`Spinner` manages a transient Rich :class:`~rich.progress.Progress`
  with a single indeterminate task.
* :meth:`Spinner.succeed` / :meth:`Spinner.fail` stop the spinner and
  leave a one-line status behind.
* Shutdown-safe: stopping twice, or reporting after stop, is harmless.
"""

from __future__ import annotations

from typing import Any

from lagoon_wrap.cli.console import console, escape, get_rich_console
from lagoon_wrap.exceptions import DependencyError


class Spinner:
    """Context-managed spinner.

    Usage::

        with Spinner(f"Deleting environment {env}...") as spinner:
            service.delete_environment(instance, project, env)
            spinner.succeed(f"Environment {env} deleted successfully.")
    """

    def __init__(self, text: str) -> None:
        try:
            from rich.progress import Progress, SpinnerColumn, TextColumn
        except ModuleNotFoundError as exc:
            raise DependencyError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._text: str = text
        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            console=get_rich_console(),
            transient=True,
        )
        self._task_id: Any = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start spinning (idempotent)."""
        if not self._started:
            self._progress.start()
            self._task_id = self._progress.add_task(escape(self._text), total=None)
            self._started = True

    def stop(self) -> None:
        """Stop the spinner (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Outcome reporting
    # ------------------------------------------------------------------

    def succeed(self, message: str) -> None:
        self.stop()
        console.print(f"[green]✔[/green] {escape(message)}")

    def fail(self, message: str) -> None:
        self.stop()
        console.print(f"[red]✖[/red] {escape(message)}")
