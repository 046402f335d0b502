"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from lagoon_wrap.core.models import ExecutionResult


class RenderableCommand(Protocol):
    """Anything that renders to an executable name plus argument vector.

    :class:`~lagoon_wrap.core.commands.LagoonCommand` and
    :class:`~lagoon_wrap.core.commands.GitCommand` satisfy this protocol
    structurally — they share no base class.
    """

    def to_executable_name(self) -> str:
        ...  # pragma: no cover

    def to_arguments(self) -> list[str]:
        ...  # pragma: no cover

    def to_display_string(self) -> str:
        """Human-readable rendering.  For logs only — never executed."""
        ...  # pragma: no cover


class CommandRunner(Protocol):
    """Contract for command execution backends.

    Implementations must spawn the executable with a discrete argument
    vector (never through a shell) and map every failure to a
    :class:`~lagoon_wrap.exceptions.LagoonWrapError` subclass.
    """

    def execute(
        self,
        command: RenderableCommand,
        action: str = "Unknown Action",
    ) -> ExecutionResult:
        """Run *command* to completion and return its captured output.

        Raises
        ------
        CommandExecutionError
            When the process exits non-zero or cannot be spawned.
        """
        ...  # pragma: no cover


class ActionLogger(Protocol):
    """Audit-log collaborator notified after every command."""

    def log_action(self, action: str, command: str, result: str | None = None) -> None:
        ...  # pragma: no cover

    def log_error(self, action: str, command: str, error: BaseException) -> None:
        ...  # pragma: no cover
