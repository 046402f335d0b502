"""Subprocess-backed implementation of :class:`~lagoon_wrap.core.protocols.CommandRunner`.

This module is the **only** place in the codebase that spawns a
process.  Commands are run as ``[executable, *arguments]`` with
``shell=False``; the display string is used for logging and never
executed.  All ``subprocess``/``OSError`` failures are caught here and
re-raised as :class:`~lagoon_wrap.exceptions.CommandExecutionError`.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable

from lagoon_wrap.core.models import ExecutionResult
from lagoon_wrap.core.protocols import ActionLogger, RenderableCommand
from lagoon_wrap.exceptions import CommandExecutionError, ExecutableNotFoundError, LagoonWrapError

logger = logging.getLogger(__name__)

SUCCESS_RESULT = "Success"


class SubprocessExecutor:
    """Concrete :class:`CommandRunner` backed by :func:`subprocess.run`.

    Parameters
    ----------
    action_logger:
        Optional audit-log collaborator.  Missing collaborators or
        missing ``log_action``/``log_error`` methods are skipped, so a
        broken log never blocks a command.
    on_execute:
        Optional callback receiving the display string just before the
        process is spawned (the CLI uses it to echo the command).
    timeout:
        Seconds to wait for each process, or ``None`` for no limit.
    """

    def __init__(
        self,
        action_logger: ActionLogger | None = None,
        *,
        on_execute: Callable[[str], None] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._action_logger = action_logger
        self._on_execute = on_execute
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def execute(
        self,
        command: RenderableCommand,
        action: str = "Unknown Action",
    ) -> ExecutionResult:
        """Run *command* and return its captured output.

        Raises
        ------
        ExecutableNotFoundError
            When the executable is not on PATH.
        CommandExecutionError
            For a non-zero exit, a timeout, or any other spawn failure.
        """
        executable = command.to_executable_name()
        arguments = command.to_arguments()
        display = command.to_display_string()

        if self._on_execute is not None:
            self._on_execute(display)
        logger.debug("Executing %s: %r", action, [executable, *arguments])

        try:
            result = self._run(executable, arguments, display)
        except CommandExecutionError as exc:
            self._log_error(action, display, exc)
            raise

        self._log_action(action, display)
        return result

    # ------------------------------------------------------------------
    # Process boundary
    # ------------------------------------------------------------------

    def _run(self, executable: str, arguments: list[str], display: str) -> ExecutionResult:
        try:
            completed = subprocess.run(
                [executable, *arguments],
                capture_output=True,
                text=True,
                encoding="utf-8",
                # Undecodable bytes become U+FFFD instead of raising.
                errors="replace",
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise ExecutableNotFoundError(
                f"Executable not found: {executable}",
                command=display,
                hint=f"Install {executable} and make sure it is on your PATH.",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandExecutionError(
                f"Command timed out after {exc.timeout}s: {display}",
                command=display,
            ) from exc
        except (OSError, ValueError) as exc:
            raise CommandExecutionError(
                f"Could not run {executable}: {exc}",
                command=display,
            ) from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            detail = stderr or (completed.stdout or "").strip() or "no output"
            raise CommandExecutionError(
                f"Command failed with exit code {completed.returncode}: {display}\n{detail}",
                command=display,
                returncode=completed.returncode,
                stderr=stderr,
            )

        return ExecutionResult(stdout=completed.stdout or "", stderr=completed.stderr or "")

    # ------------------------------------------------------------------
    # Audit logging (tolerant of absent or failing collaborators)
    # ------------------------------------------------------------------

    def _log_action(self, action: str, display: str) -> None:
        log_action = getattr(self._action_logger, "log_action", None)
        if not callable(log_action):
            return
        try:
            log_action(action, display, SUCCESS_RESULT)
        except (LagoonWrapError, OSError) as exc:
            logger.warning("Action log unavailable, entry dropped: %s", exc)

    def _log_error(self, action: str, display: str, error: BaseException) -> None:
        log_error = getattr(self._action_logger, "log_error", None)
        if not callable(log_error):
            return
        try:
            log_error(action, display, error)
        except (LagoonWrapError, OSError) as exc:
            logger.warning("Action log unavailable, entry dropped: %s", exc)
