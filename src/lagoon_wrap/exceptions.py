"""Custom exception hierarchy for lagoon-wrap.

All exceptions that cross layer boundaries must inherit from
:class:`LagoonWrapError`.  Raw ``subprocess``/``OSError``/YAML
exceptions must NEVER propagate beyond the infrastructure layer — they
must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
LagoonWrapError
├── ValidationError
│   ├── ProtectedEnvironmentError
│   ├── InvalidBranchNameError
│   └── InstanceNotFoundError
├── CommandExecutionError
│   └── ExecutableNotFoundError
├── ResponseParseError
├── OperationFailedError
├── ConfigError
└── DependencyError
"""

from __future__ import annotations


class LagoonWrapError(Exception):
    """Base exception for all lagoon-wrap errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""

    def add_context(self, context: str) -> None:
        """Prefix the message with *context* (e.g. the failing operation).

        Mutates in place so a bare ``raise`` keeps type and traceback.
        """
        self.args = (f"{context}: {self}",)


# --- Validation (raised before any process is spawned) ---------------------

class ValidationError(LagoonWrapError):
    """Raised when an operation is rejected before command construction."""


class ProtectedEnvironmentError(ValidationError):
    """Raised when an operation targets an environment protected by policy."""


class InvalidBranchNameError(ValidationError):
    """Raised when a branch name contains characters outside the safe set."""


class InstanceNotFoundError(ValidationError):
    """Raised when a Lagoon instance is missing from the local configuration."""


# --- Execution --------------------------------------------------------------

class CommandExecutionError(LagoonWrapError):
    """Raised when a wrapped command exits non-zero or cannot be spawned."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        returncode: int | None = None,
        stderr: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.command: str | None = command
        self.returncode: int | None = returncode
        self.stderr: str = stderr


class ExecutableNotFoundError(CommandExecutionError):
    """Raised when the wrapped executable is not on the system PATH."""


# --- Responses ---------------------------------------------------------------

class ResponseParseError(LagoonWrapError):
    """Raised when a command ran but its output could not be understood."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        raw: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.operation: str = operation
        self.raw: str = raw


class OperationFailedError(LagoonWrapError):
    """Raised when the wrapped CLI explicitly reports ``"result": "error"``."""


# --- Environment / tooling ----------------------------------------------------

class ConfigError(LagoonWrapError):
    """Raised when the Lagoon configuration file cannot be read or written."""


class DependencyError(LagoonWrapError):
    """Raised when an optional runtime library is not installed."""
