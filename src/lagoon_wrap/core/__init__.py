"""Core / service layer — command model, policy, parsing, orchestration.

Rules
-----
* No ``print()`` calls.
* No process spawning, filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from lagoon_wrap.core.commands import GitCommand, LagoonCommand
from lagoon_wrap.core.lagoon_service import LagoonService
from lagoon_wrap.core.models import (
    DeletionOutcome,
    DeletionReport,
    DeploymentResult,
    ExecutionResult,
    Project,
)
from lagoon_wrap.core.protocols import ActionLogger, CommandRunner, RenderableCommand

__all__: list[str] = [
    "ActionLogger",
    "CommandRunner",
    "DeletionOutcome",
    "DeletionReport",
    "DeploymentResult",
    "ExecutionResult",
    "GitCommand",
    "LagoonCommand",
    "LagoonService",
    "Project",
    "RenderableCommand",
]
