"""Domain models for lagoon-wrap.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and small derived views.  They carry zero
I/O and no dependencies on external packages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Process execution
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Captured output of one wrapped-command invocation."""

    stdout: str
    """Standard output, decoded as text."""

    stderr: str
    """Standard error, decoded as text."""


# ---------------------------------------------------------------------------
# Lagoon records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Project:
    """A Lagoon project as returned by ``list projects``."""

    name: str
    """The ``projectname`` field."""

    git_url: str | None
    """The project's Git remote (``giturl``), if configured."""

    details: Mapping[str, Any] = field(default_factory=dict, compare=False)
    """The raw record, kept for display of fields the core does not model."""


# ---------------------------------------------------------------------------
# Operation outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DeploymentResult:
    """Outcome of a successfully *initiated* branch deployment.

    The remote deployment itself runs asynchronously; this only records
    that Lagoon accepted the request.
    """

    branch: str
    project: str
    message: str


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of deleting one environment within a batch."""

    environment: str
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class DeletionReport:
    """Ordered outcomes of a sequential multi-environment deletion."""

    outcomes: tuple[DeletionOutcome, ...]

    @property
    def succeeded(self) -> tuple[DeletionOutcome, ...]:
        return tuple(o for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> tuple[DeletionOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.succeeded)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __bool__(self) -> bool:
        return len(self.outcomes) > 0
