"""Shared pytest fixtures and configuration for the lagoon-wrap test suite.

Guidelines
----------
* No test spawns a real ``lagoon`` or ``git`` process.
* The command runner is mocked at the core boundary; ``subprocess.run``
  is patched only in the executor tests.
* Core tests must be pure — no side effects.
* Filesystem access goes through ``tmp_path`` only.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lagoon_wrap.config import Settings
from lagoon_wrap.core.lagoon_service import LagoonService
from lagoon_wrap.core.models import ExecutionResult


def result(stdout: str = "", stderr: str = "") -> ExecutionResult:
    """Shorthand for a captured command output."""
    return ExecutionResult(stdout=stdout, stderr=stderr)


def argv_of(runner: MagicMock, index: int = 0) -> list[str]:
    """Executable plus arguments of the *index*-th executed command."""
    command = runner.execute.call_args_list[index].args[0]
    return [command.to_executable_name(), *command.to_arguments()]


@pytest.fixture()
def runner() -> MagicMock:
    mock = MagicMock()
    mock.execute.return_value = result()
    return mock


@pytest.fixture()
def service(runner: MagicMock) -> LagoonService:
    return LagoonService(runner)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        lagoon_config_path=tmp_path / ".lagoon.yml",
        log_dir=tmp_path / "logs",
        ssh_dir=tmp_path / ".ssh",
    )
