"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined and the error boundary maps to them.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from lagoon_wrap import __version__
from lagoon_wrap.cli import exit_codes
from lagoon_wrap.cli.app import cli, main
from lagoon_wrap.config import Settings
from lagoon_wrap.exceptions import (
    CommandExecutionError,
    ConfigError,
    DependencyError,
    ExecutableNotFoundError,
    InstanceNotFoundError,
    InvalidBranchNameError,
    LagoonWrapError,
    OperationFailedError,
    ProtectedEnvironmentError,
    ResponseParseError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ValidationError,
            CommandExecutionError,
            OperationFailedError,
            ConfigError,
            DependencyError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[LagoonWrapError]
    ) -> None:
        assert issubclass(exc_class, LagoonWrapError)

    @pytest.mark.parametrize(
        "exc_class", [ProtectedEnvironmentError, InvalidBranchNameError, InstanceNotFoundError],
    )
    def test_validation_subclasses(self, exc_class: type[LagoonWrapError]) -> None:
        assert issubclass(exc_class, ValidationError)

    def test_executable_not_found_is_execution_error(self) -> None:
        assert issubclass(ExecutableNotFoundError, CommandExecutionError)

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(LagoonWrapError, Exception)

    def test_hint_is_stored(self) -> None:
        err = LagoonWrapError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert LagoonWrapError("boom").hint is None

    def test_add_context_keeps_type_and_hint(self) -> None:
        err = InvalidBranchNameError("bad name", hint="use [A-Za-z0-9_./-]")
        err.add_context("Failed to deploy branch x")
        assert str(err) == "Failed to deploy branch x: bad name"
        assert err.hint == "use [A-Za-z0-9_./-]"

    def test_execution_error_details(self) -> None:
        err = CommandExecutionError("failed", command="lagoon login", returncode=1, stderr="denied")
        assert (err.command, err.returncode, err.stderr) == ("lagoon login", 1, "denied")

    def test_parse_error_details(self) -> None:
        err = ResponseParseError("bad", operation="list projects", raw="<html>")
        assert err.operation == "list projects"
        assert err.raw == "<html>"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2

    def test_executable_not_found_is_127(self) -> None:
        assert exit_codes.EXECUTABLE_NOT_FOUND == 127

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_runs_interactive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from lagoon_wrap.cli import app as app_module

        seen: list[Settings] = []
        monkeypatch.setattr(
            app_module,
            "_handle_interactive",
            lambda settings: seen.append(settings) or exit_codes.SUCCESS,
        )
        assert main([]) == exit_codes.SUCCESS
        assert len(seen) == 1

    def test_interactive_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from lagoon_wrap.cli import app as app_module

        monkeypatch.setattr(app_module, "_handle_interactive", lambda settings: exit_codes.SUCCESS)
        assert main(["interactive"]) == exit_codes.SUCCESS

    def test_log_dir_flag(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        from lagoon_wrap.cli import app as app_module

        seen: list[Settings] = []
        monkeypatch.setattr(
            app_module,
            "_handle_interactive",
            lambda settings: seen.append(settings) or exit_codes.SUCCESS,
        )
        main(["--log-dir", str(tmp_path / "logs")])
        assert seen[0].log_dir == tmp_path / "logs"

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["destroy-everything"])
        assert exc_info.value.code == 2

    @patch("lagoon_wrap.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        assert main(["doctor"]) == exit_codes.SUCCESS

    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value=None)
    def test_interactive_requires_lagoon(self, _mock_which: object, tmp_path: Path) -> None:
        settings = Settings(log_dir=tmp_path / "logs")
        from lagoon_wrap.cli.app import _handle_interactive

        with pytest.raises(ExecutableNotFoundError):
            _handle_interactive(settings)
        assert not (tmp_path / "logs").exists()


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    @pytest.mark.parametrize(
        ("raised", "expected"),
        [
            (ExecutableNotFoundError("lagoon is not installed"), exit_codes.EXECUTABLE_NOT_FOUND),
            (ProtectedEnvironmentError("production"), exit_codes.GENERAL_ERROR),
            (ConfigError("bad timeout"), exit_codes.GENERAL_ERROR),
            (KeyboardInterrupt(), exit_codes.KEYBOARD_INTERRUPT),
            (RuntimeError("bug"), exit_codes.UNEXPECTED_ERROR),
        ],
    )
    def test_exit_codes(self, raised: BaseException, expected: int) -> None:
        with patch("lagoon_wrap.cli.app.main", side_effect=raised):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == expected

    def test_success(self) -> None:
        with patch("lagoon_wrap.cli.app.main", return_value=exit_codes.SUCCESS):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == 0

    def test_hint_is_printed(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = ConfigError("cannot read", hint="check permissions")
        with patch("lagoon_wrap.cli.app.main", side_effect=error):
            with pytest.raises(SystemExit):
                cli()
        err = capsys.readouterr().err
        assert "cannot read" in err
        assert "check permissions" in err
