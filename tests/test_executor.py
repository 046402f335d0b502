"""Tests for the subprocess-backed executor (infra/executor.py).

``subprocess.run`` is patched throughout — no process is ever spawned.

Coverage:
* The argument vector is passed as a list, never through a shell.
* Non-zero exits, missing executables and timeouts map to typed errors.
* The audit logger is notified, and its absence or failure never
  blocks a command.
"""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from lagoon_wrap.core.commands import GitCommand, LagoonCommand
from lagoon_wrap.exceptions import CommandExecutionError, ConfigError, ExecutableNotFoundError
from lagoon_wrap.infra.executor import SubprocessExecutor


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    completed = MagicMock()
    completed.returncode = returncode
    completed.stdout = stdout
    completed.stderr = stderr
    return completed


def _command() -> LagoonCommand:
    return LagoonCommand().with_instance("amazeeio").list_projects().with_json_output()


# ---------------------------------------------------------------------------
# Process invocation
# ---------------------------------------------------------------------------

class TestExecute:
    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_runs_argument_vector(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout='{"data": []}')

        result = SubprocessExecutor().execute(_command(), "List Projects")

        assert result.stdout == '{"data": []}'
        args, kwargs = mock_run.call_args
        assert args[0] == ["lagoon", "-l", "amazeeio", "list", "projects", "--output-json"]
        assert kwargs.get("shell", False) is False
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_git_command(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout="abc\trefs/heads/main\n")

        SubprocessExecutor().execute(GitCommand().ls_remote("git@github.com:o/r.git"))

        assert mock_run.call_args.args[0] == ["git", "ls-remote", "--heads", "git@github.com:o/r.git"]

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_timeout_is_forwarded(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        SubprocessExecutor(timeout=12.5).execute(_command())
        assert mock_run.call_args.kwargs["timeout"] == 12.5

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_stderr_is_captured_on_success(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout="ok", stderr="warning: deprecated")
        result = SubprocessExecutor().execute(_command())
        assert result.stderr == "warning: deprecated"

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_on_execute_receives_display_string(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        seen: list[str] = []

        SubprocessExecutor(on_execute=seen.append).execute(_command())

        assert seen == ["lagoon -l amazeeio list projects --output-json"]


# ---------------------------------------------------------------------------
# Failure mapping
# ---------------------------------------------------------------------------

class TestFailures:
    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_non_zero_exit(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(returncode=1, stderr="Error: project not found\n")

        with pytest.raises(CommandExecutionError) as exc_info:
            SubprocessExecutor().execute(_command())

        exc = exc_info.value
        assert exc.returncode == 1
        assert exc.stderr == "Error: project not found"
        assert exc.command == "lagoon -l amazeeio list projects --output-json"
        assert "exit code 1" in str(exc)
        assert "project not found" in str(exc)

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_non_zero_exit_falls_back_to_stdout(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(returncode=2, stdout="denied")

        with pytest.raises(CommandExecutionError, match="denied"):
            SubprocessExecutor().execute(_command())

    @patch("lagoon_wrap.infra.executor.subprocess.run", side_effect=FileNotFoundError("lagoon"))
    def test_missing_executable(self, _mock_run: MagicMock) -> None:
        with pytest.raises(ExecutableNotFoundError) as exc_info:
            SubprocessExecutor().execute(_command())
        assert exc_info.value.hint is not None
        assert "lagoon" in str(exc_info.value)

    @patch(
        "lagoon_wrap.infra.executor.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd=["lagoon"], timeout=5),
    )
    def test_timeout(self, _mock_run: MagicMock) -> None:
        with pytest.raises(CommandExecutionError, match="timed out"):
            SubprocessExecutor(timeout=5).execute(_command())

    @patch("lagoon_wrap.infra.executor.subprocess.run", side_effect=PermissionError("denied"))
    def test_os_error(self, _mock_run: MagicMock) -> None:
        with pytest.raises(CommandExecutionError) as exc_info:
            SubprocessExecutor().execute(_command())
        assert not isinstance(exc_info.value, ExecutableNotFoundError)

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_output_is_decoded_with_replacement(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout="caf\ufffd")

        result = SubprocessExecutor().execute(_command())

        kwargs = mock_run.call_args.kwargs
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"
        assert result.stdout == "caf\ufffd"

    @patch(
        "lagoon_wrap.infra.executor.subprocess.run",
        side_effect=UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
    )
    def test_decode_error_is_wrapped(self, _mock_run: MagicMock) -> None:
        action_log = MagicMock()

        with pytest.raises(CommandExecutionError, match="Could not run lagoon"):
            SubprocessExecutor(action_log).execute(_command(), "List Projects")

        action_log.log_error.assert_called_once()
        action_log.log_action.assert_not_called()


# ---------------------------------------------------------------------------
# Audit logging
# ---------------------------------------------------------------------------

class TestAuditLogging:
    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_success_is_logged(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        action_log = MagicMock()

        SubprocessExecutor(action_log).execute(_command(), "List Projects")

        action_log.log_action.assert_called_once_with(
            "List Projects", "lagoon -l amazeeio list projects --output-json", "Success",
        )
        action_log.log_error.assert_not_called()

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_failure_is_logged_and_reraised(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(returncode=1, stderr="boom")
        action_log = MagicMock()

        with pytest.raises(CommandExecutionError):
            SubprocessExecutor(action_log).execute(_command(), "List Projects")

        action_log.log_action.assert_not_called()
        action, command, error = action_log.log_error.call_args.args
        assert action == "List Projects"
        assert command.startswith("lagoon -l amazeeio")
        assert isinstance(error, CommandExecutionError)

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_default_action_label(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        action_log = MagicMock()

        SubprocessExecutor(action_log).execute(_command())

        assert action_log.log_action.call_args.args[0] == "Unknown Action"

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_logger_without_methods_is_skipped(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout="ok")
        result = SubprocessExecutor(object()).execute(_command())  # type: ignore[arg-type]
        assert result.stdout == "ok"

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_failing_logger_does_not_block(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(stdout="ok")
        action_log = MagicMock()
        action_log.log_action.side_effect = ConfigError("disk full")

        result = SubprocessExecutor(action_log).execute(_command())

        assert result.stdout == "ok"

    @patch("lagoon_wrap.infra.executor.subprocess.run")
    def test_failing_error_logger_keeps_original_error(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(returncode=3, stderr="real problem")
        action_log = MagicMock()
        action_log.log_error.side_effect = OSError("read-only")

        with pytest.raises(CommandExecutionError, match="real problem"):
            SubprocessExecutor(action_log).execute(_command())
