"""Tests for executable detection (infra/binary_detector.py).

``shutil.which`` and ``platform.system`` are patched — the result never
depends on what is installed on the test machine.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from lagoon_wrap.exceptions import ExecutableNotFoundError
from lagoon_wrap.infra.binary_detector import (
    _platform_install_commands,
    detect_binary,
    require_binary,
)


class TestDetectBinary:
    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value="/usr/local/bin/lagoon")
    def test_found(self, _mock_which: MagicMock) -> None:
        status = detect_binary("lagoon")
        assert status.found is True
        assert status.path == Path("/usr/local/bin/lagoon").resolve()
        assert status.install_commands == ()

    @patch("lagoon_wrap.infra.binary_detector.platform.system", return_value="Linux")
    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value=None)
    def test_missing(self, _mock_which: MagicMock, _mock_system: MagicMock) -> None:
        status = detect_binary("git")
        assert status.found is False
        assert status.path is None
        assert "sudo apt install git" in status.install_commands

    @patch("lagoon_wrap.infra.binary_detector.platform.system", return_value="Linux")
    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value=None)
    def test_missing_custom_path_uses_basename(
        self, _mock_which: MagicMock, _mock_system: MagicMock,
    ) -> None:
        status = detect_binary("/opt/tools/lagoon")
        assert status.install_commands
        assert "releases" in status.install_commands[0]


class TestRequireBinary:
    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value="/usr/bin/git")
    def test_returns_path(self, _mock_which: MagicMock) -> None:
        assert require_binary("git") == Path("/usr/bin/git").resolve()

    @patch("lagoon_wrap.infra.binary_detector.platform.system", return_value="Darwin")
    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value=None)
    def test_raises_with_hint(self, _mock_which: MagicMock, _mock_system: MagicMock) -> None:
        with pytest.raises(ExecutableNotFoundError) as exc_info:
            require_binary("lagoon")
        assert exc_info.value.hint is not None
        assert "brew install uselagoon/lagoon-cli/lagoon" in exc_info.value.hint

    @patch("lagoon_wrap.infra.binary_detector.shutil.which", return_value=None)
    def test_unknown_binary_has_no_hint(self, _mock_which: MagicMock) -> None:
        with pytest.raises(ExecutableNotFoundError) as exc_info:
            require_binary("not-a-real-tool")
        assert exc_info.value.hint is None


class TestInstallCommands:
    @pytest.mark.parametrize(
        ("system", "expected"),
        [
            ("Darwin", "brew install git"),
            ("Windows", "winget install Git.Git"),
            ("Linux", "sudo pacman -S git"),
        ],
    )
    def test_git(self, system: str, expected: str) -> None:
        with patch("lagoon_wrap.infra.binary_detector.platform.system", return_value=system):
            assert expected in _platform_install_commands("git")

    def test_lagoon_linux_points_at_releases(self) -> None:
        with patch("lagoon_wrap.infra.binary_detector.platform.system", return_value="Linux"):
            (command,) = _platform_install_commands("lagoon")
        assert "github.com/uselagoon/lagoon-cli/releases" in command
