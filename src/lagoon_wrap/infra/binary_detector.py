"""Infrastructure: locate wrapped executables and offer install guidance.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from lagoon_wrap.exceptions import ExecutableNotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BinaryStatus:
    """Result of a PATH probe for one executable.

    Attributes
    ----------
    name : str
        The executable that was looked up.
    found : bool
        Whether it was located on PATH.
    path : Path | None
        Absolute path to the binary, or ``None``.
    install_commands : tuple[str, ...]
        Suggested install commands for the current platform.  Empty
        when the binary is already present.
    """

    name: str
    found: bool
    path: Path | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_binary(name: str) -> BinaryStatus:
    """Probe PATH for *name*; never raises."""
    result = shutil.which(name)
    if result is not None:
        return BinaryStatus(
            name=name,
            found=True,
            path=Path(result).resolve(),
            install_commands=(),
        )
    return BinaryStatus(
        name=name,
        found=False,
        path=None,
        install_commands=_platform_install_commands(Path(name).name),
    )


def require_binary(name: str) -> Path:
    """Locate *name* or raise :class:`ExecutableNotFoundError`."""
    status = detect_binary(name)
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append(f"Install {name} using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ExecutableNotFoundError(
            f"{name} is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

_LAGOON_RELEASES = "https://github.com/uselagoon/lagoon-cli/releases"


def _platform_install_commands(name: str) -> tuple[str, ...]:
    """Return install commands for *name* on the current OS."""
    system = platform.system().lower()
    if name == "lagoon":
        if system == "darwin":
            return ("brew install uselagoon/lagoon-cli/lagoon",)
        return (f"Download the lagoon binary from {_LAGOON_RELEASES}",)
    if name == "git":
        if system == "windows":
            return ("winget install Git.Git",)
        if system == "linux":
            return (
                "sudo apt install git",
                "sudo dnf install git",
                "sudo pacman -S git",
            )
        if system == "darwin":
            return ("brew install git",)
    return ()
