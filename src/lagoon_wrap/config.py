"""Runtime settings for lagoon-wrap.

Settings resolve in priority order:

1. Explicit CLI flags (applied by the CLI layer via :meth:`Settings.with_overrides`)
2. Environment variables (``LAGOON_WRAP_*``)
3. Built-in defaults
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from lagoon_wrap.exceptions import ConfigError

ENV_LAGOON_BIN = "LAGOON_WRAP_LAGOON_BIN"
ENV_GIT_BIN = "LAGOON_WRAP_GIT_BIN"
ENV_CONFIG = "LAGOON_WRAP_CONFIG"
ENV_LOG_DIR = "LAGOON_WRAP_LOG_DIR"
ENV_SSH_DIR = "LAGOON_WRAP_SSH_DIR"
ENV_TIMEOUT = "LAGOON_WRAP_TIMEOUT"


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for a single lagoon-wrap process."""

    lagoon_binary: str = "lagoon"
    """Executable name (or path) of the Lagoon CLI."""

    git_binary: str = "git"
    """Executable name (or path) of git."""

    lagoon_config_path: Path = Path("~/.lagoon.yml")
    """The Lagoon CLI YAML configuration file."""

    log_dir: Path = Path("~/.lagoon-wrap/logs")
    """Directory receiving the daily action log files."""

    ssh_dir: Path = Path("~/.ssh")
    """Directory scanned for private SSH keys."""

    timeout: float | None = None
    """Per-command timeout in seconds, or ``None`` to wait indefinitely."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``LAGOON_WRAP_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            lagoon_binary=env.get(ENV_LAGOON_BIN) or defaults.lagoon_binary,
            git_binary=env.get(ENV_GIT_BIN) or defaults.git_binary,
            lagoon_config_path=_path(env.get(ENV_CONFIG), defaults.lagoon_config_path),
            log_dir=_path(env.get(ENV_LOG_DIR), defaults.log_dir),
            ssh_dir=_path(env.get(ENV_SSH_DIR), defaults.ssh_dir),
            timeout=_timeout(env.get(ENV_TIMEOUT)),
        )

    def with_overrides(
        self,
        *,
        lagoon_config_path: str | None = None,
        log_dir: str | None = None,
    ) -> Settings:
        """Return a copy with CLI-flag overrides applied (``None`` = keep)."""
        updated = self
        if lagoon_config_path:
            updated = replace(updated, lagoon_config_path=_path(lagoon_config_path, self.lagoon_config_path))
        if log_dir:
            updated = replace(updated, log_dir=_path(log_dir, self.log_dir))
        return updated


def _path(raw: str | None, default: Path) -> Path:
    """Expand ``~`` in *raw*, falling back to *default*."""
    return Path(raw or default).expanduser()


def _timeout(raw: str | None) -> float | None:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid {ENV_TIMEOUT} value: {raw!r}",
            hint="Use a positive number of seconds.",
        ) from exc
    if value <= 0:
        raise ConfigError(
            f"Invalid {ENV_TIMEOUT} value: {raw!r}",
            hint="Use a positive number of seconds.",
        )
    return value
