"""Read and rewrite the Lagoon CLI configuration file (``~/.lagoon.yml``).

The file maps instance names to connection settings under a top-level
``lagoons`` key; this module only touches each instance's ``sshkey``.
PyYAML is imported lazily so that ``--help``/``--version``/``doctor``
keep working without it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from lagoon_wrap.core.protocols import ActionLogger
from lagoon_wrap.exceptions import ConfigError, DependencyError, InstanceNotFoundError

logger = logging.getLogger(__name__)

# Files in ~/.ssh that are never private keys.
_NON_KEY_FILES: frozenset[str] = frozenset({"known_hosts", "authorized_keys", "config"})


def _import_yaml() -> Any:
    """Import PyYAML lazily."""
    try:
        import yaml
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "PyYAML is not installed. Install with: pip install pyyaml",
        ) from exc
    return yaml


class LagoonConfigStore:
    """Structured access to one Lagoon YAML configuration file."""

    def __init__(self, path: Path, action_log: ActionLogger | None = None) -> None:
        self._path: Path = Path(path).expanduser()
        self._action_log = action_log

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Whole-file I/O
    # ------------------------------------------------------------------

    def read(self) -> dict[str, Any]:
        """Load the configuration as a dict.

        Raises
        ------
        ConfigError
            If the file is missing, unreadable or not a YAML mapping.
        """
        yaml = _import_yaml()
        try:
            content = self._path.read_text(encoding="utf-8")
            data = yaml.safe_load(content)
        except OSError as exc:
            self._log_error("Read Config", exc)
            raise ConfigError(
                f"Failed to read Lagoon configuration: {exc}",
                hint=f"Expected the Lagoon CLI config at {self._path}.",
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse Lagoon configuration: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Failed to read Lagoon configuration: {self._path} is not a YAML mapping.",
            )
        return data

    def write(self, config: dict[str, Any]) -> None:
        yaml = _import_yaml()
        try:
            rendered = yaml.safe_dump(config, default_flow_style=False, sort_keys=False)
            self._path.write_text(rendered, encoding="utf-8")
        except (OSError, yaml.YAMLError) as exc:
            self._log_error("Write Config", exc)
            raise ConfigError(f"Failed to write Lagoon configuration: {exc}") from exc
        logger.debug("Wrote Lagoon configuration to %s", self._path)
        if self._action_log is not None:
            self._action_log.log_action(
                "Write Config", str(self._path), "Successfully updated Lagoon configuration",
            )

    def _log_error(self, action: str, exc: BaseException) -> None:
        if self._action_log is not None:
            self._action_log.log_error(action, str(self._path), exc)

    # ------------------------------------------------------------------
    # Instance helpers
    # ------------------------------------------------------------------

    def instance(self, name: str, config: dict[str, Any] | None = None) -> dict[str, Any]:
        """Return the settings mapping for instance *name*.

        Raises
        ------
        InstanceNotFoundError
            When ``lagoons.<name>`` is absent.
        """
        data = self.read() if config is None else config
        lagoons = data.get("lagoons")
        if not isinstance(lagoons, dict) or not isinstance(lagoons.get(name), dict):
            raise InstanceNotFoundError(
                f'Lagoon instance "{name}" not found in configuration',
                hint=f"Check the 'lagoons' section of {self._path}.",
            )
        return lagoons[name]

    def ssh_key(self, name: str) -> str | None:
        """Return the configured ``sshkey`` path for *name*, if any."""
        value = self.instance(name).get("sshkey")
        return str(value) if value else None

    def set_ssh_key(self, name: str, key_path: str) -> None:
        """Point instance *name* at *key_path* and rewrite the file."""
        config = self.read()
        self.instance(name, config)["sshkey"] = key_path
        self.write(config)


def list_ssh_keys(ssh_dir: Path) -> list[Path]:
    """Return the private keys in *ssh_dir*, sorted by name.

    ``*.pub`` files, ``known_hosts``, ``authorized_keys``, ``config`` and
    sub-directories are excluded.
    """
    directory = Path(ssh_dir).expanduser()
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise ConfigError(f"Failed to list SSH keys: {exc}") from exc

    return sorted(
        (
            entry
            for entry in entries
            if entry.is_file()
            and not entry.name.endswith(".pub")
            and entry.name not in _NON_KEY_FILES
        ),
        key=lambda entry: entry.name,
    )
