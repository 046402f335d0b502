"""Infrastructure layer — process spawning, files, and the OS.

This layer wraps all interaction with the ``lagoon``/``git``
executables, the filesystem and PATH.  Every raw ``subprocess``,
``OSError`` or YAML exception must be caught here and re-raised as a
:class:`~lagoon_wrap.exceptions.LagoonWrapError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from lagoon_wrap.infra.action_log import ActionLog
from lagoon_wrap.infra.binary_detector import BinaryStatus, detect_binary, require_binary
from lagoon_wrap.infra.config_store import LagoonConfigStore, list_ssh_keys
from lagoon_wrap.infra.executor import SubprocessExecutor

__all__: list[str] = [
    "ActionLog",
    "BinaryStatus",
    "LagoonConfigStore",
    "SubprocessExecutor",
    "detect_binary",
    "list_ssh_keys",
    "require_binary",
]
