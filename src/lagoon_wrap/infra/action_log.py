"""File-backed audit log of every action and command.

One file per day, ``<log_dir>/log--YYYYMMDD.txt``, with lines::

    [2026-10-19T08:15:02.113+00:00] ACTION: List Projects for amazeeio | COMMAND: lagoon -l amazeeio list projects --output-json | RESULT: Success
    [2026-10-19T08:16:40.870+00:00] ERROR: Deploy Branch main to site | COMMAND: lagoon ... | ERROR: Command failed ...

Writes go through a dedicated :mod:`logging` logger that does not
propagate to the root logger.
"""

from __future__ import annotations

import itertools
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from lagoon_wrap.exceptions import ConfigError

NO_COMMAND = "N/A"

_instance_ids = itertools.count()


class _IsoFormatter(logging.Formatter):
    """``[<ISO-8601 UTC timestamp>] <message>``."""

    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return stamp.isoformat(timespec="milliseconds")


class ActionLog:
    """Audit logger satisfying :class:`~lagoon_wrap.core.protocols.ActionLogger`.

    Parameters
    ----------
    log_dir:
        Directory for the daily files; created on first use.
    """

    def __init__(self, log_dir: Path) -> None:
        self._log_dir: Path = Path(log_dir)
        self._logger: logging.Logger = logging.getLogger(
            f"{__name__}.{next(_instance_ids)}",
        )
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._handler: logging.FileHandler | None = None

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def current_log_file(self) -> Path:
        """Path of today's log file."""
        return self._log_dir / f"log--{datetime.now(timezone.utc):%Y%m%d}.txt"

    # ------------------------------------------------------------------
    # ActionLogger protocol
    # ------------------------------------------------------------------

    def log_action(self, action: str, command: str, result: str | None = None) -> None:
        message = f"ACTION: {action} | COMMAND: {command}"
        if result:
            message += f" | RESULT: {result}"
        self._write(message)

    def log_error(self, action: str, command: str, error: BaseException) -> None:
        # First line only; multi-line stderr would break the one-entry-per-line layout.
        first_line = str(error).splitlines()[0] if str(error) else type(error).__name__
        self._write(f"ERROR: {action} | COMMAND: {command} | ERROR: {first_line}")

    def close(self) -> None:
        """Detach and close the file handler (idempotent)."""
        if self._handler is not None:
            self._logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, message: str) -> None:
        self._ensure_handler()
        self._logger.info(message)

    def _ensure_handler(self) -> None:
        """Attach a handler for today's file, rolling over at midnight UTC."""
        path = self.current_log_file()
        if self._handler is not None and self._handler.baseFilename == os.path.abspath(path):
            return
        self.close()
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"Cannot write action log in {self._log_dir}: {exc}",
                hint="Set LAGOON_WRAP_LOG_DIR or --log-dir to a writable directory.",
            ) from exc
        handler.setFormatter(_IsoFormatter())
        self._logger.addHandler(handler)
        self._handler = handler
