"""Response parsers — raw command output → domain values.

Each parser targets one wrapped-CLI operation's known output shape.
Parse failures raise :class:`~lagoon_wrap.exceptions.ResponseParseError`
naming the operation and carrying the raw output, so callers can tell
"the command ran but its result was unintelligible" apart from
"the command did not run".
"""

from __future__ import annotations

import json
import re
from typing import Any

from lagoon_wrap.core.models import Project
from lagoon_wrap.exceptions import OperationFailedError, ResponseParseError

RESULT_SUCCESS = "success"
RESULT_ERROR = "error"

_INSTANCE_NAME_SPLIT = re.compile(r"\s+|\(")
_REMOTE_HEAD = re.compile(r"refs/heads/(.+)$")


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------

def parse_json(raw: str, operation: str) -> Any:
    """Decode *raw* as JSON or raise :class:`ResponseParseError`."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ResponseParseError(
            f"{operation}: output is not valid JSON ({exc}). Raw response: {raw!r}",
            operation=operation,
            raw=raw,
        ) from exc


def _data_records(raw: str, operation: str) -> list[dict[str, Any]]:
    """Return the ``data`` list of a ``--output-json`` listing."""
    payload = parse_json(raw, operation)
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise ResponseParseError(
            f"{operation}: expected a 'data' list. Raw response: {raw!r}",
            operation=operation,
            raw=raw,
        )
    for entry in data:
        if not isinstance(entry, dict):
            raise ResponseParseError(
                f"{operation}: expected object records in 'data'. Raw response: {raw!r}",
                operation=operation,
                raw=raw,
            )
    return data


def _field(record: dict[str, Any], key: str, raw: str, operation: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise ResponseParseError(
            f"{operation}: record without a '{key}' field. Raw response: {raw!r}",
            operation=operation,
            raw=raw,
        )
    return value


def classify_result(raw: str, operation: str) -> dict[str, Any]:
    """Classify a ``{"result": ...}`` response three ways.

    Returns
    -------
    dict
        The decoded response when ``result`` is ``"success"``.

    Raises
    ------
    OperationFailedError
        When the CLI declares ``"result": "error"``.
    ResponseParseError
        For unparseable output or any other ``result`` value.
    """
    payload = parse_json(raw, operation)
    result = payload.get("result") if isinstance(payload, dict) else None
    if result == RESULT_SUCCESS:
        return payload
    if result == RESULT_ERROR:
        raise OperationFailedError(f"{operation}: Lagoon reported an error: {raw.strip()}")
    raise ResponseParseError(
        f"{operation}: unexpected response format. Raw response: {raw!r}",
        operation=operation,
        raw=raw,
    )


# ---------------------------------------------------------------------------
# Instances
# ---------------------------------------------------------------------------

def clean_instance_name(raw_name: str) -> str:
    """Strip annotations such as ``(default)(current)`` from an instance name."""
    return _INSTANCE_NAME_SPLIT.split(raw_name.strip(), maxsplit=1)[0].strip()


def parse_instance_names(raw: str) -> list[str]:
    """Parse ``lagoon config list --output-json``."""
    operation = "config list"
    return [
        clean_instance_name(_field(record, "name", raw, operation))
        for record in _data_records(raw, operation)
    ]


# ---------------------------------------------------------------------------
# Projects and environments
# ---------------------------------------------------------------------------

def parse_projects(raw: str) -> list[Project]:
    """Parse ``lagoon list projects --output-json``."""
    operation = "list projects"
    projects: list[Project] = []
    for record in _data_records(raw, operation):
        git_url = record.get("giturl")
        projects.append(
            Project(
                name=_field(record, "projectname", raw, operation),
                git_url=git_url if isinstance(git_url, str) and git_url else None,
                details=dict(record),
            )
        )
    return projects


def parse_environment_names(raw: str) -> list[str]:
    """Parse ``lagoon list environments --output-json``."""
    operation = "list environments"
    return [_field(record, "name", raw, operation) for record in _data_records(raw, operation)]


# ---------------------------------------------------------------------------
# Plain-text outputs
# ---------------------------------------------------------------------------

def parse_user_names(raw: str) -> list[str]:
    """Parse the ``|``-separated table of ``lagoon list all-users``.

    The first non-empty line is a header and is discarded.
    """
    lines = [line for line in raw.splitlines() if line.strip()]
    return [line.split("|", 1)[0].strip() for line in lines[1:]]


def parse_remote_branches(raw: str) -> list[str]:
    """Parse ``git ls-remote --heads`` into branch names.

    Lines that do not reference ``refs/heads/`` are skipped.
    """
    branches: list[str] = []
    for line in raw.splitlines():
        if not line.strip():
            continue
        match = _REMOTE_HEAD.search(line.rstrip())
        if match:
            branches.append(match.group(1))
    return branches
