"""Policy guards — pure predicates encoding environment and branch rules.

Every function here is side-effect free and never raises; callers branch
on the returned value and raise domain errors themselves.

Two distinct protection sets exist:

* **Deletion** — ``production``, ``master``, ``develop`` and anything
  under ``project/``.
* **Login links** — only ``production`` and ``master``.
"""

from __future__ import annotations

import re

DELETION_PROTECTED: frozenset[str] = frozenset({"production", "master", "develop"})
DELETION_PROTECTED_PREFIX = "project/"

LOGIN_LINK_PROTECTED: frozenset[str] = frozenset({"production", "master"})

_PR_ENVIRONMENT = re.compile(r"pr-([0-9]+)", re.IGNORECASE)
_BRANCH_NAME = re.compile(r"[A-Za-z0-9_./-]+")

_GITHUB_HOST = "github.com"
_GITHUB_SSH_PREFIX = "git@github.com:"


# ---------------------------------------------------------------------------
# Environment protection
# ---------------------------------------------------------------------------

def is_deletion_protected(environment: str | None) -> bool:
    """Return ``True`` if *environment* must never be deleted (case-sensitive)."""
    if not environment:
        return False
    return (
        environment in DELETION_PROTECTED
        or environment.startswith(DELETION_PROTECTED_PREFIX)
    )


def is_login_link_protected(environment: str | None) -> bool:
    """Return ``True`` if no one-time login link may be issued for *environment*."""
    if not environment:
        return False
    return environment in LOGIN_LINK_PROTECTED


# ---------------------------------------------------------------------------
# Pull-request environments
# ---------------------------------------------------------------------------

def extract_pull_request_number(environment: str | None) -> str | None:
    """Return the digits of a ``pr-<N>`` environment name, else ``None``.

    >>> extract_pull_request_number("PR-7")
    '7'
    >>> extract_pull_request_number("feature-pr-5") is None
    True
    """
    if not environment:
        return None
    match = _PR_ENVIRONMENT.fullmatch(environment)
    return match.group(1) if match else None


def to_github_url(git_url: str | None) -> str | None:
    """Convert a GitHub remote into its HTTPS web URL.

    * ``git@github.com:org/repo.git`` → ``https://github.com/org/repo``
    * other URLs containing ``github.com`` lose a trailing ``.git`` only
    * anything else → ``None``
    """
    if not git_url or _GITHUB_HOST not in git_url:
        return None
    if git_url.startswith(_GITHUB_SSH_PREFIX):
        path = git_url[len(_GITHUB_SSH_PREFIX):].removesuffix(".git")
        return f"https://github.com/{path}"
    return git_url.removesuffix(".git")


def pull_request_url(github_base_url: str | None, environment: str) -> str | None:
    """Return the pull-request page for *environment*, when derivable."""
    number = extract_pull_request_number(environment)
    if number is None or not github_base_url:
        return None
    return f"{github_base_url}/pull/{number}"


# ---------------------------------------------------------------------------
# Branch names
# ---------------------------------------------------------------------------

def is_valid_branch_name(branch: str | None) -> bool:
    """Return ``True`` iff *branch* is non-empty and only uses ``[A-Za-z0-9_./-]``."""
    if not branch:
        return False
    return _BRANCH_NAME.fullmatch(branch) is not None
