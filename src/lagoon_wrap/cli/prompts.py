"""Interactive prompts for the CLI layer.

This module is responsible for:

* Wrapping questionary behind a small :class:`QuestionaryPrompter` so the
  session can be driven by a scripted prompter in tests.
* Building environment labels that carry pull-request links.

questionary is imported lazily; ``--help``, ``--version`` and
``doctor`` never need it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from lagoon_wrap.core.policy import extract_pull_request_number, pull_request_url
from lagoon_wrap.exceptions import DependencyError

Choice = tuple[str, Any]
"""``(label, value)`` pair offered to the user."""


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Label helpers (pure)
# ---------------------------------------------------------------------------

def environment_label(
    environment: str,
    github_base_url: str | None,
    *,
    with_url: bool = True,
) -> str:
    """Render ``pr-12 (PR #12: https://github.com/org/repo/pull/12)``.

    Non-PR environments, or projects without a GitHub remote, render as
    the bare name.  ``with_url=False`` keeps only ``(PR #12)``.
    """
    url = pull_request_url(github_base_url, environment)
    if url is None:
        return environment
    number = extract_pull_request_number(environment)
    if with_url:
        return f"{environment} (PR #{number}: {url})"
    return f"{environment} (PR #{number})"


def environment_choices(
    environments: Sequence[str],
    github_base_url: str | None,
    *,
    with_url: bool = False,
) -> list[Choice]:
    return [
        (environment_label(env, github_base_url, with_url=with_url), env)
        for env in environments
    ]


# ---------------------------------------------------------------------------
# Prompter contract and questionary implementation
# ---------------------------------------------------------------------------

class Prompter(Protocol):
    """What the interactive session needs from a terminal."""

    def select(self, message: str, choices: Sequence[Choice], *, search: bool = False) -> Any:
        ...  # pragma: no cover

    def checkbox(self, message: str, choices: Sequence[Choice]) -> list[Any]:
        ...  # pragma: no cover

    def confirm(self, message: str, *, default: bool = False) -> bool:
        ...  # pragma: no cover

    def text(self, message: str, *, default: str = "") -> str:
        ...  # pragma: no cover

    def pause(self) -> None:
        ...  # pragma: no cover


class QuestionaryPrompter:
    """:class:`Prompter` backed by questionary.

    ``unsafe_ask`` is used throughout so Ctrl+C raises
    ``KeyboardInterrupt`` and reaches the CLI error boundary instead of
    being turned into ``None``.
    """

    def __init__(self) -> None:
        self._q: Any = _import_questionary()

    def _choices(self, choices: Sequence[Choice]) -> list[Any]:
        return [self._q.Choice(title=label, value=value) for label, value in choices]

    def select(self, message: str, choices: Sequence[Choice], *, search: bool = False) -> Any:
        """Single selection; ``search=True`` enables type-to-filter."""
        return self._q.select(
            message,
            choices=self._choices(choices),
            use_search_filter=search,
            use_jk_keys=not search,
            use_shortcuts=False,
        ).unsafe_ask()

    def checkbox(self, message: str, choices: Sequence[Choice]) -> list[Any]:
        return list(self._q.checkbox(message, choices=self._choices(choices)).unsafe_ask())

    def confirm(self, message: str, *, default: bool = False) -> bool:
        return bool(self._q.confirm(message, default=default).unsafe_ask())

    def text(self, message: str, *, default: str = "") -> str:
        return str(self._q.text(message, default=default).unsafe_ask())

    def pause(self) -> None:
        self._q.press_any_key_to_continue("Press any key to continue...").unsafe_ask()
