"""Structured command builders for the Lagoon CLI and git.

A command is an executable name plus an ordered list of argument
tokens.  Builders only ever *append* discrete tokens; nothing is
concatenated into a shell string, so values such as environment or
branch names are never interpreted by a shell.

Every ``with_*`` configurator and every parameterised verb is a silent
no-op for falsy values (``None``, ``""``).

Usage::

    command = (
        LagoonCommand()
        .with_instance("amazeeio")
        .with_project("my-site")
        .list_environments()
        .with_json_output()
    )
    command.to_arguments()
    # ['-l', 'amazeeio', '-p', 'my-site', 'list', 'environments', '--output-json']
"""

from __future__ import annotations

LAGOON_EXECUTABLE = "lagoon"
GIT_EXECUTABLE = "git"


class LagoonCommand:
    """Builder for a single ``lagoon`` invocation.

    Only one verb configurator should be used per instance; the builder
    does not enforce this.
    """

    def __init__(self, executable: str = LAGOON_EXECUTABLE) -> None:
        self._executable: str = executable
        self._arguments: list[str] = []

    # ------------------------------------------------------------------
    # Global flags
    # ------------------------------------------------------------------

    def with_instance(self, instance: str | None) -> LagoonCommand:
        if instance:
            self._arguments.extend(("-l", instance))
        return self

    def with_project(self, project: str | None) -> LagoonCommand:
        if project:
            self._arguments.extend(("-p", project))
        return self

    def with_environment(self, environment: str | None) -> LagoonCommand:
        if environment:
            self._arguments.extend(("-e", environment))
        return self

    def with_json_output(self) -> LagoonCommand:
        self._arguments.append("--output-json")
        return self

    def with_force(self) -> LagoonCommand:
        self._arguments.append("--force")
        return self

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def list_configs(self) -> LagoonCommand:
        self._arguments.extend(("config", "list"))
        return self

    def list_projects(self) -> LagoonCommand:
        self._arguments.extend(("list", "projects"))
        return self

    def list_environments(self) -> LagoonCommand:
        self._arguments.extend(("list", "environments"))
        return self

    def list_users(self) -> LagoonCommand:
        self._arguments.extend(("list", "all-users"))
        return self

    def delete_environment(self, environment: str | None) -> LagoonCommand:
        if environment:
            self._arguments.extend(("delete", "environment", "--environment", environment))
        return self

    def deploy_branch(self, branch: str | None) -> LagoonCommand:
        """Append ``deploy branch --branch <branch>``.

        Callers must validate *branch* with
        :func:`~lagoon_wrap.core.policy.is_valid_branch_name` first.
        """
        if branch:
            self._arguments.extend(("deploy", "branch", "--branch", branch))
        return self

    def login(self) -> LagoonCommand:
        self._arguments.append("login")
        return self

    def ssh(self, remote_command: str | None) -> LagoonCommand:
        """Run *remote_command* inside the environment (``ssh -C ...``).

        The remote command is a single token here; it is interpreted by
        the shell on the *remote* container, never locally.
        """
        if remote_command:
            self._arguments.extend(("ssh", "-C", remote_command))
        return self

    def ssh_session(self, service: str | None) -> LagoonCommand:
        """Open an interactive shell on *service* (``ssh --service ...``)."""
        if service:
            self._arguments.extend(("ssh", "--service", service))
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def to_executable_name(self) -> str:
        return self._executable

    def to_arguments(self) -> list[str]:
        return list(self._arguments)

    def to_display_string(self) -> str:
        """Space-joined rendering for logs and display.

        Never pass this string to anything that executes it.
        """
        return " ".join((self._executable, *self._arguments))

    def __repr__(self) -> str:
        return f"LagoonCommand({self.to_display_string()!r})"


class GitCommand:
    """Builder for a single ``git`` invocation."""

    def __init__(self, executable: str = GIT_EXECUTABLE) -> None:
        self._executable: str = executable
        self._arguments: list[str] = []

    def ls_remote(self, git_url: str | None) -> GitCommand:
        """Append ``ls-remote --heads <git_url>``."""
        if git_url:
            self._arguments.extend(("ls-remote", "--heads", git_url))
        return self

    def to_executable_name(self) -> str:
        return self._executable

    def to_arguments(self) -> list[str]:
        return list(self._arguments)

    def to_display_string(self) -> str:
        """Space-joined rendering for logs and display only."""
        return " ".join((self._executable, *self._arguments))

    def __repr__(self) -> str:
        return f"GitCommand({self.to_display_string()!r})"
