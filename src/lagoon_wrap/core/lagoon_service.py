"""Core Lagoon service — guards → command → runner → parser.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~lagoon_wrap.core.protocols.CommandRunner` injected
at construction time, keeping the core free of process spawning.

Guarantees
----------
* Validation (protected environments, branch names) happens before any
  command is built; a rejected operation spawns nothing.
* One fresh command object per operation, executed exactly once.
* No automatic retries.  Every failure surfaces as a
  :class:`~lagoon_wrap.exceptions.LagoonWrapError` with the instance,
  project, environment or branch prepended to its message.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager

from lagoon_wrap.core import parsers
from lagoon_wrap.core.commands import GIT_EXECUTABLE, LAGOON_EXECUTABLE, GitCommand, LagoonCommand
from lagoon_wrap.core.models import (
    DeletionOutcome,
    DeletionReport,
    DeploymentResult,
    Project,
)
from lagoon_wrap.core.policy import (
    is_deletion_protected,
    is_login_link_protected,
    is_valid_branch_name,
)
from lagoon_wrap.core.protocols import CommandRunner
from lagoon_wrap.exceptions import (
    CommandExecutionError,
    InvalidBranchNameError,
    LagoonWrapError,
    ProtectedEnvironmentError,
    ValidationError,
)

LOGIN_LINK_REMOTE_COMMAND = "drush user:unblock --uid=1 && drush uli"
CLEAR_CACHE_REMOTE_COMMAND = "drush cr"
DEFAULT_SSH_SERVICE = "cli"

PRIORITY_BRANCHES: tuple[str, ...] = ("main", "master", "develop")


@contextmanager
def _failure_context(context: str) -> Iterator[None]:
    """Prefix any escaping :class:`LagoonWrapError` with *context*."""
    try:
        yield
    except LagoonWrapError as exc:
        exc.add_context(context)
        raise


class LagoonService:
    """Stateless service wrapping the Lagoon CLI and ``git ls-remote``.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`CommandRunner` protocol.
    lagoon_binary, git_binary:
        Executable names (or paths) passed to the command builders.
    """

    def __init__(
        self,
        runner: CommandRunner,
        *,
        lagoon_binary: str = LAGOON_EXECUTABLE,
        git_binary: str = GIT_EXECUTABLE,
    ) -> None:
        self._runner: CommandRunner = runner
        self._lagoon_binary: str = lagoon_binary
        self._git_binary: str = git_binary

    def _lagoon(self) -> LagoonCommand:
        return LagoonCommand(self._lagoon_binary)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def get_instances(self) -> list[str]:
        """Return the configured Lagoon instance names, annotations stripped."""
        command = self._lagoon().list_configs().with_json_output()
        with _failure_context("Failed to get Lagoon instances"):
            result = self._runner.execute(command, "List Lagoon Instances")
            return parsers.parse_instance_names(result.stdout)

    def get_projects_with_details(self, instance: str) -> list[Project]:
        command = self._lagoon().with_instance(instance).list_projects().with_json_output()
        with _failure_context(f"Failed to get projects for instance {instance}"):
            result = self._runner.execute(command, f"List Projects for {instance}")
            return parsers.parse_projects(result.stdout)

    def get_projects(self, instance: str) -> list[str]:
        return [project.name for project in self.get_projects_with_details(instance)]

    def get_environments(self, instance: str, project: str) -> list[str]:
        command = (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .list_environments()
            .with_json_output()
        )
        with _failure_context(f"Failed to get environments for project {project}"):
            result = self._runner.execute(command, f"List Environments for {project}")
            return parsers.parse_environment_names(result.stdout)

    def get_users(self, instance: str, project: str) -> list[str]:
        command = self._lagoon().with_instance(instance).with_project(project).list_users()
        with _failure_context(f"Failed to get users for project {project}"):
            result = self._runner.execute(command, f"List Users for {project}")
            return parsers.parse_user_names(result.stdout)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_environment(self, instance: str, project: str, environment: str) -> None:
        """Delete *environment* unless it is protected.

        Raises
        ------
        ProtectedEnvironmentError
            Before anything runs, for ``production``/``master``/``develop``
            and ``project/*``.
        OperationFailedError
            When Lagoon answers ``{"result": "error"}``.
        ResponseParseError
            When the response is not ``{"result": "success"}``-shaped.
        CommandExecutionError
            When the ``lagoon`` process fails.
        """
        if is_deletion_protected(environment):
            raise ProtectedEnvironmentError(
                f"Cannot delete protected environment: {environment}",
            )

        command = (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .delete_environment(environment)
            .with_force()
            .with_json_output()
        )
        with _failure_context(f"Failed to delete environment {environment}"):
            result = self._runner.execute(
                command, f"Delete Environment {environment} from {project}",
            )
            parsers.classify_result(result.stdout, "delete environment")

    def delete_environments(
        self,
        instance: str,
        project: str,
        environments: Iterable[str],
        *,
        on_outcome: Callable[[DeletionOutcome], None] | None = None,
    ) -> DeletionReport:
        """Delete each environment in order, continuing past failures.

        Each deletion completes (or fails) before the next one starts.
        *on_outcome* is called after every attempt, e.g. to update a
        spinner.
        """
        outcomes: list[DeletionOutcome] = []
        for environment in environments:
            try:
                self.delete_environment(instance, project, environment)
            except LagoonWrapError as exc:
                outcome = DeletionOutcome(environment=environment, error=exc)
            else:
                outcome = DeletionOutcome(environment=environment)
            outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return DeletionReport(outcomes=tuple(outcomes))

    # ------------------------------------------------------------------
    # Remote commands on an environment
    # ------------------------------------------------------------------

    def generate_login_link(self, instance: str, project: str, environment: str) -> str:
        """Return a one-time Drupal login URL for *environment*."""
        if is_login_link_protected(environment):
            raise ProtectedEnvironmentError(
                f"Cannot generate login link for protected environment: {environment}",
            )

        command = (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .with_environment(environment)
            .ssh(LOGIN_LINK_REMOTE_COMMAND)
        )
        with _failure_context(f"Failed to generate login link for environment {environment}"):
            result = self._runner.execute(
                command, f"Generate Login Link for {environment} in {project}",
            )
            return result.stdout.strip()

    def clear_drupal_cache(self, instance: str, project: str, environment: str) -> str:
        command = (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .with_environment(environment)
            .ssh(CLEAR_CACHE_REMOTE_COMMAND)
        )
        with _failure_context(f"Failed to clear cache for environment {environment}"):
            result = self._runner.execute(
                command, f"Clear Cache for {environment} in {project}",
            )
            return result.stdout.strip()

    def ssh_command(
        self,
        instance: str,
        project: str,
        environment: str,
        service: str = DEFAULT_SSH_SERVICE,
    ) -> LagoonCommand:
        """Build (but do not run) an interactive SSH command for the user to copy."""
        return (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .with_environment(environment)
            .ssh_session(service or DEFAULT_SSH_SERVICE)
        )

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    def deploy_branch(self, instance: str, project: str, branch: str) -> DeploymentResult:
        """Ask Lagoon to deploy *branch*.

        Returns as soon as Lagoon accepts the request; the deployment
        itself continues remotely.

        Raises
        ------
        InvalidBranchNameError
            Before anything runs, for names outside ``[A-Za-z0-9_./-]``.
        """
        if not is_valid_branch_name(branch):
            raise InvalidBranchNameError(
                f"Invalid branch name: {branch!r}",
                hint=(
                    "Branch names must contain only alphanumeric characters, "
                    "slashes, underscores, hyphens, and periods."
                ),
            )

        command = (
            self._lagoon()
            .with_instance(instance)
            .with_project(project)
            .deploy_branch(branch)
            .with_json_output()
        )
        with _failure_context(f"Failed to deploy branch {branch}"):
            result = self._runner.execute(command, f"Deploy Branch {branch} to {project}")
            parsers.classify_result(result.stdout, "deploy branch")

        return DeploymentResult(
            branch=branch,
            project=project,
            message=f"Branch {branch} is being deployed to {project}",
        )

    def get_git_branches(self, git_url: str | None) -> list[str]:
        """List branch names on the remote *git_url* via ``git ls-remote``."""
        if not git_url:
            raise ValidationError("Git URL not provided or invalid")

        command = GitCommand(self._git_binary).ls_remote(git_url)
        with _failure_context("Failed to get git branches"):
            try:
                result = self._runner.execute(command, "List Branches")
            except CommandExecutionError as exc:
                exc.hint = exc.hint or _git_failure_hint(git_url, exc)
                raise
            return parsers.parse_remote_branches(result.stdout)

    @staticmethod
    def sort_branches(branches: Sequence[str]) -> list[str]:
        """Order ``main``, ``master``, ``develop`` first, then alphabetically."""
        def key(branch: str) -> tuple[int, str]:
            if branch in PRIORITY_BRANCHES:
                return (PRIORITY_BRANCHES.index(branch), "")
            return (len(PRIORITY_BRANCHES), branch)

        return sorted(branches, key=key)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def refresh_token(self, instance: str) -> None:
        """Run ``lagoon -l <instance> login`` with the configured SSH key."""
        command = self._lagoon().with_instance(instance).login()
        with _failure_context(f"Failed to refresh token for {instance}"):
            self._runner.execute(command, f"Refresh Token for {instance}")


def _git_failure_hint(git_url: str, exc: CommandExecutionError) -> str | None:
    details = f"{exc} {exc.stderr}"
    if git_url.startswith("git@") and "Permission denied" in details:
        return f"Authentication failed for {git_url}. Please check your SSH key configuration."
    if "not found" in details.lower():
        return f"Repository not found: {git_url}. Please check if the URL is correct."
    return None
