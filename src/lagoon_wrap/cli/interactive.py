"""Interactive session — menu-driven orchestration of Lagoon operations.

The session keeps the current instance/project selection and runs one
flow per menu choice.  Each flow is strictly sequential: at most one
``lagoon``/``git`` process is in flight, and every prompt is answered
before the next step.  No business rules live here; protection and
branch validation are enforced by :class:`~lagoon_wrap.core.LagoonService`
(the eligible-environment lists below only pre-filter what is offered).
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from lagoon_wrap.cli.console import console, escape
from lagoon_wrap.cli.prompts import Prompter, environment_choices, environment_label
from lagoon_wrap.cli.spinner import Spinner
from lagoon_wrap.cli.ssh_keys import configure_ssh_key
from lagoon_wrap.core.lagoon_service import DEFAULT_SSH_SERVICE, LagoonService
from lagoon_wrap.core.models import DeletionOutcome, Project
from lagoon_wrap.core.policy import is_deletion_protected, is_login_link_protected, to_github_url
from lagoon_wrap.core.protocols import ActionLogger
from lagoon_wrap.exceptions import ConfigError, LagoonWrapError, ValidationError
from lagoon_wrap.infra.action_log import NO_COMMAND
from lagoon_wrap.infra.config_store import LagoonConfigStore

SpinnerFactory = Callable[[str], Any]

# Menu action identifiers, in display order.
LIST_ENVIRONMENTS = "listEnvironments"
LIST_USERS = "listUsers"
DELETE_ENVIRONMENT = "deleteEnvironment"
GENERATE_LOGIN_LINK = "generateLoginLink"
CLEAR_CACHE = "clearCache"
DEPLOY_BRANCH = "deployBranch"
SSH_TO_ENVIRONMENT = "sshToEnvironment"
CHANGE_PROJECT = "changeProject"
CHANGE_INSTANCE = "changeInstance"
CONFIGURE_SSH_KEY = "configureUserSshKey"
EXIT = "exit"

MENU: tuple[tuple[str, str], ...] = (
    ("List Environments", LIST_ENVIRONMENTS),
    ("List Users", LIST_USERS),
    ("Delete Environment", DELETE_ENVIRONMENT),
    ("Generate Login Link", GENERATE_LOGIN_LINK),
    ("Clear Drupal Cache", CLEAR_CACHE),
    ("Deploy Branch", DEPLOY_BRANCH),
    ("SSH to Environment", SSH_TO_ENVIRONMENT),
    ("Change Project", CHANGE_PROJECT),
    ("Change Instance", CHANGE_INSTANCE),
    ("Configure User SSH Key", CONFIGURE_SSH_KEY),
    ("Exit", EXIT),
)


class InteractiveSession:
    """One interactive run of lagoon-wrap.

    Parameters
    ----------
    service:
        The core service; all wrapped-CLI access goes through it.
    prompter:
        Terminal prompts (questionary in production).
    config_store:
        The Lagoon YAML configuration, for the SSH-key flow.
    ssh_dir:
        Directory scanned for private keys.
    action_log:
        Optional audit log for session events (commands are logged by
        the executor).
    spinner_factory:
        Builds the activity indicator for a message.
    """

    def __init__(
        self,
        service: LagoonService,
        prompter: Prompter,
        *,
        config_store: LagoonConfigStore,
        ssh_dir: Path,
        action_log: ActionLogger | None = None,
        spinner_factory: SpinnerFactory = Spinner,
    ) -> None:
        self._service = service
        self._prompter = prompter
        self._config_store = config_store
        self._ssh_dir = ssh_dir
        self._action_log = action_log
        self._spinner = spinner_factory

        self.instance: str | None = None
        self.project: Project | None = None
        self.github_base_url: str | None = None

        self._handlers: dict[str, Callable[[], None]] = {
            LIST_ENVIRONMENTS: self.list_environments,
            LIST_USERS: self.list_users,
            DELETE_ENVIRONMENT: self.delete_environments,
            GENERATE_LOGIN_LINK: self.generate_login_link,
            CLEAR_CACHE: self.clear_cache,
            DEPLOY_BRANCH: self.deploy_branch,
            SSH_TO_ENVIRONMENT: self.ssh_to_environment,
            CONFIGURE_SSH_KEY: self.configure_ssh_key,
            CHANGE_PROJECT: self.change_project,
            CHANGE_INSTANCE: self.change_instance,
        }

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Loop over the main menu until the user exits.

        Domain errors are shown and the user decides whether to go on;
        ``KeyboardInterrupt`` propagates to the CLI error boundary.
        """
        console.print("[green]Welcome to the Lagoon CLI Wrapper![/green]")
        self._log("Application Start", "Interactive mode started")

        while True:
            try:
                self._ensure_selection()
                action = self._main_menu()
                self._log("Menu Selection", f"Selected action: {action}")
                if action == EXIT:
                    self._log("Exit Application", "User exited the application")
                    break
                self._handlers[action]()
            except LagoonWrapError as exc:
                console.print_error(exc)
                if not self._prompter.confirm("Do you want to continue?", default=True):
                    self._log("Exit Application", "User exited after error")
                    break

        console.print("[green]Thank you for using Lagoon CLI Wrapper![/green]")

    @property
    def instance_name(self) -> str:
        if self.instance is None:
            raise ValidationError("No Lagoon instance selected")
        return self.instance

    @property
    def current_project(self) -> Project:
        if self.project is None:
            raise ValidationError("No project selected")
        return self.project

    @property
    def project_name(self) -> str:
        return self.current_project.name

    def _ensure_selection(self) -> None:
        if self.instance is None:
            self.instance = self._select_instance()
            self._log("Select Instance", f"Selected instance: {self.instance}")
        if self.project is None:
            try:
                self.project = self._select_project(self.instance)
            except ValidationError:
                # Let the user pick another instance on the next pass.
                self.instance = None
                raise
            self.github_base_url = to_github_url(self.project.git_url)
            self._log("Select Project", f"Selected project: {self.project.name}")

    def _select_instance(self) -> str:
        with self._spinner("Loading Lagoon instances..."):
            instances = self._service.get_instances()
        if not instances:
            raise ConfigError(
                "No Lagoon instances configured",
                hint="Add one with: lagoon config add --lagoon <name> ...",
            )
        return self._prompter.select(
            "Select a Lagoon instance:",
            [(name, name) for name in instances],
        )

    def _select_project(self, instance: str) -> Project:
        with self._spinner(f"Loading projects for {instance}..."):
            projects = self._service.get_projects_with_details(instance)
        if not projects:
            raise ValidationError(f"No projects found for instance {instance}")
        name = self._prompter.select(
            "Select a project (type to search):",
            [(project.name, project.name) for project in projects],
            search=True,
        )
        return next(project for project in projects if project.name == name)

    def _main_menu(self) -> str:
        console.print(f"\n[blue]Current Instance: [bold]{escape(self.instance_name)}[/bold][/blue]")
        console.print(f"[blue]Current Project: [bold]{escape(self.project_name)}[/bold][/blue]\n")
        return self._prompter.select("What would you like to do? (type to search)", MENU, search=True)

    def _environments(self) -> list[str]:
        with self._spinner(f"Loading environments for {self.project_name}..."):
            return self._service.get_environments(self.instance_name, self.project_name)

    def _log(self, action: str, result: str) -> None:
        if self._action_log is not None:
            self._action_log.log_action(action, NO_COMMAND, result)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_environments(self) -> None:
        environments = self._environments()
        console.print("\n[green]Environments:[/green]")
        for env in environments:
            console.print(f"- {escape(environment_label(env, self.github_base_url))}")
        self._prompter.pause()

    def list_users(self) -> None:
        with self._spinner(f"Loading users for {self.project_name}..."):
            users = self._service.get_users(self.instance_name, self.project_name)
        console.print("\n[green]Users:[/green]")
        for user in users:
            console.print(f"- {escape(user)}")
        self._prompter.pause()

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_environments(self) -> None:
        eligible = [env for env in self._environments() if not is_deletion_protected(env)]
        if not eligible:
            console.print("\n[yellow]No eligible environments to delete.[/yellow]")
            self._prompter.pause()
            return

        console.print("\n[green]Eligible environments for deletion:[/green]")
        for env in eligible:
            console.print(f"- {escape(environment_label(env, self.github_base_url))}")
        console.print()

        selected: list[str] = self._prompter.checkbox(
            "Select environments to delete:",
            environment_choices(eligible, self.github_base_url, with_url=True),
        )
        if not selected:
            console.print("\n[yellow]No environments selected.[/yellow]")
            return

        listing = "\n".join(f"  - {env}" for env in selected)
        confirmed = self._prompter.confirm(
            "Are you sure you want to delete the following environment(s)?:\n"
            f"{listing}\n\nTotal: {len(selected)} environment(s)",
            default=False,
        )
        if not confirmed:
            console.print("\n[yellow]Deletion cancelled.[/yellow]")
            self._prompter.pause()
            return

        report = self._service.delete_environments(
            self.instance_name, self.project_name, selected, on_outcome=_print_deletion_outcome,
        )
        console.print(
            f"\n[bold]Deleted {len(report.succeeded)} of {len(report)} environment(s).[/bold]"
        )
        self._prompter.pause()

    # ------------------------------------------------------------------
    # Remote commands
    # ------------------------------------------------------------------

    def generate_login_link(self) -> None:
        eligible = [env for env in self._environments() if not is_login_link_protected(env)]
        if not eligible:
            console.print("\n[yellow]No eligible environments for login link generation.[/yellow]")
            self._prompter.pause()
            return

        environment = self._prompter.select(
            "Select an environment to generate a login link:",
            environment_choices(eligible, self.github_base_url),
        )
        with self._spinner(f"Generating login link for {environment}...") as spinner:
            try:
                link = self._service.generate_login_link(self.instance_name, self.project_name, environment)
            except LagoonWrapError as exc:
                spinner.fail(f"Failed to generate login link: {exc}")
            else:
                spinner.succeed("Login link generated successfully.")
                console.print("\n[green]Login Link:[/green]")
                console.print(f"[cyan]{escape(link)}[/cyan]")
        self._prompter.pause()

    def clear_cache(self) -> None:
        environments = self._environments()
        if not environments:
            console.print("\n[yellow]No environments found.[/yellow]")
            self._prompter.pause()
            return

        environment = self._prompter.select(
            "Select an environment to clear cache:",
            environment_choices(environments, self.github_base_url),
        )
        with self._spinner(f"Clearing cache for {environment}...") as spinner:
            try:
                output = self._service.clear_drupal_cache(self.instance_name, self.project_name, environment)
            except LagoonWrapError as exc:
                spinner.fail(f"Failed to clear cache: {exc}")
            else:
                spinner.succeed("Cache cleared successfully.")
                console.print("\n[green]Cache Clear Result:[/green]")
                console.print(f"[cyan]{escape(output or 'Cache cleared successfully.')}[/cyan]")
        self._prompter.pause()

    def ssh_to_environment(self) -> None:
        environments = self._environments()
        if not environments:
            console.print("\n[yellow]No environments found.[/yellow]")
            self._prompter.pause()
            return

        environment = self._prompter.select(
            "Select an environment to SSH into:",
            environment_choices(environments, self.github_base_url),
        )
        service = self._prompter.text(
            "Enter the container/service name (press Enter for default):",
            default=DEFAULT_SSH_SERVICE,
        )
        command = self._service.ssh_command(self.instance_name, self.project_name, environment, service)

        console.print(f"\n[cyan]Run the following command to SSH into {escape(environment)}:[/cyan]")
        console.print(f"\n[bold yellow]{escape(command.to_display_string())}[/bold yellow]\n")
        console.print(
            "[dim]Tip: Run this command in a new terminal window to keep your SSH "
            "session open while continuing to use this CLI.[/dim]"
        )
        self._prompter.pause()

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    def deploy_branch(self) -> None:
        git_url = self.current_project.git_url
        if not git_url:
            console.print("\n[yellow]This project does not have a valid Git URL configured.[/yellow]")
            self._prompter.pause()
            return

        console.print(f"\n[blue]Fetching branches from [bold]{escape(git_url)}[/bold]...[/blue]")
        with self._spinner("Loading branches...") as spinner:
            try:
                branches = self._service.get_git_branches(git_url)
            except LagoonWrapError as exc:
                spinner.fail(f"Failed to fetch branches: {exc}")
                self._prompter.pause()
                return
            spinner.succeed(f"Found {len(branches)} branches.")

        if not branches:
            console.print("\n[yellow]No branches found in the git repository.[/yellow]")
            self._prompter.pause()
            return

        branch = self._prompter.select(
            "Select a branch to deploy:",
            [(name, name) for name in self._service.sort_branches(branches)],
            search=True,
        )
        if not self._prompter.confirm(
            f"Are you sure you want to deploy branch {branch} to project {self.project_name}?",
            default=False,
        ):
            console.print("\n[yellow]Deployment cancelled.[/yellow]")
            self._prompter.pause()
            return

        with self._spinner(f"Deploying branch {branch}...") as spinner:
            try:
                result = self._service.deploy_branch(self.instance_name, self.project_name, branch)
            except LagoonWrapError as exc:
                spinner.fail(f"Failed to deploy branch: {exc}")
            else:
                spinner.succeed("Deployment initiated successfully.")
                console.print("\n[green]Deployment Status:[/green]")
                console.print(f"[cyan]{escape(result.message)}[/cyan]")
                console.print(
                    "\n[blue]Note: The deployment process runs asynchronously and may "
                    "take several minutes to complete.[/blue]"
                )
                console.print("[blue]You can check the status of the deployment in the Lagoon UI.[/blue]")
        self._prompter.pause()

    # ------------------------------------------------------------------
    # Selection and configuration
    # ------------------------------------------------------------------

    def configure_ssh_key(self) -> None:
        configure_ssh_key(
            self.instance_name,
            store=self._config_store,
            ssh_dir=self._ssh_dir,
            service=self._service,
            prompter=self._prompter,
        )

    def change_project(self) -> None:
        self.project = None
        self.github_base_url = None
        self._log("Change Project", "Project selection reset")

    def change_instance(self) -> None:
        self.instance = None
        self.project = None
        self.github_base_url = None
        self._log("Change Instance", "Instance selection reset")


def _print_deletion_outcome(outcome: DeletionOutcome) -> None:
    if outcome.succeeded:
        console.print(f"[green]✔[/green] Environment {escape(outcome.environment)} deleted successfully.")
    else:
        console.print(
            f"[red]✖[/red] Failed to delete environment {escape(outcome.environment)}: "
            f"{escape(str(outcome.error))}"
        )
