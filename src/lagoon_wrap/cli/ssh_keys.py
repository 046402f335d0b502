"""Configure which SSH key the Lagoon CLI uses for an instance.

Flow: show the current key → pick a private key from ``~/.ssh`` →
rewrite ``lagoons.<instance>.sshkey`` in the Lagoon config → run
``lagoon -l <instance> login`` so the new key is used immediately.
"""

from __future__ import annotations

from pathlib import Path

from lagoon_wrap.cli.console import console, escape
from lagoon_wrap.cli.prompts import Prompter
from lagoon_wrap.core.lagoon_service import LagoonService
from lagoon_wrap.exceptions import LagoonWrapError
from lagoon_wrap.infra.config_store import LagoonConfigStore, list_ssh_keys

_CANCEL = ""


def configure_ssh_key(
    instance: str,
    *,
    store: LagoonConfigStore,
    ssh_dir: Path,
    service: LagoonService,
    prompter: Prompter,
) -> bool:
    """Run the SSH-key flow for *instance*.

    Returns ``True`` when the key was changed and the token refreshed.
    Errors are reported to the user and turn into ``False``.
    """
    try:
        current = store.ssh_key(instance) or "Not configured"
        console.print(
            f"[blue]Current SSH key for [bold]{escape(instance)}[/bold]: "
            f"[yellow]{escape(current)}[/yellow][/blue]"
        )

        keys = list_ssh_keys(ssh_dir)
        if not keys:
            console.print(f"[yellow]No SSH keys found in {escape(str(ssh_dir))}[/yellow]")
            return False

        choices = [(key.name, str(key)) for key in keys]
        choices.append(("Cancel", _CANCEL))
        selected = prompter.select("Select an SSH key:", choices)
        if not selected:
            console.print("[yellow]SSH key configuration cancelled[/yellow]")
            return False

        store.set_ssh_key(instance, selected)
    except LagoonWrapError as exc:
        console.print(f"[red]Error configuring SSH key: {escape(str(exc))}[/red]")
        return False

    console.print(
        f"[green]SSH key for [bold]{escape(instance)}[/bold] updated to: "
        f"[bold]{escape(selected)}[/bold][/green]"
    )
    return refresh_token(instance, service)


def refresh_token(instance: str, service: LagoonService) -> bool:
    """Re-login to *instance*; report and return ``False`` on failure."""
    console.print(f"[blue]Refreshing token for [bold]{escape(instance)}[/bold]...[/blue]")
    try:
        service.refresh_token(instance)
    except LagoonWrapError as exc:
        console.print(f"[red]Error refreshing token: {escape(str(exc))}[/red]")
        return False
    console.print(f"[green]Successfully refreshed token for [bold]{escape(instance)}[/bold][/green]")
    return True
