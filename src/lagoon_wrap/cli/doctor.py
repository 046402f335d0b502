"""``lagoon-wrap doctor`` — environment diagnostics command.

Checks that the wrapped executables and the Lagoon configuration are in
place and renders a Rich table (or a plain-text table without Rich).
Nothing here spawns a process; executables are only located on PATH.
"""

from __future__ import annotations

import importlib.util
import platform
import sys

from lagoon_wrap.cli import exit_codes
from lagoon_wrap.cli.console import console
from lagoon_wrap.config import Settings
from lagoon_wrap.infra.binary_detector import BinaryStatus, detect_binary
from lagoon_wrap.version import __version__

Check = tuple[str, str, str]
"""``(label, value, status)`` with status ``OK``, ``WARN`` or ``FAIL``."""

OK = "OK"
WARN = "WARN"
FAIL = "FAIL"

_STATUS_STYLE = {OK: "green", WARN: "yellow", FAIL: "red"}


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _version_check() -> Check:
    return "lagoon-wrap", __version__, OK


def _python_version_check() -> Check:
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    return "Python", version, OK if ok else FAIL


def _binary_check(label: str, status: BinaryStatus) -> Check:
    if status.found:
        return label, str(status.path) if status.path else "found", OK
    return label, f"{status.name}: not found", FAIL


def _config_check(settings: Settings) -> Check:
    path = settings.lagoon_config_path
    if path.is_file():
        return "Lagoon config", str(path), OK
    # The lagoon CLI creates it on first use; not fatal.
    return "Lagoon config", f"{path} (missing)", WARN


def _yaml_check() -> Check:
    if importlib.util.find_spec("yaml") is None:
        return "PyYAML", "NOT INSTALLED", WARN
    return "PyYAML", "installed", OK


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    return "OS", f"{system_display} {platform.release()} ({platform.machine()})", OK


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_table(checks: list[Check]) -> None:
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_table(checks)
        return

    table = Table(
        title="lagoon-wrap doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=14)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=6)
    for label, value, status in checks:
        style = _STATUS_STYLE[status]
        table.add_row(label, value, f"[{style}]{status}[/{style}]")

    console.print()
    console.print(table)
    console.print()


def _print_plain_table(checks: list[Check]) -> None:
    print("\nlagoon-wrap doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<6}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {status:<6}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Run all checks and print a summary.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.  ``WARN`` rows do not
        fail the run.
    """
    binaries = [detect_binary(settings.lagoon_binary), detect_binary(settings.git_binary)]
    checks = [
        _version_check(),
        _python_version_check(),
        _binary_check("lagoon CLI", binaries[0]),
        _binary_check("git", binaries[1]),
        _config_check(settings),
        _yaml_check(),
        _os_check(),
    ]
    _render_table(checks)

    for status in binaries:
        if not status.found and status.install_commands:
            console.print(f"[yellow]{status.name} is not installed.[/yellow]")
            console.print("Install using one of the following:\n")
            for cmd in status.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
            console.print()

    if any(status == FAIL for _, _, status in checks):
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
