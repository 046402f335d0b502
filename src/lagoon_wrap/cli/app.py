"""CLI application entry point and command routing for lagoon-wrap.

This module is the **sole error boundary** for the entire application.
It catches :class:`~lagoon_wrap.exceptions.LagoonWrapError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  service, infrastructure adapters and the interactive session.
* This is the only place where the collaborators (action log,
  executor, service, prompter) are constructed and wired together.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys

from lagoon_wrap.cli import exit_codes
from lagoon_wrap.cli.console import console
from lagoon_wrap.config import Settings
from lagoon_wrap.exceptions import ExecutableNotFoundError, LagoonWrapError
from lagoon_wrap.version import __version__

INTERACTIVE = "interactive"
DOCTOR = "doctor"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``lagoon-wrap``               — interactive mode
    * ``lagoon-wrap interactive``   — interactive mode
    * ``lagoon-wrap doctor``        — environment diagnostics
    * ``lagoon-wrap --version``
    """
    parser = argparse.ArgumentParser(
        prog="lagoon-wrap",
        description="A CLI wrapper for the Lagoon CLI.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=(INTERACTIVE, DOCTOR),
        default=INTERACTIVE,
        help="'interactive' (default) or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Lagoon CLI config file (default: ~/.lagoon.yml).",
    )
    parser.add_argument(
        "--log-dir",
        metavar="DIR",
        default=None,
        help="Directory for the daily action log (default: ~/.lagoon-wrap/logs).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug diagnostics to stderr.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_interactive(settings: Settings) -> int:
    """Wire the collaborators and run the interactive session."""
    from lagoon_wrap.cli.interactive import InteractiveSession
    from lagoon_wrap.cli.prompts import QuestionaryPrompter
    from lagoon_wrap.core.lagoon_service import LagoonService
    from lagoon_wrap.infra.action_log import ActionLog
    from lagoon_wrap.infra.binary_detector import require_binary
    from lagoon_wrap.infra.config_store import LagoonConfigStore
    from lagoon_wrap.infra.executor import SubprocessExecutor

    require_binary(settings.lagoon_binary)
    prompter = QuestionaryPrompter()

    action_log = ActionLog(settings.log_dir)
    try:
        executor = SubprocessExecutor(
            action_log,
            on_execute=console.echo_command,
            timeout=settings.timeout,
        )
        service = LagoonService(
            executor,
            lagoon_binary=settings.lagoon_binary,
            git_binary=settings.git_binary,
        )
        session = InteractiveSession(
            service,
            prompter,
            config_store=LagoonConfigStore(settings.lagoon_config_path, action_log),
            ssh_dir=settings.ssh_dir,
            action_log=action_log,
        )
        session.run()
    finally:
        action_log.close()
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from lagoon_wrap.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the lagoon-wrap CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    settings = Settings.from_env().with_overrides(
        lagoon_config_path=args.config,
        log_dir=args.log_dir,
    )

    if args.command == DOCTOR:
        return _handle_doctor(settings)
    return _handle_interactive(settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ExecutableNotFoundError as exc:
        console.print_error(exc)
        sys.exit(exit_codes.EXECUTABLE_NOT_FOUND)
    except LagoonWrapError as exc:
        console.print_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
