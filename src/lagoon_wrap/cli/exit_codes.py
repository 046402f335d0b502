"""Exit-code constants used by the CLI layer.

Every process exit goes through one of these values; the interactive
session itself always ends with :data:`SUCCESS` unless an error escapes
the session loop.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — the session or command completed."""

GENERAL_ERROR: int = 1
"""A known LagoonWrapError reached the error boundary and was displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

EXECUTABLE_NOT_FOUND: int = 127
"""``lagoon`` or ``git`` is missing.  Mirrors the shell's command-not-found code."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
