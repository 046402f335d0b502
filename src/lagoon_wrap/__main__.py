"""Allow ``python -m lagoon_wrap`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m lagoon_wrap`` behaves identically to the
``lagoon-wrap`` console script.
"""

from __future__ import annotations

from lagoon_wrap.cli.app import cli

if __name__ == "__main__":
    cli()
