"""lagoon-wrap — interactive front-end for the Lagoon CLI.

Wraps the ``lagoon`` and ``git`` executables behind a structured,
shell-free command layer with a strict layered architecture.
"""

from lagoon_wrap.version import __version__

__all__: list[str] = ["__version__"]
