"""CLI command implementations for envmigrate.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .init import init
from .migrate import migrate
from .name import name
from .run import run
from .versions import versions

__all__ = [
    "init",
    "migrate",
    "name",
    "run",
    "versions",
]
