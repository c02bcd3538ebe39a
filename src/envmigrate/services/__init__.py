"""External integrations for envmigrate.

- platform: interface the core expects from the content platform
- contentful: Contentful Management API adapter
- migration: migration script execution through the contentful CLI
- github: GitHub Actions event context and step outputs
"""

from .github import build_context, load_context, set_failed, set_output
from .migration import MigrationExecutor, cli_executor, run_migration
from .platform import PlatformClient

__all__ = [
    "MigrationExecutor",
    "PlatformClient",
    "build_context",
    "cli_executor",
    "load_context",
    "run_migration",
    "set_failed",
    "set_output",
]
