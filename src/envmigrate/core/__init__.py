"""Core provisioning and migration logic for envmigrate.

- name_resolver: environment names from branch names and patterns
- version_catalog: ordered migration steps from the migrations directory
- environment_manager: remote environment lifecycle
- migration_runner: sequential migrations with version tracking
- orchestrator: end-to-end run
"""

from .environment_manager import EnvironmentManager
from .migration_runner import MigrationRunner
from .name_resolver import environment_names, resolve, sanitize
from .orchestrator import run_action
from .version_catalog import list_available, load_catalog, to_filename, to_version

__all__ = [
    "EnvironmentManager",
    "MigrationRunner",
    "environment_names",
    "list_available",
    "load_catalog",
    "resolve",
    "run_action",
    "sanitize",
    "to_filename",
    "to_version",
]
