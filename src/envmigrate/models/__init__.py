"""Pydantic data models for envmigrate.

This package defines the values passed between components:
- Run context derived from the CI event (BranchNames, EnvironmentNames, RunContext)
- Platform resources returned by the client adapter (Environment, ApiKey, Locale, Entry)
- Migration state (MigrationStep, MigrationRequest, MigrationResult)
- Run outcomes (PropagationResult, RunResult)

Platform values are frozen: an update produces a new value instead of
mutating the one that was fetched.
"""

from .context import BranchNames, EnvironmentNames, EventName, RunContext
from .migration import MigrationRequest, MigrationResult, MigrationStep
from .platform import ApiKey, Entry, Environment, EnvironmentStatus, Locale
from .result import PropagationResult, RunResult

__all__ = [
    "ApiKey",
    "BranchNames",
    "Entry",
    "Environment",
    "EnvironmentNames",
    "EnvironmentStatus",
    "EventName",
    "Locale",
    "MigrationRequest",
    "MigrationResult",
    "MigrationStep",
    "PropagationResult",
    "RunContext",
    "RunResult",
]
