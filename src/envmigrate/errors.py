"""Exceptions raised by envmigrate.

Every error that should abort a run derives from EnvMigrateError so the CLI
can report it in one place. Recoverable conditions (a missing environment
during lookup-before-delete, an alias that cannot be updated) are caught and
logged where they occur instead.
"""


class EnvMigrateError(Exception):
    """Base exception for envmigrate errors."""


class ConfigError(EnvMigrateError):
    """Raised when configuration is missing or invalid."""


class EventContextError(EnvMigrateError):
    """Raised when the CI event metadata cannot be read."""


class NameResolutionError(EnvMigrateError):
    """Raised when a name pattern cannot be resolved."""


class CatalogError(EnvMigrateError):
    """Raised when the migrations directory cannot be read."""


class PlatformError(EnvMigrateError):
    """Raised when a call to the content platform fails."""


class EnvironmentNotFoundError(PlatformError):
    """Raised when an environment does not exist in the space."""


class EnvironmentTimeoutError(EnvMigrateError):
    """Raised when an environment never reaches a terminal status."""


class LocaleError(EnvMigrateError):
    """Raised when an environment has no default locale."""


class VersionTrackingError(EnvMigrateError):
    """Raised when the version tracking entry is missing, duplicated or empty."""


class UnknownVersionError(EnvMigrateError):
    """Raised when the recorded version is not part of the migration catalog."""


class MigrationError(EnvMigrateError):
    """Raised when a migration script fails."""
