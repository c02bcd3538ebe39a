"""Constants for envmigrate."""

# Configuration defaults
DEFAULT_MIGRATIONS_DIR = "migrations"
DEFAULT_MASTER_PATTERN = "master-[YYYY]-[MM]-[DD]-[mmss]"
DEFAULT_FEATURE_PATTERN = "GH-[branch]"
DEFAULT_VERSION_CONTENT_TYPE = "versionTracking"
DEFAULT_VERSION_FIELD = "version"
DEFAULT_ENVIRONMENT = "master"
DEFAULT_ALIAS = "master"
DEFAULT_MIGRATION_EXEC = "contentful"

# Readiness polling
POLL_DELAY = 3.0  # seconds between status checks
POLL_ATTEMPTS = 10

# Migration files
MIGRATION_EXTENSION = ".js"

APP_URL = "https://app.contentful.com"
CONFIG_FILENAME = "envmigrate.toml"
