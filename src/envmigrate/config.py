"""Configuration management for envmigrate.

Settings come from three layers, later ones winning:
defaults, an optional envmigrate.toml file, then environment variables
(the GitHub Action inputs arrive as INPUT_* variables).
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_ALIAS,
    DEFAULT_ENVIRONMENT,
    DEFAULT_FEATURE_PATTERN,
    DEFAULT_MASTER_PATTERN,
    DEFAULT_MIGRATION_EXEC,
    DEFAULT_MIGRATIONS_DIR,
    DEFAULT_VERSION_CONTENT_TYPE,
    DEFAULT_VERSION_FIELD,
    POLL_ATTEMPTS,
    POLL_DELAY,
)
from .errors import ConfigError

# Config field -> environment variable
ENV_VARS = {
    "space_id": "SPACE_ID",
    "management_token": "MANAGEMENT_API_KEY",
    "workspace": "GITHUB_WORKSPACE",
    "migrations_dir": "INPUT_MIGRATIONS_DIR",
    "version_content_type": "INPUT_VERSION_CONTENT_TYPE",
    "version_field": "INPUT_VERSION_FIELD",
    "master_pattern": "INPUT_MASTER_PATTERN",
    "feature_pattern": "INPUT_FEATURE_PATTERN",
    "set_alias": "INPUT_SET_ALIAS",
    "delete_feature": "INPUT_DELETE_FEATURE",
    "alias_name": "INPUT_ALIAS_NAME",
    "default_environment": "INPUT_DEFAULT_ENVIRONMENT",
    "poll_delay": "INPUT_POLL_DELAY",
    "poll_attempts": "INPUT_POLL_ATTEMPTS",
    "fail_on_poll_timeout": "INPUT_FAIL_ON_POLL_TIMEOUT",
    "migration_exec": "INPUT_MIGRATION_EXEC",
    "migration_timeout": "INPUT_MIGRATION_TIMEOUT",
}


class EnvMigrateConfig(BaseModel):
    """Root configuration for envmigrate."""

    space_id: str | None = None
    management_token: str | None = Field(default=None, repr=False)
    workspace: Path = Field(default_factory=Path.cwd)
    migrations_dir: str = DEFAULT_MIGRATIONS_DIR

    # Version tracking entry
    version_content_type: str = DEFAULT_VERSION_CONTENT_TYPE
    version_field: str = DEFAULT_VERSION_FIELD

    # Environment naming
    master_pattern: str = DEFAULT_MASTER_PATTERN
    feature_pattern: str = DEFAULT_FEATURE_PATTERN
    default_environment: str = DEFAULT_ENVIRONMENT
    alias_name: str = DEFAULT_ALIAS

    # Lifecycle switches
    set_alias: bool = False
    delete_feature: bool = False

    # Readiness polling
    poll_delay: float = Field(default=POLL_DELAY, ge=0)
    poll_attempts: int = Field(default=POLL_ATTEMPTS, ge=1)
    fail_on_poll_timeout: bool = False

    migration_exec: str = DEFAULT_MIGRATION_EXEC
    # Seconds per migration script; None waits indefinitely
    migration_timeout: float | None = Field(default=None, gt=0)

    @property
    def migrations_path(self) -> Path:
        """Absolute migrations directory."""
        return self.workspace / self.migrations_dir

    def require_credentials(self) -> tuple[str, str]:
        """Return (space_id, management_token) or raise if either is missing."""
        missing = []
        if not self.space_id:
            missing.append(ENV_VARS["space_id"])
        if not self.management_token:
            missing.append(ENV_VARS["management_token"])
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")
        return str(self.space_id), str(self.management_token)


def _from_environ(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect non-empty environment overrides."""
    values: dict[str, Any] = {}
    for field, var in ENV_VARS.items():
        value = environ.get(var, "").strip()
        if value:
            values[field] = value
    return values


def load_config(
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> EnvMigrateConfig:
    """Load configuration from an optional TOML file and the environment.

    Args:
        environ: Environment mapping (defaults to os.environ)
        config_path: Explicit config file. When None, envmigrate.toml in the
            workspace is used if it exists.

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid
    """
    environ = os.environ if environ is None else environ
    overrides = _from_environ(environ)

    if config_path is None:
        workspace = Path(overrides.get("workspace", Path.cwd()))
        candidate = workspace / CONFIG_FILENAME
        config_path = candidate if candidate.exists() else None
    elif not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    data: dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    data.update(overrides)
    try:
        return EnvMigrateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def write_config_template(directory: Path) -> Path:
    """Write default envmigrate.toml template.

    Credentials are deliberately left out; they belong in CI secrets.

    Args:
        directory: Directory to write into

    Returns:
        Path to the written config file
    """
    config_path = directory / CONFIG_FILENAME
    template = {
        "migrations_dir": DEFAULT_MIGRATIONS_DIR,
        "version_content_type": DEFAULT_VERSION_CONTENT_TYPE,
        "version_field": DEFAULT_VERSION_FIELD,
        "master_pattern": DEFAULT_MASTER_PATTERN,
        "feature_pattern": DEFAULT_FEATURE_PATTERN,
        "default_environment": DEFAULT_ENVIRONMENT,
        "alias_name": DEFAULT_ALIAS,
        "set_alias": False,
        "delete_feature": False,
        "poll_delay": POLL_DELAY,
        "poll_attempts": POLL_ATTEMPTS,
        "fail_on_poll_timeout": False,
        "migration_exec": DEFAULT_MIGRATION_EXEC,
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
