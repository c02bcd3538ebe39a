"""Tests for envmigrate configuration."""

from pathlib import Path

import pytest

from envmigrate.config import EnvMigrateConfig, load_config, write_config_template
from envmigrate.errors import ConfigError


def test_defaults(tmp_path: Path) -> None:
    """Defaults match the action's documented inputs."""
    config = load_config({"GITHUB_WORKSPACE": str(tmp_path)})

    assert config.migrations_path == tmp_path / "migrations"
    assert config.version_content_type == "versionTracking"
    assert config.version_field == "version"
    assert config.master_pattern == "master-[YYYY]-[MM]-[DD]-[mmss]"
    assert config.feature_pattern == "GH-[branch]"
    assert config.set_alias is False
    assert config.delete_feature is False
    assert config.poll_delay == 3.0
    assert config.poll_attempts == 10


def test_environment_overrides(tmp_path: Path) -> None:
    config = load_config(
        {
            "SPACE_ID": "abc",
            "MANAGEMENT_API_KEY": "secret",
            "GITHUB_WORKSPACE": str(tmp_path),
            "INPUT_MIGRATIONS_DIR": "contentful/migrations",
            "INPUT_SET_ALIAS": "true",
            "INPUT_DELETE_FEATURE": "1",
            "INPUT_FEATURE_PATTERN": "sandbox-[branch]",
            "INPUT_POLL_ATTEMPTS": "20",
            "INPUT_VERSION_FIELD": "",
        }
    )

    assert config.require_credentials() == ("abc", "secret")
    assert config.migrations_path == tmp_path / "contentful" / "migrations"
    assert config.set_alias is True
    assert config.delete_feature is True
    assert config.feature_pattern == "sandbox-[branch]"
    assert config.poll_attempts == 20
    assert config.version_field == "version"


def test_false_strings_disable_switches(tmp_path: Path) -> None:
    config = load_config({"GITHUB_WORKSPACE": str(tmp_path), "INPUT_SET_ALIAS": "false"})
    assert config.set_alias is False


def test_workspace_config_file(tmp_path: Path) -> None:
    """envmigrate.toml in the workspace is read, environment wins over it."""
    (tmp_path / "envmigrate.toml").write_text(
        'migrations_dir = "schema"\nalias_name = "production"\n'
    )

    config = load_config({"GITHUB_WORKSPACE": str(tmp_path), "INPUT_ALIAS_NAME": "live"})

    assert config.migrations_dir == "schema"
    assert config.alias_name == "live"


def test_explicit_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config({}, config_path=tmp_path / "missing.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("this is = = not toml")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config({}, config_path=path)


def test_invalid_value(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="poll_attempts"):
        load_config({"GITHUB_WORKSPACE": str(tmp_path), "INPUT_POLL_ATTEMPTS": "0"})


def test_missing_credentials() -> None:
    with pytest.raises(ConfigError, match="SPACE_ID, MANAGEMENT_API_KEY"):
        EnvMigrateConfig().require_credentials()


def test_write_config_template_round_trips(tmp_path: Path) -> None:
    path = write_config_template(tmp_path)

    assert path == tmp_path / "envmigrate.toml"
    config = load_config({}, config_path=path)
    assert config.feature_pattern == "GH-[branch]"
    assert config.space_id is None


def test_migration_timeout(tmp_path: Path) -> None:
    """No limit unless configured."""
    assert load_config({"GITHUB_WORKSPACE": str(tmp_path)}).migration_timeout is None

    config = load_config(
        {"GITHUB_WORKSPACE": str(tmp_path), "INPUT_MIGRATION_TIMEOUT": "1800"}
    )
    assert config.migration_timeout == 1800.0


def test_migration_timeout_must_be_positive(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="migration_timeout"):
        load_config({"GITHUB_WORKSPACE": str(tmp_path), "INPUT_MIGRATION_TIMEOUT": "0"})
