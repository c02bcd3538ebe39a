"""Shared test fixtures for envmigrate tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from envmigrate.config import EnvMigrateConfig
from envmigrate.errors import EnvironmentNotFoundError, MigrationError, PlatformError
from envmigrate.models import (
    ApiKey,
    BranchNames,
    Entry,
    Environment,
    EnvironmentStatus,
    Locale,
    MigrationRequest,
    RunContext,
)

SPACE_ID = "space123"
TOKEN = "cfpat-test-token"


class FakePlatformClient:
    """In-memory PlatformClient for one space and one environment's content.

    Environments progress through `status_sequences` on each lookup; entries,
    locales and keys are shared across environments.
    """

    def __init__(self, space_id: str = SPACE_ID) -> None:
        self.space_id = space_id
        self.environments: dict[str, Environment] = {}
        self.status_sequences: dict[str, list[EnvironmentStatus]] = {}
        self.api_keys: dict[str, ApiKey] = {}
        self.failing_keys: set[str] = set()
        self.key_errors: dict[str, BaseException] = {}
        self.locales: list[Locale] = [
            Locale(code="de-DE", default=False),
            Locale(code="en-US", default=True),
        ]
        self.entries: list[Entry] = []
        self.aliases: dict[str, str] = {}
        self.alias_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.published: list[Entry] = []
        self.calls: list[tuple[str, str]] = []

    async def __aenter__(self) -> "FakePlatformClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def add_environment(
        self, environment_id: str, status: EnvironmentStatus = EnvironmentStatus.READY
    ) -> None:
        self.environments[environment_id] = Environment(
            id=environment_id, name=environment_id, status=status
        )

    def add_tracking_entry(self, version: str, entry_id: str = "tracking") -> Entry:
        entry = Entry(
            id=entry_id,
            content_type="versionTracking",
            fields={"version": {"en-US": version}},
            version=1,
        )
        self.entries.append(entry)
        return entry

    def recorded_version(self, entry_id: str = "tracking") -> str:
        entry = next(e for e in self.entries if e.id == entry_id)
        return entry.fields["version"]["en-US"]

    async def get_environment(self, environment_id: str) -> Environment:
        self.calls.append(("get_environment", environment_id))
        if environment_id not in self.environments:
            raise EnvironmentNotFoundError(f"Environment not found: {environment_id}")
        sequence = self.status_sequences.get(environment_id)
        if sequence:
            status = sequence.pop(0)
            self.environments[environment_id] = self.environments[environment_id].model_copy(
                update={"status": status}
            )
        return self.environments[environment_id]

    async def create_environment(self, environment_id: str, name: str) -> Environment:
        self.calls.append(("create_environment", environment_id))
        environment = Environment(
            id=environment_id, name=name, status=EnvironmentStatus.PROCESSING
        )
        self.environments[environment_id] = environment
        return environment

    async def delete_environment(self, environment_id: str) -> None:
        self.calls.append(("delete_environment", environment_id))
        if self.delete_error is not None:
            raise self.delete_error
        if environment_id not in self.environments:
            raise EnvironmentNotFoundError(f"Environment not found: {environment_id}")
        del self.environments[environment_id]

    async def list_api_keys(self) -> list[ApiKey]:
        return list(self.api_keys.values())

    async def update_api_key(self, key: ApiKey) -> ApiKey:
        self.calls.append(("update_api_key", key.id))
        if key.id in self.key_errors:
            raise self.key_errors[key.id]
        if key.id in self.failing_keys:
            raise PlatformError(f"Failed to update API key {key.id}")
        self.api_keys[key.id] = key
        return key

    async def list_locales(self, environment_id: str) -> list[Locale]:
        return list(self.locales)

    async def get_entries(self, environment_id: str, content_type: str) -> list[Entry]:
        self.calls.append(("get_entries", content_type))
        return [e for e in self.entries if e.content_type == content_type]

    async def update_entry(self, environment_id: str, entry: Entry) -> Entry:
        self.calls.append(("update_entry", entry.id))
        saved = entry.model_copy(update={"version": (entry.version or 0) + 1})
        self.entries = [saved if e.id == entry.id else e for e in self.entries]
        return saved

    async def publish_entry(self, environment_id: str, entry: Entry) -> Entry:
        self.calls.append(("publish_entry", entry.id))
        self.published.append(entry)
        return entry

    async def update_alias(self, alias_name: str, environment_id: str) -> None:
        self.calls.append(("update_alias", alias_name))
        if self.alias_error is not None:
            raise self.alias_error
        self.aliases[alias_name] = environment_id

    def environment_url(self, environment_id: str) -> str:
        return f"https://app.contentful.com/spaces/{self.space_id}/environments/{environment_id}"


class RecordingExecutor:
    """Migration executor that records requests and fails on chosen versions."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.requests: list[MigrationRequest] = []

    @property
    def executed(self) -> list[str]:
        return [r.file_path.stem for r in self.requests]

    async def __call__(self, request: MigrationRequest) -> None:
        self.requests.append(request)
        if request.file_path.stem in self.fail_on:
            raise MigrationError(f"Migration {request.file_path.name} failed")


def make_context(
    event_name: str = "pull_request",
    base_ref: str = "master",
    head_ref: str | None = "feature/foo_bar",
    default_branch: str = "master",
    merged: bool = False,
) -> RunContext:
    """Create a run context for testing."""
    return RunContext(
        event_name=event_name,
        branch_names=BranchNames(
            base_ref=base_ref, head_ref=head_ref, default_branch=default_branch
        ),
        merged=merged,
    )


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def client() -> FakePlatformClient:
    """In-memory platform client."""
    return FakePlatformClient()


@pytest.fixture
def executor() -> RecordingExecutor:
    """Executor that succeeds for every migration."""
    return RecordingExecutor()


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Migrations directory with versions 1 to 5."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    for version in range(1, 6):
        (directory / f"{version}.js").write_text("module.exports = function () {};\n")
    return directory


@pytest.fixture
def config(tmp_path: Path, migrations_dir: Path) -> EnvMigrateConfig:
    """Config pointing at the temporary workspace, without poll delays."""
    return EnvMigrateConfig(
        space_id=SPACE_ID,
        management_token=TOKEN,
        workspace=tmp_path,
        poll_delay=0,
        poll_attempts=3,
    )
