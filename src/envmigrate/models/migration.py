"""Migration catalog and execution models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class MigrationStep(BaseModel):
    """One migration file in the catalog."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(description="Version token, e.g. '3' or '1.2'")
    file_path: Path


class MigrationRequest(BaseModel):
    """Parameters handed to the migration executor for one step.

    Attributes:
        space_id: Space the environment lives in.
        environment_id: Environment to migrate.
        access_token: Management API token.
        file_path: Migration script to run.
        yes: Run non-interactively.
    """

    model_config = ConfigDict(frozen=True)

    space_id: str
    environment_id: str
    access_token: str = Field(repr=False)
    file_path: Path
    yes: bool = True


class MigrationResult(BaseModel):
    """Outcome of a migration run."""

    start_version: str
    applied: list[str] = Field(default_factory=list)

    @property
    def final_version(self) -> str:
        """Version recorded after the last applied step."""
        return self.applied[-1] if self.applied else self.start_version
