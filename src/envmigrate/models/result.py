"""Run outcome models."""

from pydantic import BaseModel, Field

from .platform import EnvironmentStatus


class PropagationResult(BaseModel):
    """Outcome of linking API keys to a new environment.

    Attributes:
        updated: Ids of keys that now include the environment.
        skipped: Ids of keys that already included it.
        failed: Key id -> error message for keys that could not be updated.
    """

    updated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)


class RunResult(BaseModel):
    """Summary of a complete orchestration run."""

    environment_id: str
    environment_url: str
    status: EnvironmentStatus | None = None
    start_version: str | None = None
    applied: list[str] = Field(default_factory=list)
    alias_updated: bool = False
    deleted_environment: str | None = None
