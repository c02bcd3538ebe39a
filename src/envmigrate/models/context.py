"""Run context models derived from CI event metadata."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventName(str, Enum):
    """GitHub event names that change how branches are read."""

    PULL_REQUEST = "pull_request"
    PUSH = "push"


class BranchNames(BaseModel):
    """Branch references for the current run.

    Attributes:
        base_ref: Target branch of a pull request, or the pushed branch.
        head_ref: Source branch of a pull request, None for other events.
        default_branch: Repository default branch (master, main, ...).
    """

    model_config = ConfigDict(frozen=True)

    base_ref: str
    head_ref: str | None = None
    default_branch: str


class EnvironmentNames(BaseModel):
    """Sanitized forms of BranchNames usable as environment ids."""

    model_config = ConfigDict(frozen=True)

    base: str
    head: str | None = None


class RunContext(BaseModel):
    """Everything a run needs to know about the triggering event.

    Built once at process entry and passed explicitly to each component.
    """

    model_config = ConfigDict(frozen=True)

    event_name: str = Field(description="Raw GitHub event name")
    branch_names: BranchNames
    merged: bool = Field(default=False, description="Pull request was merged")

    @property
    def is_merge_into_default(self) -> bool:
        """True when a pull request was merged into the default branch."""
        return self.merged and self.branch_names.base_ref == self.branch_names.default_branch
