"""Content platform resources as seen by envmigrate.

The client adapter converts API responses into these values so the core never
sees the wire format.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EnvironmentStatus(str, Enum):
    """Server-assigned environment status."""

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class Environment(BaseModel):
    """A remote environment inside a space."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    status: EnvironmentStatus = EnvironmentStatus.PROCESSING


class ApiKey(BaseModel):
    """A delivery API key and the environments it may read."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: str | None = None
    environment_ids: tuple[str, ...] = ()
    version: int | None = None

    def with_environment(self, environment_id: str) -> "ApiKey":
        """Return a copy linked to one more environment."""
        return self.model_copy(
            update={"environment_ids": (*self.environment_ids, environment_id)}
        )


class Locale(BaseModel):
    """A locale configured in an environment."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str = ""
    default: bool = False


class Entry(BaseModel):
    """A content entry.

    Attributes:
        id: Entry id.
        content_type: Id of the entry's content type.
        fields: Field name -> locale code -> value.
        version: Server-side revision, required for updates.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content_type: str
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)
    version: int | None = None

    def get_field(self, field: str, locale: str) -> Any:
        """Return a localized field value, or None if absent."""
        return self.fields.get(field, {}).get(locale)

    def with_field(self, field: str, locale: str, value: Any) -> "Entry":
        """Return a copy with one localized field replaced."""
        fields = {name: dict(values) for name, values in self.fields.items()}
        fields.setdefault(field, {})[locale] = value
        return self.model_copy(update={"fields": fields})
