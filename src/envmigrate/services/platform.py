"""Interface the core expects from the content platform client."""

from typing import Protocol

from ..models import ApiKey, Entry, Environment, Locale


class PlatformClient(Protocol):
    """Async operations on one space of the content platform.

    Implementations raise EnvironmentNotFoundError when an environment does
    not exist and PlatformError for any other failed call.
    """

    space_id: str

    async def get_environment(self, environment_id: str) -> Environment: ...

    async def create_environment(self, environment_id: str, name: str) -> Environment: ...

    async def delete_environment(self, environment_id: str) -> None: ...

    async def list_api_keys(self) -> list[ApiKey]: ...

    async def update_api_key(self, key: ApiKey) -> ApiKey: ...

    async def list_locales(self, environment_id: str) -> list[Locale]: ...

    async def get_entries(self, environment_id: str, content_type: str) -> list[Entry]: ...

    async def update_entry(self, environment_id: str, entry: Entry) -> Entry: ...

    async def publish_entry(self, environment_id: str, entry: Entry) -> Entry: ...

    async def update_alias(self, alias_name: str, environment_id: str) -> None: ...

    def environment_url(self, environment_id: str) -> str: ...
