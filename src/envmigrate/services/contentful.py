"""Contentful Management API adapter.

Implements PlatformClient over the Contentful Management REST API with
httpx. Responses are converted to envmigrate models on the way out, so
nothing outside this module knows the wire format.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from ..constants import APP_URL
from ..errors import EnvironmentNotFoundError, PlatformError
from ..models import ApiKey, Entry, Environment, EnvironmentStatus, Locale

logger = logging.getLogger(__name__)

API_URL = "https://api.contentful.com"
CONTENT_TYPE = "application/vnd.contentful.management.v1+json"
PAGE_SIZE = 100
REQUEST_TIMEOUT = 30.0
MAX_RATE_LIMIT_RETRIES = 5

T = TypeVar("T")


def _link(link_type: str, resource_id: str) -> dict[str, Any]:
    return {"sys": {"type": "Link", "linkType": link_type, "id": resource_id}}


def _link_id(value: Any) -> str | None:
    if not isinstance(value, dict):
        return None
    return value.get("sys", {}).get("id")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if not isinstance(body, dict):
        return response.text or response.reason_phrase
    message = body.get("message") or response.reason_phrase
    details = body.get("details")
    details = details.get("errors") if isinstance(details, dict) else None
    return f"{message} {details}" if details else message


def _retry_delay(response: httpx.Response) -> float:
    try:
        return max(float(response.headers.get("X-Contentful-RateLimit-Reset", "1")), 0.0)
    except ValueError:
        return 1.0


def _decode(response: httpx.Response, method: str, path: str) -> dict[str, Any]:
    """Body of a successful response as a JSON object ({} when empty).

    Raises:
        PlatformError: If the body is not a JSON object
    """
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError as e:
        raise PlatformError(
            f"{method} {path} returned a non-JSON body ({response.status_code})"
        ) from e
    if not isinstance(data, dict):
        raise PlatformError(f"{method} {path} returned {type(data).__name__}, expected an object")
    return data


def _parse(convert: Callable[[Any], T], data: Any) -> T:
    """Apply a converter, reporting malformed resources as PlatformError."""
    try:
        return convert(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PlatformError(f"Unexpected resource in platform response: {e!r}") from e


def _to_locale(data: dict[str, Any]) -> Locale:
    return Locale(code=data["code"], name=data.get("name", ""), default=data.get("default", False))


def _to_environment(data: dict[str, Any]) -> Environment:
    # "queued" and any other in-flight state count as processing
    status = _link_id(data["sys"].get("status"))
    try:
        parsed = EnvironmentStatus(status)
    except ValueError:
        parsed = EnvironmentStatus.PROCESSING
    return Environment(id=data["sys"]["id"], name=data.get("name", ""), status=parsed)


def _to_api_key(data: dict[str, Any]) -> ApiKey:
    ids = (_link_id(link) for link in data.get("environments", []))
    return ApiKey(
        id=data["sys"]["id"],
        name=data.get("name", ""),
        description=data.get("description"),
        environment_ids=tuple(i for i in ids if i),
        version=data["sys"].get("version"),
    )


def _to_entry(data: dict[str, Any]) -> Entry:
    return Entry(
        id=data["sys"]["id"],
        content_type=_link_id(data["sys"].get("contentType")) or "",
        fields=data.get("fields", {}),
        version=data["sys"].get("version"),
    )


class ContentfulClient:
    """PlatformClient for one Contentful space.

    Use as an async context manager so the HTTP connection pool is closed:

        async with ContentfulClient.connect(space_id, token) as client:
            await client.get_environment("master")
    """

    def __init__(self, http: httpx.AsyncClient, space_id: str) -> None:
        self._http = http
        self.space_id = space_id

    @classmethod
    def connect(
        cls, space_id: str, access_token: str, base_url: str = API_URL
    ) -> "ContentfulClient":
        """Create a client authenticated with a management token."""
        http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": CONTENT_TYPE,
            },
            timeout=REQUEST_TIMEOUT,
        )
        return cls(http, space_id)

    async def __aenter__(self) -> "ContentfulClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _space_path(self, path: str) -> str:
        return f"/spaces/{self.space_id}{path}"

    def _environment_path(self, environment_id: str, path: str = "") -> str:
        return self._space_path(f"/environments/{environment_id}{path}")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        version: int | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, retrying while rate limited.

        Error statuses are returned to the caller; only transport failures raise.

        Raises:
            PlatformError: If the request cannot be sent
        """
        headers = kwargs.pop("headers", {})
        if version is not None:
            headers["X-Contentful-Version"] = str(version)

        for attempt in range(MAX_RATE_LIMIT_RETRIES + 1):
            try:
                response = await self._http.request(method, path, headers=headers, **kwargs)
            except httpx.HTTPError as e:
                raise PlatformError(f"{method} {path} failed: {e}") from e

            if response.status_code != 429 or attempt == MAX_RATE_LIMIT_RETRIES:
                return response
            reset = _retry_delay(response)
            logger.debug(f"Rate limited on {method} {path}, retrying in {reset}s")
            await asyncio.sleep(reset)

        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._request(method, path, **kwargs)
        if response.is_error:
            raise PlatformError(
                f"{method} {path} failed ({response.status_code}): {_error_message(response)}"
            )
        return _decode(response, method, path)

    async def _all_items(self, path: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Fetch every item of a collection endpoint, following pagination."""
        items: list[dict] = []
        skip = 0
        while True:
            page = await self._json(
                "GET", path, params={**(params or {}), "limit": PAGE_SIZE, "skip": skip}
            )
            batch = page.get("items", [])
            items.extend(batch)
            skip += len(batch)
            if not batch or skip >= page.get("total", 0):
                return items

    async def get_environment(self, environment_id: str) -> Environment:
        path = self._environment_path(environment_id)
        response = await self._request("GET", path)
        if response.status_code == 404:
            raise EnvironmentNotFoundError(f"Environment not found: {environment_id}")
        if response.is_error:
            raise PlatformError(
                f"Failed to get environment {environment_id} "
                f"({response.status_code}): {_error_message(response)}"
            )
        return _parse(_to_environment, _decode(response, "GET", path))

    async def create_environment(self, environment_id: str, name: str) -> Environment:
        data = await self._json("PUT", self._environment_path(environment_id), json={"name": name})
        return _parse(_to_environment, data)

    async def delete_environment(self, environment_id: str) -> None:
        path = self._environment_path(environment_id)
        response = await self._request("DELETE", path)
        if response.status_code == 404:
            raise EnvironmentNotFoundError(f"Environment not found: {environment_id}")
        if response.is_error:
            raise PlatformError(
                f"Failed to delete environment {environment_id} "
                f"({response.status_code}): {_error_message(response)}"
            )

    async def list_api_keys(self) -> list[ApiKey]:
        items = await self._all_items(self._space_path("/api_keys"))
        return [_parse(_to_api_key, item) for item in items]

    async def update_api_key(self, key: ApiKey) -> ApiKey:
        body: dict[str, Any] = {
            "name": key.name,
            "environments": [_link("Environment", i) for i in key.environment_ids],
        }
        # PUT replaces the whole key
        if key.description is not None:
            body["description"] = key.description
        data = await self._json(
            "PUT", self._space_path(f"/api_keys/{key.id}"), version=key.version, json=body
        )
        return _parse(_to_api_key, data)

    async def list_locales(self, environment_id: str) -> list[Locale]:
        items = await self._all_items(self._environment_path(environment_id, "/locales"))
        return [_parse(_to_locale, item) for item in items]

    async def get_entries(self, environment_id: str, content_type: str) -> list[Entry]:
        items = await self._all_items(
            self._environment_path(environment_id, "/entries"),
            {"content_type": content_type},
        )
        return [_parse(_to_entry, item) for item in items]

    async def update_entry(self, environment_id: str, entry: Entry) -> Entry:
        data = await self._json(
            "PUT",
            self._environment_path(environment_id, f"/entries/{entry.id}"),
            version=entry.version,
            json={"fields": entry.fields},
        )
        return _parse(_to_entry, data)

    async def publish_entry(self, environment_id: str, entry: Entry) -> Entry:
        data = await self._json(
            "PUT",
            self._environment_path(environment_id, f"/entries/{entry.id}/published"),
            version=entry.version,
        )
        return _parse(_to_entry, data)

    async def update_alias(self, alias_name: str, environment_id: str) -> None:
        path = self._space_path(f"/environment_aliases/{alias_name}")
        alias = await self._json("GET", path)
        await self._json(
            "PUT",
            path,
            version=_parse(lambda data: data["sys"]["version"], alias),
            json={"environment": _link("Environment", environment_id)},
        )

    def environment_url(self, environment_id: str) -> str:
        return f"{APP_URL}/spaces/{self.space_id}/environments/{environment_id}"
