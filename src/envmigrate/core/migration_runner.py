"""Sequential migration runner with per-step version tracking.

The environment records the last applied migration in a single entry of the
version tracking content type. Pending migrations run strictly in catalog
order and the entry is updated and published after every successful step, so
an interrupted run resumes at the first unrecorded step.
"""

import logging

from ..config import EnvMigrateConfig
from ..errors import MigrationError, UnknownVersionError, VersionTrackingError
from ..models import Entry, MigrationRequest, MigrationResult, MigrationStep
from ..services.migration import MigrationExecutor
from ..services.platform import PlatformClient
from .version_catalog import pending_after

logger = logging.getLogger(__name__)


class MigrationRunner:
    """Apply pending catalog steps to one environment."""

    def __init__(
        self,
        client: PlatformClient,
        executor: MigrationExecutor,
        config: EnvMigrateConfig,
        access_token: str,
    ) -> None:
        self.client = client
        self.executor = executor
        self.config = config
        self.access_token = access_token

    async def fetch_tracking_entry(self, environment_id: str) -> Entry:
        """Return the single version tracking entry.

        Raises:
            VersionTrackingError: If there is not exactly one entry
        """
        content_type = self.config.version_content_type
        entries = await self.client.get_entries(environment_id, content_type)
        if not entries:
            raise VersionTrackingError(
                f'There should be exactly one entry of type "{content_type}"'
            )
        if len(entries) > 1:
            raise VersionTrackingError(
                f'There should only be one entry of type "{content_type}", found {len(entries)}'
            )
        return entries[0]

    def read_version(self, entry: Entry, locale: str) -> str:
        """Read the recorded version from the tracking entry."""
        value = entry.get_field(self.config.version_field, locale)
        if value is None or str(value).strip() == "":
            raise VersionTrackingError(
                f'Entry "{entry.id}" has no {self.config.version_field} value for locale {locale}'
            )
        return str(value).strip()

    def plan(self, catalog: list[MigrationStep], current_version: str) -> list[MigrationStep]:
        """Steps to apply after the current version.

        Raises:
            UnknownVersionError: If the current version is not in the catalog
        """
        try:
            return pending_after(catalog, current_version)
        except ValueError:
            raise UnknownVersionError(
                f"Version {current_version} is not matching with any known migration"
            ) from None

    async def record_version(
        self, environment_id: str, entry: Entry, locale: str, version: str
    ) -> Entry:
        """Write a new version to the tracking entry, then publish it."""
        updated = await self.client.update_entry(
            environment_id, entry.with_field(self.config.version_field, locale, version)
        )
        published = await self.client.publish_entry(environment_id, updated)
        logger.info(
            f"Updated field {self.config.version_field} in "
            f"{self.config.version_content_type} entry to {version}"
        )
        return published

    async def run(
        self, environment_id: str, catalog: list[MigrationStep], locale: str
    ) -> MigrationResult:
        """Apply every pending migration to the environment.

        Args:
            environment_id: Environment to migrate
            catalog: Ordered migration steps
            locale: Locale holding the version field

        Returns:
            The starting version and the versions applied, in order

        Raises:
            VersionTrackingError: If the tracking entry is missing, duplicated or empty
            UnknownVersionError: If the recorded version is not in the catalog
            MigrationError: If a migration fails; earlier steps stay recorded
        """
        logger.info("Find current version of the contentful space")
        entry = await self.fetch_tracking_entry(environment_id)
        current_version = self.read_version(entry, locale)

        logger.info("Evaluate which migrations to run")
        steps = self.plan(catalog, current_version)
        result = MigrationResult(start_version=current_version)
        if not steps:
            logger.info(f"Environment is up to date at version {current_version}")
            return result

        logger.info(
            f"Run migrations and update version entry: {', '.join(s.version for s in steps)}"
        )
        for step in steps:
            logger.info(f"Running {step.file_path}")
            request = MigrationRequest(
                space_id=self.client.space_id,
                environment_id=environment_id,
                access_token=self.access_token,
                file_path=step.file_path,
            )
            try:
                await self.executor(request)
            except MigrationError:
                logger.error(f"Migration script {step.file_path.name} failed")
                raise
            except Exception as e:
                raise MigrationError(f"Migration script {step.file_path.name} failed: {e}") from e
            logger.info(f"Migration script {step.file_path.name} succeeded")

            entry = await self.record_version(environment_id, entry, locale, step.version)
            result.applied.append(step.version)

        return result
