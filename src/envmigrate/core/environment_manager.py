"""Lifecycle of the per-branch remote environment.

A run walks the environment through these states:

    resolve name -> look up -> delete if present -> create -> poll -> ready | failed

The long-lived default environment is never replaced. After the environment
is usable, API keys are linked to it, the alias may be repointed and, after a
merge, the feature environment may be removed.
"""

import asyncio
import logging
from datetime import datetime

from ..config import EnvMigrateConfig
from ..errors import (
    EnvironmentNotFoundError,
    EnvironmentTimeoutError,
    LocaleError,
    PlatformError,
)
from ..models import (
    ApiKey,
    Environment,
    EnvironmentNames,
    EnvironmentStatus,
    PropagationResult,
    RunContext,
)
from ..services.platform import PlatformClient
from .name_resolver import resolve

logger = logging.getLogger(__name__)


class EnvironmentManager:
    """Create, await and wire up environments in one space."""

    def __init__(self, client: PlatformClient, config: EnvMigrateConfig) -> None:
        self.client = client
        self.config = config

    def resolve_target_name(self, context: RunContext, now: datetime | None = None) -> str:
        """Pick the environment id for this run.

        A pull request merged into the default branch gets a name from the
        master pattern; everything else is named after the head branch.
        """
        if context.is_merge_into_default:
            return resolve(self.config.master_pattern, now=now)
        return resolve(
            self.config.feature_pattern, branch=context.branch_names.head_ref, now=now
        )

    def is_master_lineage(self, environment_id: str) -> bool:
        """True for ids in the default environment's naming lineage."""
        return environment_id.startswith(self.config.default_environment)

    async def acquire(self, context: RunContext) -> Environment:
        """Resolve the target name and return a fresh environment for it.

        The default environment is returned as-is, never recreated.
        """
        environment_id = self.resolve_target_name(context)
        logger.info(f'environmentId: "{environment_id}"')

        if environment_id == self.config.default_environment:
            logger.info(f'Using long-lived environment "{environment_id}" without changes')
            return await self.client.get_environment(environment_id)

        return await self.replace(environment_id)

    async def replace(self, environment_id: str) -> Environment:
        """Delete any environment with this id, then create it again."""
        logger.info(f'Checking for existing versions of environment: "{environment_id}"')
        try:
            await self.client.get_environment(environment_id)
            await self.client.delete_environment(environment_id)
            logger.info(f'Environment deleted: "{environment_id}"')
        except EnvironmentNotFoundError:
            logger.info(f'Environment not found: "{environment_id}"')
        except PlatformError as e:
            logger.warning(f'Could not remove existing environment "{environment_id}": {e}')

        logger.info(f"Creating environment {environment_id}")
        return await self.client.create_environment(environment_id, name=environment_id)

    async def await_ready(self, environment_id: str) -> Environment:
        """Poll until the environment is ready or failed.

        Polls every poll_delay seconds, at most poll_attempts times. A failed
        environment is reported but not retried. Running out of attempts is a
        warning unless fail_on_poll_timeout is set.

        Returns:
            The last environment state fetched

        Raises:
            EnvironmentTimeoutError: If attempts run out and fail_on_poll_timeout is set
        """
        logger.info("Waiting for environment processing...")
        environment: Environment | None = None

        for attempt in range(1, self.config.poll_attempts + 1):
            environment = await self.client.get_environment(environment_id)

            if environment.status is EnvironmentStatus.READY:
                logger.info(f'Successfully processed new environment: "{environment_id}"')
                return environment
            if environment.status is EnvironmentStatus.FAILED:
                logger.error(f'Environment creation failed: "{environment_id}"')
                return environment

            logger.debug(
                f"Environment {environment_id} is {environment.status.value} "
                f"(attempt {attempt}/{self.config.poll_attempts})"
            )
            await asyncio.sleep(self.config.poll_delay)

        message = (
            f'Environment "{environment_id}" not ready after '
            f"{self.config.poll_attempts} attempts"
        )
        if self.config.fail_on_poll_timeout:
            raise EnvironmentTimeoutError(message)
        logger.warning(f"{message}, continuing anyway")
        assert environment is not None  # poll_attempts >= 1
        return environment

    async def _link_key(self, key: ApiKey, environment_id: str) -> ApiKey:
        logger.info(f'Updating: "{key.id}"')
        return await self.client.update_api_key(key.with_environment(environment_id))

    async def propagate_access(self, environment_id: str) -> PropagationResult:
        """Link every API key in the space to the environment.

        Keys are updated concurrently. A failing key is logged and does not
        stop the others.
        """
        logger.info("Update API Keys to allow access to new environment")
        keys = await self.client.list_api_keys()
        result = PropagationResult()

        pending = []
        for key in keys:
            if environment_id in key.environment_ids:
                result.skipped.append(key.id)
            else:
                pending.append(key)

        outcomes = await asyncio.gather(
            *(self._link_key(key, environment_id) for key in pending),
            return_exceptions=True,
        )
        for key, outcome in zip(pending, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.error(f'Failed to update API key "{key.id}": {outcome}')
                result.failed[key.id] = str(outcome) or type(outcome).__name__
            else:
                result.updated.append(key.id)
        return result

    async def default_locale(self, environment_id: str) -> str:
        """Code of the environment's default locale.

        Raises:
            LocaleError: If no locale is flagged default
        """
        locales = await self.client.list_locales(environment_id)
        for locale in locales:
            if locale.default:
                logger.debug(f"Default locale of {environment_id}: {locale.code}")
                return locale.code
        raise LocaleError(f'Environment "{environment_id}" has no default locale')

    async def update_alias(self, environment_id: str) -> bool:
        """Point the configured alias at a master-lineage environment.

        Returns:
            True if the alias was updated
        """
        if not (self.config.set_alias and self.is_master_lineage(environment_id)):
            logger.info("Running on feature branch")
            logger.info("No alias changes required")
            return False

        alias_name = self.config.alias_name
        logger.info(f"Updating {alias_name} alias.")
        try:
            await self.client.update_alias(alias_name, environment_id)
        except PlatformError as e:
            logger.error(f"Cannot update alias {alias_name}: {e}")
            return False
        logger.info(f"alias {alias_name} updated.")
        return True

    async def delete_if_merged(
        self, context: RunContext, names: EnvironmentNames
    ) -> str | None:
        """Remove the feature environment once its pull request is merged.

        Returns:
            The deleted environment id, or None if nothing was deleted
        """
        if not (self.config.delete_feature and context.is_merge_into_default):
            return None
        if names.head is None:
            logger.warning("Merged event has no head branch, nothing to delete")
            return None

        environment_id = resolve(self.config.feature_pattern, branch=names.head)
        logger.info(f"Delete the environment: {environment_id}")
        try:
            await self.client.get_environment(environment_id)
            await self.client.delete_environment(environment_id)
        except PlatformError as e:
            logger.error(f"Cannot delete the environment {environment_id}: {e}")
            return None
        logger.info(f"Deleted the environment: {environment_id}")
        return environment_id
