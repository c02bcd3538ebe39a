"""Top-level sequencing of a provisioning and migration run.

No rollback is attempted on failure: environments already created and
migrations already recorded stay in place, and a re-run resumes from the
recorded version.
"""

import logging
from collections.abc import Callable

from ..config import EnvMigrateConfig
from ..models import RunContext, RunResult
from ..services.github import set_output
from ..services.migration import MigrationExecutor
from ..services.platform import PlatformClient
from .environment_manager import EnvironmentManager
from .migration_runner import MigrationRunner
from .name_resolver import environment_names
from .version_catalog import load_catalog

logger = logging.getLogger(__name__)

OutputSetter = Callable[[str, str], None]


async def run_action(
    context: RunContext,
    config: EnvMigrateConfig,
    client: PlatformClient,
    executor: MigrationExecutor,
    access_token: str,
    emit_output: OutputSetter = set_output,
) -> RunResult:
    """Provision the branch environment and bring it up to date.

    Args:
        context: Event context built at process entry
        config: Run configuration
        client: Platform client for the target space
        executor: Runs one migration script
        access_token: Management token handed to the executor
        emit_output: Sets a named step output

    Returns:
        Summary of the run

    Raises:
        EnvMigrateError: On any fatal error
    """
    manager = EnvironmentManager(client, config)
    names = environment_names(context.branch_names)

    environment = await manager.acquire(context)
    environment_id = environment.id
    environment = await manager.await_ready(environment_id)

    await manager.propagate_access(environment_id)

    logger.info("Set default locale to new environment")
    locale = await manager.default_locale(environment_id)

    logger.info("Read all the available migrations from the file system")
    catalog = load_catalog(config.migrations_path)

    runner = MigrationRunner(client, executor, config, access_token)
    migration = await runner.run(environment_id, catalog, locale)

    logger.info("Checking if we need to update master alias")
    alias_updated = await manager.update_alias(environment_id)
    deleted = await manager.delete_if_merged(context, names)

    result = RunResult(
        environment_id=environment_id,
        environment_url=client.environment_url(environment_id),
        status=environment.status,
        start_version=migration.start_version,
        applied=migration.applied,
        alias_updated=alias_updated,
        deleted_environment=deleted,
    )
    emit_output("environment_url", result.environment_url)
    emit_output("environment_name", result.environment_id)
    logger.info("All done")
    return result
