"""Migrate command: apply pending migrations to an existing environment."""

import asyncio
from pathlib import Path

import typer

from ..config import EnvMigrateConfig, load_config
from ..core import EnvironmentManager, MigrationRunner, load_catalog
from ..models import MigrationResult, MigrationStep
from ..output import get_output_context
from ..services import MigrationExecutor, PlatformClient, cli_executor
from ..services.contentful import ContentfulClient
from .run import report_failure


async def migrate_environment(
    environment_id: str,
    config: EnvMigrateConfig,
    client: PlatformClient,
    executor: MigrationExecutor,
    access_token: str,
    dry_run: bool = False,
) -> tuple[MigrationResult, list[MigrationStep]]:
    """Apply (or with dry_run only plan) pending migrations.

    Returns:
        The migration result and the steps pending at the start
    """
    locale = await EnvironmentManager(client, config).default_locale(environment_id)
    catalog = load_catalog(config.migrations_path)
    runner = MigrationRunner(client, executor, config, access_token)

    entry = await runner.fetch_tracking_entry(environment_id)
    current = runner.read_version(entry, locale)
    pending = runner.plan(catalog, current)
    if dry_run:
        return MigrationResult(start_version=current), pending

    return await runner.run(environment_id, catalog, locale), pending


async def _migrate(
    environment_id: str, config: EnvMigrateConfig, dry_run: bool
) -> tuple[MigrationResult, list[MigrationStep]]:
    space_id, token = config.require_credentials()
    async with ContentfulClient.connect(space_id, token) as client:
        return await migrate_environment(
            environment_id,
            config,
            client,
            cli_executor(config.migration_exec, config.migration_timeout),
            access_token=token,
            dry_run=dry_run,
        )


def migrate(
    environment: str = typer.Option(..., "--environment", "-e", help="Environment id"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show pending migrations without running them"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (defaults to envmigrate.toml)"
    ),
) -> None:
    """Apply pending migrations to an existing environment."""
    ctx = get_output_context()

    try:
        config = load_config(config_path=config_file)
        result, pending = asyncio.run(_migrate(environment, config, dry_run))
    except Exception as e:
        report_failure(ctx, e)

    if dry_run:
        ctx.print(f"[cyan][DRY RUN][/cyan] {environment} is at version {result.start_version}")
        ctx.table(
            "Pending migrations", ["Version", "File"], [(s.version, s.file_path.name) for s in pending]
        )
        ctx.result(
            {
                "environment": environment,
                "current_version": result.start_version,
                "pending": [s.version for s in pending],
            }
        )
        return

    ctx.success(
        f"{environment} migrated from {result.start_version} to {result.final_version}",
        {
            "environment": environment,
            "start_version": result.start_version,
            "applied": result.applied,
        },
    )
