"""Run command: provision the branch environment and migrate it."""

import asyncio
import logging
from pathlib import Path
from typing import NoReturn

import typer

from ..config import EnvMigrateConfig, load_config
from ..core import run_action
from ..errors import EnvMigrateError
from ..models import RunContext, RunResult
from ..output import OutputContext, get_output_context
from ..services import cli_executor, load_context, set_failed
from ..services.contentful import ContentfulClient

logger = logging.getLogger(__name__)


def report_failure(ctx: OutputContext, error: Exception) -> NoReturn:
    """Report a failed run to the workflow and the console, then exit 1."""
    if isinstance(error, EnvMigrateError):
        message = str(error)
    else:
        # Unexpected; keep the traceback for -v
        logger.debug("Unhandled error", exc_info=error)
        message = f"Unexpected error: {error!r}"
    set_failed(message)
    ctx.error(message, {"type": type(error).__name__})
    raise typer.Exit(1) from None


async def _run(context: RunContext, config: EnvMigrateConfig) -> RunResult:
    space_id, token = config.require_credentials()
    async with ContentfulClient.connect(space_id, token) as client:
        return await run_action(
            context,
            config,
            client,
            cli_executor(config.migration_exec, config.migration_timeout),
            access_token=token,
        )


def run(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (defaults to envmigrate.toml in the workspace)",
    ),
) -> None:
    """Create or replace the environment for this event and apply migrations."""
    ctx = get_output_context()

    try:
        config = load_config(config_path=config_file)
        context = load_context()
        result = asyncio.run(_run(context, config))
    except Exception as e:
        report_failure(ctx, e)

    ctx.table(
        "Run summary",
        ["Setting", "Value"],
        [
            ("Environment", result.environment_id),
            ("URL", result.environment_url),
            ("Status", result.status.value if result.status else "unknown"),
            ("Start version", result.start_version or "-"),
            ("Applied", ", ".join(result.applied) or "none"),
            ("Alias updated", "yes" if result.alias_updated else "no"),
            ("Deleted", result.deleted_environment or "-"),
        ],
    )
    ctx.success("All done", result.model_dump(mode="json"))
