"""Migration script execution through the contentful CLI."""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Mapping

from ..constants import DEFAULT_MIGRATION_EXEC
from ..errors import MigrationError
from ..models import MigrationRequest

logger = logging.getLogger(__name__)

MigrationExecutor = Callable[[MigrationRequest], Awaitable[None]]

# Read by the contentful CLI in place of --management-token
TOKEN_ENV_VAR = "CONTENTFUL_MANAGEMENT_TOKEN"


def build_command(request: MigrationRequest, exec_path: str = DEFAULT_MIGRATION_EXEC) -> list[str]:
    """Build the contentful CLI invocation for one migration.

    The management token is not part of the command line; see build_env.
    """
    cmd = [
        exec_path,
        "space",
        "migration",
        "--space-id",
        request.space_id,
        "--environment-id",
        request.environment_id,
    ]
    if request.yes:
        cmd.append("--yes")
    cmd.append(str(request.file_path))
    return cmd


def build_env(
    request: MigrationRequest, environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Child process environment carrying the management token."""
    env = dict(os.environ if environ is None else environ)
    env[TOKEN_ENV_VAR] = request.access_token
    return env


async def run_migration(
    request: MigrationRequest,
    exec_path: str = DEFAULT_MIGRATION_EXEC,
    timeout: float | None = None,
) -> None:
    """Run a single migration script.

    Args:
        request: Target environment, credentials and script path
        exec_path: Path to the contentful CLI
        timeout: Maximum execution time in seconds, None for no limit

    Raises:
        MigrationError: If the CLI is missing, times out or exits non-zero
    """
    if not request.file_path.is_file():
        raise MigrationError(f"Migration script not found: {request.file_path}")

    cmd = build_command(request, exec_path)
    logger.debug(f"Running migration {request.file_path} against {request.environment_id}")

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=build_env(request),
        )
    except FileNotFoundError:
        raise MigrationError(f"Command not found: {exec_path}") from None

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        raise MigrationError(
            f"Migration {request.file_path.name} timed out after {timeout} seconds"
        ) from None

    output = stdout.decode("utf-8", errors="replace").strip()
    if output:
        logger.debug(output)

    if proc.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip() or output
        raise MigrationError(
            f"Migration {request.file_path.name} failed (exit {proc.returncode}): {detail}"
        )


def cli_executor(
    exec_path: str = DEFAULT_MIGRATION_EXEC, timeout: float | None = None
) -> MigrationExecutor:
    """Bind the CLI path and timeout into an executor callable."""

    async def execute(request: MigrationRequest) -> None:
        await run_migration(request, exec_path=exec_path, timeout=timeout)

    return execute
