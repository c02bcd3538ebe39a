"""Versions command: list the migration catalog."""

from pathlib import Path

import typer

from ..config import load_config
from ..core import load_catalog
from ..errors import EnvMigrateError
from ..output import get_output_context


def versions(
    directory: Path | None = typer.Option(
        None, "--dir", "-d", help="Migrations directory (defaults to the configured one)"
    ),
) -> None:
    """List available migrations in the order they would run."""
    ctx = get_output_context()

    try:
        migrations_dir = directory or load_config().migrations_path
        catalog = load_catalog(migrations_dir)
    except EnvMigrateError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    if not catalog:
        ctx.print(f"[yellow]No migrations found in {migrations_dir}[/yellow]")
    ctx.table("Migrations", ["Version", "File"], [(s.version, s.file_path.name) for s in catalog])
    ctx.result({"directory": str(migrations_dir), "versions": [s.version for s in catalog]})
