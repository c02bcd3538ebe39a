"""Init command implementation."""

from pathlib import Path

import typer

from ..config import write_config_template
from ..constants import CONFIG_FILENAME, DEFAULT_MIGRATIONS_DIR
from ..output import get_output_context


def init(
    directory: Path = typer.Option(
        Path("."), "--dir", "-d", help="Repository root to initialize"
    ),
) -> None:
    """Create envmigrate.toml and the migrations directory."""
    ctx = get_output_context()

    if not directory.is_dir():
        ctx.error(f"Not a directory: {directory}")
        raise typer.Exit(1)

    config_path = directory / CONFIG_FILENAME
    if config_path.exists():
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")
    else:
        write_config_template(directory)
        ctx.print(f"[green]Created config template:[/green] {config_path}")

    migrations_dir = directory / DEFAULT_MIGRATIONS_DIR
    if migrations_dir.exists():
        ctx.print(f"[yellow]Migrations directory already exists:[/yellow] {migrations_dir}")
    else:
        migrations_dir.mkdir(parents=True)
        ctx.print(f"[green]Created migrations directory:[/green] {migrations_dir}")

    ctx.success(
        "envmigrate initialized successfully!",
        {"config": str(config_path), "migrations_dir": str(migrations_dir)},
    )
