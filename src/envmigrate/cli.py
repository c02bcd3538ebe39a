"""envmigrate CLI: per-branch Contentful environments with versioned migrations."""

import typer

from envmigrate import __version__

from .commands import init, migrate, name, run, versions
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"envmigrate {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="envmigrate",
    help="Provision per-branch Contentful environments and apply versioned migrations",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Debug logging with timestamps and source locations",
    ),
) -> None:
    """envmigrate - Contentful environment provisioning and migrations."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
        debug=debug,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))


app.command()(run)
app.command()(migrate)
app.command()(versions)
app.command()(name)
app.command()(init)


if __name__ == "__main__":
    app()
