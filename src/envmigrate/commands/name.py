"""Name command: resolve an environment name pattern."""

import typer

from ..core import resolve
from ..errors import NameResolutionError
from ..output import get_output_context


def name(
    pattern: str = typer.Argument(..., help="Pattern, e.g. 'GH-[branch]'"),
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch for [branch]"),
) -> None:
    """Resolve a name pattern against the current UTC time."""
    ctx = get_output_context()

    try:
        resolved = resolve(pattern, branch=branch)
    except NameResolutionError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    if ctx.json_mode:
        ctx.print_json({"pattern": pattern, "name": resolved})
    else:
        typer.echo(resolved)
