"""Latest command - show which upstream release would be built."""

from __future__ import annotations

from pathlib import Path

import typer

from fioport.cli.context import build_context
from fioport.core.result import Err, Ok
from fioport.output.errors import print_release_error, release_error_exit_code
from fioport.services.release import ReleaseBuilder
from fioport.services.versions import release_version


def latest(
    config: Path | None = typer.Option(
        None, "--config", help="TOML config file (also: $FIOPORT_CONFIG)", show_default=False
    ),
) -> None:
    """Print the newest stable upstream release tag."""
    ctx = build_context(config)
    builder = ReleaseBuilder(config=ctx.config, console=ctx.console)

    match builder.latest_tag(cwd=Path.cwd()):
        case Ok(tag):
            typer.echo(f"{tag} ({release_version(tag, ctx.config.upstream.tag_prefix)})")
        case Err(error):
            print_release_error(error, ctx.console)
            raise typer.Exit(code=release_error_exit_code(error))
