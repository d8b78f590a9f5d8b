"""Build command - produce the portable fio release archive."""

from __future__ import annotations

from pathlib import Path

import typer

from fioport.cli.context import build_context
from fioport.core.config import debug_from_env
from fioport.core.errors import ErrorCode
from fioport.core.result import Err, Ok
from fioport.output.console import Style
from fioport.output.errors import print_release_error, release_error_exit_code
from fioport.services.release import ReleaseBuilder


def build(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Trace commands and keep the workspace (also: DEBUG=true)",
    ),
    skip_deps: bool = typer.Option(
        False, "--skip-deps", help="Do not run the package manager (host already provisioned)"
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Where to write the archive (default: current directory)",
        show_default=False,
    ),
    project_dir: Path | None = typer.Option(
        None,
        "--project-dir",
        help="Git checkout described into the distribution name (default: current directory)",
        show_default=False,
    ),
    config: Path | None = typer.Option(
        None, "--config", help="TOML config file (also: $FIOPORT_CONFIG)", show_default=False
    ),
) -> None:
    """Build the latest stable fio release into a self-installing tarball."""
    ctx = build_context(config)
    cfg = ctx.config.with_overrides(
        debug=True if debug or debug_from_env() else None,
        install_deps=False if skip_deps else None,
        output_dir=output_dir.expanduser().resolve() if output_dir else None,
        project_dir=project_dir.expanduser().resolve() if project_dir else None,
    )

    builder = ReleaseBuilder(config=cfg, console=ctx.console)
    try:
        result = builder.run()
    except KeyboardInterrupt:
        ctx.console.error("interrupted")
        raise typer.Exit(code=int(ErrorCode.INTERRUPTED))

    match result:
        case Ok(artifact):
            if artifact.from_cache:
                ctx.console.print("source snapshot served from cache", Style.DIM)
            if cfg.debug:
                ctx.console.print(f"workspace kept at {artifact.workspace}", Style.DIM)
            ctx.console.success(str(artifact.archive))
        case Err(error):
            print_release_error(error, ctx.console)
            raise typer.Exit(code=release_error_exit_code(error))
