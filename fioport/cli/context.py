from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from fioport.core.config import BuildConfig, load_config_or_default
from fioport.core.errors import ErrorCode
from fioport.core.result import Err
from fioport.output.console import ConsoleProtocol, RichConsole
from fioport.output.errors import print_config_error

CONFIG_ENV_VAR = "FIOPORT_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: BuildConfig
    console: ConsoleProtocol


def resolve_config_path(config_path: Path | None) -> Path | None:
    """--config wins over $FIOPORT_CONFIG; neither means built-in defaults."""
    if config_path is not None:
        return config_path.expanduser()
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return None


def build_context(config_path: Path | None = None) -> CLIContext:
    console = RichConsole()
    config_result = load_config_or_default(resolve_config_path(config_path))
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(config=config_result.value, console=console)
