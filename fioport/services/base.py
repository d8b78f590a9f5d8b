"""Shared plumbing for pipeline services."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from fioport.core.config import BuildConfig
from fioport.output.console import ConsoleProtocol, Style
from fioport.platform.process import CommandRunner, SubprocessRunner


class BaseService:
    """Holds config, console and command runner for a service.

    In debug mode every external command is echoed before it runs.
    """

    def __init__(
        self,
        *,
        config: BuildConfig,
        console: ConsoleProtocol,
        runner: CommandRunner | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._runner: CommandRunner = runner or SubprocessRunner()

    def _trace(self, cmd: Sequence[str]) -> None:
        if self._config.debug:
            self._console.print(f"+ {shlex.join(cmd)}", Style.DIM)
