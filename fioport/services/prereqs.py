"""Host build dependency provisioning.

Runs the configured package-manager commands in order (by default the
Software Collections repository, then devtoolset-7 and the fio build
libraries via yum). The first failing command stops the run. Commands run
without a time limit.
"""

from __future__ import annotations

from pathlib import Path

from fioport.core.result import Err, Ok, Result
from fioport.services.base import BaseService
from fioport.services.release_errors import DependencyInstallFailed

__all__ = ["DependencyInstaller"]


class DependencyInstaller(BaseService):
    """Install compiler toolchain and development libraries."""

    def install(self, *, cwd: Path) -> Result[None, DependencyInstallFailed]:
        for argv in self._config.deps.commands:
            self._trace(argv)
            result = self._runner.stream(list(argv), cwd=cwd)
            if isinstance(result, Err):
                e = result.error
                return Err(
                    DependencyInstallFailed(
                        command=tuple(argv),
                        returncode=e.returncode,
                        detail=e.stderr.strip(),
                    )
                )
        return Ok(None)
