"""Out-of-tree configure/make build of fio.

configure runs from build/ against the extracted sources with the final
install location as prefix (<install_prefix>/<dist-name>, /opt by default);
make install then stages the tree into dist/<dist-name>/ through
INSTALL_PREFIX, and install.sh copies it back under the same prefix. No step
has a time limit.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from fioport.core.result import Err, Ok, Result
from fioport.core.workspace import BuildWorkspace
from fioport.services.base import BaseService
from fioport.services.release_errors import CompileFailed, ConfigureFailed, InstallFailed

__all__ = ["FioBuilder", "BuildStepError", "parallel_jobs"]

BuildStepError = ConfigureFailed | CompileFailed | InstallFailed


def parallel_jobs() -> int:
    """Number of make jobs: every available processor."""
    try:
        return len(os.sched_getaffinity(0)) or 1
    except AttributeError:
        return os.cpu_count() or 1


class FioBuilder(BaseService):
    """Configure, compile and stage-install fio."""

    def install_prefix(self, dist_name: str) -> str:
        return str(PurePosixPath(self._config.dist.install_prefix) / dist_name)

    def configure_args(self, workspace: BuildWorkspace, dist_name: str) -> list[str]:
        return [
            str(workspace.source_dir / "configure"),
            "--disable-native",
            f"--prefix={self.install_prefix(dist_name)}",
        ]

    def build(
        self,
        workspace: BuildWorkspace,
        dist_name: str,
        *,
        env: Mapping[str, str] | None = None,
        jobs: int | None = None,
    ) -> Result[Path, BuildStepError]:
        """Build and stage-install fio.

        Returns:
            Ok(path) of the staged distribution tree, Err(BuildStepError) on failure
        """
        dist_tree = workspace.dist_dir / dist_name
        cwd = workspace.build_dir

        configure = self.configure_args(workspace, dist_name)
        self._trace(configure)
        result = self._runner.stream(configure, cwd=cwd, env=env)
        if isinstance(result, Err):
            return Err(ConfigureFailed(returncode=result.error.returncode))

        make = ["make", f"--jobs={jobs or parallel_jobs()}"]
        self._trace(make)
        result = self._runner.stream(make, cwd=cwd, env=env)
        if isinstance(result, Err):
            return Err(CompileFailed(returncode=result.error.returncode))

        install = ["make", f"INSTALL_PREFIX={dist_tree}", "install"]
        self._trace(install)
        result = self._runner.stream(install, cwd=cwd, env=env)
        if isinstance(result, Err):
            return Err(InstallFailed(returncode=result.error.returncode))

        return Ok(dist_tree)
