"""Compiler toolchain activation.

Software Collections toolchains are enabled by sourcing a shell script
(/opt/rh/devtoolset-7/enable) that rewrites PATH, LD_LIBRARY_PATH and
friends. The script is sourced in bash and the resulting environment is
captured so configure and make can run with it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from fioport.core.result import Err, Ok, Result
from fioport.services.base import BaseService
from fioport.services.release_errors import ToolchainMissing

__all__ = ["ToolchainActivator", "parse_env_dump"]

# "$1" is the enable script; env -0 separates entries with NUL so values may
# contain newlines.
_DUMP_SCRIPT = 'source "$1" >/dev/null && env -0'


def parse_env_dump(dump: str) -> dict[str, str]:
    """Parse NUL-separated NAME=value entries as printed by `env -0`."""
    env: dict[str, str] = {}
    for entry in dump.split("\0"):
        if not entry or "=" not in entry:
            continue
        name, _, value = entry.partition("=")
        if name:
            env[name] = value
    return env


class ToolchainActivator(BaseService):
    """Resolve the environment configure/make run with."""

    def environment(self, *, cwd: Path) -> Result[Mapping[str, str], ToolchainMissing]:
        script = self._config.toolchain.enable_script
        if script is None:
            return Ok(dict(os.environ))

        if not script.is_file():
            return Err(ToolchainMissing(script=script))

        cmd = ["bash", "-c", _DUMP_SCRIPT, "bash", str(script)]
        self._trace(cmd)
        result = self._runner.capture(cmd, cwd=cwd)
        if isinstance(result, Err):
            detail = result.error.stderr.strip() or str(result.error)
            return Err(ToolchainMissing(script=script, detail=detail))

        env = parse_env_dump(result.value)
        if "PATH" not in env:
            return Err(ToolchainMissing(script=script, detail="sourcing produced no PATH"))
        return Ok(env)
