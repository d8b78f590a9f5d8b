"""Git queries used by the release builder.

All operations return Result types; commands go through a CommandRunner so
they can be replaced in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fioport.core.result import Err, Ok, Result
from fioport.platform.process import CommandRunner, ProcessError

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = ["GitError", "describe", "list_remote_tags"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message (stderr or launch failure)
        returncode: Process return code (-1 if git never ran)
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(e: ProcessError) -> GitError:
    return GitError(
        command=" ".join(e.command),
        message=e.stderr.strip() or str(e),
        returncode=e.returncode,
    )


def list_remote_tags(
    url: str,
    *,
    runner: CommandRunner,
    cwd: Path,
) -> Result[str, GitError]:
    """Run `git ls-remote --tags <url>` and return its raw output."""
    result = runner.capture(
        ["git", "ls-remote", "--tags", url],
        cwd=cwd,
        timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(_git_error(result.error))
    return Ok(result.value)


def describe(project_dir: Path, *, runner: CommandRunner) -> Result[str, GitError]:
    """Describe HEAD of project_dir (`git describe --always --dirty --tags`)."""
    result = runner.capture(
        ["git", "describe", "--always", "--dirty", "--tags"],
        cwd=project_dir,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(_git_error(result.error))

    value = result.value.strip()
    if not value:
        return Err(GitError(command="git describe", message="empty output"))
    return Ok(value)
