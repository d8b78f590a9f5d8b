"""Error presentation utilities.

Centralized release error formatting and exit code mapping, so every
failure is reported the same way: the step, the cause, the exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fioport.core.config import ConfigError
from fioport.core.errors import ErrorCode
from fioport.output.console import Style
from fioport.services.release_errors import (
    ArchiveFailed,
    CompileFailed,
    ConfigureFailed,
    DependencyInstallFailed,
    DescribeFailed,
    DistTreeFailed,
    DownloadFailed,
    ExtractFailed,
    InstallFailed,
    NoReleaseFound,
    ReleaseError,
    StripFailed,
    TagQueryFailed,
    TemplateMissing,
    ToolchainMissing,
    WorkspaceFailed,
)

if TYPE_CHECKING:
    from fioport.output.console import ConsoleProtocol

__all__ = ["print_config_error", "print_release_error", "release_error_exit_code"]


def _hint(error: ReleaseError) -> str | None:
    match error:
        case DependencyInstallFailed():
            return "run as root on a yum-based host, or pass --skip-deps if already provisioned"
        case NoReleaseFound(prefix=prefix):
            return f"check upstream.git_url and upstream.tag_prefix ({prefix!r})"
        case DescribeFailed():
            return "run from a git checkout with tags, or pass --project-dir"
        case ToolchainMissing():
            return "install devtoolset-7 or set toolchain.enable_script = \"\" in the config"
        case TemplateMissing():
            return "set paths.template in the config"
        case _:
            return None


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error with its step, exit status and hint."""
    code = release_error_exit_code(error)
    console.error(f"build aborted during {error.step}: {error.message}")
    console.print(f"exit status: {code}", Style.DIM)
    hint = _hint(error)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def _command_status(returncode: int, fallback: ErrorCode) -> int:
    # A command that ran keeps its own exit status.
    if returncode > 0:
        return returncode
    return int(fallback)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error:
        case DependencyInstallFailed(returncode=rc):
            return _command_status(rc, ErrorCode.ENV_ERROR)
        case TagQueryFailed(returncode=rc):
            return _command_status(rc, ErrorCode.NETWORK_ERROR)
        case DescribeFailed(returncode=rc):
            return _command_status(rc, ErrorCode.ENV_ERROR)
        case ConfigureFailed(returncode=rc) | CompileFailed(returncode=rc) | InstallFailed(
            returncode=rc
        ):
            return _command_status(rc, ErrorCode.BUILD_ERROR)
        case StripFailed(returncode=rc):
            return _command_status(rc, ErrorCode.BUILD_ERROR)
        case NoReleaseFound() | ToolchainMissing() | TemplateMissing():
            return int(ErrorCode.ENV_ERROR)
        case DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case ExtractFailed() | DistTreeFailed() | ArchiveFailed() | WorkspaceFailed():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.BUILD_ERROR)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.path is not None:
        console.print(f"config: {error.path}", Style.DIM)
