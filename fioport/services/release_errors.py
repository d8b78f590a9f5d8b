"""Typed failures of the release pipeline.

Each error names the step it came from and carries the cause; the
orchestrator stops at the first one and the CLI renders it via
fioport.output.errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import ClassVar


class Step(StrEnum):
    WORKSPACE = "workspace setup"
    DEPENDENCIES = "dependency installation"
    VERSION = "version discovery"
    DOWNLOAD = "source download"
    EXTRACT = "source extraction"
    DIST_NAME = "distribution naming"
    BUILD = "build"
    STRIP = "binary stripping"
    TEMPLATE = "install script"
    ARCHIVE = "archival"


@dataclass(frozen=True, slots=True)
class WorkspaceFailed:
    step: ClassVar[Step] = Step.WORKSPACE
    root: Path
    detail: str

    @property
    def message(self) -> str:
        return f"cannot prepare workspace {self.root}: {self.detail}"


@dataclass(frozen=True, slots=True)
class DependencyInstallFailed:
    step: ClassVar[Step] = Step.DEPENDENCIES
    command: tuple[str, ...]
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        msg = f"'{' '.join(self.command)}' failed (exit {self.returncode})"
        return f"{msg}: {self.detail}" if self.detail else msg


@dataclass(frozen=True, slots=True)
class TagQueryFailed:
    step: ClassVar[Step] = Step.VERSION
    url: str
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        msg = f"listing tags of {self.url} failed (exit {self.returncode})"
        return f"{msg}: {self.detail}" if self.detail else msg


@dataclass(frozen=True, slots=True)
class NoReleaseFound:
    step: ClassVar[Step] = Step.VERSION
    url: str
    prefix: str
    tags_seen: int

    @property
    def message(self) -> str:
        return (
            f"no stable '{self.prefix}*' release tag found at {self.url} "
            f"({self.tags_seen} tags listed)"
        )


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    step: ClassVar[Step] = Step.DOWNLOAD
    url: str
    detail: str

    @property
    def message(self) -> str:
        return f"download failed: {self.detail}"


@dataclass(frozen=True, slots=True)
class ExtractFailed:
    step: ClassVar[Step] = Step.EXTRACT
    archive: Path
    detail: str

    @property
    def message(self) -> str:
        return f"cannot extract {self.archive}: {self.detail}"


@dataclass(frozen=True, slots=True)
class DescribeFailed:
    step: ClassVar[Step] = Step.DIST_NAME
    project_dir: Path
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        msg = f"git describe failed in {self.project_dir} (exit {self.returncode})"
        return f"{msg}: {self.detail}" if self.detail else msg


@dataclass(frozen=True, slots=True)
class DistTreeFailed:
    step: ClassVar[Step] = Step.DIST_NAME
    path: Path
    detail: str

    @property
    def message(self) -> str:
        return f"cannot create distribution folder {self.path}: {self.detail}"


@dataclass(frozen=True, slots=True)
class ToolchainMissing:
    step: ClassVar[Step] = Step.BUILD
    script: Path
    detail: str = "enable script not found"

    @property
    def message(self) -> str:
        return f"toolchain unavailable ({self.script}): {self.detail}"


@dataclass(frozen=True, slots=True)
class ConfigureFailed:
    step: ClassVar[Step] = Step.BUILD
    returncode: int

    @property
    def message(self) -> str:
        return f"configure failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class CompileFailed:
    step: ClassVar[Step] = Step.BUILD
    returncode: int

    @property
    def message(self) -> str:
        return f"make failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class InstallFailed:
    step: ClassVar[Step] = Step.BUILD
    returncode: int

    @property
    def message(self) -> str:
        return f"make install failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class StripFailed:
    step: ClassVar[Step] = Step.STRIP
    path: Path
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        msg = f"strip {self.path.name} failed (exit {self.returncode})"
        return f"{msg}: {self.detail}" if self.detail else msg


@dataclass(frozen=True, slots=True)
class TemplateMissing:
    step: ClassVar[Step] = Step.TEMPLATE
    path: Path
    detail: str = "not found"

    @property
    def message(self) -> str:
        return f"install script template {self.path}: {self.detail}"


@dataclass(frozen=True, slots=True)
class ArchiveFailed:
    step: ClassVar[Step] = Step.ARCHIVE
    path: Path
    detail: str

    @property
    def message(self) -> str:
        return f"cannot create {self.path}: {self.detail}"


ReleaseError = (
    WorkspaceFailed
    | DependencyInstallFailed
    | TagQueryFailed
    | NoReleaseFound
    | DownloadFailed
    | ExtractFailed
    | DescribeFailed
    | DistTreeFailed
    | ToolchainMissing
    | ConfigureFailed
    | CompileFailed
    | InstallFailed
    | StripFailed
    | TemplateMissing
    | ArchiveFailed
)
