"""Scratch workspace for a single release build.

The workspace is a temporary directory owned by one run:

- build/   out-of-tree configure/make directory
- cache/   downloaded source snapshots (kept between debug runs)
- dist/    staged install tree that gets archived
- source/  extracted fio sources

In debug mode the workspace lives at a fixed path under the system temp
directory and is kept after exit so it can be inspected. Otherwise a fresh
directory is created and removed when the context manager exits, whatever
the outcome.
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "BuildWorkspace",
    "WORKSPACE_NAME",
    "acquire_workspace",
    "debug_workspace_root",
]

WORKSPACE_NAME = "fioport"


@dataclass(frozen=True, slots=True)
class BuildWorkspace:
    """Paths of one build's scratch area."""

    root: Path
    debug: bool = False

    @property
    def build_dir(self) -> Path:
        return self.root / "build"

    @property
    def cache_dir(self) -> Path:
        return self.root / "cache"

    @property
    def dist_dir(self) -> Path:
        return self.root / "dist"

    @property
    def source_dir(self) -> Path:
        return self.root / "source"

    def prepare(self) -> None:
        """Reset build/, dist/ and source/; create cache/ if missing."""
        for d in (self.build_dir, self.dist_dir, self.source_dir):
            if d.exists():
                shutil.rmtree(d)
        for d in (self.build_dir, self.cache_dir, self.dist_dir, self.source_dir):
            d.mkdir(parents=True, exist_ok=True)

    def __str__(self) -> str:
        return str(self.root)


def debug_workspace_root(temp_root: Path | None = None) -> Path:
    """Fixed workspace location used in debug mode."""
    base = temp_root if temp_root is not None else Path(tempfile.gettempdir())
    return base / WORKSPACE_NAME


@contextmanager
def acquire_workspace(
    *,
    debug: bool = False,
    temp_root: Path | None = None,
) -> Iterator[BuildWorkspace]:
    """Create and prepare a workspace, removing it on exit unless debug.

    Args:
        debug: Use the fixed, reused location and keep it after exit
        temp_root: Parent directory (defaults to the system temp directory)

    Yields:
        The prepared BuildWorkspace
    """
    if debug:
        root = debug_workspace_root(temp_root)
        root.mkdir(parents=True, exist_ok=True)
    else:
        root = Path(
            tempfile.mkdtemp(
                prefix=f"{WORKSPACE_NAME}.",
                dir=str(temp_root) if temp_root is not None else None,
            )
        )

    workspace = BuildWorkspace(root=root, debug=debug)
    try:
        workspace.prepare()
        yield workspace
    finally:
        if not debug:
            shutil.rmtree(root, ignore_errors=True)
