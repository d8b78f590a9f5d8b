"""Source snapshot downloader with a tag-keyed cache.

Snapshots are stored in the workspace cache directory under the name the
server announces (gitweb uses "<project>-<tag>-<shortsha>.tar.gz"). A file
matching "<project>-<tag>-*.tar.gz" counts as a cache hit and no request is
made. Downloads land in a hidden ".part" file first so an interrupted
transfer never matches the pattern.
"""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from fioport.core.result import Err, Ok, Result
from fioport.tools.http import HttpError

if TYPE_CHECKING:
    from collections.abc import Callable

    from fioport.tools.http import HttpClient

__all__ = ["SnapshotDownloader", "SnapshotResult"]


@dataclass(frozen=True, slots=True)
class SnapshotResult:
    """Result of fetching a snapshot.

    Attributes:
        path: Path to the snapshot archive in the cache
        from_cache: True if no download was needed
        size: File size in bytes
    """

    path: Path
    from_cache: bool
    size: int


class SnapshotDownloader:
    """Fetch upstream source snapshots, reusing cached ones.

    Usage:
        downloader = SnapshotDownloader(http, cache_dir, url_template)
        result = downloader.fetch("fio-3.31")
        if is_ok(result):
            print(result.value.path)
    """

    def __init__(
        self,
        http: HttpClient,
        cache_dir: Path,
        url_template: str,
        *,
        project: str = "fio",
    ) -> None:
        self._http = http
        self._cache_dir = cache_dir
        self._url_template = url_template
        self._project = project

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def url_for(self, tag: str) -> str:
        return self._url_template.format(tag=tag)

    def cache_pattern(self, tag: str) -> str:
        """Glob pattern of cached snapshots for tag."""
        return f"{self._project}-{tag}-*.tar.gz"

    def fallback_name(self, tag: str) -> str:
        """Name used when the server does not announce a matching filename."""
        return f"{self._project}-{tag}-snapshot.tar.gz"

    def find_cached(self, tag: str) -> Path | None:
        if not self._cache_dir.is_dir():
            return None
        matches = sorted(p for p in self._cache_dir.glob(self.cache_pattern(tag)) if p.is_file())
        return matches[0] if matches else None

    def fetch(
        self,
        tag: str,
        *,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[SnapshotResult, HttpError]:
        """Return the cached snapshot for tag, downloading it if needed."""
        url = self.url_for(tag)
        try:
            cached = self.find_cached(tag)
            if cached is not None:
                size = cached.stat().st_size
                return Ok(SnapshotResult(path=cached, from_cache=True, size=size))
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"cache unavailable: {e}"))

        part = self._cache_dir / f".{self._project}-{tag}.tar.gz.part"

        result = self._http.download(url, part, progress=progress)
        if isinstance(result, Err):
            part.unlink(missing_ok=True)
            return result

        name = result.value.filename
        if name is None or not fnmatch.fnmatchcase(name, self.cache_pattern(tag)):
            name = self.fallback_name(tag)

        final = self._cache_dir / name
        try:
            os.replace(part, final)
            size = final.stat().st_size
        except OSError as e:
            part.unlink(missing_ok=True)
            return Err(HttpError(url=url, status=0, message=f"cannot store download: {e}"))

        return Ok(SnapshotResult(path=final, from_cache=False, size=size))
