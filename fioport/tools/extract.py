"""Source archive extraction.

Unpacks .tar.gz/.tgz and .tar.xz archives with strip_components (dropping
the "<project>-<tag>-<sha>/" wrapper snapshot services add), keeping file
modes so scripts such as ./configure stay executable. Members that would
land outside the destination, links and special files are skipped; skipped
links are listed in the result so the caller can report them.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from fioport.core.result import Err, Ok, Result

__all__ = ["ExtractError", "ExtractResult", "Extractor"]


@dataclass(frozen=True, slots=True)
class ExtractError:
    """Extraction error details.

    Attributes:
        archive: Path to the archive that failed
        message: Human-readable error message
    """

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


@dataclass(frozen=True, slots=True)
class ExtractResult:
    """Result of an extraction.

    Attributes:
        dest: Directory the archive was unpacked into
        files_count: Number of files written
        skipped_links: Member names of symlinks and hardlinks left out
    """

    dest: Path
    files_count: int
    skipped_links: tuple[str, ...] = ()


class Extractor:
    """Tar archive extractor.

    Usage:
        result = Extractor().extract(archive, source_dir, strip_components=1)
        if is_ok(result):
            print(f"Extracted {result.value.files_count} files")
    """

    def extract(
        self,
        archive: Path,
        dest: Path,
        *,
        strip_components: int = 0,
    ) -> Result[ExtractResult, ExtractError]:
        """Extract archive into dest, replacing previous contents.

        Args:
            archive: Path to archive file
            dest: Directory to extract to
            strip_components: Number of leading path components to remove

        Returns:
            Ok with ExtractResult, or Err with ExtractError
        """
        if not archive.is_file():
            return Err(ExtractError(archive=archive, message="Archive not found"))

        name = archive.name.lower()
        if name.endswith((".tar.gz", ".tgz")):
            mode = "r:gz"
        elif name.endswith((".tar.xz", ".txz")):
            mode = "r:xz"
        else:
            return Err(ExtractError(archive=archive, message="Unsupported archive format"))

        return self._extract_tar(archive, dest, strip_components, mode)

    def _safe_relative_path(self, member_name: str, strip_components: int) -> Path | None:
        """Return a sanitized relative extraction path, or None if unsafe."""
        normalized = member_name.replace("\\", "/")
        if normalized.startswith("/"):
            return None

        parts = PurePosixPath(normalized).parts
        if len(parts) <= strip_components:
            return None

        kept = parts[strip_components:]
        if any(part in {"", ".", ".."} for part in kept):
            return None

        return Path(*kept)

    def _is_within_root(self, root: Path, target: Path) -> bool:
        try:
            return target.resolve().is_relative_to(root)
        except OSError:
            return False

    def _extract_tar(
        self,
        archive: Path,
        dest: Path,
        strip_components: int,
        mode: str,
    ) -> Result[ExtractResult, ExtractError]:
        try:
            if dest.exists():
                shutil.rmtree(dest)
            dest.mkdir(parents=True, exist_ok=True)
            root = dest.resolve()

            files_count = 0
            skipped_links: list[str] = []
            with tarfile.open(archive, mode) as tar:
                for member in tar:
                    if member.issym() or member.islnk():
                        skipped_links.append(member.name)
                        continue
                    # Directories, devices and fifos
                    if not member.isreg():
                        continue

                    rel_path = self._safe_relative_path(member.name, strip_components)
                    if rel_path is None:
                        continue

                    full_path = dest / rel_path
                    if not self._is_within_root(root, full_path):
                        continue

                    src = tar.extractfile(member)
                    if src is None:
                        continue

                    full_path.parent.mkdir(parents=True, exist_ok=True)
                    with src, open(full_path, "wb") as dst:
                        shutil.copyfileobj(src, dst)

                    perm = member.mode & 0o777
                    if perm:
                        with contextlib.suppress(OSError):
                            os.chmod(full_path, perm)

                    files_count += 1

            if files_count == 0:
                return Err(ExtractError(archive=archive, message="Archive contained no files"))
            return Ok(
                ExtractResult(
                    dest=dest, files_count=files_count, skipped_links=tuple(skipped_links)
                )
            )

        except tarfile.TarError as e:
            return Err(ExtractError(archive=archive, message=f"Tar extraction failed: {e}"))
        except (OSError, EOFError) as e:
            return Err(ExtractError(archive=archive, message=f"IO error: {e}"))
