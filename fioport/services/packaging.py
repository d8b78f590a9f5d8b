"""Distribution naming, install script rendering and archival."""

from __future__ import annotations

import os
import tarfile
from pathlib import Path

from fioport.core.config import INSTALL_PREFIX_PLACEHOLDER
from fioport.core.result import Err, Ok, Result
from fioport.services.release_errors import ArchiveFailed, TemplateMissing

__all__ = [
    "archive_path",
    "create_archive",
    "make_dist_name",
    "render_install_script",
]

INSTALL_SCRIPT_NAME = "install.sh"


def make_dist_name(*, project: str, version: str, describe: str, arch: str) -> str:
    """Compose "<project>-<version>-dist-g<describe>-<arch>".

    A single leading "v" of the describe string is dropped ("v1.2" -> "1.2").
    """
    return f"{project}-{version}-dist-g{describe.removeprefix('v')}-{arch}"


def render_install_script(
    template: Path,
    dist_tree: Path,
    *,
    dist_name: str,
    placeholder: str,
    install_prefix: str = "/opt",
    prefix_placeholder: str = INSTALL_PREFIX_PLACEHOLDER,
) -> Result[Path, TemplateMissing]:
    """Write dist_tree/install.sh from template with every placeholder replaced.

    The distribution name placeholder is mandatory. The install prefix
    placeholder is substituted wherever it appears, so the script installs
    the tree where configure --prefix expects it.
    """
    try:
        content = template.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(TemplateMissing(path=template))
    except (OSError, UnicodeDecodeError) as e:
        return Err(TemplateMissing(path=template, detail=str(e)))

    if placeholder not in content:
        return Err(TemplateMissing(path=template, detail=f"no {placeholder} placeholder"))

    dest = dist_tree / INSTALL_SCRIPT_NAME
    try:
        rendered = content.replace(placeholder, dist_name).replace(
            prefix_placeholder, install_prefix.rstrip("/") or "/"
        )
        dest.write_text(rendered, encoding="utf-8")
        os.chmod(dest, 0o755)
    except OSError as e:
        return Err(TemplateMissing(path=template, detail=f"cannot write {dest}: {e}"))
    return Ok(dest)


def archive_path(out_dir: Path, dist_name: str) -> Path:
    return out_dir / f"{dist_name}.tar.xz"


def _root_owned(info: tarfile.TarInfo) -> tarfile.TarInfo:
    info.uid = info.gid = 0
    info.uname = info.gname = "root"
    return info


def create_archive(dist_dir: Path, dist_name: str, out_dir: Path) -> Result[Path, ArchiveFailed]:
    """Archive dist_dir/dist_name as out_dir/<dist_name>.tar.xz.

    The archive holds a single top-level directory named dist_name.
    """
    src = dist_dir / dist_name
    dest = archive_path(out_dir, dist_name)
    if not src.is_dir():
        return Err(ArchiveFailed(path=dest, detail=f"distribution tree missing: {src}"))

    part = dest.with_name(f".{dest.name}.part")
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(part, "w:xz") as tar:
            tar.add(src, arcname=dist_name, filter=_root_owned)
        os.replace(part, dest)
    except (OSError, tarfile.TarError) as e:
        part.unlink(missing_ok=True)
        return Err(ArchiveFailed(path=dest, detail=str(e)))
    return Ok(dest)
