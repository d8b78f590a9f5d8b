"""Tests for fioport.services.packaging module."""

from __future__ import annotations

import os
import stat
import tarfile
from pathlib import Path

from fioport.core.config import (
    DEFAULT_TEMPLATE_PATH,
    DIST_NAME_PLACEHOLDER,
    INSTALL_PREFIX_PLACEHOLDER,
)
from fioport.core.result import Err, Ok
from fioport.services.packaging import (
    archive_path,
    create_archive,
    make_dist_name,
    render_install_script,
)

DIST_NAME = "fio-3.31-dist-g1.2.0-amd64"


class TestMakeDistName:
    def test_strips_leading_v(self) -> None:
        name = make_dist_name(project="fio", version="3.31", describe="v1.2.0", arch="amd64")
        assert name == DIST_NAME

    def test_plain_describe(self) -> None:
        name = make_dist_name(
            project="fio", version="3.31", describe="1a2b3c4-dirty", arch="amd64"
        )
        assert name == "fio-3.31-dist-g1a2b3c4-dirty-amd64"

    def test_only_one_v_removed(self) -> None:
        name = make_dist_name(project="fio", version="3.31", describe="vv2", arch="arm64")
        assert name == "fio-3.31-dist-gv2-arm64"


class TestRenderInstallScript:
    def test_bundled_template(self, tmp_path: Path) -> None:
        result = render_install_script(
            DEFAULT_TEMPLATE_PATH,
            tmp_path,
            dist_name=DIST_NAME,
            placeholder=DIST_NAME_PLACEHOLDER,
        )

        assert isinstance(result, Ok)
        script = result.value
        assert script == tmp_path / "install.sh"
        content = script.read_text(encoding="utf-8")
        assert DIST_NAME_PLACEHOLDER not in content
        assert INSTALL_PREFIX_PLACEHOLDER not in content
        assert 'install_dir="/opt/${dist_name}"' in content
        assert DIST_NAME in content
        assert stat.S_IMODE(script.stat().st_mode) == 0o755

    def test_install_prefix(self, tmp_path: Path) -> None:
        result = render_install_script(
            DEFAULT_TEMPLATE_PATH,
            tmp_path,
            dist_name=DIST_NAME,
            placeholder=DIST_NAME_PLACEHOLDER,
            install_prefix="/usr/local/fio/",
        )

        content = result.unwrap().read_text(encoding="utf-8")
        assert 'install_dir="/usr/local/fio/${dist_name}"' in content
        assert "/opt" not in content
        assert INSTALL_PREFIX_PLACEHOLDER not in content

    def test_prefix_placeholder_is_optional(self, tmp_path: Path) -> None:
        template = tmp_path / "t.in"
        template.write_text("name=@N@\n", encoding="utf-8")
        out = tmp_path / "dist"
        out.mkdir()

        result = render_install_script(
            template, out, dist_name="x", placeholder="@N@", install_prefix="/srv"
        )

        assert result.unwrap().read_text(encoding="utf-8") == "name=x\n"

    def test_every_occurrence_replaced(self, tmp_path: Path) -> None:
        template = tmp_path / "t.in"
        template.write_text("a=@N@\nb=@N@\n", encoding="utf-8")
        out = tmp_path / "dist"
        out.mkdir()

        result = render_install_script(template, out, dist_name="x", placeholder="@N@")

        assert result.unwrap().read_text(encoding="utf-8") == "a=x\nb=x\n"

    def test_missing_template(self, tmp_path: Path) -> None:
        result = render_install_script(
            tmp_path / "missing.in", tmp_path, dist_name=DIST_NAME, placeholder="@N@"
        )

        assert isinstance(result, Err)
        assert result.error.detail == "not found"

    def test_template_without_placeholder(self, tmp_path: Path) -> None:
        template = tmp_path / "t.in"
        template.write_text("#!/bin/sh\n", encoding="utf-8")

        result = render_install_script(template, tmp_path, dist_name=DIST_NAME, placeholder="@N@")

        assert isinstance(result, Err)
        assert not (tmp_path / "install.sh").exists()


class TestCreateArchive:
    def _dist_tree(self, dist_dir: Path) -> Path:
        tree = dist_dir / DIST_NAME
        (tree / "bin").mkdir(parents=True)
        (tree / "bin" / "fio").write_bytes(b"\x7fELF")
        os.chmod(tree / "bin" / "fio", 0o755)
        (tree / "install.sh").write_text("#!/bin/bash\n", encoding="utf-8")
        return tree

    def test_single_top_level_directory(self, tmp_path: Path) -> None:
        dist_dir = tmp_path / "dist"
        self._dist_tree(dist_dir)
        out = tmp_path / "out"

        result = create_archive(dist_dir, DIST_NAME, out)

        assert result == Ok(archive_path(out, DIST_NAME))
        assert result.unwrap().name == f"{DIST_NAME}.tar.xz"
        with tarfile.open(result.unwrap(), "r:xz") as tar:
            names = tar.getnames()
            tops = {n.split("/")[0] for n in names}
            assert tops == {DIST_NAME}
            assert f"{DIST_NAME}/bin/fio" in names
            assert f"{DIST_NAME}/install.sh" in names
            member = tar.getmember(f"{DIST_NAME}/bin/fio")
            assert member.uid == 0
            assert member.mode & 0o111
        assert [p.name for p in out.iterdir()] == [f"{DIST_NAME}.tar.xz"]

    def test_overwrites_existing_archive(self, tmp_path: Path) -> None:
        dist_dir = tmp_path / "dist"
        self._dist_tree(dist_dir)
        out = tmp_path / "out"
        out.mkdir()
        archive_path(out, DIST_NAME).write_bytes(b"stale")

        result = create_archive(dist_dir, DIST_NAME, out)

        assert isinstance(result, Ok)
        assert tarfile.is_tarfile(result.value)

    def test_missing_tree(self, tmp_path: Path) -> None:
        result = create_archive(tmp_path / "dist", DIST_NAME, tmp_path / "out")

        assert isinstance(result, Err)
        assert "missing" in result.error.detail
