"""Tests for fioport.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from fioport.core.config import (
    DEFAULT_DEP_COMMANDS,
    DEFAULT_TEMPLATE_PATH,
    BuildConfig,
    DistConfig,
    UpstreamConfig,
    debug_from_env,
    load_config,
    load_config_or_default,
)
from fioport.core.result import Err, Ok


class TestDefaults:
    def test_upstream(self) -> None:
        upstream = UpstreamConfig()
        assert upstream.git_url == "git://git.kernel.dk/fio.git"
        assert upstream.tag_prefix == "fio-"
        assert upstream.snapshot_url_for("fio-3.31") == (
            "https://git.kernel.dk/?p=fio.git;a=snapshot;h=fio-3.31;sf=tgz"
        )

    def test_dist(self) -> None:
        dist = DistConfig()
        assert (dist.project, dist.arch, dist.install_prefix) == ("fio", "amd64", "/opt")

    def test_build_config(self) -> None:
        cfg = BuildConfig()
        assert cfg.debug is False
        assert cfg.install_deps is True
        assert cfg.placeholder == "__DIST_NAME__"
        assert cfg.template_path == DEFAULT_TEMPLATE_PATH
        assert cfg.deps.commands == DEFAULT_DEP_COMMANDS
        assert cfg.toolchain.enable_script == Path("/opt/rh/devtoolset-7/enable")

    def test_default_template_ships_with_package(self) -> None:
        assert DEFAULT_TEMPLATE_PATH.is_file()
        assert "__DIST_NAME__" in DEFAULT_TEMPLATE_PATH.read_text(encoding="utf-8")

    def test_frozen(self) -> None:
        cfg = BuildConfig()
        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


class TestFromDict:
    def test_empty_gives_defaults(self) -> None:
        cfg = BuildConfig.from_dict({})
        assert cfg.upstream == UpstreamConfig()
        assert cfg.dist == DistConfig()

    def test_overrides(self, tmp_path: Path) -> None:
        cfg = BuildConfig.from_dict(
            {
                "upstream": {"git_url": "https://example.com/fio.git", "tag_prefix": "v"},
                "dist": {"arch": "arm64"},
                "deps": {"commands": [["dnf", "install", "-y", "gcc"]]},
                "paths": {"template": "res/install.sh.in", "output_dir": "/srv/out"},
            },
            base_dir=tmp_path,
        )
        assert cfg.upstream.git_url == "https://example.com/fio.git"
        assert cfg.upstream.tag_prefix == "v"
        assert cfg.dist.arch == "arm64"
        assert cfg.deps.commands == (("dnf", "install", "-y", "gcc"),)
        assert cfg.template_path == tmp_path / "res" / "install.sh.in"
        assert cfg.output_dir == Path("/srv/out")

    def test_empty_enable_script_disables_toolchain(self) -> None:
        cfg = BuildConfig.from_dict({"toolchain": {"enable_script": ""}})
        assert cfg.toolchain.enable_script is None

    def test_snapshot_url_requires_tag_placeholder(self) -> None:
        with pytest.raises(ValueError, match="placeholder"):
            BuildConfig.from_dict({"upstream": {"snapshot_url": "https://example.com/x.tgz"}})

    def test_malformed_commands(self) -> None:
        with pytest.raises(ValueError):
            BuildConfig.from_dict({"deps": {"commands": ["yum install -y gcc"]}})


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fioport.toml"
        path.write_text('[dist]\nproject = "fio"\narch = "x86_64"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.dist.arch == "x86_64"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[dist\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[deps]\ncommands = "yum"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert result.error.path == path

    def test_or_default_without_path(self) -> None:
        result = load_config_or_default(None)
        assert isinstance(result, Ok)
        assert result.value.dist.project == "fio"


class TestOverrides:
    def test_none_keeps_values(self) -> None:
        cfg = BuildConfig()
        assert cfg.with_overrides() == cfg

    def test_apply(self, tmp_path: Path) -> None:
        cfg = BuildConfig().with_overrides(debug=True, install_deps=False, output_dir=tmp_path)
        assert cfg.debug is True
        assert cfg.install_deps is False
        assert cfg.output_dir == tmp_path


class TestDebugFromEnv:
    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes"])
    def test_truthy(self, value: str) -> None:
        assert debug_from_env({"DEBUG": value}) is True

    @pytest.mark.parametrize("value", ["false", "0", "", "on"])
    def test_falsy(self, value: str) -> None:
        assert debug_from_env({"DEBUG": value}) is False

    def test_unset(self) -> None:
        assert debug_from_env({}) is False
