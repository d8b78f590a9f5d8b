"""Typed build configuration.

Defaults reproduce the CentOS 7 + devtoolset-7 release build. An optional
TOML file can override the upstream location, naming and host commands;
the DEBUG environment variable and CLI flags are applied on top.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import Argv, StrDict, as_str_dict, get_argv_list, get_str, get_table

__all__ = [
    "BuildConfig",
    "ConfigError",
    "DepsConfig",
    "DistConfig",
    "ToolchainConfig",
    "UpstreamConfig",
    "DEFAULT_TEMPLATE_PATH",
    "DIST_NAME_PLACEHOLDER",
    "INSTALL_PREFIX_PLACEHOLDER",
    "debug_from_env",
    "load_config",
    "load_config_or_default",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

FIO_GIT_URL = "git://git.kernel.dk/fio.git"
FIO_SNAPSHOT_URL = "https://git.kernel.dk/?p=fio.git;a=snapshot;h={tag};sf=tgz"
FIO_TAG_PREFIX = "fio-"

DEVTOOLSET_ENABLE_SCRIPT = "/opt/rh/devtoolset-7/enable"

DEFAULT_DEP_COMMANDS: tuple[Argv, ...] = (
    ("yum", "install", "-y", "centos-release-scl"),
    (
        "yum",
        "install",
        "-y",
        "curl",
        "devtoolset-7",
        "git",
        "libaio-devel",
        "zlib-devel",
        "xz",
    ),
)

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "resources" / "install.sh.in"
DIST_NAME_PLACEHOLDER = "__DIST_NAME__"
INSTALL_PREFIX_PLACEHOLDER = "__INSTALL_PREFIX__"

_TRUTHY = {"true", "1", "yes"}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class UpstreamConfig:
    """Where fio releases come from."""

    git_url: str = FIO_GIT_URL
    snapshot_url: str = FIO_SNAPSHOT_URL
    tag_prefix: str = FIO_TAG_PREFIX

    def snapshot_url_for(self, tag: str) -> str:
        return self.snapshot_url.format(tag=tag)


@dataclass(frozen=True, slots=True)
class DistConfig:
    """Naming and install location of the distribution."""

    project: str = "fio"
    arch: str = "amd64"
    install_prefix: str = "/opt"


@dataclass(frozen=True, slots=True)
class ToolchainConfig:
    """Compiler toolchain activation.

    enable_script is sourced in bash before configure/make; None uses the
    current environment unchanged.
    """

    enable_script: Path | None = Path(DEVTOOLSET_ENABLE_SCRIPT)


@dataclass(frozen=True, slots=True)
class DepsConfig:
    """Host package manager commands run before building."""

    commands: tuple[Argv, ...] = DEFAULT_DEP_COMMANDS


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Main configuration container."""

    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    dist: DistConfig = field(default_factory=DistConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    deps: DepsConfig = field(default_factory=DepsConfig)
    template_path: Path = DEFAULT_TEMPLATE_PATH
    placeholder: str = DIST_NAME_PLACEHOLDER
    output_dir: Path = field(default_factory=Path.cwd)
    project_dir: Path = field(default_factory=Path.cwd)
    debug: bool = False
    install_deps: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path | None = None) -> BuildConfig:
        """Create BuildConfig from a mapping (parsed TOML).

        Relative paths are resolved against base_dir (the config file's folder).
        """
        upstream: StrDict = get_table(data, "upstream") or {}
        dist: StrDict = get_table(data, "dist") or {}
        toolchain: StrDict = get_table(data, "toolchain") or {}
        deps: StrDict = get_table(data, "deps") or {}
        paths: StrDict = get_table(data, "paths") or {}

        snapshot_url = get_str(upstream, "snapshot_url") or FIO_SNAPSHOT_URL
        if "{tag}" not in snapshot_url:
            raise ValueError("upstream.snapshot_url must contain a {tag} placeholder")

        # An explicit empty string disables toolchain activation.
        enable_script: Path | None = Path(DEVTOOLSET_ENABLE_SCRIPT)
        if "enable_script" in toolchain:
            raw = get_str(toolchain, "enable_script")
            enable_script = Path(raw) if raw else None

        def resolve(raw: str | None, default: Path) -> Path:
            if raw is None:
                return default
            p = Path(raw).expanduser()
            if not p.is_absolute() and base_dir is not None:
                p = base_dir / p
            return p

        return cls(
            upstream=UpstreamConfig(
                git_url=get_str(upstream, "git_url") or FIO_GIT_URL,
                snapshot_url=snapshot_url,
                tag_prefix=get_str(upstream, "tag_prefix") or FIO_TAG_PREFIX,
            ),
            dist=DistConfig(
                project=get_str(dist, "project") or "fio",
                arch=get_str(dist, "arch") or "amd64",
                install_prefix=get_str(dist, "install_prefix") or "/opt",
            ),
            toolchain=ToolchainConfig(enable_script=enable_script),
            deps=DepsConfig(commands=_deps_commands(deps)),
            template_path=resolve(get_str(paths, "template"), DEFAULT_TEMPLATE_PATH),
            output_dir=resolve(get_str(paths, "output_dir"), Path.cwd()),
            project_dir=resolve(get_str(paths, "project_dir"), Path.cwd()),
        )

    def with_overrides(
        self,
        *,
        debug: bool | None = None,
        install_deps: bool | None = None,
        output_dir: Path | None = None,
        project_dir: Path | None = None,
    ) -> BuildConfig:
        """Return a copy with CLI/environment overrides applied (None keeps the value)."""
        cfg = self
        if debug is not None:
            cfg = replace(cfg, debug=debug)
        if install_deps is not None:
            cfg = replace(cfg, install_deps=install_deps)
        if output_dir is not None:
            cfg = replace(cfg, output_dir=output_dir)
        if project_dir is not None:
            cfg = replace(cfg, project_dir=project_dir)
        return cfg


def _deps_commands(deps: StrDict) -> tuple[Argv, ...]:
    commands = get_argv_list(deps, "commands")
    if commands is None:
        return DEFAULT_DEP_COMMANDS
    return commands


def debug_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Read the DEBUG flag ("true", "1" or "yes", case-insensitive)."""
    env = os.environ if environ is None else environ
    return env.get("DEBUG", "false").strip().lower() in _TRUTHY


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[BuildConfig, ConfigError]:
    """Load and validate configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(BuildConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(BuildConfig.from_dict(result.value, base_dir=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path | None) -> Result[BuildConfig, ConfigError]:
    """Load config from path, or defaults when no path is given."""
    if path is None:
        return Ok(BuildConfig())
    return load_config(path)
