"""Release builder: the whole fio packaging pipeline.

Steps run in a fixed order and each returns a Result; the first Err stops
the run. The workspace is acquired through a context manager, so it is
cleaned up (unless debug) whichever way the run ends. Only a failure to set
the workspace up is reported as WorkspaceFailed; later I/O errors belong to
the step that hit them.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from fioport.core.config import BuildConfig
from fioport.core.result import Err, Ok, Result
from fioport.core.workspace import BuildWorkspace, acquire_workspace
from fioport.git.repository import describe, list_remote_tags
from fioport.output.console import ConsoleProtocol, Style
from fioport.platform.process import CommandRunner, SubprocessRunner
from fioport.services.build import FioBuilder
from fioport.services.packaging import create_archive, make_dist_name, render_install_script
from fioport.services.prereqs import DependencyInstaller
from fioport.services.release_errors import (
    DescribeFailed,
    DistTreeFailed,
    DownloadFailed,
    ExtractFailed,
    NoReleaseFound,
    ReleaseError,
    TagQueryFailed,
    WorkspaceFailed,
)
from fioport.services.strip import BinaryStripper
from fioport.services.toolchain import ToolchainActivator
from fioport.services.versions import parse_ls_remote, release_version, select_latest_tag
from fioport.tools.download import SnapshotDownloader
from fioport.tools.extract import Extractor
from fioport.tools.http import HttpClient, RealHttpClient

__all__ = ["ReleaseArtifact", "ReleaseBuilder"]


@dataclass(frozen=True, slots=True)
class ReleaseArtifact:
    """Outcome of a successful build."""

    archive: Path
    tag: str
    version: str
    dist_name: str
    from_cache: bool
    stripped: tuple[Path, ...]
    skipped: tuple[Path, ...]
    workspace: Path


class ReleaseBuilder:
    """Build the latest stable fio release into a portable tarball."""

    def __init__(
        self,
        *,
        config: BuildConfig,
        console: ConsoleProtocol,
        runner: CommandRunner | None = None,
        http: HttpClient | None = None,
        extractor: Extractor | None = None,
        temp_root: Path | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._runner: CommandRunner = runner or SubprocessRunner()
        self._http: HttpClient = http or RealHttpClient()
        self._extractor = extractor or Extractor()
        self._temp_root = temp_root

    # -------------------------------------------------------------------------
    # Version discovery
    # -------------------------------------------------------------------------

    def latest_tag(self, *, cwd: Path) -> Result[str, TagQueryFailed | NoReleaseFound]:
        """Query upstream tags and select the newest stable release."""
        upstream = self._config.upstream
        if self._config.debug:
            self._console.print(f"+ git ls-remote --tags {upstream.git_url}", Style.DIM)

        listed = list_remote_tags(upstream.git_url, runner=self._runner, cwd=cwd)
        if isinstance(listed, Err):
            e = listed.error
            return Err(
                TagQueryFailed(url=upstream.git_url, returncode=e.returncode, detail=e.message)
            )

        names = parse_ls_remote(listed.value)
        tag = select_latest_tag(names, upstream.tag_prefix)
        if tag is None:
            return Err(
                NoReleaseFound(
                    url=upstream.git_url, prefix=upstream.tag_prefix, tags_seen=len(names)
                )
            )
        return Ok(tag)

    # -------------------------------------------------------------------------
    # Full pipeline
    # -------------------------------------------------------------------------

    def run(self) -> Result[ReleaseArtifact, ReleaseError]:
        self._console.banner("Creating temporary folder for building...")
        with ExitStack() as stack:
            try:
                ws = stack.enter_context(
                    acquire_workspace(debug=self._config.debug, temp_root=self._temp_root)
                )
            except OSError as e:
                root = Path(e.filename) if e.filename else Path("?")
                return Err(WorkspaceFailed(root=root, detail=e.strerror or str(e)))
            self._console.print(f"workspace: {ws.root}", Style.DIM)
            result = self._run_in(ws)

        if isinstance(result, Ok):
            self._console.banner(
                f"Release archive created at {result.value.archive.parent}.",
                "Build process completed without error.",
            )
        return result

    def _run_in(self, ws: BuildWorkspace) -> Result[ReleaseArtifact, ReleaseError]:
        cfg = self._config
        console = self._console

        if cfg.install_deps:
            console.banner("Installing build dependencies...")
            deps = DependencyInstaller(config=cfg, console=console, runner=self._runner).install(
                cwd=ws.root
            )
            if isinstance(deps, Err):
                return deps
        else:
            console.print("Skipping build dependency installation", Style.DIM)

        console.banner(f"Determining latest {cfg.dist.project} release...")
        tag_result = self.latest_tag(cwd=ws.root)
        if isinstance(tag_result, Err):
            return tag_result
        tag = tag_result.value
        version = release_version(tag, cfg.upstream.tag_prefix)
        console.print(f"{cfg.dist.project} latest version determined to be {version}")

        console.banner(f"Downloading {cfg.dist.project} source archive...")
        downloader = SnapshotDownloader(
            self._http, ws.cache_dir, cfg.upstream.snapshot_url, project=cfg.dist.project
        )
        fetched = downloader.fetch(tag)
        if isinstance(fetched, Err):
            return Err(DownloadFailed(url=fetched.error.url, detail=str(fetched.error)))
        snapshot = fetched.value
        if snapshot.from_cache:
            console.print(f"using cached {snapshot.path.name}", Style.DIM)
        else:
            console.print(f"downloaded {snapshot.path.name} ({snapshot.size} bytes)", Style.DIM)

        console.banner(f"Extracting {cfg.dist.project} source archive...")
        extracted = self._extractor.extract(snapshot.path, ws.source_dir, strip_components=1)
        if isinstance(extracted, Err):
            return Err(ExtractFailed(archive=snapshot.path, detail=extracted.error.message))
        console.print(f"{extracted.value.files_count} files extracted", Style.DIM)
        for name in extracted.value.skipped_links:
            console.print(f"link not extracted: {name}", Style.DIM)

        console.banner("Creating distribution folder...")
        described = describe(cfg.project_dir, runner=self._runner)
        if isinstance(described, Err):
            git_err = described.error
            return Err(
                DescribeFailed(
                    project_dir=cfg.project_dir,
                    returncode=git_err.returncode,
                    detail=git_err.message,
                )
            )
        dist_name = make_dist_name(
            project=cfg.dist.project,
            version=version,
            describe=described.value,
            arch=cfg.dist.arch,
        )
        dist_tree = ws.dist_dir / dist_name
        try:
            dist_tree.mkdir()
        except OSError as e:
            return Err(DistTreeFailed(path=dist_tree, detail=e.strerror or str(e)))
        console.print(f"created {dist_tree}", Style.DIM)

        console.banner(f"Building {cfg.dist.project}...")
        toolchain = ToolchainActivator(config=cfg, console=console, runner=self._runner)
        env = toolchain.environment(cwd=ws.root)
        if isinstance(env, Err):
            return env
        builder = FioBuilder(config=cfg, console=console, runner=self._runner)
        built = builder.build(ws, dist_name, env=env.value)
        if isinstance(built, Err):
            return built
        stripper = BinaryStripper(config=cfg, console=console, runner=self._runner)
        stripped = stripper.strip_dir(dist_tree / "bin")
        if isinstance(stripped, Err):
            return stripped
        for path in stripped.value.skipped:
            console.warning(f"not stripped: {path.name} (file format not recognized)")

        console.banner("Installing release archive assets...")
        script = render_install_script(
            cfg.template_path,
            dist_tree,
            dist_name=dist_name,
            placeholder=cfg.placeholder,
            install_prefix=cfg.dist.install_prefix,
        )
        if isinstance(script, Err):
            return script

        console.banner("Creating release archive...")
        archive = create_archive(ws.dist_dir, dist_name, cfg.output_dir)
        if isinstance(archive, Err):
            return archive

        return Ok(
            ReleaseArtifact(
                archive=archive.value,
                tag=tag,
                version=version,
                dist_name=dist_name,
                from_cache=snapshot.from_cache,
                stripped=tuple(stripped.value.stripped),
                skipped=tuple(stripped.value.skipped),
                workspace=ws.root,
            )
        )
