"""Debug symbol stripping of installed binaries.

bin/ also holds helper shell/python scripts (fio_generate_plots,
fio2gnuplot, ...). strip rejects those with "File format not recognized";
that file is reported as skipped and the run continues. Any other strip
failure is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fioport.core.result import Err, Ok, Result
from fioport.output.console import Style
from fioport.services.base import BaseService
from fioport.services.release_errors import StripFailed

__all__ = ["BinaryStripper", "StripReport", "is_unrecognized_format"]

UNRECOGNIZED_FORMAT = "file format not recognized"


def is_unrecognized_format(stderr: str) -> bool:
    """True if strip's diagnostic only says the input is not an object file."""
    return UNRECOGNIZED_FORMAT in stderr.lower()


def _empty_paths() -> list[Path]:
    return []


@dataclass(frozen=True, slots=True)
class StripReport:
    stripped: list[Path] = field(default_factory=_empty_paths)
    skipped: list[Path] = field(default_factory=_empty_paths)


class BinaryStripper(BaseService):
    """Strip every regular file of a bin/ directory."""

    def strip_dir(self, bin_dir: Path) -> Result[StripReport, StripFailed]:
        files = sorted(p for p in bin_dir.iterdir() if p.is_file()) if bin_dir.is_dir() else []
        if not files:
            return Err(StripFailed(path=bin_dir, returncode=1, detail="no installed binaries"))

        report = StripReport()
        for path in files:
            cmd = ["strip", str(path)]
            self._trace(cmd)
            result = self._runner.capture(cmd, cwd=bin_dir)
            match result:
                case Ok(_):
                    report.stripped.append(path)
                case Err(e) if e.started and is_unrecognized_format(e.stderr):
                    self._console.print(f"skipped (not an object file): {path.name}", Style.DIM)
                    report.skipped.append(path)
                case Err(e):
                    return Err(
                        StripFailed(path=path, returncode=e.returncode, detail=e.stderr.strip())
                    )
        return Ok(report)
