"""Tests for fioport.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from fioport.core.result import Err, Ok
from fioport.platform.process import (
    MockCommandRunner,
    ProcessError,
    SubprocessRunner,
    run,
    run_silent,
)

PY = sys.executable


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "describe"), returncode=128, stdout="", stderr="")
        assert str(error) == "git describe failed (exit 128)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("make", "INSTALL_PREFIX=/tmp/x", "install", "V=1"),
            returncode=2,
            stdout="",
            stderr="",
        )
        assert str(error) == "make INSTALL_PREFIX=/tmp/x install ... failed (exit 2)"

    def test_started(self) -> None:
        assert ProcessError(("strip",), 1, "", "").started
        assert not ProcessError(("strip",), -1, "", "not found").started


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_keeps_status_and_stderr(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import sys; sys.stderr.write('bad'); sys.exit(42)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert "bad" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert result.error.stderr

    def test_uses_env(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import os; print(os.environ.get('FIOPORT_TEST', ''))"],
            cwd=tmp_path,
            env={"FIOPORT_TEST": "devtoolset"},
        )

        assert isinstance(result, Ok)
        assert "devtoolset" in result.value

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "import time; time.sleep(10)"], cwd=tmp_path, timeout=0.2)

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRunSilent:
    def test_success(self, tmp_path: Path) -> None:
        assert run_silent([PY, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_silent([PY, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 3


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
class TestKilledBySignal:
    KILL_SELF = "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"

    def test_run_reports_shell_status(self, tmp_path: Path) -> None:
        result = run([PY, "-c", self.KILL_SELF], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 128 + 15
        assert result.error.started

    def test_run_silent_reports_shell_status(self, tmp_path: Path) -> None:
        result = run_silent([PY, "-c", self.KILL_SELF], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 143


class TestSubprocessRunner:
    def test_capture_and_stream(self, tmp_path: Path) -> None:
        runner = SubprocessRunner()
        assert runner.capture([PY, "-c", "print(1)"], cwd=tmp_path) == Ok("1\n")
        assert runner.stream([PY, "-c", "pass"], cwd=tmp_path) == Ok(None)


class TestMockCommandRunner:
    def test_unmatched_succeeds_and_is_recorded(self, tmp_path: Path) -> None:
        runner = MockCommandRunner()

        assert runner.capture(["uname", "-m"], cwd=tmp_path) == Ok("")
        assert runner.commands == [("uname", "-m")]
        assert runner.calls[0].mode == "capture"

    def test_longest_prefix_wins(self, tmp_path: Path) -> None:
        runner = MockCommandRunner()
        runner.set_output(["git"], "generic")
        runner.set_output(["git", "describe"], "v1.0")

        assert runner.capture(["git", "describe", "--tags"], cwd=tmp_path) == Ok("v1.0")
        assert runner.capture(["git", "status"], cwd=tmp_path) == Ok("generic")

    def test_failure(self, tmp_path: Path) -> None:
        runner = MockCommandRunner()
        runner.set_failure(["make"], returncode=2, stderr="error: ld returned 1")

        result = runner.stream(["make", "--jobs=4"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 2
        assert result.error.command == ("make", "--jobs=4")

    @pytest.mark.parametrize("prefix", [("make",), ("make", "--jobs=4")])
    def test_called(self, tmp_path: Path, prefix: tuple[str, ...]) -> None:
        runner = MockCommandRunner()
        runner.stream(["make", "--jobs=4"], cwd=tmp_path)
        runner.stream(["strip", "fio"], cwd=tmp_path)

        assert len(runner.called(*prefix)) == 1

    def test_later_registration_overrides(self, tmp_path: Path) -> None:
        runner = MockCommandRunner()
        runner.set_output(["make"], "")
        runner.set_failure(["make"], returncode=2)

        assert isinstance(runner.stream(["make"], cwd=tmp_path), Err)

    def test_records_timeout(self, tmp_path: Path) -> None:
        runner = MockCommandRunner()
        runner.capture(["git", "ls-remote"], cwd=tmp_path, timeout=180.0)
        runner.stream(["make"], cwd=tmp_path)

        assert [c.timeout for c in runner.calls] == [180.0, None]
