"""Subprocess execution with Result-based error handling.

Provides thin wrappers around subprocess.run that return structured errors
instead of raising, plus a CommandRunner protocol so services can be
exercised in tests without spawning processes.

Usage:
    result = run(["git", "describe", "--always"], cwd=Path("."))
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from fioport.core.result import Err, Ok, Result

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "ProcessError",
    "RecordedCall",
    "SubprocessRunner",
    "run",
    "run_silent",
]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit status as a shell reports it (128+N when killed
            by signal N), or -1 if the command never ran or timed out.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details when captured).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def started(self) -> bool:
        """False when the command could not be launched or timed out."""
        return self.returncode >= 0

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def _exit_status(returncode: int) -> int:
    # subprocess reports death by signal N as -N.
    if returncode < 0:
        return 128 - returncode
    return returncode


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=_exit_status(proc.returncode),
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Execute a command, streaming its output to the terminal.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=_exit_status(proc.returncode),
                stdout="",
                stderr="",
            )
        )

    return Ok(None)


class CommandRunner(Protocol):
    """Protocol for running external commands.

    capture() collects output (for commands whose output is parsed);
    stream() lets output go to the terminal (long builds, installers).
    """

    def capture(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]: ...

    def stream(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[None, ProcessError]: ...


class SubprocessRunner:
    """Default runner backed by run() and run_silent()."""

    def capture(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        return run(cmd, cwd=cwd, env=env, timeout=timeout)

    def stream(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[None, ProcessError]:
        return run_silent(cmd, cwd=cwd, env=env, timeout=timeout)


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """A command seen by MockCommandRunner."""

    command: tuple[str, ...]
    cwd: Path
    env: Mapping[str, str] | None
    mode: str
    timeout: float | None = None


Handler = Callable[[RecordedCall], Result[str, ProcessError]]


def _empty_handlers() -> list[tuple[tuple[str, ...], Handler]]:
    return []


def _empty_calls() -> list[RecordedCall]:
    return []


@dataclass
class MockCommandRunner:
    """Runner that records commands and answers from registered handlers.

    Handlers are matched on the leading arguments of a command; the longest
    matching prefix wins (the latest registration on a tie). Unmatched
    commands succeed with empty output.

    Usage:
        runner = MockCommandRunner()
        runner.set_output(["git", "describe"], "v1.2-3-gabc\\n")
        runner.set_failure(["make"], returncode=2)
    """

    handlers: list[tuple[tuple[str, ...], Handler]] = field(default_factory=_empty_handlers)
    calls: list[RecordedCall] = field(default_factory=_empty_calls)

    def on(self, prefix: Sequence[str], handler: Handler) -> None:
        """Register a handler for commands starting with prefix."""
        self.handlers.append((tuple(prefix), handler))

    def set_output(self, prefix: Sequence[str], stdout: str) -> None:
        self.on(prefix, lambda _call: Ok(stdout))

    def set_failure(
        self, prefix: Sequence[str], *, returncode: int = 1, stderr: str = ""
    ) -> None:
        def fail(call: RecordedCall) -> Result[str, ProcessError]:
            return Err(
                ProcessError(
                    command=call.command, returncode=returncode, stdout="", stderr=stderr
                )
            )

        self.on(prefix, fail)

    def _dispatch(self, call: RecordedCall) -> Result[str, ProcessError]:
        self.calls.append(call)
        best: Handler | None = None
        best_len = -1
        for prefix, handler in self.handlers:
            if call.command[: len(prefix)] == prefix and len(prefix) >= best_len:
                best, best_len = handler, len(prefix)
        if best is None:
            return Ok("")
        return best(call)

    def capture(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        return self._dispatch(RecordedCall(tuple(cmd), cwd, env, "capture", timeout))

    def stream(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[None, ProcessError]:
        result = self._dispatch(RecordedCall(tuple(cmd), cwd, env, "stream", timeout))
        if isinstance(result, Err):
            return result
        return Ok(None)

    # Test helpers

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [c.command for c in self.calls]

    def called(self, *prefix: str) -> list[RecordedCall]:
        """Calls whose command starts with prefix."""
        return [c for c in self.calls if c.command[: len(prefix)] == prefix]
