"""Platform abstraction layer."""

from .process import (
    CommandRunner,
    MockCommandRunner,
    ProcessError,
    SubprocessRunner,
    run,
    run_silent,
)

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run",
    "run_silent",
]
