"""Exit codes for the fioport CLI.

A failing external command exits with that command's own status; these codes
cover everything else (bad input, missing toolchain, network, I/O).
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    These values are part of the CLI contract and should remain stable:
    - 0: Success
    - 1: User error (bad config, invalid arguments)
    - 2: Environment error (missing toolchain or template, no release found)
    - 3: Build error (configure, compile, install or strip failed)
    - 4: Network error (tag query or snapshot download failed)
    - 5: I/O error (extraction, archival, workspace)
    - 130: Interrupted (Ctrl-C)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTERRUPTED = 130

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
