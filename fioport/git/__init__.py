"""Git operations module.

Usage:
    from fioport.git import describe, list_remote_tags

    tags = list_remote_tags("git://git.kernel.dk/fio.git", runner=runner, cwd=Path("."))
"""

from fioport.git.repository import GitError, describe, list_remote_tags

__all__ = [
    "GitError",
    "describe",
    "list_remote_tags",
]
