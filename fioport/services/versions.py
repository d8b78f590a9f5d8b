"""Upstream release tag selection.

Pure functions, no network: the caller lists remote tags and feeds the
names in here.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import cmp_to_key

__all__ = [
    "DEFAULT_TAG_PREFIX",
    "is_release_tag",
    "parse_ls_remote",
    "release_version",
    "select_latest_tag",
    "version_compare",
]

DEFAULT_TAG_PREFIX = "fio-"

# Release candidates and alphas: "fio-3.32-rc1", "fio-2.0a", "fio-3.0-rc".
_PRERELEASE_RE = re.compile(r"(?:rc|a)\d*$")
_DEREF_MARKER = "{}"
_PARTS_RE = re.compile(r"(\d+)")


def parse_ls_remote(output: str) -> list[str]:
    """Extract tag names from `git ls-remote --tags` output.

    Each line is "<sha>\\trefs/tags/<name>"; the name is the third
    '/'-separated component of the ref. Malformed lines are skipped.
    """
    names: list[str] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        parts = fields[1].split("/")
        if len(parts) < 3 or not parts[2]:
            continue
        names.append(parts[2])
    return names


def is_release_tag(name: str, prefix: str = DEFAULT_TAG_PREFIX) -> bool:
    """True for stable tags carrying the prefix (no ^{} marker, no rc/alpha suffix)."""
    if _DEREF_MARKER in name:
        return False
    if _PRERELEASE_RE.search(name):
        return False
    return name.startswith(prefix)


def _char_order(c: str) -> int:
    # Same ordering as GNU sort -V: '~' before end of string, letters before
    # everything else.
    if c == "~":
        return -1
    if c.isalpha():
        return ord(c)
    return ord(c) + 256


def _cmp_text(a: str, b: str) -> int:
    for i in range(max(len(a), len(b))):
        oa = _char_order(a[i]) if i < len(a) else 0
        ob = _char_order(b[i]) if i < len(b) else 0
        if oa != ob:
            return -1 if oa < ob else 1
    return 0


def version_compare(a: str, b: str) -> int:
    """Compare two names the way `sort --version-sort` does.

    Returns a negative number, zero or a positive number.
    """
    # Splitting on digit runs alternates text and digits, starting with text.
    pa, pb = _PARTS_RE.split(a), _PARTS_RE.split(b)
    n = max(len(pa), len(pb))
    for i in range(n):
        xa = pa[i] if i < len(pa) else ""
        xb = pb[i] if i < len(pb) else ""
        if i % 2 == 0:
            c = _cmp_text(xa, xb)
        else:
            ia, ib = int(xa or "0"), int(xb or "0")
            c = (ia > ib) - (ia < ib)
        if c:
            return c
    # Equal as versions ("1.01" vs "1.1"): fall back to plain ordering.
    return (a > b) - (a < b)


def select_latest_tag(tags: Iterable[str], prefix: str = DEFAULT_TAG_PREFIX) -> str | None:
    """Pick the highest stable release tag.

    Args:
        tags: Tag names in any order
        prefix: Required tag name prefix

    Returns:
        The version-sort maximum of the stable tags, or None if there is none.

    Example:
        >>> select_latest_tag(["fio-3.30", "fio-3.31", "fio-3.32-rc1", "fio-3.30^{}"])
        'fio-3.31'
    """
    candidates = [t for t in tags if is_release_tag(t, prefix)]
    if not candidates:
        return None
    candidates.sort(key=cmp_to_key(version_compare), reverse=True)
    return candidates[0]


def release_version(tag: str, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    """Strip the tag prefix: "fio-3.31" -> "3.31"."""
    return tag.removeprefix(prefix)
