"""Helpers for reading untyped TOML data.

Used at the config boundary to validate values and narrow their types.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
Argv = tuple[str, ...]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def as_argv(obj: object) -> Argv | None:
    """Return obj as a non-empty argv tuple, or None if it is not a list of strings."""
    if not isinstance(obj, list):
        return None
    items = cast(list[object], obj)
    if not items or not all(isinstance(x, str) and x for x in items):
        return None
    return tuple(cast(list[str], items))


def get_argv_list(table: Mapping[str, object], key: str) -> tuple[Argv, ...] | None:
    """Get a list of command lines (list of lists of strings).

    Raises:
        ValueError: If the key is present but malformed.
    """
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list of commands")
    out: list[Argv] = []
    for item in cast(list[object], value):
        argv = as_argv(item)
        if argv is None:
            raise ValueError(f"'{key}' entries must be non-empty lists of strings")
        out.append(argv)
    return tuple(out)
