"""Criteria copying and merging.

Base criteria are backend-native filter mappings supplied by the caller. They
are copied once at construction so later caller-side mutation cannot leak into
a running or cached query.

Only plain containers are copied. Store-native values such as identity
references, compiled patterns or timestamps are kept by reference so their
native representation survives the copy. Passing ``deep=True`` deep-copies
those leaf values as well.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def copy_criteria(value: Any, *, deep: bool = False) -> Any:
    """Copy ``value``, recursing into dicts, lists and tuples.

    Args:
        value: Criteria mapping (or any nested value)
        deep: Also deep-copy non-container leaf values

    Returns:
        Copied value
    """
    if isinstance(value, dict):
        return {key: copy_criteria(item, deep=deep) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(copy_criteria(item, deep=deep) for item in value)
    return copy.deepcopy(value) if deep else value


def merge_criteria(*sources: Mapping[str, Any] | None, deep: bool = False) -> dict[str, Any]:
    """Merge criteria mappings left to right; later keys win.

    The merge is shallow: a key present in several sources takes the last
    value wholesale. With ``deep=True`` nested plain mappings are merged
    recursively and leaf values are deep-copied.

    Example:
        merge_criteria({"status": "active"}, {"name": pattern})
        # {"status": "active", "name": pattern}
    """
    merged: dict[str, Any] = {}
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            existing = merged.get(key)
            if deep and isinstance(existing, dict) and isinstance(value, Mapping):
                merged[key] = merge_criteria(existing, value, deep=True)
            else:
                merged[key] = copy_criteria(value, deep=deep)
    return merged


def get_nested_value(obj: Any, key: str) -> Any:
    """Read a dotted path from mappings or attribute-bearing objects.

    Missing segments yield ``None`` instead of raising.

    Example:
        get_nested_value({"author": {"name": "Ada"}}, "author.name")  # "Ada"
    """
    current = obj
    for part in key.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


__all__ = ["copy_criteria", "get_nested_value", "merge_criteria"]
