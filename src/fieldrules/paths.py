"""Field path resolution.

A field path is a dotted string such as ``people.*.email``. The ``*``
segment expands to every key (mappings) or index (lists) of the node it
applies to. Resolution is eager: the whole match set is returned as a dict
of fully-qualified keys to leaf values, in enumeration order.

The data is assumed to be a finite tree (as produced by JSON or YAML
parsing). Cyclic structures make resolution recurse without end.
"""

from collections.abc import Mapping, Sequence
from typing import Any

WILDCARD = "*"


def split_path(path: str | None) -> list[str]:
    """Split a dotted field path into segments (empty path -> no segments)."""
    if not path:
        return []
    return path.split(".")


def _join(base: str, key: Any) -> str:
    return f"{base}.{key}" if base else str(key)


def _children(node: Any) -> list[tuple[Any, Any]]:
    """Enumerate (key, child) pairs of a container; scalars have none."""
    if isinstance(node, Mapping):
        return list(node.items())
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        return list(enumerate(node))
    return []


def _child(node: Any, segment: str) -> tuple[bool, Any]:
    """Look up a concrete segment, returning (found, value)."""
    if isinstance(node, Mapping):
        if segment in node:
            return True, node[segment]
        return False, None
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        if segment.isascii() and segment.isdecimal() and int(segment) < len(node):
            return True, node[int(segment)]
    return False, None


def resolve_values(
    data: Any,
    path: str | list[str] | None = None,
    base: str = "",
) -> dict[str, Any]:
    """Resolve a field path against nested data.

    Args:
        data: The data tree
        path: Dotted path string or list of segments
        base: Dotted key of ``data`` within the whole tree

    Returns:
        Dict of resolved dotted key -> value. Empty when the path is absent.
        When no path is given the whole value is returned under ``base``, or
        under ``"0"`` if there is no base either.

    Example:
        resolve_values({"emails": ["a@a.com", "b@b.com"]}, "emails.*")
        # {"emails.0": "a@a.com", "emails.1": "b@b.com"}
    """
    segments = split_path(path) if isinstance(path, str) or path is None else list(path)

    if not segments:
        return {base or "0": data}

    segment, rest = segments[0], segments[1:]

    if segment == WILDCARD:
        values: dict[str, Any] = {}
        for key, child in _children(data):
            values.update(resolve_values(child, rest, _join(base, key)))
        return values

    found, child = _child(data, segment)
    if not found:
        return {}
    return resolve_values(child, rest, _join(base, segment))
