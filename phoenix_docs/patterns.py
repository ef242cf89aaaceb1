"""Glob-lite exclusion patterns for documentation source trees.

Patterns come from the ``exclude`` list in ``docs.json``. Only a leading or
trailing ``*`` is special; every other character is compared literally.

>>> from phoenix_docs.patterns import matches, should_exclude
>>> matches("_draft.md", "_*")
True
>>> should_exclude("notes.md", ["*.tmp", "README.md"])
False
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePath

WILDCARD = "*"


def matches(name: str, pattern: str) -> bool:
    """Return True when ``name`` satisfies a single exclusion ``pattern``.

    Precedence: ``*`` alone, then ``prefix*``, then ``*suffix``, then exact
    equality.
    """
    if pattern == WILDCARD:
        return True
    if pattern.endswith(WILDCARD) and len(pattern) > 1:
        return name.startswith(pattern[:-1])
    if pattern.startswith(WILDCARD) and len(pattern) > 1:
        return name.endswith(pattern[1:])
    return name == pattern


def should_exclude(name: str, patterns: typ.Iterable[str]) -> bool:
    """Return True when any of ``patterns`` matches ``name``."""
    return any(matches(name, pattern) for pattern in patterns)


def is_excluded_path(relative_path: PurePath, patterns: typ.Iterable[str]) -> bool:
    """Return True when any component of ``relative_path`` is excluded.

    Excluding a directory hides its whole subtree, so a nested file is
    skipped as soon as one of its ancestors matches.
    """
    compiled = tuple(patterns)
    return any(should_exclude(part, compiled) for part in relative_path.parts)


__all__ = ["WILDCARD", "is_excluded_path", "matches", "should_exclude"]
