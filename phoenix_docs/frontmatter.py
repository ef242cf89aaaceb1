r"""Read and write the restricted frontmatter block used by docs sources.

Documentation pages start with a small ``---`` delimited header of
``key: value`` lines. This module implements just enough of that format to
route pages and rewrite their metadata: quoted scalars, canonical integers,
and a single level of nested mapping (used for ``sidebar.order``). It is
deliberately not a YAML parser; unknown syntax is ignored rather than raised.

Example
-------
>>> from phoenix_docs.frontmatter import parse, serialize
>>> meta, body = parse("---\ntitle: Intro\nsidebar_position: 2\n---\nHello\n")
>>> meta
{'title': 'Intro', 'sidebar_position': 2}
>>> body
'Hello\n'
>>> print(serialize({"title": "A: B", "sidebar": {"order": 1}}))
---
title: "A: B"
sidebar:
  order: 1
---
"""

from __future__ import annotations

import re
import typing as typ

Scalar: typ.TypeAlias = str | int
FrontmatterValue: typ.TypeAlias = Scalar | dict[str, Scalar]
Frontmatter: typ.TypeAlias = dict[str, FrontmatterValue]

DELIMITER = "---"

BLOCK_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(?P<block>.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
INTEGER_PATTERN = re.compile(r"-?(?:0|[1-9]\d*)")
_QUOTE_TRIGGERS = (":", "#", "'")


def parse(content: str) -> tuple[Frontmatter, str]:
    """Split ``content`` into its frontmatter mapping and remaining body.

    Parameters
    ----------
    content : str
        Full text of a markdown or MDX document.

    Returns
    -------
    tuple[Frontmatter, str]
        The parsed mapping (empty when no block is present) and the body text
        following the closing delimiter line.
    """
    match = BLOCK_PATTERN.match(content)
    if not match:
        return {}, content

    body = content[match.end() :]
    block = match.group("block") or ""
    return _parse_block(block.splitlines()), body


def _parse_block(lines: list[str]) -> Frontmatter:
    """Parse frontmatter lines, folding indented children into the parent key."""
    frontmatter: Frontmatter = {}
    parent: str | None = None
    for line in lines:
        entry = _split_entry(line)
        if entry is None:
            continue
        key, raw_value = entry
        nested = line[:1].isspace()
        if nested and parent is not None:
            children = frontmatter.get(parent)
            if not isinstance(children, dict):
                children = {}
                frontmatter[parent] = children
            children[key] = _parse_scalar(raw_value)
            continue
        frontmatter[key] = _parse_scalar(raw_value)
        parent = key if not raw_value else None
    return frontmatter


def _split_entry(line: str) -> tuple[str, str] | None:
    """Return the ``(key, value)`` pair for a line, or None when it has no key."""
    colon = line.find(":")
    if colon <= 0:
        return None
    key = line[:colon].strip()
    if not key:
        return None
    return key, line[colon + 1 :].strip()


def _parse_scalar(raw: str) -> Scalar:
    """Strip matching outer quotes or coerce canonical integers."""
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in {'"', "'"}:
        inner = raw[1:-1]
        if raw[0] == '"':
            inner = inner.replace('\\"', '"')
        return inner
    if INTEGER_PATTERN.fullmatch(raw):
        return int(raw)
    return raw


def serialize(frontmatter: typ.Mapping[str, FrontmatterValue]) -> str:
    """Render ``frontmatter`` as a ``---`` delimited block without a trailing newline.

    Parameters
    ----------
    frontmatter : Mapping[str, FrontmatterValue]
        Ordered mapping to emit. Mapping values are written as an indented
        block one level deep.

    Returns
    -------
    str
        The block text, starting and ending with a ``---`` line.
    """
    lines = [DELIMITER]
    for key, value in frontmatter.items():
        if isinstance(value, dict):
            lines.append(f"{key}:")
            lines.extend(
                f"  {sub_key}: {_format_scalar(sub_value)}"
                for sub_key, sub_value in value.items()
            )
        else:
            lines.append(f"{key}: {_format_scalar(value)}".rstrip())
    lines.append(DELIMITER)
    return "\n".join(lines)


def render(frontmatter: typ.Mapping[str, FrontmatterValue], body: str) -> str:
    """Return a complete document: serialized frontmatter, newline, then body."""
    return f"{serialize(frontmatter)}\n{body}"


def _format_scalar(value: Scalar) -> str:
    if isinstance(value, int):
        return str(value)
    if _needs_quotes(value):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _needs_quotes(value: str) -> bool:
    """Return True when ``value`` would not survive a bare round trip."""
    if any(trigger in value for trigger in _QUOTE_TRIGGERS):
        return True
    if value != value.strip():
        return True
    if value[:1] == '"':
        return True
    return INTEGER_PATTERN.fullmatch(value) is not None


__all__ = [
    "Frontmatter",
    "FrontmatterValue",
    "Scalar",
    "parse",
    "render",
    "serialize",
]
