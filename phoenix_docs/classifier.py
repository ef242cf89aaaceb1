"""Decide where a documentation page lives and how its metadata is rewritten.

Given a page's parsed frontmatter, its path relative to the docs source root,
and the site configuration, :func:`classify` returns the navigation group,
the destination directory slug, the effective title, the ordering key, and the
frontmatter to write into the destination copy.

Example
-------
>>> from pathlib import PurePosixPath
>>> from phoenix_docs.classifier import classify
>>> from phoenix_docs.config import DocsConfig
>>> result = classify(
...     {"sidebar_group": "Getting Started", "sidebar_position": "1"},
...     PurePosixPath("install.md"),
...     DocsConfig(),
... )
>>> (result.group, result.directory, result.title)
('Getting Started', 'getting-started', 'Install')
>>> result.frontmatter
{'title': 'Install', 'sidebar': {'order': 1}}
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import typing as typ

from ._constants import (
    DEFAULT_POSITION,
    DRAFTS_GROUP,
    GROUP_KEY,
    INDEX_FILENAMES,
    ORDER_KEY,
    PLANS_GROUP,
    POSITION_KEY,
    SIDEBAR_KEY,
    TITLE_KEY,
)

if typ.TYPE_CHECKING:
    from pathlib import PurePath

    from .config import DocsConfig
    from .frontmatter import Frontmatter, FrontmatterValue

MARKDOWN_SUFFIX_PATTERN = re.compile(r"\.(md|mdx)$")
SEPARATOR_PATTERN = re.compile(r"[-_]+")
WORD_START_PATTERN = re.compile(r"\b\w")
LEADING_INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")
PLAN_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[-_]?")


@dc.dataclass(frozen=True, slots=True)
class Classification:
    """Routing decision for a single page.

    Attributes
    ----------
    title : str
        Effective page title (explicit or derived from the filename).
    group : str or None
        Navigation group label; ``None`` only for the root index page.
    directory : str
        Destination subdirectory slug; empty for pages kept at the root.
    position : int or None
        Parsed ``sidebar_position``; ``None`` when missing or not numeric.
    plan_date : datetime.date or None
        Date taken from a ``YYYY-MM-DD-`` filename prefix inside the plans
        directory.
    frontmatter : Frontmatter
        Metadata to serialize into the destination copy.
    """

    title: str
    group: str | None
    directory: str
    position: int | None
    plan_date: dt.date | None
    frontmatter: Frontmatter

    @property
    def sort_key(self) -> tuple[int, int]:
        """Return the within-group ordering key (position, then plan date)."""
        return sort_key(self.position, self.plan_date)


def sort_key(position: int | None, plan_date: dt.date | None) -> tuple[int, int]:
    """Return the ordering key shared by classifications and page entries."""
    weight = DEFAULT_POSITION if position is None else position
    return weight, plan_date.toordinal() if plan_date else 0


def slugify(label: str) -> str:
    """Return the directory slug for a group ``label``.

    The transform is lossy: ``"API"`` and ``"Api!"`` share the slug ``api``.
    A label with no letters or digits gets ``group``, the same slug as
    ``"Group"``; a full sync warns when two labels share a slug.

    >>> slugify("Getting Started")
    'getting-started'
    >>> slugify("  C++ & Rust ")
    'c-rust'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-")
    return slug or "group"


def title_from_filename(filename: str) -> str:
    """Derive a display title from a markdown filename.

    >>> title_from_filename("my-awesome-page.md")
    'My Awesome Page'
    >>> title_from_filename("getting__started")
    'Getting Started'
    """
    stem = MARKDOWN_SUFFIX_PATTERN.sub("", filename)
    spaced = SEPARATOR_PATTERN.sub(" ", stem)
    return WORD_START_PATTERN.sub(lambda match: match.group(0).upper(), spaced)


def parse_position(value: FrontmatterValue | None) -> int | None:
    """Return the leading integer of ``value`` the way ``parseInt`` reads it.

    >>> parse_position("3")
    3
    >>> parse_position("2nd") is None
    False
    >>> parse_position("first") is None
    True
    """
    match value:
        case bool():
            return None
        case int():
            return value
        case str():
            found = LEADING_INTEGER_PATTERN.match(value)
            return int(found.group(1)) if found else None
        case _:
            return None


def is_root_index(relative_path: PurePath) -> bool:
    """Return True for ``index.md``/``index.mdx`` directly under the source root."""
    return len(relative_path.parts) == 1 and relative_path.name in INDEX_FILENAMES


def classify(
    frontmatter: typ.Mapping[str, FrontmatterValue],
    relative_path: PurePath,
    config: DocsConfig,
) -> Classification:
    """Classify a page and compute its destination metadata.

    Parameters
    ----------
    frontmatter : Mapping[str, FrontmatterValue]
        Metadata parsed from the source page; it is not modified.
    relative_path : PurePath
        Path of the page relative to the docs source root.
    config : DocsConfig
        Site configuration (directory grouping and plans handling).

    Returns
    -------
    Classification
        The chosen group, slug, title, ordering data, and output frontmatter.
    """
    output: Frontmatter = dict(frontmatter)
    plan_date = _plan_date(frontmatter, relative_path, config)

    title = output.get(TITLE_KEY)
    if title is None or title == "":
        title = _derived_title(relative_path.name, plan_date)
        output[TITLE_KEY] = title

    group = _resolve_group(frontmatter, relative_path, config)
    position = parse_position(output.pop(POSITION_KEY, None))
    if position is not None:
        output[SIDEBAR_KEY] = _with_order(output.get(SIDEBAR_KEY), position)
    output.pop(GROUP_KEY, None)

    return Classification(
        title=str(title),
        group=group,
        directory=slugify(group) if group is not None else "",
        position=position,
        plan_date=plan_date,
        frontmatter=output,
    )


def _resolve_group(
    frontmatter: typ.Mapping[str, FrontmatterValue],
    relative_path: PurePath,
    config: DocsConfig,
) -> str | None:
    """Apply the explicit -> directory -> plans -> Drafts fallback chain."""
    if is_root_index(relative_path):
        return None
    explicit = frontmatter.get(GROUP_KEY)
    if explicit not in (None, ""):
        return str(explicit)
    top_level = _top_level_directory(relative_path)
    if top_level is not None:
        if config.plans_directory and top_level == config.plans_directory:
            return PLANS_GROUP
        if config.group_by_directory:
            return title_from_filename(top_level)
    return DRAFTS_GROUP


def _top_level_directory(relative_path: PurePath) -> str | None:
    if len(relative_path.parts) < 2:
        return None
    return relative_path.parts[0]


def _plan_date(
    frontmatter: typ.Mapping[str, FrontmatterValue],
    relative_path: PurePath,
    config: DocsConfig,
) -> dt.date | None:
    """Return the filename date for pages routed to the plans group."""
    if not config.plans_directory or frontmatter.get(GROUP_KEY) not in (None, ""):
        return None
    if _top_level_directory(relative_path) != config.plans_directory:
        return None
    match = PLAN_DATE_PATTERN.match(relative_path.name)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def _derived_title(filename: str, plan_date: dt.date | None) -> str:
    if plan_date is not None:
        undated = title_from_filename(PLAN_DATE_PATTERN.sub("", filename, count=1))
        if undated.strip():
            return undated
    return title_from_filename(filename)


def _with_order(existing: FrontmatterValue | None, position: int) -> dict[str, str | int]:
    """Merge ``order`` into an existing nested ``sidebar`` mapping."""
    nested: dict[str, str | int] = dict(existing) if isinstance(existing, dict) else {}
    nested[ORDER_KEY] = position
    return nested


__all__ = [
    "Classification",
    "classify",
    "is_root_index",
    "parse_position",
    "slugify",
    "sort_key",
    "title_from_filename",
]
