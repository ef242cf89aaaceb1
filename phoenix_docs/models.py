"""Shared dataclasses passed between the synchronizer and sidebar generator."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata

from .classifier import slugify, sort_key


@dc.dataclass(frozen=True, slots=True)
class PageEntry:
    """A synced markdown page as seen by navigation builders.

    Attributes
    ----------
    source_path : str
        POSIX path relative to the docs source root.
    slug : str
        Destination path relative to the destination root, without extension
        (for example ``getting-started/install``).
    title : str
        Effective page title.
    group : str or None
        Navigation group label; ``None`` for the root index page.
    description : str or None
        Optional description shown in the index document.
    position : int or None
        Explicit ``sidebar_position``; ``None`` falls back to the default weight.
    plan_date : datetime.date or None
        Secondary ordering key for dated plan pages.
    """

    source_path: str
    slug: str
    title: str
    group: str | None
    description: str | None = None
    position: int | None = None
    plan_date: dt.date | None = None

    @property
    def sort_key(self) -> tuple[int, int]:
        """Return the within-group ordering key."""
        return sort_key(self.position, self.plan_date)


@dc.dataclass(slots=True)
class Group:
    """A navigation section and its member pages in discovery order."""

    label: str
    pages: list[PageEntry] = dc.field(default_factory=list)

    @property
    def slug(self) -> str:
        """Return the destination directory slug derived from the label."""
        return slugify(self.label)


def group_pages(pages: cabc.Iterable[PageEntry]) -> dict[str, Group]:
    """Bucket ``pages`` by group label, keeping discovery order throughout.

    Pages without a group (the root index) are left out.
    """
    groups: dict[str, Group] = {}
    for page in pages:
        if page.group is None:
            continue
        groups.setdefault(page.group, Group(page.group)).pages.append(page)
    return groups


__all__ = ["Group", "PageEntry", "group_pages"]
