"""Typed dataclasses describing the ``docs.json`` site configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from phoenix_docs._constants import (
    DEFAULT_DESCRIPTION,
    DEFAULT_EXCLUDES,
    DEFAULT_TITLE,
)

SidebarMode = typ.Literal["autogenerate", "explicit"]
SIDEBAR_MODES: tuple[str, ...] = typ.get_args(SidebarMode)


@dc.dataclass(frozen=True, slots=True)
class DocsConfig:
    """Project-wide settings read once per sync or build invocation.

    Attributes
    ----------
    title : str
        Site title handed to the site generator and used in the index page.
    description : str
        Site description; opaque to the sync engine.
    exclude : tuple[str, ...]
        Glob-lite patterns for source entries that are never synced.
    group_order : tuple[str, ...]
        Group labels that lead the navigation, in this order.
    sidebar_mode : SidebarMode
        ``"autogenerate"`` addresses each group by directory; ``"explicit"``
        lists every page.
    generate_index : bool
        Write an aggregated index page when the source has no root index.
    group_by_directory : bool
        Derive a missing group from the page's top-level directory name.
    plans_directory : str or None
        Top-level directory whose pages default to the ``Plans`` group.
    """

    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    group_order: tuple[str, ...] = ()
    sidebar_mode: SidebarMode = "autogenerate"
    generate_index: bool = False
    group_by_directory: bool = False
    plans_directory: str | None = None


__all__ = ["SIDEBAR_MODES", "DocsConfig", "SidebarMode"]
