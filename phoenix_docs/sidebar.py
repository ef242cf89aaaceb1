"""Build and render the navigation manifest and the aggregated docs index.

This module takes the groups discovered by a sync and turns them into an
ordered :class:`NavigationManifest`: configured ``group_order`` labels first,
then every remaining group alphabetically, with pages ordered by
``sidebar_position`` (stable on discovery order). The manifest is rendered
into the ``sidebar.generated.mjs`` module the site generator imports, or into
JSON when the output path ends in ``.json``.

The same ordering drives the optional index document: a title, a
description, and one table-of-contents subsection per group.

Typical usage pairs the builder with a sync result:

>>> from pathlib import Path
>>> from phoenix_docs.sidebar import SidebarBuilder, build_manifest
>>> manifest = build_manifest(result.groups, group_order=["Guide"])  # doctest: +SKIP
>>> SidebarBuilder().write_manifest(Path("src/sidebar.generated.mjs"), manifest)  # doctest: +SKIP
True

Templates are read from ``phoenix_docs/templates`` by default and written as
UTF-8 text.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path

import msgspec
from jinja2 import Environment, FileSystemLoader, select_autoescape

from . import frontmatter
from ._constants import INTRODUCTION_LABEL, ORDER_KEY, SIDEBAR_KEY, TITLE_KEY
from .models import Group, PageEntry

if typ.TYPE_CHECKING:
    from .config import DocsConfig, SidebarMode


@dc.dataclass(slots=True)
class NavItem:
    """A single navigation link."""

    label: str
    slug: str


@dc.dataclass(slots=True)
class NavSection:
    """A sidebar section addressed by directory or by explicit items."""

    label: str
    directory: str | None = None
    items: list[NavItem] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class NavigationManifest:
    """Ordered sidebar sections plus an optional leading introduction link."""

    sections: list[NavSection] = dc.field(default_factory=list)
    introduction: NavItem | None = None


def order_groups(
    labels: cabc.Iterable[str], group_order: cabc.Sequence[str]
) -> list[str]:
    """Return ``labels`` with configured groups first and the rest sorted.

    >>> order_groups({"Guide", "Reference", "Zeta"}, ["Reference", "Guide"])
    ['Reference', 'Guide', 'Zeta']
    """
    remaining = set(labels)
    ordered: list[str] = []
    for label in group_order:
        if label in remaining:
            ordered.append(label)
            remaining.discard(label)
    ordered.extend(sorted(remaining))
    return ordered


def order_pages(pages: cabc.Iterable[PageEntry]) -> list[PageEntry]:
    """Return ``pages`` sorted by position; ties keep discovery order."""
    return sorted(pages, key=lambda page: page.sort_key)


def ordered_groups(
    groups: cabc.Mapping[str, Group], group_order: cabc.Sequence[str]
) -> list[Group]:
    """Return groups in navigation order with their pages sorted."""
    return [
        Group(label, order_pages(groups[label].pages))
        for label in order_groups(groups, group_order)
    ]


def build_manifest(
    groups: cabc.Mapping[str, Group],
    *,
    group_order: cabc.Sequence[str] = (),
    mode: SidebarMode = "autogenerate",
    index_page: PageEntry | None = None,
) -> NavigationManifest:
    """Build the navigation manifest for the discovered ``groups``.

    Parameters
    ----------
    groups : Mapping[str, Group]
        Discovered groups keyed by label.
    group_order : Sequence[str], optional
        Labels that lead the sidebar in the given order when present.
    mode : SidebarMode, optional
        ``"autogenerate"`` emits one directory reference per group and lets
        the site generator list its pages; ``"explicit"`` lists every page.
    index_page : PageEntry, optional
        Root index page; when given, an ``Introduction`` link leads the
        sidebar.

    Returns
    -------
    NavigationManifest
        The ordered sections.
    """
    sections: list[NavSection] = []
    for group in ordered_groups(groups, group_order):
        if mode == "explicit":
            items = [NavItem(page.title, page.slug) for page in group.pages]
            sections.append(NavSection(group.label, items=items))
        else:
            sections.append(NavSection(group.label, directory=group.slug))
    introduction = (
        NavItem(INTRODUCTION_LABEL, index_page.slug) if index_page is not None else None
    )
    return NavigationManifest(sections=sections, introduction=introduction)


def _js_string(value: object) -> str:
    """Render ``value`` as a single-quoted JavaScript string literal."""
    text = (
        str(value)
        .replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{text}'"


class SidebarBuilder:
    """Render the sidebar module and the aggregated index document."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the builder.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            ``phoenix_docs/templates`` directory when ``None``.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["js_string"] = _js_string
        self.sidebar_template = self.env.get_template("sidebar.mjs.jinja")
        self.index_template = self.env.get_template("index.md.jinja")

    def render_manifest(self, manifest: NavigationManifest, *, as_json: bool = False) -> str:
        """Return the manifest as a JavaScript module, or as JSON."""
        if as_json:
            encoded = msgspec.json.format(msgspec.json.encode(manifest), indent=2)
            return encoded.decode("utf-8") + "\n"
        return _ensure_newline(self.sidebar_template.render(manifest=manifest))

    def write_manifest(self, path: Path, manifest: NavigationManifest) -> bool:
        """Write the manifest to ``path`` when its content changed.

        The format follows the suffix: ``.json`` for JSON, anything else for
        the JavaScript module. Returns True when the file was (re)written.
        """
        text = self.render_manifest(manifest, as_json=path.suffix == ".json")
        return _write_if_changed(path, text)

    def render_index(
        self, groups: cabc.Mapping[str, Group], config: DocsConfig
    ) -> str:
        """Render the aggregated index document for ``groups``.

        Groups follow the configured order and pages are sorted by position,
        matching the sidebar.
        """
        header = frontmatter.serialize(
            {TITLE_KEY: config.title, SIDEBAR_KEY: {ORDER_KEY: 0}}
        )
        return _ensure_newline(
            self.index_template.render(
                header=header,
                title=config.title,
                description=config.description,
                groups=ordered_groups(groups, config.group_order),
            )
        )

    def write_index(
        self, path: Path, groups: cabc.Mapping[str, Group], config: DocsConfig
    ) -> bool:
        """Write the index document to ``path`` when its content changed."""
        return _write_if_changed(path, self.render_index(groups, config))


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else f"{text}\n"


def _write_if_changed(path: Path, text: str) -> bool:
    """Write ``text`` to ``path`` unless it already holds exactly that text."""
    try:
        if path.read_text(encoding="utf-8") == text:
            return False
    except FileNotFoundError:
        pass
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return True


__all__ = [
    "NavItem",
    "NavSection",
    "NavigationManifest",
    "SidebarBuilder",
    "build_manifest",
    "order_groups",
    "order_pages",
    "ordered_groups",
]
