"""Run a sync and publish the navigation artifacts the site generator needs.

:class:`SyncPipeline` is the glue shared by the CLI and the change watcher:
it runs the :class:`~phoenix_docs.sync.TreeSynchronizer`, then writes the
sidebar manifest and, when configured, the aggregated index page.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from .models import PageEntry, group_pages
from .sidebar import SidebarBuilder, build_manifest

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .sync import SyncResult, TreeSynchronizer

logger = logging.getLogger(__name__)

GENERATED_INDEX = "index.md"


class SyncPipeline:
    """Full sync followed by sidebar (and optional index) generation."""

    def __init__(
        self,
        synchronizer: TreeSynchronizer,
        sidebar_output: Path,
        *,
        builder: SidebarBuilder | None = None,
    ) -> None:
        self.synchronizer = synchronizer
        self.sidebar_output = sidebar_output
        self.builder = builder or SidebarBuilder()

    def run(self) -> SyncResult:
        """Rebuild the destination tree and regenerate navigation outputs."""
        result = self.synchronizer.full_sync()
        self.publish(result.pages)
        logger.info("Sync complete")
        return result

    def publish(self, pages: cabc.Iterable[PageEntry]) -> list[Path]:
        """Write the sidebar manifest (and index page) for ``pages``.

        Returns the paths that were rewritten; unchanged outputs are left
        untouched.
        """
        config = self.synchronizer.config
        entries = list(pages)
        groups = group_pages(entries)
        index_page = next((page for page in entries if page.group is None), None)
        written: list[Path] = []

        if index_page is None and config.generate_index:
            index_path = self.synchronizer.dest_dir / GENERATED_INDEX
            if self.builder.write_index(index_path, groups, config):
                written.append(index_path)
            index_page = PageEntry(
                source_path="", slug="index", title=config.title, group=None
            )

        manifest = build_manifest(
            groups,
            group_order=config.group_order,
            mode=config.sidebar_mode,
            index_page=index_page,
        )
        if self.builder.write_manifest(self.sidebar_output, manifest):
            logger.info("Generated: %s", self.sidebar_output)
            written.append(self.sidebar_output)
        return written


__all__ = ["GENERATED_INDEX", "SyncPipeline"]
