"""Unit tests for the sync-then-publish pipeline."""

from __future__ import annotations

import typing as typ

from phoenix_docs.config import DocsConfig
from phoenix_docs.pipeline import SyncPipeline
from phoenix_docs.sync import TreeSynchronizer

if typ.TYPE_CHECKING:
    from pathlib import Path


def _pipeline(tmp_path: Path, config: DocsConfig | None = None) -> SyncPipeline:
    synchronizer = TreeSynchronizer(tmp_path / "docs", tmp_path / "content", config=config)
    return SyncPipeline(synchronizer, tmp_path / "src" / "sidebar.generated.mjs")


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_run_writes_sidebar_module(tmp_path: Path) -> None:
    """A run syncs the tree and writes the sidebar module."""
    _write(tmp_path / "docs", "index.md", "# Home\n")
    _write(tmp_path / "docs", "guide.md", "---\nsidebar_group: Guide\n---\n")
    pipeline = _pipeline(tmp_path)

    result = pipeline.run()

    sidebar = (tmp_path / "src" / "sidebar.generated.mjs").read_text(encoding="utf-8")
    assert set(result.groups) == {"Guide"}, "unexpected groups"
    assert "autogenerate: { directory: 'guide' }," in sidebar, "group section expected"
    assert "slug: 'index'" in sidebar, "root index should be the introduction"


def test_publish_skips_unchanged_outputs(tmp_path: Path) -> None:
    """Publishing the same pages twice writes nothing the second time."""
    _write(tmp_path / "docs", "page.md", "Page.\n")
    pipeline = _pipeline(tmp_path)
    result = pipeline.run()
    assert pipeline.publish(result.pages) == [], "unchanged sidebar should be skipped"


def test_generated_index_when_source_has_none(tmp_path: Path) -> None:
    """With ``generate_index`` an index page is written and introduced."""
    _write(tmp_path / "docs", "setup.md", "---\nsidebar_group: Guide\n---\n")
    pipeline = _pipeline(tmp_path, DocsConfig(title="Handbook", generate_index=True))

    pipeline.run()

    index = (tmp_path / "content" / "index.md").read_text(encoding="utf-8")
    sidebar = (tmp_path / "src" / "sidebar.generated.mjs").read_text(encoding="utf-8")
    assert "# Handbook" in index, "generated index should carry the site title"
    assert "- [Setup](./guide/setup.md)" in index, "generated index should link pages"
    assert "{ label: 'Introduction', slug: 'index' }," in sidebar, (
        "generated index should be linked as the introduction"
    )


def test_source_index_is_not_replaced(tmp_path: Path) -> None:
    """An authored root index wins over the generated one."""
    _write(tmp_path / "docs", "index.md", "---\ntitle: Welcome\n---\nHello\n")
    pipeline = _pipeline(tmp_path, DocsConfig(generate_index=True))

    pipeline.run()

    index = (tmp_path / "content" / "index.md").read_text(encoding="utf-8")
    assert index == "---\ntitle: Welcome\n---\nHello\n", "authored index must be kept"
