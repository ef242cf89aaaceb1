"""Behaviour tests for incremental watch-mode updates.

Backed by ``features/watch_mode.feature``. Events are applied through
:meth:`ChangeWatcher.handle` so the scenarios do not wait on filesystem
notifications.

Usage:
    Run these behaviour tests with pytest, for example:

        pytest tests/bdd/test_watch_mode.py -v
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from phoenix_docs.pipeline import SyncPipeline
from phoenix_docs.sync import TreeSynchronizer
from phoenix_docs.watcher import Added, ChangeWatcher, Removed

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "watch_mode.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a synced docs tree being watched")
def given_watched_tree(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Sync a one-page docs tree and keep a watcher for later events."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "notes.md").write_text("Notes.\n", encoding="utf-8")
    sidebar = tmp_path / "sidebar.generated.mjs"
    pipeline = SyncPipeline(TreeSynchronizer(source, tmp_path / "out"), sidebar)
    watcher = ChangeWatcher(pipeline)
    watcher.resync()
    scenario_state.update(watcher=watcher, source=source, sidebar=sidebar)


@when(parsers.parse('a page in the group "{label}" is added'))
def when_page_added(scenario_state: dict[str, object], label: str) -> None:
    """Write ``faq.md`` with the given group and apply the add event."""
    page = scenario_state["source"] / "faq.md"  # type: ignore[operator]
    page.write_text(f"---\nsidebar_group: {label}\n---\nQ?\n", encoding="utf-8")
    scenario_state["page"] = page
    scenario_state["watcher"].handle(Added(page))  # type: ignore[union-attr]


@when("that page is deleted")
def when_page_deleted(scenario_state: dict[str, object]) -> None:
    """Delete the added page and apply the removal event."""
    page: Path = scenario_state["page"]  # type: ignore[assignment]
    page.unlink()
    scenario_state["watcher"].handle(Removed(page))  # type: ignore[union-attr]


@then(parsers.parse('the sidebar lists the directory "{slug}"'))
def then_sidebar_lists(scenario_state: dict[str, object], slug: str) -> None:
    """Verify the sidebar module references the group directory."""
    text = scenario_state["sidebar"].read_text(encoding="utf-8")  # type: ignore[union-attr]
    assert f"directory: '{slug}'" in text, f"expected '{slug}' in the sidebar"


@then(parsers.parse('the sidebar does not list the directory "{slug}"'))
def then_sidebar_omits(scenario_state: dict[str, object], slug: str) -> None:
    """Verify the sidebar module no longer references the group directory."""
    text = scenario_state["sidebar"].read_text(encoding="utf-8")  # type: ignore[union-attr]
    assert f"directory: '{slug}'" not in text, f"did not expect '{slug}' in the sidebar"


@then(parsers.parse('the destination contains "{relative}"'))
def then_destination_contains(
    tmp_path: Path, scenario_state: dict[str, object], relative: str
) -> None:
    """Verify a file exists under the synced destination root."""
    assert (tmp_path / "out" / relative).is_file(), f"expected {relative} to be synced"
