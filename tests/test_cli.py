"""Tests for the ``phoenix-docs`` command functions.

The Cyclopts command functions are called directly, the same way the console
script dispatches them, so exit codes surface as ``SystemExit``. External
processes (the site generator's dev server and build) are replaced with
pytest-mock doubles.

Usage
-----
Run ``pytest tests/test_cli.py -v``.
"""

from __future__ import annotations

import subprocess
import typing as typ

import cyclopts
import pytest

from phoenix_docs import cli

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


def _docs(tmp_path: Path) -> Path:
    source = tmp_path / "docs"
    source.mkdir()
    (source / "docs.json").write_text('{"title": "Handbook"}', encoding="utf-8")
    (source / "install.md").write_text(
        "---\nsidebar_group: Getting Started\n---\nSteps.\n", encoding="utf-8"
    )
    return source


def test_init_creates_starter_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``init`` copies every starter template into a new docs folder."""
    source = tmp_path / "docs"
    cli.init(source=source)

    assert sorted(path.name for path in source.iterdir()) == sorted(cli.INIT_TEMPLATES), (
        "every starter file should be created"
    )
    assert '"title"' in (source / "docs.json").read_text(encoding="utf-8"), (
        "starter config should be JSON with a title"
    )
    assert "Created:" in capsys.readouterr().out, "created files should be listed"


def test_init_never_overwrites(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Existing files are kept and reported as skipped."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "docs.json").write_text("{}", encoding="utf-8")

    cli.init(source=source)

    assert (source / "docs.json").read_text(encoding="utf-8") == "{}", (
        "existing config must not be overwritten"
    )
    assert (source / "getting-started.md").exists(), "missing files are still created"
    assert "Skipped (exists):" in capsys.readouterr().out, "skip should be printed"


def test_sync_requires_source_directory(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A missing docs folder exits with status 1 and a remediation hint."""
    with pytest.raises(SystemExit) as excinfo:
        cli.sync(source=tmp_path / "docs", site_dir=tmp_path)
    assert excinfo.value.code == 1, "missing source should exit 1"
    err = capsys.readouterr().err
    assert "directory not found" in err, f"unexpected stderr {err!r}"
    assert "phoenix-docs init" in err, "stderr should suggest running init"


def test_sync_requires_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A docs folder without ``docs.json`` is rejected the same way."""
    (tmp_path / "docs").mkdir()
    with pytest.raises(SystemExit) as excinfo:
        cli.sync(source=tmp_path / "docs", site_dir=tmp_path)
    assert excinfo.value.code == 1, "missing config should exit 1"
    assert "docs.json not found" in capsys.readouterr().err, "config should be named"


def test_sync_writes_content_and_sidebar(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A one-shot sync fills the default content folder and sidebar path."""
    source = _docs(tmp_path)
    cli.sync(source=source, site_dir=tmp_path)

    assert (tmp_path / "src" / "content" / "docs" / "getting-started" / "install.md").exists(), (
        "page should be synced into the site's content folder"
    )
    sidebar = tmp_path / "src" / "sidebar.generated.mjs"
    assert sidebar.exists(), "sidebar module should be written"
    assert "wrote" in capsys.readouterr().out, "written artifact should be echoed"


def test_sync_failure_exits_non_zero(tmp_path: Path) -> None:
    """Engine errors during a one-shot sync abort with status 1."""
    source = _docs(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        cli.sync(source=source, site_dir=tmp_path, dest=tmp_path)
    assert excinfo.value.code == 1, "overlapping destination should abort"


def test_sync_watch_starts_and_stops_watcher(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """``--watch`` hands the synced state to a watcher until interrupted."""
    source = _docs(tmp_path)
    watcher_cls = mocker.patch("phoenix_docs.cli.ChangeWatcher")
    watcher = watcher_cls.return_value
    watcher.run.side_effect = KeyboardInterrupt

    cli.sync(source=source, site_dir=tmp_path, watch=True)

    state = watcher_cls.call_args.kwargs["state"]
    assert state.known_groups == {"Getting Started"}, "state should match the sync"
    watcher.start.assert_called_once_with(initial_sync=False)
    watcher.stop.assert_called_once_with()


def test_build_runs_site_build(tmp_path: Path, mocker: MockerFixture) -> None:
    """``build`` syncs, clears the output folder, and runs the build command."""
    source = _docs(tmp_path)
    output_dir = tmp_path / "dist"
    (output_dir / "old").mkdir(parents=True)
    run = mocker.patch(
        "phoenix_docs.cli.subprocess.run",
        return_value=subprocess.CompletedProcess(["npm"], 0),
    )

    cli.build(
        source=source,
        site_dir=tmp_path,
        output_dir=output_dir,
        build_command="npm run build -- --silent",
    )

    run.assert_called_once_with(
        ["npm", "run", "build", "--", "--silent"], cwd=tmp_path, check=False
    )
    assert not output_dir.exists(), "previous output should be cleared"
    assert (tmp_path / "src" / "sidebar.generated.mjs").exists(), (
        "sidebar should be generated before building"
    )


def test_build_propagates_failure_status(tmp_path: Path, mocker: MockerFixture) -> None:
    """A failed site build exits with the build's own status."""
    source = _docs(tmp_path)
    mocker.patch(
        "phoenix_docs.cli.subprocess.run",
        return_value=subprocess.CompletedProcess(["npm"], 3),
    )
    with pytest.raises(SystemExit) as excinfo:
        cli.build(source=source, site_dir=tmp_path, output_dir=tmp_path / "dist")
    assert excinfo.value.code == 3, "build status should be propagated"


def test_build_requires_prerequisites(tmp_path: Path, mocker: MockerFixture) -> None:
    """``build`` validates the docs folder before running anything."""
    run = mocker.patch("phoenix_docs.cli.subprocess.run")
    with pytest.raises(SystemExit) as excinfo:
        cli.build(source=tmp_path / "docs", site_dir=tmp_path)
    assert excinfo.value.code == 1, "missing docs should exit 1"
    run.assert_not_called()


def test_serve_runs_dev_server_with_watcher(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """``serve`` starts the dev server and stops it when watching ends."""
    source = _docs(tmp_path)
    popen = mocker.patch("phoenix_docs.cli.subprocess.Popen")
    watcher_cls = mocker.patch("phoenix_docs.cli.ChangeWatcher")
    watcher_cls.return_value.run.side_effect = KeyboardInterrupt

    cli.serve(source=source, site_dir=tmp_path, dev_command="npm run dev")

    popen.assert_called_once_with(["npm", "run", "dev"], cwd=tmp_path)
    server = popen.return_value
    server.terminate.assert_called_once_with()
    server.wait.assert_called_once_with()
    watcher_cls.return_value.stop.assert_called_once_with()


def test_serve_reports_missing_dev_command(
    tmp_path: Path, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    """A dev command that is not installed exits with status 1."""
    source = _docs(tmp_path)
    mocker.patch("phoenix_docs.cli.subprocess.Popen", side_effect=FileNotFoundError)
    with pytest.raises(SystemExit) as excinfo:
        cli.serve(source=source, site_dir=tmp_path, dev_command="missing-tool dev")
    assert excinfo.value.code == 1, "missing executable should exit 1"
    assert "'missing-tool' not found" in capsys.readouterr().err, "tool should be named"


def test_help_prints_usage(mocker: MockerFixture) -> None:
    """``help`` delegates to the Cyclopts help screen."""
    help_print = mocker.patch.object(cyclopts.App, "help_print")
    cli.show_help()
    help_print.assert_called_once_with([])
