"""Cyclopts CLI entrypoint for syncing docs and driving the site generator.

The ``phoenix-docs`` console script wraps the sync engine for the usual
authoring loop: ``init`` scaffolds a ``docs/`` folder, ``sync`` rebuilds the
site generator's content tree and sidebar (optionally watching for changes),
``serve`` runs the generator's dev server alongside the watcher, and
``build`` produces the static site. Every option can also be set through a
``PHOENIX_DOCS_<OPTION>`` environment variable.

Examples
--------
Sync once into the default site layout:

>>> from phoenix_docs.cli import main
>>> main()  # doctest: +SKIP

Watch a custom source folder:

>>> from phoenix_docs.cli import app
>>> app(["sync", "--source", "handbook", "--watch"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import CONFIG_FILENAME, SIDEBAR_FILENAME
from .pipeline import SyncPipeline
from .sync import DocsSyncError, SyncResult, TreeSynchronizer
from .watcher import ChangeWatcher, WatcherState

DEFAULT_SOURCE = Path("docs")
DEFAULT_SITE_DIR = Path()
DEFAULT_OUTPUT_DIR = Path("docs-dist")
DEFAULT_BUILD_COMMAND = "npm run build"
DEFAULT_DEV_COMMAND = "npm run dev"
TEMPLATES_DIR = Path(__file__).parent / "templates" / "init"
INIT_TEMPLATES = (
    CONFIG_FILENAME,
    "getting-started.md",
    "_documentation-guide.md",
    "_template.md",
)

app = App(
    name="phoenix-docs",
    help="Sync markdown docs into a static-site generator and build the site.",
    config=cyclopts.config.Env("PHOENIX_DOCS_", command=False),  # type: ignore[unknown-argument]
)

SourceOption = typ.Annotated[Path, Parameter(help="Docs source directory")]
SiteDirOption = typ.Annotated[
    Path, Parameter(help="Site generator project directory")
]
DestOption = typ.Annotated[
    Path | None,
    Parameter(help="Synced content directory (default: <site-dir>/src/content/docs)"),
]
SidebarOption = typ.Annotated[
    Path | None,
    Parameter(
        help=f"Generated sidebar module (default: <site-dir>/src/{SIDEBAR_FILENAME})"
    ),
]
VerboseOption = typ.Annotated[bool, Parameter(help="Log debug details")]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _fail(message: str, *, hint: str | None = None) -> typ.NoReturn:
    """Print ``message`` (and an optional remediation hint) and exit with status 1."""
    print(message, file=sys.stderr)
    if hint:
        print(hint, file=sys.stderr)
    raise SystemExit(1)


def _require_docs(source: Path) -> None:
    """Exit unless the docs source directory and its ``docs.json`` exist."""
    hint = "Run 'phoenix-docs init' first"
    if not source.is_dir():
        _fail(f"Error: {_format_path(source)}/ directory not found", hint=hint)
    if not (source / CONFIG_FILENAME).is_file():
        _fail(
            f"Error: {_format_path(source / CONFIG_FILENAME)} not found", hint=hint
        )


def _build_pipeline(
    source: Path, site_dir: Path, dest: Path | None, sidebar: Path | None
) -> SyncPipeline:
    content_dir = dest or site_dir / "src" / "content" / "docs"
    sidebar_output = sidebar or site_dir / "src" / SIDEBAR_FILENAME
    return SyncPipeline(TreeSynchronizer(source, content_dir), sidebar_output)


def _run_sync(pipeline: SyncPipeline) -> SyncResult:
    """Run a full sync, turning engine and filesystem failures into exit status 1."""
    try:
        result = pipeline.run()
    except (DocsSyncError, OSError) as exc:
        _fail(f"Error: sync failed: {exc}")
    print(f"wrote {_format_path(pipeline.sidebar_output)}")
    return result


def _watch(watcher: ChangeWatcher) -> None:
    """Drain watcher events until interrupted, then close the subscription."""
    try:
        watcher.run()
    except KeyboardInterrupt:
        print("\nStopping file watcher...")
    finally:
        watcher.stop()


def _split_command(command: str) -> list[str]:
    argv = shlex.split(command)
    if not argv:
        _fail("Error: empty site generator command")
    return argv


@app.command(help="Create a docs/ folder with starter files.")
def init(*, source: SourceOption = DEFAULT_SOURCE) -> None:
    """Copy the starter templates into ``source`` without overwriting files.

    Parameters
    ----------
    source : Path, optional
        Docs directory to create; defaults to ``docs``.
    """
    print(f"Initializing documentation in {_format_path(source)}...")
    source.mkdir(parents=True, exist_ok=True)
    for name in INIT_TEMPLATES:
        target = source / name
        if target.exists():
            print(f"  Skipped (exists): {_format_path(target)}")
            continue
        shutil.copyfile(TEMPLATES_DIR / name, target)
        print(f"  Created: {_format_path(target)}")
    print()
    print("Done! Next steps:")
    print(f"  1. Edit {_format_path(source / CONFIG_FILENAME)} with your project title")
    print(f"  2. Edit {_format_path(source / 'getting-started.md')} with your content")
    print("  3. Run 'phoenix-docs serve'")


@app.command(help="Sync docs into the site generator and regenerate the sidebar.")
def sync(
    *,
    source: SourceOption = DEFAULT_SOURCE,
    site_dir: SiteDirOption = DEFAULT_SITE_DIR,
    dest: DestOption = None,
    sidebar: SidebarOption = None,
    watch: typ.Annotated[bool, Parameter(help="Keep syncing on changes")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Run a full sync and optionally keep watching the source tree.

    Parameters
    ----------
    source : Path, optional
        Docs source directory containing ``docs.json``.
    site_dir : Path, optional
        Site generator project; destination defaults are resolved inside it.
    dest : Path or None, optional
        Override the synced content directory.
    sidebar : Path or None, optional
        Override the generated sidebar module path (``.json`` writes JSON).
    watch : bool, optional
        After the initial sync, apply changes until interrupted.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        With status 1 when the docs folder or ``docs.json`` is missing, or the
        initial sync fails.
    """
    _configure_logging(verbose=verbose)
    _require_docs(source)
    pipeline = _build_pipeline(source, site_dir, dest, sidebar)
    result = _run_sync(pipeline)
    if watch:
        watcher = ChangeWatcher(pipeline, state=WatcherState.from_result(result))
        watcher.start(initial_sync=False)
        _watch(watcher)


@app.command(help="Start the site generator dev server with live sync.")
def serve(
    *,
    source: SourceOption = DEFAULT_SOURCE,
    site_dir: SiteDirOption = DEFAULT_SITE_DIR,
    dest: DestOption = None,
    sidebar: SidebarOption = None,
    dev_command: typ.Annotated[
        str, Parameter(help="Command that starts the dev server")
    ] = DEFAULT_DEV_COMMAND,
    verbose: VerboseOption = False,
) -> None:
    """Sync, launch the dev server in ``site_dir``, and watch for changes."""
    _configure_logging(verbose=verbose)
    _require_docs(source)
    pipeline = _build_pipeline(source, site_dir, dest, sidebar)
    result = _run_sync(pipeline)
    argv = _split_command(dev_command)
    try:
        server = subprocess.Popen(argv, cwd=site_dir)  # noqa: S603 - user-supplied command
    except FileNotFoundError:
        _fail(f"Error: '{argv[0]}' not found on PATH")
    print(f"Started dev server: {dev_command}")
    watcher = ChangeWatcher(pipeline, state=WatcherState.from_result(result))
    watcher.start(initial_sync=False)
    try:
        _watch(watcher)
    finally:
        server.terminate()
        server.wait()


@app.command(help="Sync docs and build the static site.")
def build(
    *,
    source: SourceOption = DEFAULT_SOURCE,
    site_dir: SiteDirOption = DEFAULT_SITE_DIR,
    dest: DestOption = None,
    sidebar: SidebarOption = None,
    output_dir: typ.Annotated[
        Path, Parameter(help="Static output folder cleared before building")
    ] = DEFAULT_OUTPUT_DIR,
    build_command: typ.Annotated[
        str, Parameter(help="Command that builds the static site")
    ] = DEFAULT_BUILD_COMMAND,
    verbose: VerboseOption = False,
) -> None:
    """Sync, clear ``output_dir``, and run the site generator build.

    Raises
    ------
    SystemExit
        With status 1 for missing prerequisites or a failed sync, or with the
        build command's own exit status when it fails.
    """
    _configure_logging(verbose=verbose)
    _require_docs(source)
    pipeline = _build_pipeline(source, site_dir, dest, sidebar)
    _run_sync(pipeline)
    if output_dir.exists():
        shutil.rmtree(output_dir)
    argv = _split_command(build_command)
    print(f"Running site build: {build_command}")
    try:
        completed = subprocess.run(argv, cwd=site_dir, check=False)  # noqa: S603 - user-supplied command
    except FileNotFoundError:
        _fail(f"Error: '{argv[0]}' not found on PATH")
    if completed.returncode != 0:
        print(f"Build failed with exit status {completed.returncode}", file=sys.stderr)
        raise SystemExit(completed.returncode)
    print()
    print(f"Build complete! Static files are in {_format_path(output_dir)}/")


@app.command(name="help", help="Show this help message.")
def show_help() -> None:
    """Print the command overview."""
    app.help_print([])


def main() -> None:
    """Invoke the Cyclopts application behind the ``phoenix-docs`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
