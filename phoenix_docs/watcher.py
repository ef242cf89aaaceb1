"""Keep the destination tree in step with the docs source while authors edit.

The watchdog observer thread only translates filesystem notifications into
typed :data:`FileEvent` values on a bounded queue. A single loop in
:meth:`ChangeWatcher.run` drains that queue and applies each event to
completion before taking the next, so no two syncs ever touch the
destination tree at once.

Event handling:

* ``Added``/``Changed`` files are synced one at a time. The sidebar is
  regenerated when a page introduces a new group (or, in explicit sidebar
  mode, whenever the rendered manifest changes).
* ``Removed`` files or directories, new directories, and pages that moved to
  another group fall back to a full resync, because group membership cannot
  be updated safely without re-deriving it.

Example
-------
>>> from pathlib import Path
>>> from phoenix_docs.pipeline import SyncPipeline
>>> from phoenix_docs.sync import TreeSynchronizer
>>> from phoenix_docs.watcher import ChangeWatcher
>>> pipeline = SyncPipeline(
...     TreeSynchronizer(Path("docs"), Path("src/content/docs")),
...     Path("src/sidebar.generated.mjs"),
... )
>>> watcher = ChangeWatcher(pipeline)
>>> watcher.start()  # doctest: +SKIP
>>> watcher.run()  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import queue
import threading
import typing as typ
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .patterns import is_excluded_path
from .sync import is_config_file

if typ.TYPE_CHECKING:
    from pathlib import PurePosixPath

    from .models import PageEntry
    from .pipeline import SyncPipeline
    from .sync import SyncResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 1024


@dc.dataclass(frozen=True, slots=True)
class Added:
    """A file or directory appeared under the source tree."""

    path: Path
    is_directory: bool = False


@dc.dataclass(frozen=True, slots=True)
class Changed:
    """A file under the source tree was modified."""

    path: Path
    is_directory: bool = False


@dc.dataclass(frozen=True, slots=True)
class Removed:
    """A file or directory was deleted from the source tree."""

    path: Path
    is_directory: bool = False


FileEvent: typ.TypeAlias = Added | Changed | Removed


@dc.dataclass(slots=True)
class WatcherState:
    """Everything the watcher knows about the synced tree between events.

    Attributes
    ----------
    known_groups : set[str]
        Group labels seen since the last full sync.
    pages : dict[str, PageEntry]
        Synced pages keyed by their source path, in discovery order.
    """

    known_groups: set[str] = dc.field(default_factory=set)
    pages: dict[str, PageEntry] = dc.field(default_factory=dict)

    @classmethod
    def from_result(cls, result: SyncResult) -> WatcherState:
        """Build the state that matches a completed full sync."""
        return cls(
            known_groups=set(result.groups),
            pages={page.source_path: page for page in result.pages},
        )


class _QueueingHandler(FileSystemEventHandler):
    """Translate watchdog callbacks into typed events on a queue."""

    def __init__(
        self, events: queue.Queue[FileEvent], is_ignored: typ.Callable[[Path], bool]
    ) -> None:
        super().__init__()
        self._events = events
        self._is_ignored = is_ignored

    def on_created(self, event: FileSystemEvent) -> None:
        self._put(Added(_event_path(event.src_path), event.is_directory))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(Changed(_event_path(event.src_path)))

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._put(Removed(_event_path(event.src_path), event.is_directory))

    def on_moved(self, event: FileSystemEvent) -> None:
        self._put(Removed(_event_path(event.src_path), event.is_directory))
        self._put(Added(_event_path(event.dest_path), event.is_directory))

    def _put(self, event: FileEvent) -> None:
        if not self._is_ignored(event.path):
            self._events.put(event)


def _event_path(raw: str | bytes) -> Path:
    return Path(os.fsdecode(raw))


class ChangeWatcher:
    """Apply source-tree changes to the destination tree, one event at a time."""

    def __init__(
        self,
        pipeline: SyncPipeline,
        *,
        state: WatcherState | None = None,
        max_pending: int = DEFAULT_MAX_PENDING,
        poll_interval: float = 0.5,
    ) -> None:
        """Initialize the watcher.

        Parameters
        ----------
        pipeline : SyncPipeline
            Sync pipeline used for incremental updates and full resyncs.
        state : WatcherState, optional
            Known groups and pages; replaced by :meth:`start` when it runs the
            initial sync.
        max_pending : int, optional
            Capacity of the event queue; the observer thread blocks when full.
        poll_interval : float, optional
            Seconds :meth:`run` waits for an event before re-checking its stop
            flag.
        """
        self.pipeline = pipeline
        self.synchronizer = pipeline.synchronizer
        self.state = state or WatcherState()
        self.events: queue.Queue[FileEvent] = queue.Queue(maxsize=max_pending)
        self.poll_interval = poll_interval
        self._observer: typ.Any = None

    def start(self, *, initial_sync: bool = True) -> WatcherState:
        """Optionally run a full sync, then subscribe to source-tree events."""
        if initial_sync:
            self.resync()
        source = self.synchronizer.source_dir.resolve()
        observer = Observer()
        observer.schedule(
            _QueueingHandler(self.events, self.is_ignored), str(source), recursive=True
        )
        observer.start()
        self._observer = observer
        logger.info("Watching for changes...")
        return self.state

    def stop(self) -> None:
        """Close the filesystem subscription."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def run(self, stop_event: threading.Event | None = None) -> None:
        """Drain the event queue until ``stop_event`` is set.

        Failures while handling one event are logged and the loop keeps
        watching.
        """
        stop_event = stop_event or threading.Event()
        while not stop_event.is_set():
            try:
                event = self.events.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            try:
                self.handle(event)
            except Exception:  # noqa: BLE001 - one bad event must not end watching
                logger.exception("Failed to apply %s", event)
            finally:
                self.events.task_done()

    def is_ignored(self, path: Path) -> bool:
        """Return True for paths outside the source tree, hidden, or excluded."""
        relative = self.synchronizer.relative_path(path)
        if relative is None or not relative.parts:
            return True
        if any(part.startswith(".") for part in relative.parts):
            return True
        return is_excluded_path(relative, self.synchronizer.config.exclude)

    def resync(self) -> WatcherState:
        """Run a full sync and reset the watcher state from its result."""
        result = self.pipeline.run()
        self.state = WatcherState.from_result(result)
        return self.state

    def handle(self, event: FileEvent) -> WatcherState:
        """Apply a single event and return the updated state."""
        label = _describe(event, self.synchronizer.relative_path(event.path))
        logger.info("%s", label)
        match event:
            case Removed():
                return self.resync()
            case Added(is_directory=True):
                return self.resync()
            case Added() | Changed():
                return self._apply_file(event.path)
        return self.state  # pragma: no cover - exhaustive match

    def _apply_file(self, path: Path) -> WatcherState:
        if is_config_file(path.name):
            logger.debug("Configuration change in %s is picked up on the next sync", path)
            return self.state
        outcome = self.synchronizer.sync_file(path)
        page = outcome.page
        if page is None:
            return self.state

        previous = self.state.pages.get(page.source_path)
        if previous is not None and previous.slug != page.slug:
            logger.info("%s moved to %s; resyncing", page.source_path, page.slug)
            return self.resync()

        self.state.pages[page.source_path] = page
        if page.group is not None and page.group not in self.state.known_groups:
            self.state.known_groups.add(page.group)
            logger.info("New group '%s'", page.group)
        if self.pipeline.publish(self.state.pages.values()):
            logger.info("Regenerated sidebar config")
        return self.state


def _describe(event: FileEvent, relative: PurePosixPath | None) -> str:
    """Return a one-line ``+``/``~``/``-`` summary of ``event``."""
    target = relative if relative is not None else event.path
    match event:
        case Added():
            return f"+ {target}"
        case Changed():
            return f"~ {target}"
        case Removed(is_directory=True):
            return f"-/ {target}"
        case _:
            return f"- {target}"


__all__ = [
    "Added",
    "ChangeWatcher",
    "Changed",
    "FileEvent",
    "Removed",
    "WatcherState",
]
