"""Mirror a docs source tree into a grouped destination tree.

:class:`TreeSynchronizer` walks the docs source directory, skips excluded
entries, and routes every markdown page through the frontmatter codec and the
classifier so that it lands in ``<destination>/<group-slug>/<filename>`` with
rewritten metadata. Other assets are copied byte for byte to the mirrored
path; ``.json`` files are configuration and never copied.

A full sync always starts from an empty destination, so the output reflects
only the current source state. :meth:`TreeSynchronizer.sync_file` updates a
single destination entry for watch mode.

Example
-------
>>> from pathlib import Path
>>> from phoenix_docs.sync import TreeSynchronizer
>>> synchronizer = TreeSynchronizer(Path("docs"), Path("site/src/content/docs"))
>>> result = synchronizer.full_sync()  # doctest: +SKIP
>>> sorted(result.groups)  # doctest: +SKIP
['Drafts', 'Getting Started']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ
from pathlib import Path, PurePosixPath

from . import frontmatter
from ._constants import (
    CONFIG_FILENAME,
    CONFIG_SUFFIX,
    DESCRIPTION_KEY,
    MARKDOWN_SUFFIXES,
)
from .classifier import classify
from .config import DocsConfig, load_docs_config
from .models import Group, PageEntry, group_pages
from .patterns import is_excluded_path, should_exclude

if typ.TYPE_CHECKING:
    from .classifier import Classification

logger = logging.getLogger(__name__)

SyncAction = typ.Literal["markdown", "asset", "skipped"]


class DocsSyncError(RuntimeError):
    """Base class for failures raised by the sync engine."""


class SyncError(DocsSyncError):
    """Raised when a sync cannot run safely (for example, overlapping trees)."""


class SourceNotFoundError(DocsSyncError, FileNotFoundError):
    """Raised when the docs source directory does not exist."""


@dc.dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Result of syncing one source file."""

    action: SyncAction
    source_path: str
    destination: Path | None = None
    page: PageEntry | None = None


@dc.dataclass(slots=True)
class SyncResult:
    """Pages discovered by a full sync, in discovery order."""

    pages: list[PageEntry] = dc.field(default_factory=list)
    assets: list[Path] = dc.field(default_factory=list)

    @property
    def groups(self) -> dict[str, Group]:
        """Return the discovered groups keyed by label."""
        return group_pages(self.pages)

    @property
    def index_page(self) -> PageEntry | None:
        """Return the root index page when the source tree has one."""
        return next((page for page in self.pages if page.group is None), None)


def is_markdown(name: str) -> bool:
    """Return True for ``.md`` and ``.mdx`` filenames."""
    return name.endswith(MARKDOWN_SUFFIXES)


def is_config_file(name: str) -> bool:
    """Return True for ``.json`` files, which are reserved for configuration."""
    return name.endswith(CONFIG_SUFFIX)


class TreeSynchronizer:
    """Sync a docs source tree into a grouped destination tree."""

    def __init__(
        self,
        source_dir: Path,
        dest_dir: Path,
        *,
        config: DocsConfig | None = None,
        config_path: Path | None = None,
    ) -> None:
        """Initialize the synchronizer.

        Parameters
        ----------
        source_dir : Path
            Root of the authored docs tree.
        dest_dir : Path
            Directory the site generator reads content from. It is deleted and
            recreated by every full sync.
        config : DocsConfig, optional
            Fixed configuration. When ``None`` (default) the configuration is
            read from ``config_path`` and re-read before each full sync.
        config_path : Path, optional
            Location of ``docs.json``; defaults to ``source_dir / "docs.json"``.
        """
        self.source_dir = source_dir
        self.dest_dir = dest_dir
        self.config_path = config_path or source_dir / CONFIG_FILENAME
        self._pinned_config = config
        self.config = config or load_docs_config(self.config_path)

    def reload_config(self) -> DocsConfig:
        """Re-read ``docs.json`` unless the configuration was pinned."""
        if self._pinned_config is None:
            self.config = load_docs_config(self.config_path)
        return self.config

    def full_sync(self) -> SyncResult:
        """Rebuild the destination tree from the current source tree.

        Returns
        -------
        SyncResult
            Every synced page plus the copied asset paths.

        Raises
        ------
        SourceNotFoundError
            If the source directory does not exist.
        SyncError
            If the destination overlaps the source tree.
        OSError
            Propagated from filesystem reads, writes, and deletes.
        """
        if not self.source_dir.is_dir():
            msg = f"Source directory not found: {self.source_dir}"
            raise SourceNotFoundError(msg)
        self._guard_destination()
        config = self.reload_config()
        logger.info("Syncing docs from %s to %s", self.source_dir, self.dest_dir)
        logger.info("Excluding: %s", ", ".join(config.exclude) or "(nothing)")

        if self.dest_dir.exists():
            shutil.rmtree(self.dest_dir)
        self.dest_dir.mkdir(parents=True, exist_ok=True)

        result = SyncResult()
        self._sync_directory(self.source_dir, PurePosixPath(), result)
        groups = result.groups
        _warn_slug_collisions(groups)
        logger.info(
            "Found %d sidebar groups: %s", len(groups), ", ".join(groups) or "(none)"
        )
        return result

    def sync_file(self, path: Path) -> SyncOutcome:
        """Sync a single source file into the destination tree.

        Parameters
        ----------
        path : Path
            File inside the source tree, absolute or relative to it.

        Returns
        -------
        SyncOutcome
            What was done; ``action == "skipped"`` for excluded paths, ``.json``
            files, directories, and files that no longer exist.
        """
        relative = self.relative_path(path)
        if relative is None:
            return SyncOutcome("skipped", str(path))
        source = self.source_dir / relative
        if is_excluded_path(relative, self.config.exclude) or not source.is_file():
            return SyncOutcome("skipped", relative.as_posix())
        return self._sync_entry(source, relative)

    def _sync_directory(
        self, directory: Path, relative: PurePosixPath, result: SyncResult
    ) -> None:
        for entry in sorted(directory.iterdir(), key=lambda item: item.name):
            if should_exclude(entry.name, self.config.exclude):
                logger.debug("Skipping excluded %s", relative / entry.name)
                continue
            entry_relative = relative / entry.name
            if entry.is_dir():
                self._sync_directory(entry, entry_relative, result)
                continue
            outcome = self._sync_entry(entry, entry_relative)
            if outcome.page is not None:
                result.pages.append(outcome.page)
            elif outcome.action == "asset" and outcome.destination is not None:
                result.assets.append(outcome.destination)

    def _sync_entry(self, source: Path, relative: PurePosixPath) -> SyncOutcome:
        if is_markdown(relative.name):
            return self._sync_markdown(source, relative)
        if is_config_file(relative.name):
            return SyncOutcome("skipped", relative.as_posix())
        destination = self.dest_dir / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        return SyncOutcome("asset", relative.as_posix(), destination)

    def _sync_markdown(self, source: Path, relative: PurePosixPath) -> SyncOutcome:
        text = source.read_bytes().decode("utf-8", errors="replace")
        document, body = frontmatter.parse(text)
        classification = classify(document, relative, self.config)
        destination = self._markdown_destination(relative, classification)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(
            frontmatter.render(classification.frontmatter, body),
            encoding="utf-8",
            newline="",
        )
        page = _page_entry(relative, destination, self.dest_dir, classification)
        return SyncOutcome("markdown", relative.as_posix(), destination, page)

    def _markdown_destination(
        self, relative: PurePosixPath, classification: Classification
    ) -> Path:
        if classification.directory:
            return self.dest_dir / classification.directory / relative.name
        return self.dest_dir / relative.name

    def relative_path(self, path: Path) -> PurePosixPath | None:
        """Return ``path`` relative to the source root, or None if outside it."""
        if not path.is_absolute():
            return PurePosixPath(path.as_posix())
        try:
            relative = path.relative_to(self.source_dir)
        except ValueError:
            try:
                relative = path.resolve().relative_to(self.source_dir.resolve())
            except ValueError:
                return None
        return PurePosixPath(relative.as_posix())

    def _guard_destination(self) -> None:
        source = self.source_dir.resolve()
        dest = self.dest_dir.resolve()
        if dest == source or dest in source.parents:
            msg = (
                f"Destination {self.dest_dir} would overwrite the source tree "
                f"{self.source_dir}"
            )
            raise SyncError(msg)


def _page_entry(
    relative: PurePosixPath,
    destination: Path,
    dest_root: Path,
    classification: Classification,
) -> PageEntry:
    slug = destination.relative_to(dest_root).with_suffix("").as_posix()
    description = classification.frontmatter.get(DESCRIPTION_KEY)
    return PageEntry(
        source_path=relative.as_posix(),
        slug=slug,
        title=classification.title,
        group=classification.group,
        description=str(description) if description not in (None, "") else None,
        position=classification.position,
        plan_date=classification.plan_date,
    )


def _warn_slug_collisions(groups: typ.Mapping[str, Group]) -> None:
    """Log distinct group labels that share one destination directory."""
    by_slug: dict[str, list[str]] = {}
    for label, group in groups.items():
        by_slug.setdefault(group.slug, []).append(label)
    for slug, labels in by_slug.items():
        if len(labels) > 1:
            logger.warning(
                "Groups %s share the directory '%s' and will be merged",
                ", ".join(repr(label) for label in labels),
                slug,
            )


__all__ = [
    "DocsSyncError",
    "SourceNotFoundError",
    "SyncError",
    "SyncOutcome",
    "SyncResult",
    "TreeSynchronizer",
    "is_config_file",
    "is_markdown",
]
