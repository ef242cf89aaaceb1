"""Load ``docs.json`` into a typed :class:`DocsConfig`."""

from __future__ import annotations

import logging
import typing as typ

import msgspec

from .helpers import _coerce_fields
from .models import DocsConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_docs_config(path: Path) -> DocsConfig:
    """Load the JSON configuration that drives syncing and navigation.

    Parameters
    ----------
    path : Path
        Filesystem path to ``docs.json`` (normally inside the docs source
        directory).

    Returns
    -------
    DocsConfig
        Parsed configuration. Every field that is missing or has the wrong
        type keeps its default value.

    Notes
    -----
    This loader never raises for configuration problems. A missing file is
    silently replaced by defaults; unreadable JSON or a non-object top level
    is logged as a warning and also yields defaults.

    Examples
    --------
    >>> from pathlib import Path
    >>> from phoenix_docs.config import load_docs_config
    >>> load_docs_config(Path("missing/docs.json")).exclude
    ('_*',)
    """
    if not path.is_file():
        logger.debug("No configuration at %s; using defaults", path)
        return DocsConfig()

    try:
        loaded = msgspec.json.decode(path.read_bytes())
    except (OSError, msgspec.DecodeError) as exc:
        logger.warning("Could not read %s, using defaults: %s", path, exc)
        return DocsConfig()

    match loaded:
        case dict():
            return DocsConfig(**_coerce_fields(loaded, path=path))
        case _:
            logger.warning("Top-level JSON in %s must be an object; using defaults", path)
            return DocsConfig()


__all__ = ["load_docs_config"]
