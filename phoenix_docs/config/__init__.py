"""Load and validate the ``docs.json`` configuration for documentation syncs.

This subpackage reads the project's ``docs.json`` file, checks each field
against the declared types in :class:`DocsConfig`, and substitutes defaults
for anything missing or malformed. The primary entry point is
:func:`load_docs_config`; it never raises for bad configuration so that a
typo cannot stop a docs build.

Examples
--------
>>> from pathlib import Path
>>> from phoenix_docs.config import load_docs_config
>>> config = load_docs_config(Path("docs/docs.json"))  # doctest: +SKIP
>>> config.group_order  # doctest: +SKIP
('Getting Started', 'Guide', 'Reference')
"""

from .loader import load_docs_config
from .models import SIDEBAR_MODES, DocsConfig, SidebarMode

__all__ = [
    "SIDEBAR_MODES",
    "DocsConfig",
    "SidebarMode",
    "load_docs_config",
]
