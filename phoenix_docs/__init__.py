"""Sync authored markdown docs into a static-site generator's content tree.

This package routes every page in a ``docs/`` folder into a sidebar group
based on its frontmatter, mirrors the tree into the site generator's content
directory, and writes the sidebar module the generator imports. The
``phoenix-docs`` console script drives it.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from phoenix_docs import main
>>> main()  # doctest: +SKIP
>>> from phoenix_docs import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
