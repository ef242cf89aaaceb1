"""Common literal values used across phoenix_docs.

These constants keep filenames, reserved group labels, and frontmatter keys
centralized so the synchronizer, sidebar generator, and tests can import the
same values without drifting. Intended for internal use within the
phoenix_docs package.

Examples
--------
>>> from phoenix_docs import _constants
>>> _constants.CONFIG_FILENAME
'docs.json'
>>> _constants.DRAFTS_GROUP
'Drafts'
"""

CONFIG_FILENAME = "docs.json"
SIDEBAR_FILENAME = "sidebar.generated.mjs"

DEFAULT_EXCLUDES: tuple[str, ...] = ("_*",)
DEFAULT_TITLE = "Documentation"
DEFAULT_DESCRIPTION = "Project documentation"

DRAFTS_GROUP = "Drafts"
PLANS_GROUP = "Plans"
INTRODUCTION_LABEL = "Introduction"

MARKDOWN_SUFFIXES: tuple[str, ...] = (".md", ".mdx")
CONFIG_SUFFIX = ".json"
INDEX_FILENAMES: frozenset[str] = frozenset({"index.md", "index.mdx"})

DEFAULT_POSITION = 999

TITLE_KEY = "title"
DESCRIPTION_KEY = "description"
GROUP_KEY = "sidebar_group"
POSITION_KEY = "sidebar_position"
SIDEBAR_KEY = "sidebar"
ORDER_KEY = "order"
