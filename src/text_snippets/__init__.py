"""Text snippets — categorised, localizable text fragments.

A :class:`SnippetLibrary` holds snippets grouped by category, each either
identified by a stable :class:`SnippetId` or anonymous.  It supports seeded
random draws, recursive ``<category>`` tag expansion and migration of legacy
text-hash references to ids.

Typical usage::

    from text_snippets import SnippetLibrary

    library = SnippetLibrary()
    library.load({"category": "<greeting>", "text": ["Hello.", "Well met."]})
    library.expand("<greeting> Welcome back.")

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from text_snippets.errors import (
    DuplicateIdError,
    InvalidIdError,
    MalformedEntryError,
    SnippetError,
    SnippetLoadError,
)
from text_snippets.ids import NULL_ID, SnippetId
from text_snippets.registry import CategorySnippets, SnippetLibrary
from text_snippets.translation import Translation

try:
    __version__: str = version("text-snippets")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "NULL_ID",
    "CategorySnippets",
    "DuplicateIdError",
    "InvalidIdError",
    "MalformedEntryError",
    "SnippetError",
    "SnippetId",
    "SnippetLibrary",
    "SnippetLoadError",
    "Translation",
]
