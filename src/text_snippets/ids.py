"""Stable snippet identifiers.

A :class:`SnippetId` is an opaque, hashable token naming one snippet in a
:class:`~text_snippets.registry.SnippetLibrary`.  The id whose string is
empty is the distinguished :data:`NULL_ID`, meaning "no snippet".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, order=True, slots=True)
class SnippetId:
    """Identifier of one snippet.

    Attributes:
        value: The identifier string as written in content data
               (e.g. ``"note_rusty_key"``).  Empty for :data:`NULL_ID`.
    """

    value: str = ""

    def is_null(self) -> bool:
        """Return ``True`` for the null id."""
        return not self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_json(cls, raw: Any) -> SnippetId:
        """Build an id from a parsed content value.

        Raises:
            TypeError: If *raw* is not a string.
        """
        if not isinstance(raw, str):
            raise TypeError(f"snippet id must be a string, got {type(raw).__name__}")
        return cls(raw)


#: The "no snippet" identifier.
NULL_ID = SnippetId()
