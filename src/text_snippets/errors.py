"""Typed exceptions raised while loading snippet content.

Load-time failures are fatal for the entry being loaded and carry a
:class:`SnippetLoadContext` so the offending category, field and entry can
be reported precisely.  Query methods on the library never raise; they
return ``None``, :data:`~text_snippets.ids.NULL_ID` or an empty
translation instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class SnippetLoadContext:
    """Where a load failure happened.

    Attributes:
        category: Snippet category being loaded.
        field:    Record field at fault (for example ``"id"``), if known.
        entry_id: Id of the offending entry, if it had one.
        source:   File the record came from, when loaded from disk.
    """

    category: str | None = None
    field: str | None = None
    entry_id: str | None = None
    source: str | None = None

    def describe(self) -> str:
        parts = []
        if self.source:
            parts.append(self.source)
        if self.category is not None:
            parts.append(f"category {self.category!r}")
        if self.entry_id:
            parts.append(f"id {self.entry_id!r}")
        if self.field:
            parts.append(f"field {self.field!r}")
        return ", ".join(parts)


class SnippetError(Exception):
    """Base exception for the package."""


class SnippetLoadError(SnippetError):
    """A snippet record could not be loaded.

    Args:
        reason:  Human-readable description of the problem.
        context: Structured location of the failure.
    """

    def __init__(self, reason: str, *, context: SnippetLoadContext | None = None) -> None:
        self.reason = reason
        self.context = context or SnippetLoadContext()
        where = self.context.describe()
        super().__init__(f"{where}: {reason}" if where else reason)

    def with_source(self, source: str) -> SnippetLoadError:
        """Return a copy of this error attributed to *source*."""
        return type(self)(self.reason, context=replace(self.context, source=source))


class MalformedEntryError(SnippetLoadError):
    """A required field is missing or has the wrong type."""


class InvalidIdError(SnippetLoadError):
    """An ``id`` field resolved to the null id."""


class DuplicateIdError(SnippetLoadError):
    """An ``id`` is already registered."""
