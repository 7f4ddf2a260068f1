"""Snippet library — category index, id index and hash migration.

The :class:`SnippetLibrary` owns every loaded snippet.  Content is fed in
during a loading phase (:meth:`SnippetLibrary.load`,
:meth:`~SnippetLibrary.add_entries`, :meth:`~SnippetLibrary.add_entry`);
afterwards the library is only queried.

Two indices are kept consistent on every load:

- the **category index** maps a category name to a :class:`CategorySnippets`
  bucket holding identified snippet ids and anonymous texts, in load order;
- the **id index** maps each :class:`~text_snippets.ids.SnippetId` to its
  text, plus sparse maps for the optional display name and
  ``effect_on_examine`` payload.

A third, derived index maps legacy text hashes back to ids.  It is built
lazily by :meth:`SnippetLibrary.migrate_hash_to_id` and dropped by every
load call, so a rebuild always reflects the current id index.

Design notes:
- Loading a record after the migration index was built is logged as a
  warning.  It usually means content is loaded in the wrong order upstream;
  the index is still invalidated and rebuilt correctly on the next lookup.
- Effect payloads are opaque.  The library passes the raw value through the
  ``effect_parser`` given at construction and stores whatever it returns.
- Seeded draws use :class:`random.Random` (Mersenne Twister), which is
  reproducible across runs and platforms for integer seeds.  Changing the
  generator changes which snippet every stored seed resolves to.
"""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from text_snippets.errors import (
    DuplicateIdError,
    InvalidIdError,
    MalformedEntryError,
    SnippetLoadContext,
)
from text_snippets.ids import NULL_ID, SnippetId
from text_snippets.translation import Translation

logger = logging.getLogger(__name__)

#: Returned by :meth:`SnippetLibrary.get_ref_by_id` for unknown ids.
EMPTY_TRANSLATION = Translation()

EffectParser = Callable[[Any], Any]

_SEED_BITS = 32


@dataclass(slots=True)
class CategorySnippets:
    """Snippets belonging to one category.

    Attributes:
        ids:   Identified snippets, in load order.  Every id is a key of the
               library's id index.
        no_id: Anonymous snippets, in load order.
    """

    ids: list[SnippetId] = field(default_factory=list)
    no_id: list[Translation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids) + len(self.no_id)


class SnippetLibrary:
    """Registry of text snippets grouped by category.

    Args:
        rng:           Source for unseeded draws.  Defaults to a fresh
                       :class:`random.Random`; pass a seeded one for
                       reproducible tests.
        effect_parser: Converts a raw ``effect_on_examine`` value into the
                       stored payload.  Defaults to a deep copy.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        effect_parser: EffectParser | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._effect_parser = effect_parser or copy.deepcopy
        self._snippets_by_category: dict[str, CategorySnippets] = {}
        self._snippets_by_id: dict[SnippetId, Translation] = {}
        self._effect_by_id: dict[SnippetId, Any] = {}
        self._name_by_id: dict[SnippetId, Translation] = {}
        self._hash_migration: dict[int, SnippetId] | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, record: Mapping[str, Any]) -> None:
        """Load one top-level snippet record.

        The record needs a ``category`` string and a ``text`` value.  An
        array ``text`` holds several entries; anything else makes the
        record itself a single entry.

        Raises:
            MalformedEntryError: Missing or mistyped ``category``/``text``.
            InvalidIdError:      An entry has a null ``id``.
            DuplicateIdError:    An entry reuses a registered ``id``.
        """
        self._invalidate_migration("load")
        if not isinstance(record, Mapping):
            raise MalformedEntryError(
                f"snippet record must be a mapping, got {type(record).__name__}"
            )
        category = record.get("category")
        if not isinstance(category, str):
            raise MalformedEntryError(
                "missing or non-string 'category'",
                context=SnippetLoadContext(field="category"),
            )
        if "text" not in record:
            raise MalformedEntryError(
                "missing required field",
                context=SnippetLoadContext(category=category, field="text"),
            )
        if isinstance(record["text"], list):
            self.add_entries(category, record["text"])
        else:
            self.add_entry(category, record)

    def add_entries(self, category: str, entries: Iterable[Any] | Mapping[str, Any]) -> None:
        """Add a sequence of entries to *category*.

        Each element is a bare string (an anonymous snippet) or a mapping
        handled by :meth:`add_entry`.  A single mapping is added as one entry.
        """
        self._invalidate_migration("add_entries")
        if isinstance(entries, Mapping):
            self.add_entry(category, entries)
            return
        for index, entry in enumerate(entries):
            if isinstance(entry, str):
                self._category(category).no_id.append(Translation(raw=entry))
            elif isinstance(entry, Mapping):
                self.add_entry(category, entry)
            else:
                raise MalformedEntryError(
                    f"entry #{index} must be a string or mapping, got {type(entry).__name__}",
                    context=SnippetLoadContext(category=category, field="text"),
                )

    def add_entry(self, category: str, record: Mapping[str, Any]) -> None:
        """Add a single entry record to *category*.

        Raises:
            MalformedEntryError: ``text`` (or ``id``/``name``) is missing or
                                 unreadable.
            InvalidIdError:      ``id`` is the null id.
            DuplicateIdError:    ``id`` is already registered.
        """
        self._invalidate_migration("add_entry")
        text = _read_translation(record, "text", category=category, required=True)

        if "id" not in record:
            self._category(category).no_id.append(text)
            return

        try:
            snippet_id = SnippetId.from_json(record["id"])
        except TypeError as exc:
            raise MalformedEntryError(
                str(exc), context=SnippetLoadContext(category=category, field="id")
            ) from exc
        context = SnippetLoadContext(category=category, field="id", entry_id=snippet_id.value)
        if snippet_id.is_null():
            raise InvalidIdError("null snippet id specified", context=context)
        if snippet_id in self._snippets_by_id:
            raise DuplicateIdError("duplicate snippet id", context=context)

        name = _read_translation(
            record, "name", category=category, entry_id=snippet_id.value, required=False
        )
        effect = None
        if "effect_on_examine" in record:
            effect = self._effect_parser(record["effect_on_examine"])

        self._category(category).ids.append(snippet_id)
        self._snippets_by_id[snippet_id] = text
        if effect is not None:
            self._effect_by_id[snippet_id] = effect
        self._name_by_id[snippet_id] = name

    def clear(self) -> None:
        """Forget every snippet and drop the migration index."""
        self._hash_migration = None
        self._snippets_by_category.clear()
        self._snippets_by_id.clear()
        self._effect_by_id.clear()
        self._name_by_id.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has_category(self, category: str) -> bool:
        return category in self._snippets_by_category

    def categories(self) -> list[str]:
        """Return all known category names, sorted."""
        return sorted(self._snippets_by_category)

    def category_size(self, category: str) -> tuple[int, int]:
        """Return ``(identified, anonymous)`` entry counts for *category*."""
        bucket = self._snippets_by_category.get(category)
        if bucket is None:
            return 0, 0
        return len(bucket.ids), len(bucket.no_id)

    def get_by_id(self, snippet_id: SnippetId) -> Translation | None:
        return self._snippets_by_id.get(snippet_id)

    def get_ref_by_id(self, snippet_id: SnippetId) -> Translation:
        """Like :meth:`get_by_id` but returns an empty translation for unknown ids."""
        return self._snippets_by_id.get(snippet_id, EMPTY_TRANSLATION)

    def get_effect_by_id(self, snippet_id: SnippetId) -> Any | None:
        return self._effect_by_id.get(snippet_id)

    def get_name_by_id(self, snippet_id: SnippetId) -> Translation | None:
        return self._name_by_id.get(snippet_id)

    def has_id(self, snippet_id: SnippetId) -> bool:
        return snippet_id in self._snippets_by_id

    # Id-bound accessors used by code holding a SnippetId.
    resolve = get_ref_by_id
    is_valid = has_id

    def __contains__(self, snippet_id: object) -> bool:
        return snippet_id in self._snippets_by_id

    def __len__(self) -> int:
        return len(self._snippets_by_id)

    def list_by_category(
        self, category: str, add_null_id: bool = False
    ) -> list[tuple[SnippetId, str]]:
        """List the identified snippets of *category* with their display text.

        Anonymous snippets are not listed.  With *add_null_id* a leading
        ``(NULL_ID, "")`` "no selection" choice is added, but only when the
        category has at least one identified snippet.
        """
        bucket = self._snippets_by_category.get(category)
        if bucket is None:
            return []
        listing: list[tuple[SnippetId, str]] = []
        if add_null_id and bucket.ids:
            listing.append((NULL_ID, ""))
        for snippet_id in bucket.ids:
            listing.append((snippet_id, self.get_ref_by_id(snippet_id).translated()))
        return listing

    # ------------------------------------------------------------------
    # Random selection
    # ------------------------------------------------------------------

    def random_id_from_category(self, category: str) -> SnippetId:
        """Return a uniformly chosen id from *category*, or ``NULL_ID``."""
        bucket = self._snippets_by_category.get(category)
        if bucket is None:
            return NULL_ID
        if bucket.no_id:
            logger.warning(
                "Ids are required, but not specified for some snippets in category %s",
                category,
            )
        if not bucket.ids:
            return NULL_ID
        return self._rng.choice(bucket.ids)

    def random_from_category(self, category: str, seed: int | None = None) -> Translation | None:
        """Draw one snippet of *category*, identified or anonymous.

        All entries are equally likely.  For a given *seed* and unchanged
        category contents the result is always the same.  Without a seed a
        fresh one is drawn from the library's random source.

        Returns:
            The drawn :class:`Translation`, or ``None`` if the category is
            unknown or empty.
        """
        bucket = self._snippets_by_category.get(category)
        if bucket is None or not len(bucket):
            return None
        if seed is None:
            seed = self._rng.getrandbits(_SEED_BITS)
        index = random.Random(seed).randrange(len(bucket))
        if index < len(bucket.ids):
            return self.get_by_id(bucket.ids[index])
        return bucket.no_id[index - len(bucket.ids)]

    # ------------------------------------------------------------------
    # Tag expansion
    # ------------------------------------------------------------------

    def expand(self, text: str) -> str:
        """Replace ``<category>`` tags in *text* with random snippets.

        The first complete tag is looked up as a category name, delimiters
        included.  A drawn snippet is itself expanded before insertion, and
        so is the rest of the string.  Tags naming an empty or unknown
        category are kept verbatim.  Text without a complete tag is returned
        unchanged.
        """
        begin = text.find("<")
        if begin == -1:
            return text
        end = text.find(">", begin + 1)
        if end == -1:
            return text

        replacement = self.random_from_category(text[begin : end + 1])
        if replacement is None:
            return text[: end + 1] + self.expand(text[end + 1 :])
        return text[:begin] + self.expand(replacement.translated()) + self.expand(text[end + 1 :])

    # ------------------------------------------------------------------
    # Hash migration
    # ------------------------------------------------------------------

    @property
    def migration_index_built(self) -> bool:
        return self._hash_migration is not None

    def migrate_hash_to_id(self, old_hash: int) -> SnippetId:
        """Map a legacy text hash to the id of the snippet with that text.

        The reverse index is built on first use after any load.  When two
        texts share a hash, the snippet loaded first wins.

        Returns:
            The matching id, or ``NULL_ID`` if no snippet has that hash.
        """
        if self._hash_migration is None:
            migration: dict[int, SnippetId] = {}
            for snippet_id, text in self._snippets_by_id.items():
                legacy = text.legacy_hash()
                if legacy is not None:
                    migration.setdefault(legacy, snippet_id)
            self._hash_migration = migration
            logger.debug("Built snippet hash migration index (%d entries).", len(migration))
        return self._hash_migration.get(old_hash, NULL_ID)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _category(self, category: str) -> CategorySnippets:
        return self._snippets_by_category.setdefault(category, CategorySnippets())

    def _invalidate_migration(self, caller: str) -> None:
        if self._hash_migration is not None:
            logger.warning(
                "SnippetLibrary.%s called after SnippetLibrary.migrate_hash_to_id.", caller
            )
        self._hash_migration = None


def _read_translation(
    record: Mapping[str, Any],
    key: str,
    *,
    category: str,
    required: bool,
    entry_id: str | None = None,
) -> Translation:
    """Read *key* from *record* as a :class:`Translation`."""
    context = SnippetLoadContext(category=category, field=key, entry_id=entry_id)
    if key not in record:
        if required:
            raise MalformedEntryError("missing required field", context=context)
        return Translation()
    try:
        return Translation.from_json(record[key])
    except (TypeError, KeyError) as exc:
        raise MalformedEntryError(f"unreadable translation: {exc}", context=context) from exc
