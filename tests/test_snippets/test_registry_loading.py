"""Unit tests for SnippetLibrary loading and the load-time error taxonomy."""

import logging

import pytest

from text_snippets.errors import (
    DuplicateIdError,
    InvalidIdError,
    MalformedEntryError,
    SnippetLoadError,
)
from text_snippets.ids import SnippetId
from text_snippets.registry import SnippetLibrary
from text_snippets.translation import Translation

# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestLoad:
    """Records are routed into the category and id indices."""

    def test_array_mixes_anonymous_and_identified(self, greetings):
        assert greetings.category_size("<greeting>") == (2, 1)
        assert greetings.category_size("<title>") == (0, 2)

    def test_single_record_with_id(self, library):
        library.load({"category": "note", "id": "note_a", "text": "A note."})
        assert library.get_by_id(SnippetId("note_a")) == Translation(raw="A note.")
        assert library.category_size("note") == (1, 0)

    def test_single_record_without_id_is_anonymous(self, library):
        library.load({"category": "note", "text": "A note."})
        assert library.category_size("note") == (0, 1)
        assert len(library) == 0

    def test_ids_keep_load_order(self, library):
        library.add_entries("c", [{"id": "z", "text": "Z"}, {"id": "a", "text": "A"}])
        assert [sid.value for sid, _ in library.list_by_category("c")] == ["z", "a"]

    def test_add_entries_accepts_single_record(self, library):
        library.add_entries("c", {"id": "solo", "text": "Solo."})
        assert library.list_by_category("c") == [(SnippetId("solo"), "Solo.")]

    def test_incremental_loads_extend_category(self, library):
        library.load({"category": "c", "text": ["one"]})
        library.load({"category": "c", "text": [{"id": "two", "text": "two"}]})
        assert library.category_size("c") == (1, 1)

    def test_name_defaults_to_empty_translation(self, greetings):
        name = greetings.get_name_by_id(SnippetId("greet_gruff"))
        assert name is not None
        assert name.empty()

    def test_name_is_stored(self, greetings):
        assert greetings.get_name_by_id(SnippetId("greet_formal")).translated() == "Formal"

    def test_effect_is_stored_only_when_declared(self, library):
        effect = {"u_add_var": "seen", "value": "yes"}
        library.add_entry("c", {"id": "a", "text": "A", "effect_on_examine": effect})
        library.add_entry("c", {"id": "b", "text": "B"})
        assert library.get_effect_by_id(SnippetId("a")) == effect
        assert library.get_effect_by_id(SnippetId("b")) is None

    def test_effect_is_copied(self, library):
        effect = {"u_add_var": "seen"}
        library.add_entry("c", {"id": "a", "text": "A", "effect_on_examine": effect})
        effect["u_add_var"] = "changed"
        assert library.get_effect_by_id(SnippetId("a")) == {"u_add_var": "seen"}

    def test_custom_effect_parser(self):
        library = SnippetLibrary(effect_parser=lambda raw: ("parsed", raw))
        library.add_entry("c", {"id": "a", "text": "A", "effect_on_examine": 7})
        assert library.get_effect_by_id(SnippetId("a")) == ("parsed", 7)

    def test_text_with_context(self, library):
        library.add_entry("c", {"id": "a", "text": {"str": "Open", "ctxt": "door"}})
        assert library.get_by_id(SnippetId("a")).context == "door"


# ---------------------------------------------------------------------------
# Error cases
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestLoadErrors:
    def test_duplicate_id_raises(self, greetings):
        with pytest.raises(DuplicateIdError, match="greet_formal"):
            greetings.add_entry("<other>", {"id": "greet_formal", "text": "Again."})

    def test_duplicate_id_within_one_array(self, library):
        with pytest.raises(DuplicateIdError):
            library.add_entries("c", [{"id": "a", "text": "A"}, {"id": "a", "text": "B"}])

    def test_duplicate_id_after_clear_succeeds(self, greetings):
        greetings.clear()
        greetings.add_entry("<greeting>", {"id": "greet_formal", "text": "Again."})
        assert greetings.has_id(SnippetId("greet_formal"))

    def test_null_id_raises(self, library):
        with pytest.raises(InvalidIdError):
            library.add_entry("c", {"id": "", "text": "A"})

    def test_failed_duplicate_leaves_indices_untouched(self, greetings):
        with pytest.raises(DuplicateIdError):
            greetings.add_entry("<greeting>", {"id": "greet_gruff", "text": "Again."})
        assert greetings.category_size("<greeting>") == (2, 1)
        assert greetings.get_by_id(SnippetId("greet_gruff")).raw == "What?"

    def test_missing_text_raises(self, library):
        with pytest.raises(MalformedEntryError, match="'text'"):
            library.add_entry("c", {"id": "a"})

    def test_missing_text_on_top_level_record(self, library):
        with pytest.raises(MalformedEntryError):
            library.load({"category": "c"})

    def test_missing_category_raises(self, library):
        with pytest.raises(MalformedEntryError, match="category"):
            library.load({"text": "A"})

    def test_non_string_id_raises(self, library):
        with pytest.raises(MalformedEntryError, match="'id'"):
            library.add_entry("c", {"id": 5, "text": "A"})

    def test_bad_name_raises(self, library):
        with pytest.raises(MalformedEntryError, match="'name'"):
            library.add_entry("c", {"id": "a", "text": "A", "name": 3})

    def test_bad_array_element_raises(self, library):
        with pytest.raises(MalformedEntryError, match="entry #1"):
            library.add_entries("c", ["fine", 12])

    def test_errors_share_base_class(self, library):
        with pytest.raises(SnippetLoadError) as excinfo:
            library.add_entry("c", {"id": "", "text": "A"})
        assert excinfo.value.context.category == "c"
        assert excinfo.value.context.field == "id"


# ---------------------------------------------------------------------------
# Migration index invalidation
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestInvalidation:
    def test_every_load_entry_point_invalidates(self, greetings):
        for load in (
            lambda: greetings.load({"category": "x", "text": []}),
            lambda: greetings.add_entries("x", []),
            lambda: greetings.add_entry("x", {"text": "X"}),
        ):
            greetings.migrate_hash_to_id(0)
            assert greetings.migration_index_built
            load()
            assert not greetings.migration_index_built

    def test_load_after_migration_logs_warning(self, greetings, caplog):
        greetings.migrate_hash_to_id(0)
        with caplog.at_level(logging.WARNING, logger="text_snippets.registry"):
            greetings.add_entries("x", ["X"])
        assert "after SnippetLibrary.migrate_hash_to_id" in caplog.text

    def test_load_before_migration_is_silent(self, library, caplog):
        with caplog.at_level(logging.WARNING, logger="text_snippets.registry"):
            library.load({"category": "x", "text": ["X"]})
        assert caplog.text == ""

    def test_failed_load_still_invalidates(self, greetings):
        greetings.migrate_hash_to_id(0)
        with pytest.raises(MalformedEntryError):
            greetings.add_entry("x", {})
        assert not greetings.migration_index_built

    def test_clear_resets_everything(self, greetings):
        greetings.add_entry("c", {"id": "e", "text": "E", "effect_on_examine": {}})
        greetings.migrate_hash_to_id(0)
        greetings.clear()
        assert greetings.categories() == []
        assert len(greetings) == 0
        assert greetings.get_name_by_id(SnippetId("greet_formal")) is None
        assert greetings.get_effect_by_id(SnippetId("e")) is None
        assert not greetings.migration_index_built
