"""Tests for string tables, entry resolution and the JSON store."""

import json
import logging

import pytest

from localizer.errors import LocalizerError
from localizer.tables import (
    Entry,
    StringTable,
    TableCollection,
    TableStore,
    TranslationMetadata,
    resolve_entries,
    resolve_source,
    resolve_target_languages,
)
from localizer.tables.resolver import find_missing_keys


@pytest.fixture
def collection():
    """Create a collection with an English source and partial targets."""
    return TableCollection.from_dict("Menu", {
        "en": {"a": "hi", "b": "bye", "c": ""},
        "fr": {"a": "salut"},
        "de": {"a": "", "b": "tschüss"},
    })


class TestStringTable:
    """Tests for StringTable and TableCollection."""

    def test_get_and_upsert(self):
        """Test reading and writing keys."""
        table = StringTable("de", {"a": "Hallo"})
        assert table.get("a") == "Hallo"
        assert table.get("missing") is None

        table.upsert("a", "Servus")
        table.upsert("b", "Tschüss", TranslationMetadata(confidence=0.95))

        assert table.to_dict() == {"a": "Servus", "b": "Tschüss"}
        assert table.get_metadata("a") is None
        assert table.get_metadata("b").confidence == 0.95

    def test_shared_keys_in_table_order(self, collection):
        """Test the shared key set is stable and first-seen ordered."""
        collection.get_table("de").upsert("z", "extra")
        assert collection.keys == ["a", "b", "c", "z"]

    def test_add_table(self, collection):
        """Test adding a language creates an empty table once."""
        table = collection.add_table("es")
        assert len(table) == 0
        assert collection.add_table("es") is table
        assert collection.languages == ["en", "fr", "de", "es"]


class TestTranslationMetadata:
    """Tests for TranslationMetadata."""

    def test_update_flags_low_confidence(self):
        """Test low confidence translations need review."""
        metadata = TranslationMetadata()
        metadata.update(0.6, "echo", "2024-01-01T00:00:00+00:00")
        assert metadata.needs_review is True
        assert metadata.quality_description == "Medium Quality"

        metadata.mark_reviewed()
        assert metadata.needs_review is False

    def test_confidence_clamped(self):
        """Test confidence stays within 0 and 1."""
        assert TranslationMetadata(confidence=1.7).confidence == 1.0
        assert TranslationMetadata(confidence=-1).quality_description == "Low Quality"

    def test_quality_levels(self):
        """Test quality descriptions."""
        assert TranslationMetadata(confidence=0.95).quality_description == "High Quality"
        assert TranslationMetadata(confidence=0.7).quality_description == "Good Quality"


class TestResolveSource:
    """Tests for source table resolution."""

    def test_auto_uses_first_table(self, collection):
        """Test Auto and empty values pick the first table."""
        for configured in ("Auto", "", None):
            source = resolve_source(collection, configured)
            assert source.language == "en"
            assert source.table is collection.get_table("en")

    def test_configured_language(self, collection):
        """Test a configured code picks the matching table."""
        source = resolve_source(collection, "fr")
        assert source.language == "fr"
        assert source.fallback is False

    def test_unknown_language_falls_back(self, collection, caplog):
        """Test an unknown code falls back to the first table with a warning."""
        with caplog.at_level(logging.WARNING, logger="localizer.tables.resolver"):
            source = resolve_source(collection, "ja")

        assert source.table is collection.get_table("en")
        assert source.language == "en"
        assert source.fallback is True
        assert "ja" in caplog.text

    def test_empty_collection(self):
        """Test an empty collection resolves to no table."""
        source = resolve_source(TableCollection("Empty"), "Auto")
        assert source.table is None


class TestResolveTargets:
    """Tests for target language resolution."""

    def test_all_tables_except_source(self, collection):
        """Test auto-discovery skips the source language."""
        assert resolve_target_languages(collection, "en") == ["fr", "de"]

    def test_explicit_list_wins(self, collection):
        """Test explicit targets override configured ones."""
        targets = resolve_target_languages(collection, "en", ["es", "en", "es"], ["de"])
        assert targets == ["es"]

    def test_configured_list(self, collection):
        """Test configured targets are used when nothing explicit is given."""
        assert resolve_target_languages(collection, "en", [], ["de", "it"]) == ["de", "it"]


class TestResolveEntries:
    """Tests for resolve_entries."""

    def test_only_missing(self):
        """Test only keys absent or empty in the target are returned."""
        collection = TableCollection.from_dict("T", {
            "en": {"a": "hi", "b": "bye"},
            "fr": {"a": "salut"},
        })
        source = resolve_source(collection, "en")

        entries = resolve_entries(collection, source.table, "fr", only_missing=True)

        assert entries == [Entry("b", "bye")]

    def test_empty_target_value_counts_as_missing(self, collection):
        """Test empty target text is treated as missing."""
        source = resolve_source(collection, "en")
        entries = resolve_entries(collection, source.table, "de", only_missing=True)
        assert [e.key for e in entries] == ["a"]

    def test_all_entries_skip_empty_source(self, collection):
        """Test every non-empty source entry is returned without only_missing."""
        source = resolve_source(collection, "en")
        entries = resolve_entries(collection, source.table, "fr", only_missing=False)
        assert entries == [Entry("a", "hi"), Entry("b", "bye")]

    def test_missing_target_table(self, collection):
        """Test a language without a table needs every entry."""
        source = resolve_source(collection, "en")
        entries = resolve_entries(collection, source.table, "es", only_missing=True)
        assert [e.key for e in entries] == ["a", "b"]

    def test_find_missing_keys(self, collection):
        """Test the per-language missing report."""
        assert find_missing_keys(collection) == {"fr": ["b"], "de": ["a"]}


class TestTableStore:
    """Tests for TableStore."""

    @pytest.fixture
    def store(self):
        """Create store instance."""
        return TableStore()

    def test_load_source_first(self, store, tmp_path):
        """Test files load sorted, with the source language first."""
        (tmp_path / "de.json").write_text('{"a": "Hallo"}', encoding="utf-8")
        (tmp_path / "en.json").write_text('{"a": "Hello", "b": "Bye"}', encoding="utf-8")

        collection = store.load(tmp_path, source_language="en")

        assert collection.languages == ["en", "de"]
        assert collection.get_table("en").to_dict() == {"a": "Hello", "b": "Bye"}
        assert collection.name == tmp_path.name

    def test_null_values_are_empty(self, store, tmp_path):
        """Test null values load as empty text."""
        path = tmp_path / "fr.json"
        path.write_text('{"a": null}', encoding="utf-8")
        assert store.read_file(path) == {"a": ""}

    def test_invalid_file(self, store, tmp_path):
        """Test malformed files raise LocalizerError."""
        bad = tmp_path / "en.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(LocalizerError):
            store.read_file(bad)

        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(LocalizerError):
            store.read_file(bad)

    def test_save_selected_languages(self, store, tmp_path):
        """Test only requested languages are written."""
        collection = TableCollection.from_dict("T", {
            "en": {"a": "Hello"},
            "ja": {"a": "こんにちは"},
        })

        written = store.save(collection, tmp_path / "out", languages=["ja"])

        assert written == [tmp_path / "out" / "ja.json"]
        content = written[0].read_text(encoding="utf-8")
        assert "こんにちは" in content
        assert json.loads(content) == {"a": "こんにちは"}
