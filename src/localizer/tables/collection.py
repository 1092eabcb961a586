"""In-memory string tables, one per language, grouped in a collection."""

from typing import Iterator, Optional

from .models import TranslationMetadata


class StringTable:
    """Key to text mapping for a single language.

    Keys keep their insertion order, which makes iteration stable.
    """

    def __init__(self, language: str, values: Optional[dict[str, str]] = None):
        """Initialize the table.

        Args:
            language: Language code of this table (e.g., "de").
            values: Initial key to text mapping.
        """
        self.language = language
        self._values: dict[str, str] = dict(values or {})
        self._metadata: dict[str, TranslationMetadata] = {}

    def get(self, key: str) -> Optional[str]:
        """Get the text for a key, or None if the key is absent."""
        return self._values.get(key)

    def upsert(
        self,
        key: str,
        text: str,
        metadata: Optional[TranslationMetadata] = None
    ) -> None:
        """Insert or replace the text for a key.

        Args:
            key: The string key.
            text: New text for the key.
            metadata: Optional information about how the text was produced.
        """
        self._values[key] = text
        if metadata is not None:
            self._metadata[key] = metadata

    def get_metadata(self, key: str) -> Optional[TranslationMetadata]:
        return self._metadata.get(key)

    def keys(self) -> list[str]:
        return list(self._values)

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"StringTable({self.language!r}, {len(self)} entries)"


class TableCollection:
    """An ordered set of language tables sharing one key space."""

    def __init__(self, name: str, tables: Optional[list[StringTable]] = None):
        """Initialize the collection.

        Args:
            name: Display name of the collection.
            tables: Tables in declared order. The first table is the default source.
        """
        self.name = name
        self._tables: dict[str, StringTable] = {}
        for table in tables or []:
            self._tables[table.language] = table

    @property
    def tables(self) -> list[StringTable]:
        return list(self._tables.values())

    @property
    def languages(self) -> list[str]:
        return list(self._tables)

    @property
    def keys(self) -> list[str]:
        """Shared key set, in first-seen order across tables in declared order."""
        seen: dict[str, None] = {}
        for table in self._tables.values():
            for key in table.keys():
                seen.setdefault(key, None)
        return list(seen)

    def get_table(self, language: str) -> Optional[StringTable]:
        return self._tables.get(language)

    def add_table(self, language: str) -> StringTable:
        """Create an empty table for a language, or return the existing one."""
        table = self._tables.get(language)
        if table is None:
            table = StringTable(language)
            self._tables[language] = table
        return table

    def __iter__(self) -> Iterator[StringTable]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self._tables)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, dict[str, str]]) -> "TableCollection":
        """Build a collection from {language: {key: text}}, keeping dict order."""
        return cls(name, [StringTable(lang, values) for lang, values in data.items()])

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {table.language: table.to_dict() for table in self._tables.values()}
