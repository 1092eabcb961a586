"""Directory of per-language JSON files backing a table collection."""

import json
from pathlib import Path
from typing import Optional

from ..errors import LocalizerError
from .collection import StringTable, TableCollection


class TableStore:
    """Reads and writes a collection stored as one <language>.json file per table.

    Each file holds a flat JSON object mapping keys to text.
    """

    SUFFIX = ".json"

    def load(self, directory: Path, source_language: Optional[str] = None) -> TableCollection:
        """Load every table in a directory.

        Files are read in sorted order; the source language, when given and
        present, is placed first so that it is the default source.

        Args:
            directory: Directory containing <language>.json files.
            source_language: Language to list first.

        Returns:
            TableCollection named after the directory.
        """
        directory = Path(directory)
        paths = sorted(directory.glob(f"*{self.SUFFIX}"))
        if source_language:
            paths.sort(key=lambda p: p.stem != source_language)

        tables = [StringTable(path.stem, self.read_file(path)) for path in paths]
        return TableCollection(directory.name, tables)

    def read_file(self, path: Path) -> dict[str, str]:
        """Read one table file.

        Raises:
            LocalizerError: If the file is not a flat JSON object of strings.
        """
        raw = path.read_bytes()

        # utf-8-sig also handles files saved with a BOM
        try:
            data = json.loads(raw.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LocalizerError(f"Cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise LocalizerError(f"{path} must contain a JSON object")

        values = {}
        for key, value in data.items():
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise LocalizerError(f"{path}: value for {key!r} is not a string")
            values[key] = value
        return values

    def write_table(self, table: StringTable, directory: Path) -> Path:
        """Write one table, creating the directory if needed."""
        path = Path(directory) / f"{table.language}{self.SUFFIX}"
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(table.to_dict(), ensure_ascii=False, indent=2)
        path.write_text(content + "\n", encoding="utf-8")
        return path

    def save(
        self,
        collection: TableCollection,
        directory: Path,
        languages: Optional[list[str]] = None
    ) -> list[Path]:
        """Write tables of a collection back to a directory.

        Args:
            collection: The collection to write.
            directory: Output directory.
            languages: Only write these languages (default: all tables).

        Returns:
            List of paths that were written.
        """
        written = []
        for table in collection.tables:
            if languages is not None and table.language not in languages:
                continue
            written.append(self.write_table(table, directory))
        return written
