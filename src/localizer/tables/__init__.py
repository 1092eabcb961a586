"""String tables, entry resolution and file storage."""

from .collection import StringTable, TableCollection
from .models import Entry, TranslationMetadata
from .resolver import resolve_entries, resolve_source, resolve_target_languages
from .store import TableStore

__all__ = [
    "Entry",
    "StringTable",
    "TableCollection",
    "TableStore",
    "TranslationMetadata",
    "resolve_entries",
    "resolve_source",
    "resolve_target_languages",
]
