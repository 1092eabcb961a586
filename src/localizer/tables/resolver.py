"""Resolution of source tables and of entries that need translation."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import AUTO_LANGUAGE
from .collection import StringTable, TableCollection
from .models import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSource:
    """The source language and table chosen for a run.

    Attributes:
        language: Effective source language code (None for an empty collection
            configured as "Auto").
        table: Source table, None only when the collection has no tables.
        fallback: True when the configured language had no table and the
            first table was used instead.
    """
    language: Optional[str]
    table: Optional[StringTable]
    fallback: bool = False


def is_auto(language: Optional[str]) -> bool:
    return not language or language == AUTO_LANGUAGE


def resolve_source(collection: TableCollection, configured: Optional[str]) -> ResolvedSource:
    """Pick the source table for a collection.

    "Auto" or an empty value selects the first table in declared order. A
    configured code selects the matching table, falling back to the first
    table (with a warning) when no table matches.

    Args:
        collection: The table collection.
        configured: Configured source language code or "Auto".

    Returns:
        ResolvedSource describing the choice.
    """
    tables = collection.tables

    if is_auto(configured):
        if not tables:
            return ResolvedSource(language=None, table=None)
        return ResolvedSource(language=tables[0].language, table=tables[0])

    table = collection.get_table(configured)
    if table is not None:
        return ResolvedSource(language=configured, table=table)

    if not tables:
        logger.warning(
            "Collection %r has no tables; source language %r has no entries",
            collection.name, configured
        )
        return ResolvedSource(language=configured, table=None, fallback=True)

    logger.warning(
        "No %r table in collection %r, using %r as source",
        configured, collection.name, tables[0].language
    )
    return ResolvedSource(language=tables[0].language, table=tables[0], fallback=True)


def resolve_target_languages(
    collection: TableCollection,
    source_language: Optional[str],
    explicit: Optional[Iterable[str]] = None,
    configured: Optional[Iterable[str]] = None
) -> list[str]:
    """Work out which languages a run translates into.

    The explicit list wins, then the configured list, then every table in
    the collection. The source language is never a target.

    Returns:
        Target language codes in order, without duplicates.
    """
    candidates = list(explicit or []) or list(configured or [])
    if not candidates:
        candidates = collection.languages

    targets = []
    for language in candidates:
        language = language.strip()
        if not language or language == source_language or language in targets:
            continue
        targets.append(language)
    return targets


def resolve_entries(
    collection: TableCollection,
    source_table: Optional[StringTable],
    target_language: str,
    only_missing: bool
) -> list[Entry]:
    """Collect the entries that need translating into one language.

    Keys whose source text is empty are always skipped. With only_missing,
    keys that already have non-empty text in the target table are skipped too.

    Args:
        collection: The table collection.
        source_table: The resolved source table.
        target_language: Target language code.
        only_missing: Translate only entries absent or empty in the target.

    Returns:
        Entries in the collection's shared key order.
    """
    if source_table is None:
        return []

    target_table = collection.get_table(target_language)
    entries = []

    for key in collection.keys:
        source_text = source_table.get(key)
        if not source_text:
            continue

        if only_missing and target_table is not None and target_table.get(key):
            continue

        entries.append(Entry(key=key, source_text=source_text))

    return entries


def find_missing_keys(collection: TableCollection, source_language: Optional[str] = None) -> dict[str, list[str]]:
    """Map each non-source language to the keys it is missing.

    Args:
        collection: The table collection.
        source_language: Configured source language, or None for "Auto".

    Returns:
        Dictionary of language code to missing keys (languages with none omitted).
    """
    source = resolve_source(collection, source_language)
    missing = {}
    for language in resolve_target_languages(collection, source.language):
        keys = [
            entry.key
            for entry in resolve_entries(collection, source.table, language, only_missing=True)
        ]
        if keys:
            missing[language] = keys
    return missing
