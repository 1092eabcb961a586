"""Partitioning of entries into batch jobs."""

from dataclasses import dataclass

from ..tables.models import Entry
from .models import TranslationUnit


@dataclass
class BatchJob:
    """One unit of concurrent dispatch.

    Attributes:
        target_language: Language this batch is translated into.
        units: Units in request order; results align with them by position.
        index: Position of the batch in its language (for progress only).
    """
    target_language: str
    units: list[TranslationUnit]
    index: int

    @property
    def keys(self) -> list[str]:
        return [unit.key for unit in self.units]

    def __len__(self) -> int:
        return len(self.units)


def plan_batches(entries: list[Entry], batch_size: int, target_language: str = "") -> list[BatchJob]:
    """Split entries into contiguous batches of at most batch_size.

    Order is preserved and only the last batch may be smaller. No entries
    gives no batches.

    Args:
        entries: Entries to translate.
        batch_size: Maximum number of units per batch.
        target_language: Language the batches are translated into.

    Returns:
        List of BatchJob with indexes starting at 0.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    units = [TranslationUnit(key=entry.key, text=entry.source_text) for entry in entries]

    return [
        BatchJob(
            target_language=target_language,
            units=units[start:start + batch_size],
            index=index
        )
        for index, start in enumerate(range(0, len(units), batch_size))
    ]
