"""Data models for string table entries."""

from dataclasses import dataclass
from typing import Optional

# Translations below this confidence are flagged for human review
REVIEW_THRESHOLD = 0.7


@dataclass(frozen=True)
class Entry:
    """A key and its source text, snapshotted at the start of a run.

    Attributes:
        key: The string key, unique within a collection.
        source_text: Text in the source language.
    """
    key: str
    source_text: str


@dataclass
class TranslationMetadata:
    """Information about how a table value was produced.

    Attributes:
        confidence: Provider confidence for the translation (0-1).
        model: Model or provider that produced it.
        timestamp: ISO-8601 time the translation was merged.
        needs_review: Whether a human should check the translation.
    """
    confidence: float = 0.0
    model: str = ""
    timestamp: str = ""
    needs_review: bool = False

    def __post_init__(self):
        self.confidence = _clamp01(self.confidence)

    def update(self, confidence: float, model: str, timestamp: str) -> None:
        """Record a new translation, flagging low confidence for review."""
        self.confidence = _clamp01(confidence)
        self.model = model
        self.timestamp = timestamp
        self.needs_review = self.confidence < REVIEW_THRESHOLD

    def mark_reviewed(self) -> None:
        self.needs_review = False

    @property
    def quality_description(self) -> str:
        if self.confidence >= 0.9:
            return "High Quality"
        if self.confidence >= 0.7:
            return "Good Quality"
        if self.confidence >= 0.5:
            return "Medium Quality"
        return "Low Quality"

    def __str__(self) -> str:
        return (
            f"{self.quality_description} ({self.confidence:.1%}) "
            f"- {self.model} - {self.timestamp}"
        )


def _clamp01(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return min(1.0, max(0.0, float(value)))
