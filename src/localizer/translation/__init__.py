"""Translation client, batch planning and normalization."""

from .batch import BatchJob, plan_batches
from .client import AlgebrasClient, TranslationClient
from .models import TranslationOptions, TranslationResponse, TranslationResult, TranslationUnit
from .normalizer import normalize_translation, normalize_translations

__all__ = [
    "AlgebrasClient",
    "BatchJob",
    "TranslationClient",
    "TranslationOptions",
    "TranslationResponse",
    "TranslationResult",
    "TranslationUnit",
    "normalize_translation",
    "normalize_translations",
    "plan_batches",
]
