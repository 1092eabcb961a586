"""Request and result models shared by the client and the orchestrator."""

from dataclasses import dataclass, field
from typing import Optional

from ..config import APISettings, TableSettings


@dataclass(frozen=True)
class TranslationUnit:
    """The minimal payload sent to the provider for one entry."""
    key: str
    text: str


@dataclass
class TranslationResult:
    """Result of translating one unit.

    Attributes:
        key: Key of the unit this result belongs to.
        translated: Translated text.
        confidence: Provider confidence (0-1).
        error: Error message if this item failed.
    """
    key: str
    translated: str
    confidence: float = 1.0
    error: Optional[str] = None

    def __post_init__(self):
        self.confidence = min(1.0, max(0.0, self.confidence))

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TranslationResponse:
    """What the client returns for one request.

    On failure results is empty and error holds the reason.
    """
    results: list[TranslationResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "TranslationResponse":
        return cls(results=[], error=error)


@dataclass
class TranslationOptions:
    """Per-request options.

    Temperature and max_tokens are provider tuning values passed through
    without interpretation.
    """
    ui_safe: bool = False
    glossary_id: str = ""
    custom_prompt: str = ""
    normalize_strings: bool = True
    temperature: float = 0.3
    max_tokens: int = 2048

    @classmethod
    def from_settings(
        cls,
        settings: TableSettings,
        api_settings: Optional[APISettings] = None
    ) -> "TranslationOptions":
        api_settings = api_settings or APISettings()
        return cls(
            ui_safe=settings.ui_safe,
            glossary_id=settings.glossary_id,
            custom_prompt=settings.custom_prompt,
            normalize_strings=settings.normalize_strings,
            temperature=api_settings.temperature,
            max_tokens=api_settings.max_tokens,
        )
