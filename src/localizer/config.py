"""Configuration for the translation service."""

from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigurationError

# Sentinel for "use the first table in the collection as source"
AUTO_LANGUAGE = "Auto"

DEFAULT_API_URL = "https://platform.algebras.ai"

# Language code mappings used for display
LANGUAGE_NAMES = {
    "en": "English",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "tr": "Turkish",
    "vi": "Vietnamese",
    "th": "Thai",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
    "uk": "Ukrainian",
}


def get_language_name(code: str) -> str:
    """Get the full language name for a language code.

    Args:
        code: Language code (e.g., "de").

    Returns:
        Full language name (e.g., "German"), or the code itself if unknown.
    """
    return LANGUAGE_NAMES.get(code, code)


class TranslationMode(Enum):
    """How entries are sent to the provider."""
    BATCH = "batch"
    SINGLE = "single"


class AuthenticationType(Enum):
    """Authentication method used against the provider."""
    NONE = "none"
    API_KEY = "api_key"


class Provider(Enum):
    """Translation providers known to the service."""
    ALGEBRAS = "algebras"
    OPENAI = "openai"


SUPPORTED_PROVIDERS = (Provider.ALGEBRAS,)


@dataclass
class TableSettings:
    """Settings specific to one table collection.

    Attributes:
        translation_mode: Batch (faster, no glossary) or Single (supports glossary).
        normalize_strings: Remove escape sequences the source never had.
        ui_safe: Ask the provider to keep translations no longer than the source.
        custom_prompt: Extra instructions passed to the provider.
        glossary_id: Provider-side glossary, honored in Single mode only.
        source_language: Source language code, or "Auto".
        target_languages: Target codes; empty means every non-source table.
    """
    translation_mode: TranslationMode = TranslationMode.BATCH
    normalize_strings: bool = True
    ui_safe: bool = False
    custom_prompt: str = ""
    glossary_id: str = ""
    source_language: str = AUTO_LANGUAGE
    target_languages: list[str] = field(default_factory=list)

    def warnings(self) -> list[str]:
        """Settings that are accepted but will have no effect."""
        messages = []
        if self.glossary_id and self.translation_mode == TranslationMode.BATCH:
            messages.append(
                f"Glossary '{self.glossary_id}' is ignored in batch mode; "
                f"switch to single mode to use it"
            )
        return messages


@dataclass
class BatchSettings:
    """Batch processing settings for translation requests.

    Attributes:
        batch_size: Number of texts sent in one batch request (1-100).
        max_parallel_batches: Maximum simultaneous batch requests (1-10).
        request_delay: Seconds to wait after each request (0-2).
    """
    batch_size: int = 20
    max_parallel_batches: int = 5
    request_delay: float = 0.1

    def validation_errors(self) -> list[str]:
        errors = []
        if not 1 <= self.batch_size <= 100:
            errors.append(f"Batch size must be between 1 and 100, got {self.batch_size}")
        if not 1 <= self.max_parallel_batches <= 10:
            errors.append(
                f"Max parallel batches must be between 1 and 10, "
                f"got {self.max_parallel_batches}"
            )
        if not 0 <= self.request_delay <= 2:
            errors.append(
                f"Request delay must be between 0 and 2 seconds, got {self.request_delay}"
            )
        return errors

    def validate(self) -> "BatchSettings":
        """Raise ConfigurationError if any value is out of range."""
        errors = self.validation_errors()
        if errors:
            raise ConfigurationError(errors)
        return self


@dataclass
class APISettings:
    """Provider tuning values, passed through to the client untouched.

    Attributes:
        temperature: Randomness of the model (0-1).
        max_tokens: Maximum tokens for a response.
    """
    temperature: float = 0.3
    max_tokens: int = 2048

    def validation_errors(self) -> list[str]:
        errors = []
        if not 0 <= self.temperature <= 1:
            errors.append(f"Temperature must be between 0 and 1, got {self.temperature}")
        if self.max_tokens < 1:
            errors.append(f"Max tokens must be at least 1, got {self.max_tokens}")
        return errors


@dataclass
class ServiceConfig:
    """Connection settings for the translation provider.

    Attributes:
        api_key: API key sent with every request.
        authentication: Authentication method.
        provider: Translation provider.
        application_name: Name sent in the User-Agent header.
        api_url: Base URL of the provider API.
        timeout: Transport timeout in seconds for one request.
        api_settings: Provider tuning values.
        batch_settings: Batching and concurrency limits.
    """
    api_key: str = ""
    authentication: AuthenticationType = AuthenticationType.API_KEY
    provider: Provider = Provider.ALGEBRAS
    application_name: str = "batch-localizer"
    api_url: str = DEFAULT_API_URL
    timeout: float = 120.0
    api_settings: APISettings = field(default_factory=APISettings)
    batch_settings: BatchSettings = field(default_factory=BatchSettings)

    def validation_errors(self) -> list[str]:
        """List every configuration problem without changing anything."""
        errors = []
        if self.authentication == AuthenticationType.API_KEY and not self.api_key.strip():
            errors.append("API key is required when using API key authentication")
        if self.provider not in SUPPORTED_PROVIDERS:
            errors.append(f"Provider '{self.provider.value}' is not supported")
        if self.timeout <= 0:
            errors.append(f"Timeout must be positive, got {self.timeout}")
        errors.extend(self.api_settings.validation_errors())
        errors.extend(self.batch_settings.validation_errors())
        return errors

    def validate(self) -> "ServiceConfig":
        """Raise ConfigurationError listing all problems, if any."""
        errors = self.validation_errors()
        if errors:
            raise ConfigurationError(errors)
        return self
