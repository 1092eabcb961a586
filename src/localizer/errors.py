"""Exceptions raised by the localizer."""


class LocalizerError(Exception):
    """Base class for all localizer errors."""


class ConfigurationError(LocalizerError):
    """Raised when service, batch or table settings are invalid.

    Attributes:
        problems: Individual validation messages.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "Invalid configuration")


class TranslationError(LocalizerError):
    """Raised by the transport layer when a provider request fails."""
