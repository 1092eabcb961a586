"""Removal of escape sequences that translation APIs add to plain text."""

from typing import Optional, Sequence

# Applied in this order: apostrophe, quote, backslash, newline, tab, carriage return
ESCAPE_MAPPINGS = (
    ("\\'", "'"),
    ('\\"', '"'),
    ("\\\\", "\\"),
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
)


def normalize_translation(
    source_text: Optional[str],
    translated_text: Optional[str],
    enabled: bool = True
) -> Optional[str]:
    """Unescape sequences in a translation that the source did not contain.

    An escaped form is replaced only if it appears in the translation and
    the same escaped form does not appear in the source, so intentional
    escaping in the source survives.

    Args:
        source_text: The original source text.
        translated_text: The translation returned by the provider.
        enabled: Whether normalization is enabled.

    Returns:
        The normalized translation, or translated_text unchanged when either
        input is empty or not a string.
    """
    if not enabled or not source_text or not translated_text:
        return translated_text
    if not isinstance(source_text, str) or not isinstance(translated_text, str):
        return translated_text

    normalized = translated_text
    for escaped, unescaped in ESCAPE_MAPPINGS:
        if escaped in normalized and escaped not in source_text:
            normalized = normalized.replace(escaped, unescaped)

    return normalized


def normalize_translations(
    source_texts: Sequence[str],
    translated_texts: Sequence[str],
    enabled: bool = True
) -> list[str]:
    """Normalize a list of translations against their sources by position."""
    if not enabled:
        return list(translated_texts)

    return [
        normalize_translation(
            source_texts[i] if i < len(source_texts) else "",
            translated,
            enabled
        )
        for i, translated in enumerate(translated_texts)
    ]
