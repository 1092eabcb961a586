"""Translation clients that send units of work to a provider."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from ..config import AUTO_LANGUAGE, AuthenticationType, ServiceConfig
from ..errors import TranslationError
from .models import TranslationOptions, TranslationResponse, TranslationResult, TranslationUnit
from .normalizer import normalize_translation, normalize_translations

logger = logging.getLogger(__name__)

BATCH_ENDPOINT = "/api/v1/translation/translate-batch"
SINGLE_ENDPOINT = "/api/v1/translation/translate"


class TranslationClient(ABC):
    """Abstract base class for translation clients.

    Subclasses implement the two provider calls; this class turns them into
    TranslationResponse objects, applies normalization and converts
    TranslationError into an error response. No retries happen here.
    """

    model_name = "unknown"

    @abstractmethod
    async def _request_batch(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        options: TranslationOptions
    ) -> list[str]:
        """Translate texts in one request.

        Returns:
            Translations in request order. May be shorter than texts if the
            provider returned fewer items.

        Raises:
            TranslationError: If the request failed.
        """

    @abstractmethod
    async def _request_single(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        options: TranslationOptions
    ) -> str:
        """Translate one text, honoring the glossary.

        Raises:
            TranslationError: If the request failed.
        """

    async def translate_batch(
        self,
        units: list[TranslationUnit],
        source_lang: Optional[str],
        target_lang: str,
        options: Optional[TranslationOptions] = None
    ) -> TranslationResponse:
        """Translate all units as one request.

        Args:
            units: Units to translate, in order.
            source_lang: Source language code, or "Auto".
            target_lang: Target language code.
            options: Request options.

        Returns:
            TranslationResponse whose results align with units by position.
        """
        options = options or TranslationOptions()
        if not units:
            return TranslationResponse.failure("No texts provided for translation")

        if options.glossary_id:
            logger.warning(
                "Glossary %r is ignored in batch mode", options.glossary_id
            )

        texts = [unit.text for unit in units]
        try:
            translations = await self._request_batch(
                texts, api_language(source_lang), target_lang, options
            )
        except TranslationError as e:
            logger.error("Batch translation to %s failed: %s", target_lang, e)
            return TranslationResponse.failure(str(e))

        translations = normalize_translations(texts, translations, options.normalize_strings)
        results = [
            self._make_result(unit, translated)
            for unit, translated in zip(units, translations)
        ]
        return TranslationResponse(results=results)

    async def translate_single(
        self,
        unit: TranslationUnit,
        source_lang: Optional[str],
        target_lang: str,
        options: Optional[TranslationOptions] = None
    ) -> TranslationResponse:
        """Translate exactly one unit.

        Returns:
            TranslationResponse with one result, or an error.
        """
        options = options or TranslationOptions()
        if not unit.text:
            return TranslationResponse.failure("No text provided for translation")

        try:
            translated = await self._request_single(
                unit.text, api_language(source_lang), target_lang, options
            )
        except TranslationError as e:
            logger.error("Translation of %r to %s failed: %s", unit.key, target_lang, e)
            return TranslationResponse.failure(str(e))

        translated = normalize_translation(unit.text, translated, options.normalize_strings)
        return TranslationResponse(results=[self._make_result(unit, translated)])

    async def test_connection(self) -> bool:
        """Check that the provider answers a trivial translation."""
        response = await self.translate_batch(
            [TranslationUnit(key="test", text="test")], "en", "es"
        )
        return response.success

    @staticmethod
    def _make_result(unit: TranslationUnit, translated: Optional[str]) -> TranslationResult:
        if not translated or not isinstance(translated, str):
            return TranslationResult(
                key=unit.key, translated="", confidence=0.0,
                error="Provider returned an empty translation"
            )
        # Provider does not report confidence
        return TranslationResult(key=unit.key, translated=translated, confidence=1.0)


class AlgebrasClient(TranslationClient):
    """HTTP client for the Algebras AI translation API.

    requests is blocking, so each call runs in a worker thread.
    """

    model_name = "algebras-translator-v1"

    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            config: Service configuration (URL, credentials, timeout).
            session: Optional requests session to reuse.
        """
        self.config = config
        self.url = config.api_url.rstrip('/')
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"{self.config.application_name}/1.0.0",
        }
        if self.config.authentication == AuthenticationType.API_KEY:
            headers["X-Api-Key"] = self.config.api_key
        return headers

    def _post(self, endpoint: str, **kwargs: Any) -> dict:
        """POST to the provider and return the decoded success payload.

        Raises:
            TranslationError: On transport errors, non-2xx responses,
                malformed JSON or an unsuccessful response body.
        """
        try:
            response = self.session.post(
                f"{self.url}{endpoint}",
                headers=self._headers(),
                timeout=self.config.timeout,
                **kwargs
            )
            response.raise_for_status()
            logger.debug("Response from %s: %s", endpoint, response.text)
            payload = response.json()
        except requests.HTTPError as e:
            body = e.response.text if e.response is not None else ""
            raise TranslationError(f"{e}\nResponse: {body}" if body else str(e)) from e
        except json.JSONDecodeError as e:
            raise TranslationError(f"Malformed response: {e}") from e
        except requests.RequestException as e:
            raise TranslationError(str(e)) from e

        if not isinstance(payload, dict):
            raise TranslationError("Malformed response: expected a JSON object")
        if payload.get("success") is False:
            raise TranslationError(payload.get("error") or "Provider reported failure")
        return payload

    def _send_batch(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        options: TranslationOptions
    ) -> list[str]:
        payload = self._post(BATCH_ENDPOINT, json={
            "texts": texts,
            "sourceLanguage": source_lang,
            "targetLanguage": target_lang,
            "prompt": options.custom_prompt or "",
            "flag": options.ui_safe,
        })
        data = payload.get("data")
        if not isinstance(data, dict):
            raise TranslationError("Malformed response: expected a data object")
        items = data.get("translations")
        if not isinstance(items, list):
            raise TranslationError("Malformed response: missing translations")
        return self._order_translations(items, len(texts))

    def _send_single(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        options: TranslationOptions
    ) -> str:
        # The single endpoint expects multipart/form-data
        fields = {
            "sourceLanguage": source_lang,
            "targetLanguage": target_lang,
            "textContent": text,
            "fileContent": "",
            "glossaryId": options.glossary_id or "",
            "prompt": options.custom_prompt or "",
            "flag": "true" if options.ui_safe else "false",
        }
        payload = self._post(
            SINGLE_ENDPOINT,
            files={name: (None, value) for name, value in fields.items()}
        )
        data = payload.get("data")
        if not isinstance(data, str):
            raise TranslationError("Malformed response: missing translation")
        return data.strip()

    @staticmethod
    def _order_translations(items: list, expected_count: int) -> list[str]:
        """Place translations by their index field.

        Returns:
            The contiguous run of translations starting at index 0. Anything
            after the first gap is dropped so no text lands on the wrong key.
        """
        slots: dict[int, str] = {}
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                continue
            index = item.get("index", position)
            if isinstance(index, int) and 0 <= index < expected_count:
                content = item.get("content")
                # Non-text content becomes an empty slot, reported as an item error
                slots[index] = content if isinstance(content, str) else ""

        ordered = []
        for i in range(expected_count):
            if i not in slots:
                break
            ordered.append(slots[i])
        return ordered

    async def _request_batch(self, texts, source_lang, target_lang, options):
        return await asyncio.to_thread(
            self._send_batch, texts, source_lang, target_lang, options
        )

    async def _request_single(self, text, source_lang, target_lang, options):
        return await asyncio.to_thread(
            self._send_single, text, source_lang, target_lang, options
        )


def api_language(code: Optional[str]) -> str:
    """Convert the "Auto" sentinel to the provider's "auto"."""
    if not code or code == AUTO_LANGUAGE:
        return "auto"
    return code
