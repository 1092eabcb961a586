"""Shared fixtures: an in-process translation client and a recording reporter."""

import asyncio

import pytest

from localizer.core.reporter import ProgressReporter
from localizer.errors import TranslationError
from localizer.translation import TranslationClient


class EchoClient(TranslationClient):
    """Translates text as "<text>_<target>" without any network access.

    Attributes:
        fail_languages: Target languages whose batch requests fail.
        drop_last: Number of results to drop from each batch response.
        latency: Seconds each request takes; a dict maps text to latency.
        on_request: Optional callback run at the start of every request.
    """

    model_name = "echo"

    def __init__(self):
        self.fail_languages = set()
        self.drop_last = 0
        self.latency = 0.0
        self.on_request = None
        self.batch_calls = []
        self.single_calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _simulate(self, texts):
        if self.on_request:
            self.on_request()
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if isinstance(self.latency, dict):
                await asyncio.sleep(max(self.latency.get(t, 0.0) for t in texts))
            elif self.latency:
                await asyncio.sleep(self.latency)
        finally:
            self.in_flight -= 1

    async def _request_batch(self, texts, source_lang, target_lang, options):
        self.batch_calls.append((list(texts), source_lang, target_lang, options))
        await self._simulate(texts)
        if target_lang in self.fail_languages:
            raise TranslationError(f"HTTP 500 for {target_lang}")
        translations = [f"{text}_{target_lang}" for text in texts]
        if self.drop_last:
            translations = translations[:-self.drop_last]
        return translations

    async def _request_single(self, text, source_lang, target_lang, options):
        self.single_calls.append((text, source_lang, target_lang, options))
        await self._simulate([text])
        if target_lang in self.fail_languages:
            raise TranslationError(f"HTTP 500 for {target_lang}")
        return f"{text}_{target_lang}"


class RecordingReporter(ProgressReporter):
    """Keeps every progress event in order."""

    def __init__(self):
        self.events = []

    def start(self, description, status):
        self.events.append(("start", description, status))

    def report_progress(self, status, fraction):
        self.events.append(("progress", status, fraction))

    def completed(self, message):
        self.events.append(("completed", message))

    def fail(self, error):
        self.events.append(("fail", error))

    def of_kind(self, kind):
        return [event for event in self.events if event[0] == kind]


@pytest.fixture
def echo_client():
    """Create an EchoClient."""
    return EchoClient()


@pytest.fixture
def reporter():
    """Create a RecordingReporter."""
    return RecordingReporter()
