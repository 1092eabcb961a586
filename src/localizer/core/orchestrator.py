"""Batch translation orchestration across target languages."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ..config import APISettings, BatchSettings, TableSettings, TranslationMode, get_language_name
from ..tables import TableCollection, TranslationMetadata
from ..tables.resolver import ResolvedSource, resolve_entries, resolve_source, resolve_target_languages
from ..translation import BatchJob, TranslationClient, TranslationOptions, TranslationResponse, plan_batches
from .reporter import ProgressReporter

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    """Phase of a translation run."""
    IDLE = "idle"
    PREPARING = "preparing"
    DISPATCHING = "dispatching"
    MERGING = "merging"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class BatchError:
    """A failure affecting some keys of one batch.

    Attributes:
        target_language: Language the batch was translated into.
        batch_index: Index of the batch within its language.
        keys: Keys that were not translated.
        message: Reason reported by the client or the merge step.
    """
    target_language: str
    batch_index: int
    keys: list[str]
    message: str

    def __str__(self) -> str:
        return (
            f"[{self.target_language} batch {self.batch_index + 1}] "
            f"{self.message} ({len(self.keys)} keys)"
        )


@dataclass
class RunState:
    """Mutable state owned by a single run."""
    phase: RunPhase = RunPhase.IDLE
    total_batches: int = 0
    completed_batches: int = 0
    skipped_batches: int = 0
    errors: list[BatchError] = field(default_factory=list)
    completed_languages: dict[str, bool] = field(default_factory=dict)
    translated: dict[str, int] = field(default_factory=dict)


@dataclass
class RunResult:
    """Outcome of a translation run.

    Attributes:
        phase: Terminal phase (COMPLETED, FAILED or CANCELLED).
        source_language: Resolved source language.
        target_languages: Languages the run translated into.
        translated: Number of merged entries per language.
        errors: Batch and item failures in the order they happened.
        warnings: Settings that had no effect.
        message: Final message sent to the reporter.
    """
    phase: RunPhase
    source_language: Optional[str] = None
    target_languages: list[str] = field(default_factory=list)
    translated: dict[str, int] = field(default_factory=dict)
    errors: list[BatchError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def completed(self) -> bool:
        return self.phase == RunPhase.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.phase == RunPhase.CANCELLED

    @property
    def ok(self) -> bool:
        return self.completed and not self.errors

    @property
    def total_translated(self) -> int:
        return sum(self.translated.values())

    @property
    def failed_keys(self) -> dict[str, list[str]]:
        failed: dict[str, list[str]] = {}
        for error in self.errors:
            failed.setdefault(error.target_language, []).extend(error.keys)
        return failed


class _LanguageProgress:
    """Batch counter for the language currently being dispatched."""

    def __init__(self, language: str, total: int):
        self.language = language
        self.total = total
        self.done = 0

    @property
    def fraction(self) -> float:
        return self.done / self.total if self.total else 1.0


class Orchestrator:
    """Drives a translation run: resolve, plan, dispatch, merge, report.

    Languages are processed one at a time. Batches of a language run
    concurrently, at most max_parallel_batches at once. Provider failures are
    recorded on the result and never stop the run.
    """

    def __init__(
        self,
        client: TranslationClient,
        batch_settings: Optional[BatchSettings] = None,
        api_settings: Optional[APISettings] = None
    ):
        """Initialize the orchestrator.

        Args:
            client: Client used to reach the provider.
            batch_settings: Batch size, parallelism and delay. Expected to be
                validated already.
            api_settings: Provider tuning values passed with every request.
        """
        self.client = client
        self.batch_settings = batch_settings or BatchSettings()
        self.api_settings = api_settings or APISettings()

    def run_sync(self, *args, **kwargs) -> RunResult:
        """Run from synchronous code. See run() for arguments."""
        return asyncio.run(self.run(*args, **kwargs))

    async def run(
        self,
        collection: TableCollection,
        settings: TableSettings,
        target_languages: Optional[list[str]] = None,
        only_missing: bool = False,
        reporter: Optional[ProgressReporter] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RunResult:
        """Translate a collection into its target languages.

        Args:
            collection: Tables to read from and merge into.
            settings: Table settings (mode, prompt, source and targets).
            target_languages: Explicit targets; overrides settings when non-empty.
            only_missing: Translate only entries absent or empty in the target.
            reporter: Receives progress events.
            cancel_event: When set, no further requests are issued.

        Returns:
            RunResult with per-language counts and every recorded failure.

        Raises:
            ValueError: If collection or settings is None.
        """
        reporter = reporter or ProgressReporter()
        if collection is None:
            reporter.fail("No table collection given")
            raise ValueError("collection must not be None")
        if settings is None:
            reporter.fail("No table settings given")
            raise ValueError("settings must not be None")

        state = RunState()
        self._set_phase(state, RunPhase.PREPARING)

        source = resolve_source(collection, settings.source_language)
        targets = resolve_target_languages(
            collection, source.language, target_languages, settings.target_languages
        )

        if not targets:
            self._set_phase(state, RunPhase.FAILED)
            message = "No target languages found for translation."
            reporter.fail(message)
            return RunResult(
                phase=state.phase, source_language=source.language, message=message
            )

        warnings = settings.warnings()
        for warning in warnings:
            logger.warning(warning)
        # The resolver already logged the fallback
        if source.fallback:
            warnings.append(
                f"No {settings.source_language!r} table in {collection.name}, "
                f"translating from {source.language!r}"
            )

        options = TranslationOptions.from_settings(settings, self.api_settings)
        if settings.translation_mode == TranslationMode.BATCH:
            options.glossary_id = ""

        reporter.start(f"Translating {collection.name}", "Preparing translation requests")
        logger.info(
            "Translating %s from %s into %s",
            collection.name, source.language, ", ".join(targets)
        )

        for position, language in enumerate(targets):
            if _is_set(cancel_event):
                break
            reporter.report_progress(
                f"Translating to {get_language_name(language)} ({language})",
                position / len(targets)
            )
            await self._translate_language(
                collection, settings, source, language, only_missing,
                options, state, reporter, cancel_event
            )

        result = RunResult(
            phase=RunPhase.IDLE,
            source_language=source.language,
            target_languages=targets,
            translated=dict(state.translated),
            errors=list(state.errors),
            warnings=warnings,
        )

        if _is_set(cancel_event) and len(state.completed_languages) < len(targets):
            self._set_phase(state, RunPhase.CANCELLED)
            result.phase = state.phase
            result.message = (
                f"Translation of {collection.name} cancelled after "
                f"{state.completed_batches} of {state.total_batches} batches"
            )
            if state.skipped_batches:
                result.message += f" ({state.skipped_batches} skipped)"
            reporter.fail(result.message)
            return result

        self._set_phase(state, RunPhase.COMPLETED)
        result.phase = state.phase
        if state.errors:
            result.message = (
                f"Translation completed for {collection.name} with "
                f"{len(state.errors)} errors ({result.total_translated} entries translated)"
            )
        else:
            result.message = (
                f"Translation completed for {collection.name} "
                f"({result.total_translated} entries translated)"
            )
        reporter.completed(result.message)
        return result

    async def _translate_language(
        self,
        collection: TableCollection,
        settings: TableSettings,
        source: ResolvedSource,
        language: str,
        only_missing: bool,
        options: TranslationOptions,
        state: RunState,
        reporter: ProgressReporter,
        cancel_event: Optional[asyncio.Event]
    ) -> None:
        """Translate every pending entry of one language."""
        state.translated.setdefault(language, 0)
        entries = resolve_entries(collection, source.table, language, only_missing)

        if not entries:
            reporter.report_progress(f"No entries to translate for {language}", 1.0)
            state.completed_languages[language] = True
            reporter.completed(f"Nothing to translate for {language}")
            return

        jobs = plan_batches(entries, self.batch_settings.batch_size, language)
        state.total_batches += len(jobs)
        progress = _LanguageProgress(language, len(jobs))

        gate = asyncio.Semaphore(self.batch_settings.max_parallel_batches)
        self._set_phase(state, RunPhase.DISPATCHING)

        await asyncio.gather(*(
            self._process_batch(
                gate, job, collection, settings, source, options,
                state, progress, reporter, cancel_event
            )
            for job in jobs
        ))

        if _is_set(cancel_event):
            return

        state.completed_languages[language] = True
        failed = sum(len(e.keys) for e in state.errors if e.target_language == language)
        reporter.report_progress(f"Finished {language}", 1.0)
        message = f"Translated {state.translated[language]} entries to {language}"
        if failed:
            message += f", {failed} failed"
        reporter.completed(message)

    async def _process_batch(
        self,
        gate: asyncio.Semaphore,
        job: BatchJob,
        collection: TableCollection,
        settings: TableSettings,
        source: ResolvedSource,
        options: TranslationOptions,
        state: RunState,
        progress: _LanguageProgress,
        reporter: ProgressReporter,
        cancel_event: Optional[asyncio.Event]
    ) -> None:
        async with gate:
            if _is_set(cancel_event):
                state.skipped_batches += 1
                return

            if settings.translation_mode == TranslationMode.SINGLE:
                await self._dispatch_single(job, collection, source, options, state, cancel_event)
            else:
                response = await self.client.translate_batch(
                    job.units, source.language, job.target_language, options
                )
                self._merge(collection, job, response, state)
                await self._delay()

        state.completed_batches += 1
        progress.done += 1
        reporter.report_progress(
            f"Processed batch {job.index + 1}/{progress.total} for {job.target_language}",
            progress.fraction
        )

    async def _dispatch_single(
        self,
        job: BatchJob,
        collection: TableCollection,
        source: ResolvedSource,
        options: TranslationOptions,
        state: RunState,
        cancel_event: Optional[asyncio.Event]
    ) -> None:
        """Translate the units of a job one request at a time."""
        for unit in job.units:
            if _is_set(cancel_event):
                return
            response = await self.client.translate_single(
                unit, source.language, job.target_language, options
            )
            self._merge(
                collection,
                BatchJob(job.target_language, [unit], job.index),
                response,
                state
            )
            await self._delay()

    def _merge(
        self,
        collection: TableCollection,
        job: BatchJob,
        response: TranslationResponse,
        state: RunState
    ) -> None:
        """Upsert the results of one response into the target table.

        Results align with the job's units by position. Units without a
        result, and results carrying an error, are recorded as failures.
        """
        language = job.target_language

        if not response.success:
            logger.warning("Batch %d for %s failed: %s", job.index + 1, language, response.error)
            state.errors.append(BatchError(language, job.index, job.keys, response.error))
            return

        previous_phase = state.phase
        self._set_phase(state, RunPhase.MERGING)

        table = collection.get_table(language) or collection.add_table(language)
        timestamp = datetime.now(timezone.utc).isoformat()
        results = response.results

        for unit, result in zip(job.units, results):
            if result.key != unit.key:
                state.errors.append(BatchError(
                    language, job.index, [unit.key],
                    f"Result for {result.key!r} returned in place of {unit.key!r}"
                ))
                continue
            if not result.ok:
                state.errors.append(BatchError(language, job.index, [unit.key], result.error))
                continue

            metadata = TranslationMetadata()
            metadata.update(result.confidence, self.client.model_name, timestamp)
            table.upsert(unit.key, result.translated, metadata)
            state.translated[language] = state.translated.get(language, 0) + 1

        unmatched = job.units[len(results):]
        if unmatched:
            message = f"Provider returned {len(results)} results for {len(job.units)} texts"
            logger.warning("Batch %d for %s: %s", job.index + 1, language, message)
            state.errors.append(BatchError(
                language, job.index, [unit.key for unit in unmatched], message
            ))

        self._set_phase(state, previous_phase)

    async def _delay(self) -> None:
        if self.batch_settings.request_delay > 0:
            await asyncio.sleep(self.batch_settings.request_delay)

    @staticmethod
    def _set_phase(state: RunState, phase: RunPhase) -> None:
        if state.phase != phase:
            logger.debug("Run phase %s -> %s", state.phase.value, phase.value)
            state.phase = phase


def _is_set(event: Optional[asyncio.Event]) -> bool:
    return event is not None and event.is_set()
