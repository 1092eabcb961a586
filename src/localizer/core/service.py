"""Main translation service."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ServiceConfig, TableSettings
from ..errors import ConfigurationError
from ..tables import TableCollection, TableStore
from ..tables.resolver import find_missing_keys
from ..translation import AlgebrasClient, TranslationClient
from .orchestrator import Orchestrator, RunResult
from .reporter import ProgressReporter


@dataclass
class TranslationReport:
    """Report of translating a directory of tables.

    Attributes:
        directory: Directory holding the <language>.json files.
        missing: Keys missing per language before the run.
        run_result: Result of the run (None if dry_run).
        files_updated: Files that were written.
        dry_run: Whether this was a dry run.
    """
    directory: Path
    missing: dict[str, list[str]]
    run_result: Optional[RunResult]
    files_updated: list[Path]
    dry_run: bool


class TranslationService:
    """Entry point that wires configuration, client and orchestrator together."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        client: Optional[TranslationClient] = None,
        store: Optional[TableStore] = None
    ):
        """Initialize the translation service.

        Args:
            config: Service configuration.
            client: Translation client; defaults to an AlgebrasClient built
                from config, in which case the whole config is validated.
            store: File store used by translate_directory().

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self.config = config or ServiceConfig()
        if client is None:
            self.config.validate()
            client = AlgebrasClient(self.config)
        else:
            errors = (
                self.config.batch_settings.validation_errors()
                + self.config.api_settings.validation_errors()
            )
            if errors:
                raise ConfigurationError(errors)

        self.client = client
        self.store = store or TableStore()
        self.orchestrator = Orchestrator(
            client,
            self.config.batch_settings,
            self.config.api_settings
        )

    async def push(
        self,
        collection: TableCollection,
        settings: TableSettings,
        target_languages: Optional[list[str]] = None,
        only_missing: bool = False,
        reporter: Optional[ProgressReporter] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RunResult:
        """Translate a collection and merge the results into its tables."""
        return await self.orchestrator.run(
            collection,
            settings,
            target_languages=target_languages,
            only_missing=only_missing,
            reporter=reporter,
            cancel_event=cancel_event
        )

    async def pull(
        self,
        collection: TableCollection,
        settings: TableSettings,
        target_languages: Optional[list[str]] = None,
        reporter: Optional[ProgressReporter] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> RunResult:
        """Refresh every translation of a collection.

        The provider has no store of finished translations, so this is a
        push that overwrites all entries in scope.
        """
        return await self.push(
            collection,
            settings,
            target_languages=target_languages,
            only_missing=False,
            reporter=reporter,
            cancel_event=cancel_event
        )

    def translate_directory(
        self,
        directory: Path,
        settings: TableSettings,
        target_languages: Optional[list[str]] = None,
        only_missing: bool = False,
        dry_run: bool = False,
        reporter: Optional[ProgressReporter] = None
    ) -> TranslationReport:
        """Translate the tables stored in a directory and write them back.

        Args:
            directory: Directory of <language>.json files.
            settings: Table settings.
            target_languages: Explicit targets.
            only_missing: Translate only entries absent or empty in the target.
            dry_run: Only report what is missing; make no requests.
            reporter: Receives progress events.

        Returns:
            TranslationReport with results.
        """
        directory = Path(directory)
        source_language = settings.source_language
        collection = self.store.load(directory, source_language=source_language)
        missing = find_missing_keys(collection, source_language)

        if dry_run:
            return TranslationReport(
                directory=directory,
                missing=missing,
                run_result=None,
                files_updated=[],
                dry_run=True
            )

        result = self.orchestrator.run_sync(
            collection,
            settings,
            target_languages=target_languages,
            only_missing=only_missing,
            reporter=reporter
        )

        changed = [lang for lang, count in result.translated.items() if count]
        files_updated = self.store.save(collection, directory, languages=changed)

        return TranslationReport(
            directory=directory,
            missing=missing,
            run_result=result,
            files_updated=files_updated,
            dry_run=False
        )

    def is_ready(self) -> tuple[bool, str]:
        """Check if the service is ready to translate.

        Returns:
            Tuple of (is_ready, message).
        """
        errors = self.config.validation_errors()
        if errors:
            return False, "; ".join(errors)

        if not asyncio.run(self.client.test_connection()):
            return False, (
                f"Translation provider not reachable at {self.config.api_url}. "
                f"Check the API key and network connection"
            )
        return True, "Ready"
