"""CLI entry point for the translation service."""

import logging
from pathlib import Path

import click

from .config import (
    AUTO_LANGUAGE,
    BatchSettings,
    ServiceConfig,
    TableSettings,
    TranslationMode,
    get_language_name,
)
from .core.reporter import ProgressReporter
from .core.service import TranslationService
from .errors import ConfigurationError, LocalizerError
from .tables import TableStore
from .tables.resolver import find_missing_keys


class ClickReporter(ProgressReporter):
    """Prints progress events to the terminal."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def start(self, description: str, status: str) -> None:
        click.secho(f"{description}: {status}", bold=True)

    def report_progress(self, status: str, fraction: float) -> None:
        if self.verbose:
            click.echo(f"  [{fraction:4.0%}] {status}")

    def completed(self, message: str) -> None:
        click.secho(message, fg='green')

    def fail(self, error: str) -> None:
        click.secho(f"Error: {error}", fg='red', err=True)


def _split_languages(languages: str) -> list[str]:
    return [lang.strip() for lang in languages.split(',') if lang.strip()]


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Batch translation of JSON string tables through the Algebras AI API."""
    pass


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--source', '-s', default=AUTO_LANGUAGE, help='Source language code, or Auto for the first table')
@click.option('--languages', '-l', default='', help='Comma-separated target language codes (default: all tables)')
@click.option('--only-missing', is_flag=True, help='Only translate entries that are missing in the target')
@click.option('--mode', type=click.Choice(['batch', 'single']), default='batch', help='Translation mode')
@click.option('--ui-safe', is_flag=True, help='Keep translations no longer than the source text')
@click.option('--prompt', default='', help='Custom instructions for the translator')
@click.option('--glossary', default='', help='Glossary ID (single mode only)')
@click.option('--no-normalize', is_flag=True, help='Keep escape sequences added by the provider')
@click.option('--batch-size', default=20, show_default=True, help='Texts per batch request (1-100)')
@click.option('--parallel', default=5, show_default=True, help='Maximum parallel batch requests (1-10)')
@click.option('--delay', default=0.1, show_default=True, help='Seconds to wait after each request (0-2)')
@click.option('--api-key', envvar='ALGEBRAS_API_KEY', default='', help='API key (or set ALGEBRAS_API_KEY)')
@click.option('--app-name', default='batch-localizer', help='Application name sent with requests')
@click.option('--dry-run', is_flag=True, help='Show what is missing without making requests')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def translate(
    directory: Path,
    source: str,
    languages: str,
    only_missing: bool,
    mode: str,
    ui_safe: bool,
    prompt: str,
    glossary: str,
    no_normalize: bool,
    batch_size: int,
    parallel: int,
    delay: float,
    api_key: str,
    app_name: str,
    dry_run: bool,
    verbose: bool
):
    """Translate the <language>.json tables in DIRECTORY.

    Each file holds a flat JSON object of key to text. Translations are
    merged into the target files, which are created if needed.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    target_langs = _split_languages(languages)
    settings = TableSettings(
        translation_mode=TranslationMode(mode),
        normalize_strings=not no_normalize,
        ui_safe=ui_safe,
        custom_prompt=prompt,
        glossary_id=glossary,
        source_language=source,
        target_languages=target_langs
    )

    config = ServiceConfig(
        api_key=api_key,
        application_name=app_name,
        batch_settings=BatchSettings(
            batch_size=batch_size,
            max_parallel_batches=parallel,
            request_delay=delay
        )
    )

    for warning in settings.warnings():
        click.secho(f"Warning: {warning}", fg='yellow', err=True)

    try:
        if dry_run:
            config.batch_settings.validate()
            collection = TableStore().load(directory, source_language=source)
            _show_missing(find_missing_keys(collection, source))
            click.secho("Dry run - no files modified.", fg='cyan')
            return

        service = TranslationService(config=config)
        report = service.translate_directory(
            directory,
            settings,
            target_languages=target_langs,
            only_missing=only_missing,
            reporter=ClickReporter(verbose)
        )
    except ConfigurationError as e:
        click.secho("Invalid configuration:", fg='red', err=True)
        for problem in e.problems:
            click.secho(f"  {problem}", fg='red', err=True)
        raise SystemExit(2)
    except LocalizerError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        raise SystemExit(1)

    result = report.run_result
    if result.errors:
        click.echo("\nFailed translations:")
        for error in result.errors:
            click.secho(f"  {error}", fg='red')
            if verbose:
                click.echo(f"    keys: {', '.join(error.keys)}")

    if report.files_updated:
        click.echo("\nFiles updated:")
        for path in report.files_updated:
            click.secho(f"  {path}", fg='green')

    if not result.completed:
        raise SystemExit(1)


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--source', '-s', default=AUTO_LANGUAGE, help='Source language code, or Auto for the first table')
def missing(directory: Path, source: str):
    """Show keys missing from each target table in DIRECTORY."""
    try:
        collection = TableStore().load(directory, source_language=source)
    except LocalizerError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        raise SystemExit(1)

    _show_missing(find_missing_keys(collection, source))


def _show_missing(missing_keys: dict[str, list[str]]) -> None:
    if not missing_keys:
        click.secho("No missing translations.", fg='yellow')
        return

    for language, keys in missing_keys.items():
        click.secho(
            f"{get_language_name(language)} ({language}): {len(keys)} missing",
            fg='yellow', bold=True
        )
        for key in keys:
            click.echo(f"  + {key}")
        click.echo()


@cli.command()
@click.option('--api-key', envvar='ALGEBRAS_API_KEY', default='', help='API key (or set ALGEBRAS_API_KEY)')
def check(api_key: str):
    """Check if the translation provider is reachable."""
    config = ServiceConfig(api_key=api_key)

    try:
        service = TranslationService(config=config)
    except ConfigurationError as e:
        click.secho(f"Error: {e}", fg='red')
        click.echo("\nTo fix this:")
        click.echo("  Pass --api-key or set ALGEBRAS_API_KEY")
        raise SystemExit(1)

    ready, message = service.is_ready()

    if ready:
        click.secho("Translation provider is ready!", fg='green')
        click.echo(f"  API URL: {config.api_url}")
    else:
        click.secho(f"Error: {message}", fg='red')
        raise SystemExit(1)


if __name__ == '__main__':
    cli()
