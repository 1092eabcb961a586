"""Progress reporting for translation runs."""

import logging
from typing import Optional


class ProgressReporter:
    """Receives progress events from a translation run.

    The base class ignores every event; subclasses override what they need.
    """

    def start(self, description: str, status: str) -> None:
        pass

    def report_progress(self, status: str, fraction: float) -> None:
        """Report progress.

        Args:
            status: Human-readable status line.
            fraction: Progress between 0 and 1.
        """

    def completed(self, message: str) -> None:
        pass

    def fail(self, error: str) -> None:
        pass


class LoggingReporter(ProgressReporter):
    """Writes progress events to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("localizer.progress")

    def start(self, description: str, status: str) -> None:
        self.logger.info("%s: %s", description, status)

    def report_progress(self, status: str, fraction: float) -> None:
        self.logger.info("[%3d%%] %s", round(fraction * 100), status)

    def completed(self, message: str) -> None:
        self.logger.info(message)

    def fail(self, error: str) -> None:
        self.logger.error(error)
