"""Summarizer factory for creating backends from configuration."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ...errors import InvalidInput
from .base import ProgressSink, Summarizer
from .claude_cli import ClaudeCLISummarizer
from .openai_api import OpenAISummarizer

if TYPE_CHECKING:
    from ...config import CompactorSettings

logger = logging.getLogger(__name__)

BACKENDS = ("claude", "openai")


class SummarizerFactory:
    """Factory for creating summarizers from configuration.

    Handles backend-specific construction from the shared settings.
    """

    def __init__(
        self,
        settings: "CompactorSettings",
        progress: Optional[ProgressSink] = None,
    ):
        """Initialize factory.

        Args:
            settings: Settings holding the per-backend sections
            progress: Progress sink handed to every summarizer
        """
        self.settings = settings
        self.progress = progress

    def create_claude(self) -> ClaudeCLISummarizer:
        return ClaudeCLISummarizer.from_settings(self.settings.claude, progress=self.progress)

    def create_openai(self) -> OpenAISummarizer:
        return OpenAISummarizer.from_settings(self.settings, progress=self.progress)

    def create(self, backend: Optional[str] = None) -> Summarizer:
        """Create summarizer by name.

        Args:
            backend: Backend identifier; defaults to ``settings.backend``

        Raises:
            InvalidInput: If the backend name is unknown
        """
        backend = (backend or self.settings.backend).strip().lower()
        logger.debug("Creating summarizer", extra={"backend": backend})

        if backend == "claude":
            return self.create_claude()
        elif backend == "openai":
            return self.create_openai()

        logger.error("Unknown backend requested", extra={"backend": backend})
        raise InvalidInput(
            f"Unknown backend: {backend} (expected one of: {', '.join(BACKENDS)})"
        )


def create_summarizer(
    settings: "CompactorSettings",
    backend: Optional[str] = None,
    progress: Optional[ProgressSink] = None,
) -> Summarizer:
    """Create the summarizer selected by ``backend`` or the settings."""
    return SummarizerFactory(settings, progress=progress).create(backend)
