from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ...errors import InvalidInput

ProgressSink = Callable[[str], None]


def stdout_progress(text: str) -> None:
    """Default progress sink: write straight to stdout and flush."""
    sys.stdout.write(text)
    sys.stdout.flush()


def check_content(content: Optional[str]) -> str:
    """Reject missing or empty content before any backend work starts."""
    if content is None:
        raise InvalidInput("Content cannot be null or undefined")
    if content == "":
        raise InvalidInput("Content cannot be empty")
    return content


class Summarizer(ABC):
    """Base class for summarization backends.

    A backend turns one piece of document text into one summary, streaming
    human-readable progress to ``progress`` while it works. Each call owns
    its own buffers, so concurrent calls on one instance are safe.
    """

    def __init__(self, progress: Optional[ProgressSink] = None):
        self._progress = progress or stdout_progress

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g., 'claude', 'openai')"""
        pass

    @abstractmethod
    async def summarize(self, content: str, model: Optional[str] = None) -> str:
        """Summarize ``content``.

        Args:
            content: Text to summarize; must be non-empty
            model: Optional model override

        Returns:
            Non-empty, whitespace-trimmed summary

        Raises:
            InvalidInput: If content is None or empty
            BackendFailure: If the backend could not produce a response
            EmptyResult: If the backend produced only whitespace
        """
        pass

    def emit(self, text: str) -> None:
        if text:
            self._progress(text)
