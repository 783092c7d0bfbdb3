"""Error taxonomy for document compaction.

Every failure raised by the splitter, the validators and the summarizer
backends derives from ``CompactorError``. Backend failures carry the detail
needed to diagnose them (exit code, captured stderr, API status) in both
their attributes and their message.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class CompactorError(Exception):
    """Base exception for compaction failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(CompactorError, ValueError):
    """Caller-supplied content or parameters failed a precondition."""


class BackendFailure(CompactorError):
    """Base class for failures of a summarization backend."""


class SpawnFailed(BackendFailure):
    """The backend executable could not be launched."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to spawn Claude process: {reason}")


class BackendProcessFailed(BackendFailure):
    """The backend process exited with a non-zero code."""

    def __init__(self, exit_code: Optional[int], stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Claude process exited with code {exit_code}: {stderr}")


class BackendAPIError(BackendFailure):
    """The model API answered with a structured error."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.api_message = message
        super().__init__(f"OpenAI API error: {status_code} - {message}")


class BackendError(BackendFailure):
    """Transport or client failure that carries a message."""

    def __init__(self, message: str):
        super().__init__(f"OpenAI error: {message}")
        self.detail = message


class UnknownBackendError(BackendFailure):
    """Failure with no usable message; keeps the exception representation."""

    def __init__(self, representation: str):
        self.representation = representation
        super().__init__(f"Unknown OpenAI error: {representation}")


class BackendTimeout(BackendFailure):
    """The backend did not finish within the configured timeout."""

    def __init__(self, backend: str, timeout: float):
        self.backend = backend
        self.timeout = timeout
        super().__init__(f"{backend} did not finish within {timeout:g}s")


class EmptyResult(CompactorError):
    """The backend finished successfully but produced no usable text."""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(f"{backend} returned empty output")


@dataclass(frozen=True)
class ParseDiagnostic:
    """Non-fatal record of a JSON-looking line that failed to decode."""

    line: str
    error: str
