"""
context-compactor: shrink long documents to fit a bounded context window.

Contains:
- splitting: overlap-aware two-part line splitter
- summarization: Claude CLI and OpenAI summarizers with stream aggregation
- pipeline: split, summarize and concatenate a document
- config: environment / config-file settings and logging setup
- validation: command-line parameter checks
"""

from .errors import (
    BackendAPIError,
    BackendError,
    BackendFailure,
    BackendProcessFailed,
    BackendTimeout,
    CompactorError,
    EmptyResult,
    InvalidInput,
    ParseDiagnostic,
    SpawnFailed,
    UnknownBackendError,
)
from .splitting import SplitResult, split_lines

__version__ = "1.0.0"

__all__ = [
    "BackendAPIError",
    "BackendError",
    "BackendFailure",
    "BackendProcessFailed",
    "BackendTimeout",
    "CompactorError",
    "EmptyResult",
    "InvalidInput",
    "ParseDiagnostic",
    "SpawnFailed",
    "UnknownBackendError",
    "SplitResult",
    "split_lines",
]
