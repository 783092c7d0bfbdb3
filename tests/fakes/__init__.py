"""
Fake implementations for testing.

Fakes implement the same interface as the real collaborators but avoid
subprocesses and network calls, so tests stay fast and deterministic.

Key fakes:
- FakeProcess / FakeSpawner: scripted Claude CLI process
- FakeOpenAIClient / FakeClientFactory: scripted chat completion stream
- FakeSummarizer: canned summaries for pipeline and CLI tests
- ProgressRecorder: progress sink that records streamed text
"""

from tests.fakes.process import FakeProcess, FakeSpawner, FakeStdin, FakeStreamReader
from tests.fakes.openai_client import (
    FakeClientFactory,
    FakeOpenAIClient,
    FakeStream,
    make_chunk,
)
from tests.fakes.summarizer import FakeSummarizer, ProgressRecorder

__all__ = [
    "FakeProcess",
    "FakeSpawner",
    "FakeStdin",
    "FakeStreamReader",
    "FakeClientFactory",
    "FakeOpenAIClient",
    "FakeStream",
    "make_chunk",
    "FakeSummarizer",
    "ProgressRecorder",
]
