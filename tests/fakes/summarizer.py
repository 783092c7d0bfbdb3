"""
Fake summarizer and progress sink.

FakeSummarizer implements the Summarizer interface with canned output so
pipeline and CLI tests run without any backend.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from compactor.summarization.providers import Summarizer, check_content


class ProgressRecorder:
    """Progress sink collecting everything written to it."""

    def __init__(self):
        self.parts: List[str] = []

    def __call__(self, text: str) -> None:
        self.parts.append(text)

    @property
    def text(self) -> str:
        return "".join(self.parts)


class FakeSummarizer(Summarizer):
    """
    Summarizer returning "summary N: <first line>" for the Nth call.

    Records every (content, model) pair; set ``error`` to make every call
    raise instead.
    """

    def __init__(self, error: Optional[Exception] = None, progress=None):
        super().__init__(progress or ProgressRecorder())
        self.error = error
        self.calls: List[Tuple[str, Optional[str]]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def summarize(self, content: str, model: Optional[str] = None) -> str:
        check_content(content)
        self.calls.append((content, model))
        if self.error is not None:
            raise self.error
        return f"summary {len(self.calls)}: {content.splitlines()[0]}"
