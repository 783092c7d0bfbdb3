"""
Summarization backends for context-compactor.

Provides the shared prompt, the stream aggregators, and the Claude CLI and
OpenAI summarizers behind one ``Summarizer`` interface.
"""

from .prompts import SYSTEM_PROMPT, wrap_content
from .stream import (
    AssistantMessage,
    DeltaAggregator,
    FinalResult,
    StreamJsonAggregator,
    SystemNotice,
    decode_event,
    delta_text,
)
from .providers import (
    BACKENDS,
    ClaudeCLISummarizer,
    OpenAISummarizer,
    ProgressSink,
    Summarizer,
    SummarizerFactory,
    create_summarizer,
)

__all__ = [
    "SYSTEM_PROMPT",
    "wrap_content",
    "AssistantMessage",
    "DeltaAggregator",
    "FinalResult",
    "StreamJsonAggregator",
    "SystemNotice",
    "decode_event",
    "delta_text",
    "BACKENDS",
    "ClaudeCLISummarizer",
    "OpenAISummarizer",
    "ProgressSink",
    "Summarizer",
    "SummarizerFactory",
    "create_summarizer",
]
