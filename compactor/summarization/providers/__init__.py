from .base import ProgressSink, Summarizer, check_content, stdout_progress
from .claude_cli import ClaudeCLISummarizer
from .factory import BACKENDS, SummarizerFactory, create_summarizer
from .openai_api import OpenAISummarizer

__all__ = [
    "BACKENDS",
    "ProgressSink",
    "Summarizer",
    "check_content",
    "stdout_progress",
    "ClaudeCLISummarizer",
    "OpenAISummarizer",
    "SummarizerFactory",
    "create_summarizer",
]
