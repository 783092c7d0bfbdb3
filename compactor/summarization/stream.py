"""Incremental aggregation of streamed backend output into one summary.

Both aggregators are plain state holders fed one chunk at a time. ``feed``
returns the progress text to show for that chunk; ``finish`` returns the
trimmed summary or raises ``EmptyResult``. Neither does any I/O, so the
same object works whether chunks come from a pipe, a network stream, or a
test.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from ..errors import EmptyResult, ParseDiagnostic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssistantMessage:
    """Incremental assistant output, shown as progress only."""

    texts: Tuple[str, ...]


@dataclass(frozen=True)
class FinalResult:
    """Terminal summary text; replaces any earlier result."""

    text: str


@dataclass(frozen=True)
class SystemNotice:
    """Informational event; ``model`` names the backend model when present."""

    model: Optional[str] = None


StreamEvent = Union[AssistantMessage, FinalResult, SystemNotice]


def decode_event(line: str) -> Optional[StreamEvent]:
    """Decode one stream-json line into an event.

    Returns None for valid JSON that is not a recognized event.

    Raises:
        ValueError: If the line is not valid JSON or is nested too deeply to decode
    """
    try:
        parsed = json.loads(line)
    except RecursionError as e:
        raise ValueError(f"JSON nesting too deep: {e}") from e
    if not isinstance(parsed, dict):
        return None

    event_type = parsed.get("type")

    if event_type == "assistant":
        message = parsed.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, list):
            return None
        texts = tuple(
            item["text"]
            for item in content
            if isinstance(item, dict)
            and item.get("type") == "text"
            and isinstance(item.get("text"), str)
            and item["text"]
        )
        return AssistantMessage(texts=texts)

    if event_type == "result":
        result = parsed.get("result")
        if isinstance(result, str) and result:
            return FinalResult(text=result)
        return None

    if event_type == "system":
        model = parsed.get("model")
        return SystemNotice(model=model if isinstance(model, str) and model else None)

    return None


def _looks_like_json(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("{") and stripped.endswith("}")


class StreamJsonAggregator:
    """State machine for the Claude CLI ``stream-json`` output.

    Output arrives in chunks that are not aligned to lines. Each chunk is
    appended to ``pending``; every complete line is decoded and dispatched,
    and the unterminated tail stays in ``pending`` for the next chunk.
    """

    CONNECTED_BANNER = "\U0001f517 Connected to Claude, generating response...\n\n"
    UNKNOWN_SYSTEM_NOTICE = "Unknown system message detected.\n"

    def __init__(self, backend: str = "Claude"):
        self.backend = backend
        self.pending = ""
        self.result = ""
        self.first_fragment_seen = False
        self.diagnostics: List[ParseDiagnostic] = []

    def feed(self, chunk: str) -> List[str]:
        """Consume a chunk of stdout text.

        Args:
            chunk: Raw text as read from the process, any size

        Returns:
            Progress text to emit, in order
        """
        self.pending += chunk
        *lines, self.pending = self.pending.split("\n")

        output: List[str] = []
        for index, line in enumerate(lines):
            if not line.strip():
                continue

            try:
                event = decode_event(line)
            except ValueError as e:
                if _looks_like_json(line):
                    self._record_diagnostic(line.strip(), str(e))
                continue

            if isinstance(event, AssistantMessage):
                if not self.first_fragment_seen:
                    output.append(self.CONNECTED_BANNER)
                    self.first_fragment_seen = True
                output.extend(event.texts)
            elif isinstance(event, FinalResult):
                self.result = event.text
            elif isinstance(event, SystemNotice):
                if event.model:
                    output.append(f"Process input using {event.model}...\n\n")
                else:
                    output.append(self.UNKNOWN_SYSTEM_NOTICE)
                # A system event ends processing of the current chunk
                skipped = len(lines) - index - 1
                if skipped:
                    logger.debug(
                        "Skipped lines after system event",
                        extra={"skipped_lines": skipped},
                    )
                break

        return output

    def finish(self) -> str:
        """Return the trimmed final result.

        Raises:
            EmptyResult: If no non-blank result was received
        """
        if self.pending.strip():
            logger.debug(
                "Discarding unterminated output line",
                extra={"pending_length": len(self.pending)},
            )
        summary = self.result.strip()
        if not summary:
            raise EmptyResult(self.backend)
        return summary

    def _record_diagnostic(self, line: str, error: str) -> None:
        diagnostic = ParseDiagnostic(line=line, error=error)
        self.diagnostics.append(diagnostic)
        logger.warning(
            f"Failed to parse JSON: {line}",
            extra={"error": error},
        )


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def delta_text(chunk: Any) -> str:
    """Extract ``choices[0].delta.content`` from a completion chunk.

    Works on SDK objects and plain dicts. Anything missing or of the wrong
    type yields an empty fragment.
    """
    choices = _field(chunk, "choices")
    if not choices:
        return ""
    try:
        first = choices[0]
    except (IndexError, KeyError, TypeError):
        return ""
    delta = _field(first, "delta")
    if delta is None:
        return ""
    content = _field(delta, "content")
    return content if isinstance(content, str) else ""


class DeltaAggregator:
    """Accumulates delta fragments from a chat completion stream."""

    CONNECTED_BANNER = "Connected to OpenAI, generating response...\n\n"

    def __init__(self, backend: str = "OpenAI"):
        self.backend = backend
        self.fragments: List[str] = []
        self.first_fragment_seen = False

    @property
    def text(self) -> str:
        return "".join(self.fragments)

    def feed(self, chunk: Any) -> List[str]:
        """Consume one stream chunk and return the progress text to emit."""
        fragment = delta_text(chunk)
        if not fragment:
            return []

        output: List[str] = []
        if not self.first_fragment_seen:
            output.append(self.CONNECTED_BANNER)
            self.first_fragment_seen = True
        output.append(fragment)
        self.fragments.append(fragment)
        return output

    def finish(self) -> str:
        summary = self.text.strip()
        if not summary:
            raise EmptyResult(self.backend)
        return summary
