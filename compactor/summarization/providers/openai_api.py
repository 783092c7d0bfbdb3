"""OpenAI backend: streams a chat completion and concatenates its deltas."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from openai import APIStatusError, AsyncOpenAI

from ...config import DEFAULT_OPENAI_MODEL, OpenAIConfig, resolve_openai_config
from ...errors import (
    BackendAPIError,
    BackendError,
    BackendTimeout,
    UnknownBackendError,
)
from ..prompts import SYSTEM_PROMPT, wrap_content
from ..stream import DeltaAggregator
from .base import ProgressSink, Summarizer, check_content

if TYPE_CHECKING:
    from ...config import CompactorSettings

logger = logging.getLogger(__name__)

ClientFactory = Callable[[OpenAIConfig], Any]


def _default_client(config: OpenAIConfig) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)


def _api_error_message(error: APIStatusError) -> str:
    """Pull the human-readable message out of an API error body."""
    body = error.body
    if isinstance(body, dict):
        detail = body.get("error", body)
        if isinstance(detail, dict) and detail.get("message"):
            return str(detail["message"])
    return error.message


class OpenAISummarizer(Summarizer):
    """OpenAI chat completion provider for summary generation.

    Works with any OpenAI-compatible endpoint. The summary is the
    concatenation of every streamed delta fragment.
    """

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        default_model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = 0.1,
        timeout: Optional[float] = None,
        progress: Optional[ProgressSink] = None,
        client_factory: Optional[ClientFactory] = None,
        config_resolver: Optional[Callable[[], OpenAIConfig]] = None,
    ):
        """Initialize OpenAI summarizer.

        Args:
            config: Fixed credential/endpoint; resolved on first call when omitted
            default_model: Model used when summarize() gets none
            temperature: Sampling temperature
            timeout: Seconds before the stream is abandoned (None = no limit)
            progress: Sink for streamed progress text (default: stdout)
            client_factory: Builds the API client from the resolved config
            config_resolver: Replaces the environment/config-file lookup
        """
        super().__init__(progress)
        self.default_model = default_model
        self.temperature = temperature
        self.timeout = timeout
        self._client_factory = client_factory or _default_client
        self._config = config
        self._config_resolver = config_resolver or resolve_openai_config

    @classmethod
    def from_settings(
        cls,
        settings: "CompactorSettings",
        progress: Optional[ProgressSink] = None,
    ) -> "OpenAISummarizer":
        return cls(
            default_model=settings.openai.model,
            temperature=settings.openai.temperature,
            timeout=settings.openai.timeout,
            progress=progress,
            config_resolver=lambda: resolve_openai_config(settings),
        )

    @property
    def name(self) -> str:
        return "openai"

    def _resolve_config(self) -> OpenAIConfig:
        # Resolved on first use, then reused for every later part
        if self._config is None:
            self._config = self._config_resolver()
        return self._config

    async def summarize(self, content: str, model: Optional[str] = None) -> str:
        check_content(content)
        config = self._resolve_config()
        model = model or self.default_model

        logger.info(
            "Starting OpenAI stream",
            extra={
                "model": model,
                "base_url": config.base_url,
                "content_length": len(content),
            },
        )

        try:
            summary = await asyncio.wait_for(
                self._stream_summary(config, content, model),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"OpenAI stream timed out after {self.timeout}s",
                extra={"model": model, "timeout": self.timeout},
            )
            raise BackendTimeout("OpenAI", self.timeout) from None

        logger.info("OpenAI stream completed", extra={"summary_length": len(summary)})
        return summary

    async def _stream_summary(self, config: OpenAIConfig, content: str, model: str) -> str:
        aggregator = DeltaAggregator()
        try:
            client = self._client_factory(config)
            self.emit("\U0001f517 Connecting to OpenAI API...\n\n")

            stream = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": wrap_content(content)},
                ],
                stream=True,
                response_format={"type": "text"},
                temperature=self.temperature,
            )

            async for chunk in stream:
                for text in aggregator.feed(chunk):
                    self.emit(text)

            self.emit("\n")
        except APIStatusError as e:
            logger.error(
                "OpenAI API returned an error",
                extra={"status_code": e.status_code, "error": str(e)},
            )
            raise BackendAPIError(e.status_code, _api_error_message(e)) from e
        except Exception as e:
            logger.error(
                "OpenAI stream failed",
                extra={"error_type": type(e).__name__, "error": str(e)},
            )
            message = str(e)
            if message:
                raise BackendError(message) from e
            raise UnknownBackendError(repr(e)) from e

        return aggregator.finish()
