"""Claude CLI backend: drives the ``claude`` executable in stream-json mode."""
from __future__ import annotations

import asyncio
import codecs
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional, Tuple

from ...errors import BackendProcessFailed, BackendTimeout, SpawnFailed
from ..prompts import SYSTEM_PROMPT, wrap_content
from ..stream import StreamJsonAggregator
from .base import ProgressSink, Summarizer, check_content

if TYPE_CHECKING:
    from ...config import ClaudeSettings

logger = logging.getLogger(__name__)

Spawner = Callable[..., Awaitable[Any]]


class ClaudeCLISummarizer(Summarizer):
    """Summarizer backed by the Claude command-line client.

    The wrapped content goes to stdin; stdout carries newline-delimited JSON
    events that a ``StreamJsonAggregator`` reduces to the final result;
    stderr is only kept for the error message on a non-zero exit.
    """

    READ_SIZE = 4096

    def __init__(
        self,
        executable: str = "claude",
        default_model: Optional[str] = None,
        timeout: Optional[float] = None,
        progress: Optional[ProgressSink] = None,
        spawner: Optional[Spawner] = None,
    ):
        """Initialize Claude CLI summarizer.

        Args:
            executable: Name or path of the claude binary
            default_model: Model used when summarize() gets none
            timeout: Seconds before the process is killed (None = no limit)
            progress: Sink for streamed progress text (default: stdout)
            spawner: Replacement for asyncio.create_subprocess_exec
        """
        super().__init__(progress)
        self.executable = executable
        self.default_model = default_model
        self.timeout = timeout
        self._spawner = spawner or asyncio.create_subprocess_exec

    @classmethod
    def from_settings(
        cls,
        settings: "ClaudeSettings",
        progress: Optional[ProgressSink] = None,
    ) -> "ClaudeCLISummarizer":
        return cls(
            executable=settings.executable,
            default_model=settings.model,
            timeout=settings.timeout,
            progress=progress,
        )

    @property
    def name(self) -> str:
        return "claude"

    def build_args(self, model: Optional[str] = None) -> List[str]:
        """Build CLI arguments for one summarization request."""
        args = [
            "--output-format", "stream-json",
            "--verbose",
            "--system-prompt", SYSTEM_PROMPT,
        ]
        if model:
            args.extend(["--model", model])
        return args

    async def summarize(self, content: str, model: Optional[str] = None) -> str:
        check_content(content)
        model = model or self.default_model
        args = self.build_args(model)

        logger.info(
            "Starting Claude CLI",
            extra={
                "executable": self.executable,
                "model": model,
                "content_length": len(content),
            },
        )

        try:
            process = await self._spawner(
                self.executable,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(
                "Failed to spawn Claude CLI",
                extra={"executable": self.executable, "error": str(e)},
            )
            raise SpawnFailed(str(e)) from e

        aggregator = StreamJsonAggregator()
        try:
            exit_code, stderr = await asyncio.wait_for(
                self._communicate(process, content, aggregator),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            logger.warning(
                f"Claude CLI timed out after {self.timeout}s",
                extra={"executable": self.executable, "timeout": self.timeout},
            )
            raise BackendTimeout("Claude", self.timeout) from None
        except BaseException:
            # Never leave the child running behind a failed call
            await self._kill(process)
            raise

        if exit_code != 0:
            logger.error(
                "Claude CLI exited with error",
                extra={"exit_code": exit_code, "stderr": stderr},
            )
            raise BackendProcessFailed(exit_code, stderr)

        summary = aggregator.finish()
        logger.info(
            "Claude CLI completed",
            extra={
                "summary_length": len(summary),
                "parse_diagnostics": len(aggregator.diagnostics),
            },
        )
        return summary

    async def _communicate(
        self,
        process: Any,
        content: str,
        aggregator: StreamJsonAggregator,
    ) -> Tuple[int, str]:
        """Feed stdin and drain stdout/stderr concurrently, then wait for exit.

        If any of the three fails, the others are cancelled before the
        error propagates.
        """
        tasks = [
            asyncio.ensure_future(self._write_input(process.stdin, wrap_content(content))),
            asyncio.ensure_future(self._read_output(process.stdout, aggregator)),
            asyncio.ensure_future(self._read_text(process.stderr)),
        ]
        try:
            _, _, stderr = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        exit_code = await process.wait()
        return exit_code, stderr

    async def _write_input(self, stdin: Any, text: str) -> None:
        try:
            stdin.write(text.encode("utf-8"))
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.warning(
                "Claude CLI closed stdin before reading all input",
                extra={"error": str(e)},
            )
        finally:
            stdin.close()

        try:
            await stdin.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.debug("stdin already closed by Claude CLI", extra={"error": str(e)})

    async def _read_output(self, stdout: Any, aggregator: StreamJsonAggregator) -> None:
        # Incremental decoding keeps multi-byte characters split across reads intact
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await stdout.read(self.READ_SIZE)
            if not data:
                break
            for text in aggregator.feed(decoder.decode(data)):
                self.emit(text)

        tail = decoder.decode(b"", final=True)
        if tail:
            for text in aggregator.feed(tail):
                self.emit(text)

    async def _read_text(self, stream: Any) -> str:
        data = await stream.read()
        return data.decode("utf-8", errors="replace")

    async def _kill(self, process: Any) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
