"""Two-part document compaction: split, summarize each part, concatenate."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import InvalidInput
from .splitting import SplitResult, split_lines
from .summarization.providers import ProgressSink, Summarizer

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"


@dataclass
class CompactionResult:
    """Outcome of compacting one document."""

    split: SplitResult
    sections: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return SECTION_SEPARATOR.join(self.sections)


def read_document_lines(path: Path) -> List[str]:
    """Read a UTF-8 document as a list of lines without line terminators.

    Raises:
        InvalidInput: If the document has no lines
    """
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    if not lines:
        raise InvalidInput(f"File is empty: {path}")
    return lines


async def compact_lines(
    lines: Sequence[str],
    summarizer: Summarizer,
    split_percentage: int,
    overlap: int,
    model: Optional[str] = None,
    keep_second_part: bool = False,
    progress: Optional[ProgressSink] = None,
) -> CompactionResult:
    """Split ``lines`` and summarize the parts one after the other.

    Args:
        lines: Document lines
        summarizer: Backend used for every part
        split_percentage: Share of lines in the first part, 1-100
        overlap: Lines shared by both parts
        model: Optional model override passed to the summarizer
        keep_second_part: Keep the second part verbatim instead of summarizing it
        progress: Optional sink for per-part headers

    Returns:
        CompactionResult whose ``text`` is the concatenated sections
    """
    split = split_lines(lines, split_percentage, overlap)
    result = CompactionResult(split=split)

    logger.info(
        "Compacting document",
        extra={
            "backend": summarizer.name,
            "part_a_lines": len(split.part_a),
            "part_b_lines": len(split.part_b),
            "effective_overlap": split.effective_overlap,
        },
    )

    parts = [split.part_a]
    if split.part_b:
        parts.append(split.part_b)

    for number, part in enumerate(parts, start=1):
        text = "\n".join(part)
        if number == 2 and keep_second_part:
            result.sections.append(text)
            continue
        if number == 2 and not text.strip():
            logger.info("Second part is blank; skipping summarization")
            continue

        if progress:
            progress(f"\n=== Summarizing part {number} of {len(parts)} ({len(part)} lines) ===\n")
        summary = await summarizer.summarize(text, model)
        if progress:
            progress("\n")
        result.sections.append(summary)

    return result
