"""Overlap-aware line splitting for two-part document compaction."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitResult:
    """Two overlapping parts of a line sequence.

    ``part_a + part_b[effective_overlap:]`` reproduces the original lines.
    """

    part_a: List[str] = field(default_factory=list)
    part_b: List[str] = field(default_factory=list)
    effective_overlap: int = 0

    def __iter__(self):
        # Allows ``part_a, part_b = split_lines(...)``
        yield self.part_a
        yield self.part_b


def split_lines(
    lines: Sequence[str], split_percentage: int, overlap: int
) -> SplitResult:
    """Split lines into two parts sharing ``overlap`` lines at the boundary.

    The split index is ``len(lines) * split_percentage // 100``. Overlap is
    clamped to the lines available on both sides of the split index. An index
    of zero still yields a one-line first part; an index at or past the end
    yields an empty second part.

    Args:
        lines: Document lines, in order
        split_percentage: Share of lines in the first part, 1-100
        overlap: Lines to duplicate across the boundary, >= 0

    Returns:
        SplitResult holding new lists; ``lines`` is not modified

    Raises:
        InvalidInput: If lines is empty or a parameter is out of range
    """
    if not lines:
        raise InvalidInput("lines must be non-empty")
    if split_percentage < 1 or split_percentage > 100:
        raise InvalidInput("split percentage out of range")
    if overlap < 0:
        raise InvalidInput("overlap must be non-negative")

    total = len(lines)
    split_index = (total * split_percentage) // 100

    if split_index == 0:
        return SplitResult(part_a=[lines[0]], part_b=list(lines[1:]))

    if split_index >= total:
        return SplitResult(part_a=list(lines), part_b=[])

    effective = min(overlap, split_index, total - split_index)
    part_a_end = min(split_index + effective, total)
    part_b_start = max(0, part_a_end - effective)

    logger.debug(
        "Split document",
        extra={
            "total_lines": total,
            "split_index": split_index,
            "effective_overlap": effective,
        },
    )

    return SplitResult(
        part_a=list(lines[:part_a_end]),
        part_b=list(lines[part_b_start:]),
        effective_overlap=effective,
    )
