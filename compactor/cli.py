"""
Command-line entry point.

Usage:
  compactor notes.md --split 60 --overlap 20
  compactor notes.md --backend openai --model gpt-4o-mini -o notes.short.md
  compactor notes.md --split-only

Settings not given on the command line come from the environment / ``.env``
(see ``compactor.config``).
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from .config import CompactorSettings, configure_logging, get_settings
from .errors import CompactorError, InvalidInput
from .pipeline import compact_lines, read_document_lines
from .splitting import split_lines
from .summarization.providers import BACKENDS, create_summarizer, stdout_progress
from .validation import (
    validate_file,
    validate_model,
    validate_output_file,
    validate_overlap,
    validate_split,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compactor",
        description=(
            "Split a document into two overlapping parts and summarize them "
            "with an LLM to fit a smaller context window."
        ),
    )
    parser.add_argument("file", help="Document to compact")
    parser.add_argument(
        "-s", "--split",
        default=None,
        help="Percentage of lines in the first part, 1-100 (default: 50)",
    )
    parser.add_argument(
        "-l", "--overlap",
        default=None,
        help="Lines shared by both parts, 0-99999 (default: 0)",
    )
    parser.add_argument(
        "-b", "--backend",
        choices=BACKENDS,
        default=None,
        help="Summarization backend (default: COMPACTOR_BACKEND or claude)",
    )
    parser.add_argument("-m", "--model", default=None, help="Model override")
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (default: <name>.compacted<ext> next to the input)",
    )
    parser.add_argument(
        "--keep-second-part",
        action="store_true",
        help="Summarize only the first part and append the second part verbatim",
    )
    parser.add_argument(
        "--split-only",
        action="store_true",
        help="Write the two parts to <output>.part1/.part2 without summarizing",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each backend call",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser


def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}.compacted{input_path.suffix}")


def part_paths(output_path: Path) -> Tuple[Path, Path]:
    return (
        output_path.with_name(f"{output_path.stem}.part1{output_path.suffix}"),
        output_path.with_name(f"{output_path.stem}.part2{output_path.suffix}"),
    )


def _apply_overrides(settings: CompactorSettings, args: argparse.Namespace) -> CompactorSettings:
    update = {}
    if args.log_level:
        update["log_level"] = args.log_level
    if args.backend:
        update["backend"] = args.backend
    if args.timeout is not None:
        update["claude"] = settings.claude.model_copy(update={"timeout": args.timeout})
        update["openai"] = settings.openai.model_copy(update={"timeout": args.timeout})
    return settings.model_copy(update=update) if update else settings


async def run(
    args: argparse.Namespace,
    settings: CompactorSettings,
    input_path: Path,
    output_path: Path,
    split_percentage: int,
    overlap: int,
    model: Optional[str],
) -> List[Path]:
    """Execute one CLI invocation and return the files written."""
    lines = read_document_lines(input_path)

    if args.split_only:
        split = split_lines(lines, split_percentage, overlap)
        written = []
        for path, part in zip(part_paths(output_path), (split.part_a, split.part_b)):
            path.write_text("\n".join(part) + ("\n" if part else ""), encoding="utf-8")
            written.append(path)
        logger.info(
            "Wrote split parts",
            extra={"files": [str(p) for p in written], "effective_overlap": split.effective_overlap},
        )
        return written

    summarizer = create_summarizer(settings, progress=stdout_progress)
    result = await compact_lines(
        lines,
        summarizer,
        split_percentage,
        overlap,
        model=model,
        keep_second_part=args.keep_second_part,
        progress=stdout_progress,
    )
    output_path.write_text(result.text + "\n", encoding="utf-8")
    return [output_path]


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _apply_overrides(get_settings(), args)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    configure_logging(settings)

    try:
        input_path = validate_file(args.file)
        split_percentage = validate_split(
            args.split if args.split is not None else settings.split_percentage
        )
        overlap = validate_overlap(
            args.overlap if args.overlap is not None else settings.overlap
        )
        model = validate_model(args.model)
        if args.output is not None:
            output_path = Path(validate_output_file(args.output))
        else:
            output_path = default_output_path(input_path)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        written = asyncio.run(
            run(args, settings, input_path, output_path, split_percentage, overlap, model)
        )
    except CompactorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not process {input_path}: {e}", file=sys.stderr)
        return 1

    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
