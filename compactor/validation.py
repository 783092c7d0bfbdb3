"""Validation of command-line parameters before splitting and summarizing."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Optional

from .errors import InvalidInput

MAX_OVERLAP_LINES = 99999

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"|?*]')


def _as_int(value: Any) -> Optional[int]:
    """Coerce an int or integer-looking string; None for anything else."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def validate_split(value: Any) -> int:
    """Validate the split percentage (integer in 1-100)."""
    number = _as_int(value)
    if number is None or number < 1 or number > 100:
        raise InvalidInput("Split percentage must be between 1 and 100")
    return number


def validate_overlap(value: Any) -> int:
    """Validate the overlap line count (integer in 0-99999)."""
    number = _as_int(value)
    if number is None or number < 0 or number > MAX_OVERLAP_LINES:
        raise InvalidInput(
            f"Overlap lines must be between 0 and {MAX_OVERLAP_LINES}"
        )
    return number


def validate_file(filepath: str | os.PathLike[str]) -> Path:
    """Check that ``filepath`` names an existing, readable regular file.

    Raises:
        InvalidInput: If the file is missing, a directory, or unreadable
    """
    path = Path(filepath)
    if not path.exists():
        raise InvalidInput(f"File not found: {filepath}")
    if path.is_dir():
        raise InvalidInput(f"Path is a directory, not a file: {filepath}")
    if not os.access(path, os.R_OK):
        raise InvalidInput(f"Cannot read file: {filepath}")
    return path


def validate_model(model: Any) -> Optional[str]:
    """Normalize an optional model name; blank means "use the default"."""
    if model is None:
        return None
    if not isinstance(model, str):
        raise InvalidInput("Model must be a string")
    model = model.strip()
    return model or None


def validate_output_file(filename: Any) -> str:
    """Reject empty output names and names with characters invalid on common filesystems."""
    if not filename or not isinstance(filename, str):
        raise InvalidInput("Output filename must be a string")
    if _INVALID_FILENAME_CHARS.search(filename):
        raise InvalidInput("Output filename contains invalid characters")
    return filename
