from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the repository root importable so `compactor` and `tests.fakes` resolve
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from compactor.config import get_settings  # noqa: E402

_SETTINGS_ENV_VARS = [
    "COMPACTOR_BACKEND", "BACKEND", "COMPACTOR_CONFIG_FILE", "CONFIG_FILE",
    "COMPACTOR_SPLIT", "SPLIT_PERCENTAGE", "COMPACTOR_OVERLAP", "OVERLAP_LINES",
    "LOG_LEVEL", "LOG_FORMAT",
    "CLAUDE_EXECUTABLE", "CLAUDE_BIN", "CLAUDE_MODEL", "CLAUDE_TIMEOUT",
    "OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_API_BASE", "OPENAI_MODEL",
    "OPENAI_TEMPERATURE", "OPENAI_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate every test from the caller's environment, .env and config.json."""
    monkeypatch.chdir(tmp_path)
    for var in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def generate_lines(count: int, prefix: str = "Line") -> list[str]:
    return [f"{prefix} {i}" for i in range(1, count + 1)]


@pytest.fixture
def make_lines():
    return generate_lines
