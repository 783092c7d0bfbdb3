"""
Configuration for context-compactor.

Provides environment-based configuration with Pydantic settings, the
lenient JSON config-file loader used for API credentials, and logging setup.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_prefix="",
    case_sensitive=False,
    extra="ignore",
    populate_by_name=True,
)


class ClaudeSettings(BaseSettings):
    """Claude CLI backend settings."""

    executable: str = Field(
        default="claude",
        validation_alias=AliasChoices("CLAUDE_EXECUTABLE", "CLAUDE_BIN"),
    )
    model: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CLAUDE_MODEL"),
    )
    timeout: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("CLAUDE_TIMEOUT"),
        description="Seconds before the CLI process is killed; unset waits forever",
    )

    model_config = _ENV_CONFIG


class OpenAISettings(BaseSettings):
    """OpenAI API backend settings.

    ``api_key`` and ``base_url`` only hold environment overrides here; use
    ``resolve_openai_config`` to merge them with the config file.
    """

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY"),
    )
    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "OPENAI_API_BASE"),
    )
    model: str = Field(
        default=DEFAULT_OPENAI_MODEL,
        validation_alias=AliasChoices("OPENAI_MODEL"),
    )
    temperature: float = Field(
        default=0.1,
        validation_alias=AliasChoices("OPENAI_TEMPERATURE"),
    )
    timeout: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_TIMEOUT"),
    )

    model_config = _ENV_CONFIG

    @field_validator("api_key", "base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CompactorSettings(BaseSettings):
    """Top-level settings loaded from environment variables and ``.env``."""

    backend: Literal["claude", "openai"] = Field(
        default="claude",
        validation_alias=AliasChoices("COMPACTOR_BACKEND", "BACKEND"),
    )
    config_file: Path = Field(
        default=Path("config.json"),
        validation_alias=AliasChoices("COMPACTOR_CONFIG_FILE", "CONFIG_FILE"),
    )
    split_percentage: int = Field(
        default=50,
        ge=1,
        le=100,
        validation_alias=AliasChoices("COMPACTOR_SPLIT", "SPLIT_PERCENTAGE"),
    )
    overlap: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("COMPACTOR_OVERLAP", "OVERLAP_LINES"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = Field(
        default="text",
        validation_alias=AliasChoices("LOG_FORMAT"),
        description="Log format: 'json' or 'text'",
    )

    # Backend sections read their own environment variables
    claude: ClaudeSettings = Field(default_factory=ClaudeSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)

    model_config = _ENV_CONFIG

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache
def get_settings() -> CompactorSettings:
    """Get cached settings instance."""
    return CompactorSettings()


@dataclass(frozen=True)
class OpenAIConfig:
    """Resolved credential and endpoint for the OpenAI client."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None


def load_config_file(path: Path) -> dict[str, Any]:
    """Load the JSON config file, degrading to an empty mapping.

    A missing, unreadable, malformed, or non-object file is not an error:
    one warning is logged and no overrides are applied.

    Args:
        path: Location of the JSON config file

    Returns:
        Parsed key/value settings, or an empty dict
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, ValueError) as e:
        logger.warning(
            f"Could not load {path}. Using default OpenAI settings.",
            extra={"config_file": str(path), "error": str(e)},
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(
            f"Ignoring {path}: expected a JSON object",
            extra={"config_file": str(path)},
        )
        return {}
    return data


def _file_value(values: dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = values.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def resolve_openai_config(
    settings: Optional[CompactorSettings] = None,
    config_file: Optional[Path] = None,
) -> OpenAIConfig:
    """Resolve the OpenAI credential and endpoint.

    Precedence per value: environment setting, then config file
    (``apiKey`` / ``baseURL``), then no override.

    Args:
        settings: Settings instance, uses cached settings if not provided
        config_file: Config file path, defaults to ``settings.config_file``

    Returns:
        OpenAIConfig with whatever could be resolved
    """
    if settings is None:
        settings = get_settings()

    file_values = load_config_file(config_file or settings.config_file)

    return OpenAIConfig(
        api_key=settings.openai.api_key or _file_value(file_values, "apiKey", "api_key"),
        base_url=settings.openai.base_url or _file_value(file_values, "baseURL", "base_url"),
    )


_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_record[key] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(settings: Optional[CompactorSettings] = None) -> None:
    """Configure logging based on settings.

    Logs go to stderr; stdout is reserved for streamed summaries.

    Args:
        settings: Optional settings instance, uses cached settings if not provided
    """
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)

    # Set third-party loggers to WARNING to reduce noise
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)
