"""Test configuration settings, config-file loading and logging setup."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from compactor.config import (
    ClaudeSettings,
    CompactorSettings,
    JSONFormatter,
    OpenAIConfig,
    OpenAISettings,
    configure_logging,
    get_settings,
    load_config_file,
    resolve_openai_config,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCompactorSettings:
    """Test top-level settings."""

    def test_default_values(self):
        settings = CompactorSettings()
        assert settings.backend == "claude"
        assert settings.config_file == Path("config.json")
        assert settings.split_percentage == 50
        assert settings.overlap == 0
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("COMPACTOR_BACKEND", "OpenAI")
        monkeypatch.setenv("COMPACTOR_SPLIT", "70")
        monkeypatch.setenv("COMPACTOR_OVERLAP", "12")
        monkeypatch.setenv("COMPACTOR_CONFIG_FILE", "/etc/compactor.json")

        settings = CompactorSettings()
        assert settings.backend == "openai"
        assert settings.split_percentage == 70
        assert settings.overlap == 12
        assert settings.config_file == Path("/etc/compactor.json")

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("COMPACTOR_BACKEND=openai\nOPENAI_MODEL=gpt-4o\n")

        settings = CompactorSettings()
        assert settings.backend == "openai"
        assert settings.openai.model == "gpt-4o"

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("COMPACTOR_BACKEND", "llama")
        with pytest.raises(ValidationError):
            CompactorSettings()

    def test_split_range_enforced(self, monkeypatch):
        monkeypatch.setenv("COMPACTOR_SPLIT", "0")
        with pytest.raises(ValidationError):
            CompactorSettings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestBackendSettings:
    def test_claude_defaults(self):
        claude = ClaudeSettings()
        assert claude.executable == "claude"
        assert claude.model is None
        assert claude.timeout is None

    def test_claude_env_vars(self, monkeypatch):
        monkeypatch.setenv("CLAUDE_EXECUTABLE", "/usr/local/bin/claude")
        monkeypatch.setenv("CLAUDE_MODEL", "sonnet")
        monkeypatch.setenv("CLAUDE_TIMEOUT", "90")

        settings = CompactorSettings()
        assert settings.claude.executable == "/usr/local/bin/claude"
        assert settings.claude.model == "sonnet"
        assert settings.claude.timeout == 90.0

    def test_openai_defaults(self):
        openai = OpenAISettings()
        assert openai.api_key is None
        assert openai.base_url is None
        assert openai.model == "gpt-4o-mini"
        assert openai.temperature == 0.1

    def test_blank_openai_key_is_unset(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "   ")
        assert OpenAISettings().api_key is None


class TestLoadConfigFile:
    def test_reads_json_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"apiKey": "k", "baseURL": "https://x"}))

        assert load_config_file(path) == {"apiKey": "k", "baseURL": "https://x"}

    def test_missing_file_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert load_config_file(tmp_path / "missing.json") == {}

        assert "Could not load" in caplog.text
        assert len(caplog.records) == 1

    def test_invalid_json_warns(self, tmp_path, caplog):
        path = tmp_path / "config.json"
        path.write_text("{ invalid json }")

        with caplog.at_level(logging.WARNING):
            assert load_config_file(path) == {}

        assert "Could not load" in caplog.text

    def test_non_object_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]")

        with caplog.at_level(logging.WARNING):
            assert load_config_file(path) == {}

        assert "expected a JSON object" in caplog.text


class TestResolveOpenAIConfig:
    def test_file_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"apiKey": "file-key", "baseURL": "https://proxy/v1"}))

        config = resolve_openai_config(CompactorSettings(), config_file=path)
        assert config == OpenAIConfig(api_key="file-key", base_url="https://proxy/v1")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"apiKey": "file-key", "baseURL": "https://proxy/v1"}))
        monkeypatch.setenv("OPENAI_API_KEY", "env-key")

        config = resolve_openai_config(CompactorSettings(), config_file=path)
        assert config.api_key == "env-key"
        assert config.base_url == "https://proxy/v1"

    def test_env_base_url_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"baseURL": "https://file/v1"}))
        monkeypatch.setenv("OPENAI_BASE_URL", "https://env/v1")

        assert resolve_openai_config(CompactorSettings(), config_file=path).base_url == "https://env/v1"

    def test_default_config_file_in_working_directory(self, tmp_path):
        (tmp_path / "config.json").write_text(json.dumps({"apiKey": "cwd-key"}))

        assert resolve_openai_config().api_key == "cwd-key"

    def test_nothing_configured(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = resolve_openai_config(CompactorSettings())

        assert config == OpenAIConfig()
        assert "Using default OpenAI settings" in caplog.text


class TestConfigureLogging:
    def test_text_format(self, restore_root_logger):
        configure_logging(CompactorSettings(log_level="debug"))

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert not isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_format(self, restore_root_logger):
        configure_logging(CompactorSettings(log_format="json"))

        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_json_formatter_includes_extra(self):
        record = logging.LogRecord("compactor.test", logging.INFO, __file__, 1, "hello %s", ("there",), None)
        record.backend = "claude"

        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "hello there"
        assert payload["level"] == "INFO"
        assert payload["backend"] == "claude"
