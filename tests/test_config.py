"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

import invtrack.config as config_module
from invtrack.config import Settings, load_config


class TestDefaults:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config_module, "_ENV_FILE", tmp_path / ".env")
        s = Settings()
        assert s.port == 3000
        assert s.docs_url == "/api-docs"
        assert s.upload_dir == Path("./uploads")
        assert s.log_level == "info"


class TestLogLevel:
    def test_uppercase_normalized(self):
        assert Settings(log_level="DEBUG").log_level == "debug"

    def test_whitespace_stripped(self):
        assert Settings(log_level=" warning ").log_level == "warning"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")


class TestSources:
    def test_env_var_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config_module, "_ENV_FILE", tmp_path / ".env")
        monkeypatch.setenv("INVTRACK_PORT", "8080")
        monkeypatch.setenv("INVTRACK_UPLOAD_DIR", str(tmp_path / "img"))
        s = load_config()
        assert s.port == 8080
        assert s.upload_dir == tmp_path / "img"

    def test_dotenv_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('INVTRACK_DOCS_URL="/docs"\nOTHER=1\n', encoding="utf-8")
        monkeypatch.setattr(config_module, "_ENV_FILE", env_file)
        monkeypatch.delenv("INVTRACK_DOCS_URL", raising=False)
        assert load_config().docs_url == "/docs"

    def test_env_overrides_dotenv(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("INVTRACK_PORT=4000\n", encoding="utf-8")
        monkeypatch.setattr(config_module, "_ENV_FILE", env_file)
        monkeypatch.setenv("INVTRACK_PORT", "5000")
        assert load_config().port == 5000
