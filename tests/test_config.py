"""
Tests for image_updater_modules/config.py
"""

import pytest
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import image_updater_modules.config as config_module
from image_updater_modules.config import (
    default_config, load_config, save_config, resolve_runtime_config, log_and_status,
    DEFAULT_API_BASE_URL, DEFAULT_APP_PASSWORD
)


@pytest.fixture
def config_path(monkeypatch, temp_dir):
    path = temp_dir / "config.json"
    monkeypatch.setattr(config_module, 'CONFIG_FILE', str(path))
    return path


# ============================================================================
# LOAD / SAVE
# ============================================================================

class TestLoadConfig:
    """Tests for load_config() and save_config()."""

    def test_creates_file_with_defaults(self, config_path):
        cfg = load_config()

        assert cfg == default_config()
        assert json.loads(config_path.read_text()) == default_config()

    def test_fills_missing_keys(self, config_path):
        config_path.write_text(json.dumps({"API_BASE_URL": "https://api.example.test"}))

        cfg = load_config()

        assert cfg["API_BASE_URL"] == "https://api.example.test"
        assert cfg["POLL_INTERVAL"] == 2
        assert "MAX_POLLS" in json.loads(config_path.read_text())

    def test_corrupt_file_uses_defaults(self, config_path, caplog):
        config_path.write_text("{not json")

        with caplog.at_level(logging.ERROR):
            cfg = load_config()

        assert cfg == default_config()
        assert "Failed to parse config.json" in caplog.text

    def test_save_config(self, config_path):
        cfg = default_config()
        cfg["DOWNLOAD_DIR"] = "/tmp/csv"

        save_config(cfg)

        assert json.loads(config_path.read_text())["DOWNLOAD_DIR"] == "/tmp/csv"


# ============================================================================
# RUNTIME RESOLUTION
# ============================================================================

class TestResolveRuntimeConfig:
    """Tests for resolve_runtime_config()."""

    def test_environment_wins(self):
        cfg = resolve_runtime_config(
            {"API_BASE_URL": "https://file.example.test", "APP_PASSWORD": "from-file"},
            environ={"API_BASE_URL": "https://env.example.test", "APP_PASSWORD": "from-env"},
        )
        assert cfg["API_BASE_URL"] == "https://env.example.test"
        assert cfg["APP_PASSWORD"] == "from-env"

    def test_file_wins_over_defaults(self):
        cfg = resolve_runtime_config({"APP_PASSWORD": "from-file"}, environ={})
        assert cfg["APP_PASSWORD"] == "from-file"
        assert cfg["API_BASE_URL"] == DEFAULT_API_BASE_URL

    def test_blank_environment_value_ignored(self):
        cfg = resolve_runtime_config({"APP_PASSWORD": "from-file"}, environ={"APP_PASSWORD": "  "})
        assert cfg["APP_PASSWORD"] == "from-file"

    def test_trailing_slash_removed(self, temp_config_file):
        with open(temp_config_file) as f:
            cfg = resolve_runtime_config(json.load(f), environ={})
        assert cfg["API_BASE_URL"] == "https://api.example.test"

    def test_does_not_modify_input(self):
        original = {"API_BASE_URL": "https://api.example.test/"}
        resolve_runtime_config(original, environ={"APP_PASSWORD": "x"})
        assert original == {"API_BASE_URL": "https://api.example.test/"}

    def test_default_password_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            cfg = resolve_runtime_config({}, environ={})
        assert cfg["APP_PASSWORD"] == DEFAULT_APP_PASSWORD
        assert "default application password" in caplog.text


# ============================================================================
# STATUS LOGGING
# ============================================================================

class TestLogAndStatus:
    """Tests for log_and_status()."""

    def test_logs_and_updates_status(self, mock_status_fn, caplog):
        with caplog.at_level(logging.INFO):
            log_and_status(mock_status_fn, "detailed message", ui_msg="short")

        assert "detailed message" in caplog.text
        assert mock_status_fn.messages == ["short"]

    def test_error_level(self, mock_status_fn, caplog):
        with caplog.at_level(logging.INFO):
            log_and_status(mock_status_fn, "it broke", level="error")

        assert caplog.records[-1].levelname == "ERROR"
        assert mock_status_fn.messages == ["it broke"]

    def test_status_fn_failure_does_not_raise(self, capsys):
        def broken(msg):
            raise RuntimeError("widget destroyed")

        log_and_status(broken, "message")

        assert "[STATUS] message" in capsys.readouterr().out

    def test_no_status_fn(self, caplog):
        with caplog.at_level(logging.INFO):
            log_and_status(None, "only logged")
        assert "only logged" in caplog.text
