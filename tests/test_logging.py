"""
Tests for logging setup.
"""

import logging
from pathlib import Path

from aegis.core.observability.logging_config import ENV_FILE, ENV_LEVEL, resolve_level, setup_logging


class TestResolveLevel:
    def test_flag_precedence(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "INFO")
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(ENV_LEVEL, raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging(level="INFO")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_is_warning(self, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_from_environment(self, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "aegis.log"
        monkeypatch.setenv(ENV_FILE, str(log_file))
        monkeypatch.setenv("AEGIS_LOG_FILE_LEVEL", "DEBUG")
        setup_logging(level="WARNING")

        logging.getLogger("aegis.test").debug("written to file only")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "written to file only" in log_file.read_text()

    def test_third_party_quieted(self, monkeypatch):
        monkeypatch.delenv(ENV_FILE, raising=False)
        setup_logging(level="INFO")
        assert logging.getLogger("apscheduler").level == logging.WARNING
