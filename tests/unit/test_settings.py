"""
Unit tests for configuration and logging setup.
"""
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from gmail_access.config.settings import AppConfig, GmailConfig
from gmail_access.utils.logging import configure_default_logging, configure_logging, get_logger


@pytest.mark.unit
class TestGmailConfig:
    """Test Gmail settings loaded from the environment."""

    def test_reads_environment(self):
        config = GmailConfig()

        assert config.token_path == Path("/tmp/test_gmail_token.json")
        assert config.scopes == "gmail.modify,gmail.send"
        assert config.user_id == "me"

    def test_defaults(self):
        config = GmailConfig()

        assert config.default_max_results == 10
        assert config.max_attachment_size_bytes == 25 * 1024 * 1024
        assert config.html_plain_alternative is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GMAIL_MAX_ATTACHMENT_SIZE_MB", "1")
        monkeypatch.setenv("GMAIL_HTML_PLAIN_ALTERNATIVE", "true")

        config = GmailConfig()

        assert config.max_attachment_size_bytes == 1024 * 1024
        assert config.html_plain_alternative is True

    @pytest.mark.parametrize("size_mb", ["0", "-5"])
    def test_attachment_size_limit_must_be_positive(self, monkeypatch, size_mb):
        monkeypatch.setenv("GMAIL_MAX_ATTACHMENT_SIZE_MB", size_mb)

        with pytest.raises(ValidationError):
            GmailConfig()

    def test_default_max_results_bounded(self, monkeypatch):
        monkeypatch.setenv("GMAIL_DEFAULT_MAX_RESULTS", "500")

        with pytest.raises(ValidationError):
            GmailConfig()


@pytest.mark.unit
class TestAppConfig:
    def test_testing_environment(self):
        assert AppConfig().env == "testing"

    def test_lowercase_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert AppConfig().log_level == "DEBUG"


@pytest.mark.unit
class TestLogging:
    def test_configure_and_log(self, capsys):
        configure_logging()
        logger = get_logger("gmail_access.test")

        logger.warning("Label updated", label_id="Label_1")

        captured = capsys.readouterr()
        assert captured.out == ""

    def test_default_logging_targets_stderr(self, capsys):
        """
        Given: The host never calls configure_logging()
        When: A service logs an event
        Then: It is printed to stderr and stdout stays empty
        """
        saved = structlog.get_config()
        try:
            structlog.reset_defaults()
            configure_default_logging()

            get_logger("gmail_access.test").info("Labels modified", message_id="m1")

            captured = capsys.readouterr()
            assert captured.out == ""
            assert "Labels modified" in captured.err
        finally:
            structlog.configure(**saved)
