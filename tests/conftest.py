"""Pytest configuration and fixtures for all tests."""

import os
from unittest.mock import MagicMock

import pytest

# Set test environment variables before importing settings
os.environ["APP_ENV"] = "testing"
os.environ["LOG_FORMAT"] = "console"
os.environ["GMAIL_CREDENTIALS_PATH"] = "/tmp/test_gmail_creds.json"
os.environ["GMAIL_TOKEN_PATH"] = "/tmp/test_gmail_token.json"
os.environ["GMAIL_SCOPES"] = "gmail.modify,gmail.send"
os.environ["GMAIL_USER_ID"] = "me"


@pytest.fixture
def mock_gmail_service():
    """MagicMock standing in for the googleapiclient Gmail resource."""
    service = MagicMock()
    messages = service.users.return_value.messages.return_value
    messages.list.return_value.execute.return_value = {"messages": [], "resultSizeEstimate": 0}
    messages.get.return_value.execute.return_value = {}
    return service


@pytest.fixture
def gmail_config():
    from gmail_access.config.settings import GmailConfig

    return GmailConfig()


@pytest.fixture
def email_service(mock_gmail_service, gmail_config):
    """EmailService bound to the mocked Gmail resource."""
    from gmail_access.services.email_service import EmailService

    return EmailService(mock_gmail_service, gmail_config)


@pytest.fixture
def label_service(mock_gmail_service, gmail_config):
    from gmail_access.services.label_service import LabelService

    return LabelService(mock_gmail_service, gmail_config)
