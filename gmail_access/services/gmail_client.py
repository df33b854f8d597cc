"""Gmail API client construction and request execution."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gmail_access.errors import AuthError, ProviderError
from gmail_access.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_GMAIL_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"

# Short scope names accepted in GMAIL_SCOPES
GMAIL_SCOPE_MAP = {
    "gmail.readonly": DEFAULT_GMAIL_SCOPE,
    "gmail.modify": "https://www.googleapis.com/auth/gmail.modify",
    "gmail.send": "https://www.googleapis.com/auth/gmail.send",
    "gmail.labels": "https://www.googleapis.com/auth/gmail.labels",
    "gmail.metadata": "https://www.googleapis.com/auth/gmail.metadata",
    "gmail.compose": "https://www.googleapis.com/auth/gmail.compose",
    "gmail.insert": "https://www.googleapis.com/auth/gmail.insert",
    "gmail.settings.basic": "https://www.googleapis.com/auth/gmail.settings.basic",
    "gmail.settings.sharing": "https://www.googleapis.com/auth/gmail.settings.sharing",
}


def parse_scopes(value: Optional[str]) -> list[str]:
    """
    Parse a comma-separated scope list.

    Short names are expanded to full URLs; anything else is kept as given.
    An empty value means read-only access.
    """
    scopes = [scope.strip() for scope in (value or "").split(",") if scope.strip()]
    if not scopes:
        return [DEFAULT_GMAIL_SCOPE]
    return [GMAIL_SCOPE_MAP.get(scope, scope) for scope in scopes]


def load_credentials(token_path: Path, scopes: list[str]) -> Credentials:
    """
    Load an authorized-user token file written by the OAuth collaborator.

    No interactive flow is started here. google-auth refreshes the access
    token on request when the file carries a refresh token.

    Raises:
        AuthError: Token file missing or unreadable
    """
    if not token_path.exists():
        raise AuthError(f"Gmail token not found at {token_path}; run the auth flow first")

    try:
        creds = Credentials.from_authorized_user_file(str(token_path), scopes)
    except (OSError, ValueError) as e:
        raise AuthError(f"Failed to load Gmail token from {token_path}: {e}") from e

    logger.info("Gmail credentials loaded", token_path=str(token_path), scopes=scopes)
    return creds


def build_gmail_service(credentials: Credentials) -> Any:
    """Build the Gmail v1 API resource for an authenticated credential."""
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


async def execute_request(operation: str, request_fn: Callable[[], T]) -> T:
    """
    Run a blocking Gmail API call in a worker thread.

    Args:
        operation: What was attempted, e.g. "getting message abc"
        request_fn: Zero-argument callable that builds and executes the request

    Raises:
        ProviderError: The request failed for any reason; not retried
    """
    try:
        return await asyncio.to_thread(request_fn)
    except HttpError as e:
        raise ProviderError(operation, str(e), status=e.resp.status) from e
    except Exception as e:
        raise ProviderError(operation, str(e)) from e
