"""Gmail API integration: search, read, label mutation and compose."""

import base64
import binascii
from pathlib import Path
from typing import Any, Iterable, Optional

import aiofiles
from google.oauth2.credentials import Credentials

from gmail_access.config.settings import MAX_BATCH_SIZE, GmailConfig, settings
from gmail_access.errors import InvalidArgumentError, ProviderError
from gmail_access.models.email import (
    AttachmentInfo,
    DraftMessageRef,
    DraftResult,
    EmailMessage,
    LabelDelta,
    SearchResult,
    SendResult,
)
from gmail_access.services.email_parser import (
    METADATA_HEADERS,
    extract_attachments,
    get_header,
    normalize_message,
)
from gmail_access.services.gmail_client import build_gmail_service, execute_request
from gmail_access.utils.compose import build_mime_message, encode_raw_message
from gmail_access.utils.logging import get_logger

logger = get_logger(__name__)


def _require_id(value: str, name: str) -> None:
    if not value:
        raise InvalidArgumentError(f"{name} must not be empty")


def _label_delta(add: Optional[Iterable[str]], remove: Optional[Iterable[str]]) -> LabelDelta:
    delta = LabelDelta(add=frozenset(add or ()), remove=frozenset(remove or ()))
    if delta.is_empty:
        raise InvalidArgumentError("Must specify at least one label to add or remove")
    return delta


class EmailService:
    """
    Gmail mail access layer.

    Holds a reference to an authenticated Gmail API resource and never
    mutates it. Every call is stateless: results are freshly normalized
    models, nothing is cached between calls, and failures are raised to the
    caller without retry.
    """

    def __init__(self, service: Any, config: Optional[GmailConfig] = None) -> None:
        """
        Args:
            service: Authenticated Gmail v1 resource (googleapiclient)
            config: Gmail settings; defaults to the global settings
        """
        self.service = service
        self.config = config or settings.gmail
        self.user_id = self.config.user_id

    @classmethod
    def from_credentials(cls, credentials: Credentials, config: Optional[GmailConfig] = None) -> "EmailService":
        """Build the Gmail resource from an already-authenticated credential."""
        return cls(build_gmail_service(credentials), config)

    def _format_kwargs(self, include_body: bool, extra_headers: Iterable[str] = ()) -> dict[str, Any]:
        """messages.get / threads.get format arguments."""
        if include_body:
            return {"format": "full"}
        # Only the standard headers, not full bodies
        return {"format": "metadata", "metadataHeaders": METADATA_HEADERS + list(extra_headers)}

    async def _fetch_raw_message(
        self, message_id: str, include_body: bool, extra_headers: Iterable[str] = ()
    ) -> dict[str, Any]:
        kwargs = self._format_kwargs(include_body, extra_headers)
        return await execute_request(
            f"getting message {message_id}",
            lambda: self.service.users()
            .messages()
            .get(userId=self.user_id, id=message_id, **kwargs)
            .execute(),
        )

    # Read operations

    async def search_emails(
        self,
        query: str,
        max_results: Optional[int] = None,
        include_body: bool = False,
        page_token: Optional[str] = None,
    ) -> SearchResult:
        """
        Search for emails using Gmail query syntax and fetch one page.

        Details are fetched one message at a time, in result order. A failure
        on the list call or on any detail call discards the whole page.

        Args:
            query: Gmail search query, passed through unparsed
            max_results: Page size (defaults to GMAIL_DEFAULT_MAX_RESULTS)
            include_body: Fetch full messages and decode bodies
            page_token: Cursor from a previous SearchResult

        Returns:
            SearchResult with a continuation token when more pages exist
        """
        list_kwargs: dict[str, Any] = {
            "userId": self.user_id,
            "q": query,
            "maxResults": max_results or self.config.default_max_results,
        }
        if page_token:
            list_kwargs["pageToken"] = page_token

        response = await execute_request(
            "searching emails",
            lambda: self.service.users().messages().list(**list_kwargs).execute(),
        )

        emails = []
        for entry in response.get("messages") or []:
            message_id = entry.get("id")
            if not message_id:
                continue
            raw = await self._fetch_raw_message(message_id, include_body)
            emails.append(normalize_message(raw, include_body))

        next_page_token = response.get("nextPageToken") or None
        logger.debug(
            "Search completed",
            returned=len(emails),
            total_estimate=response.get("resultSizeEstimate", 0),
            has_more=next_page_token is not None,
        )

        return SearchResult(
            emails=tuple(emails),
            total_estimate=response.get("resultSizeEstimate") or 0,
            has_more=next_page_token is not None,
            next_page_token=next_page_token,
        )

    async def get_message(self, message_id: str, include_body: bool = False) -> EmailMessage:
        """Fetch and normalize a single message."""
        _require_id(message_id, "message_id")
        raw = await self._fetch_raw_message(message_id, include_body)
        return normalize_message(raw, include_body)

    async def get_thread(self, thread_id: str, include_body: bool = False) -> list[EmailMessage]:
        """Fetch every message of a conversation, oldest first as Gmail returns them."""
        _require_id(thread_id, "thread_id")
        kwargs = self._format_kwargs(include_body)
        response = await execute_request(
            f"getting thread {thread_id}",
            lambda: self.service.users()
            .threads()
            .get(userId=self.user_id, id=thread_id, **kwargs)
            .execute(),
        )
        return [normalize_message(raw, include_body) for raw in response.get("messages") or []]

    # Attachments

    async def list_attachments(self, message_id: str) -> list[AttachmentInfo]:
        """List attachments anywhere in the message part tree."""
        _require_id(message_id, "message_id")
        raw = await execute_request(
            f"listing attachments for {message_id}",
            lambda: self.service.users()
            .messages()
            .get(userId=self.user_id, id=message_id, format="full")
            .execute(),
        )
        return extract_attachments(raw.get("payload"))

    async def _get_attachment_resource(self, message_id: str, attachment_id: str) -> dict[str, Any]:
        _require_id(message_id, "message_id")
        _require_id(attachment_id, "attachment_id")
        operation = f"getting attachment {attachment_id} from message {message_id}"
        attachment = await execute_request(
            operation,
            lambda: self.service.users()
            .messages()
            .attachments()
            .get(userId=self.user_id, messageId=message_id, id=attachment_id)
            .execute(),
        )
        if not attachment.get("data"):
            raise ProviderError(operation, "Attachment data not found")
        return attachment

    async def get_attachment(self, message_id: str, attachment_id: str) -> str:
        """Return the attachment data exactly as Gmail sends it (base64url)."""
        attachment = await self._get_attachment_resource(message_id, attachment_id)
        return attachment["data"]

    async def save_attachment(self, message_id: str, attachment_id: str, destination: Path) -> Path:
        """
        Download an attachment to local storage.

        Args:
            message_id: Gmail message ID
            attachment_id: Attachment ID from list_attachments()
            destination: Local file path to write

        Returns:
            Path to the written file

        Raises:
            InvalidArgumentError: Attachment larger than GMAIL_MAX_ATTACHMENT_SIZE_MB
        """
        attachment = await self._get_attachment_resource(message_id, attachment_id)
        limit = self.config.max_attachment_size_bytes

        declared_size = attachment.get("size") or 0
        if declared_size > limit:
            raise InvalidArgumentError(
                f"Attachment size {declared_size} bytes exceeds limit of {limit} bytes"
            )

        data = attachment["data"]
        try:
            file_data = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
        except (binascii.Error, ValueError) as e:
            raise ProviderError(f"decoding attachment {attachment_id}", str(e)) from e

        if len(file_data) > limit:
            raise InvalidArgumentError(
                f"Attachment size {len(file_data)} bytes exceeds limit of {limit} bytes"
            )

        destination.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(destination, "wb") as f:
            await f.write(file_data)

        logger.info(
            "Attachment saved",
            message_id=message_id,
            attachment_id=attachment_id,
            size_bytes=len(file_data),
        )
        return destination

    # Label mutation

    async def modify_labels(
        self,
        message_id: str,
        add: Optional[Iterable[str]] = None,
        remove: Optional[Iterable[str]] = None,
    ) -> EmailMessage:
        """
        Add and/or remove labels on one message.

        Returns:
            The message as Gmail reports it after the change (no body)

        Raises:
            InvalidArgumentError: Empty message id or no labels given
            ProviderError: Gmail rejected the change
        """
        _require_id(message_id, "message_id")
        delta = _label_delta(add, remove)

        response = await execute_request(
            f"modifying labels for {message_id}",
            lambda: self.service.users()
            .messages()
            .modify(userId=self.user_id, id=message_id, body=delta.to_request_body())
            .execute(),
        )

        logger.info(
            "Labels modified",
            message_id=message_id,
            added=sorted(delta.add),
            removed=sorted(delta.remove),
        )
        return normalize_message(response, include_body=False)

    async def batch_modify_labels(
        self,
        message_ids: list[str],
        add: Optional[Iterable[str]] = None,
        remove: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Apply one label delta to up to 1000 messages in a single request.

        Gmail applies batchModify as one request; its outcome is surfaced
        as-is with no per-message recovery.

        Raises:
            InvalidArgumentError: Batch size outside 1..1000, empty id, or no labels given
            ProviderError: Gmail rejected the batch
        """
        if not message_ids:
            raise InvalidArgumentError("Must provide at least one message ID")
        if len(message_ids) > MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"Maximum {MAX_BATCH_SIZE} messages per batch, got {len(message_ids)}"
            )
        for message_id in message_ids:
            _require_id(message_id, "message_id")
        delta = _label_delta(add, remove)

        body = {"ids": list(message_ids), **delta.to_request_body()}
        await execute_request(
            "batch modifying labels",
            lambda: self.service.users()
            .messages()
            .batchModify(userId=self.user_id, body=body)
            .execute(),
        )

        logger.info(
            "Labels batch modified",
            message_count=len(message_ids),
            added=sorted(delta.add),
            removed=sorted(delta.remove),
        )

    async def archive_message(self, message_id: str) -> EmailMessage:
        """Remove a message from the inbox; it stays in All Mail."""
        return await self.modify_labels(message_id, remove=["INBOX"])

    async def delete_message(self, message_id: str) -> None:
        """Permanently delete a message, bypassing trash. Cannot be undone."""
        _require_id(message_id, "message_id")
        await execute_request(
            f"deleting message {message_id}",
            lambda: self.service.users()
            .messages()
            .delete(userId=self.user_id, id=message_id)
            .execute(),
        )
        logger.info("Message deleted", message_id=message_id)

    # Compose

    def _compose_raw(
        self,
        to: str,
        subject: str,
        body: str,
        content_type: str,
        cc: Optional[str] = None,
        bcc: Optional[str] = None,
        in_reply_to: Optional[str] = None,
        references: Optional[str] = None,
    ) -> str:
        message = build_mime_message(
            to,
            subject,
            body,
            content_type=content_type,
            cc=cc,
            bcc=bcc,
            in_reply_to=in_reply_to,
            references=references,
            plain_alternative=self.config.html_plain_alternative,
        )
        return encode_raw_message(message)

    @staticmethod
    def _send_result(response: dict[str, Any]) -> SendResult:
        label_ids = response.get("labelIds")
        return SendResult(
            id=response.get("id") or "",
            thread_id=response.get("threadId") or "",
            label_ids=tuple(label_ids) if label_ids else None,
        )

    async def send_email(
        self,
        to: str,
        subject: str,
        body: str,
        content_type: str = "text/plain",
        cc: Optional[str] = None,
        bcc: Optional[str] = None,
    ) -> SendResult:
        """
        Compose and send a message.

        Recipients are expected to be validated by the caller's input schema.
        HTML bodies are sent as given, without sanitizing.
        """
        raw = self._compose_raw(to, subject, body, content_type, cc=cc, bcc=bcc)
        response = await execute_request(
            "sending email",
            lambda: self.service.users()
            .messages()
            .send(userId=self.user_id, body={"raw": raw})
            .execute(),
        )
        result = self._send_result(response)
        logger.info("Email sent", message_id=result.id, thread_id=result.thread_id)
        return result

    async def create_draft(
        self,
        to: str,
        subject: str,
        body: str,
        content_type: str = "text/plain",
        cc: Optional[str] = None,
        bcc: Optional[str] = None,
    ) -> DraftResult:
        """Compose a message and store it as a draft."""
        raw = self._compose_raw(to, subject, body, content_type, cc=cc, bcc=bcc)
        response = await execute_request(
            "creating draft",
            lambda: self.service.users()
            .drafts()
            .create(userId=self.user_id, body={"message": {"raw": raw}})
            .execute(),
        )
        message = response.get("message") or {}
        result = DraftResult(
            id=response.get("id") or "",
            message=DraftMessageRef(
                id=message.get("id") or "",
                thread_id=message.get("threadId") or "",
            ),
        )
        logger.info("Draft created", draft_id=result.id)
        return result

    async def reply_to_email(
        self,
        message_id: str,
        body: str,
        content_type: str = "text/plain",
        cc: Optional[str] = None,
    ) -> SendResult:
        """
        Reply to the sender of a message inside its thread.

        The subject gets a "Re: " prefix unless it already has one, and the
        original Message-ID (when present) is used for In-Reply-To/References.
        """
        _require_id(message_id, "message_id")
        raw_original = await self._fetch_raw_message(message_id, False, extra_headers=["Message-ID"])
        original = normalize_message(raw_original, include_body=False)

        headers = (raw_original.get("payload") or {}).get("headers")
        if get_header(headers, "From") is None:
            raise InvalidArgumentError(f"Message {message_id} has no From header to reply to")
        rfc_message_id = get_header(headers, "Message-ID") or get_header(headers, "Message-Id")

        subject = original.subject if original.subject.startswith("Re:") else f"Re: {original.subject}"
        raw = self._compose_raw(
            original.sender,
            subject,
            body,
            content_type,
            cc=cc,
            in_reply_to=rfc_message_id,
            references=rfc_message_id,
        )

        send_body = {"raw": raw}
        if original.thread_id:
            send_body["threadId"] = original.thread_id
        response = await execute_request(
            "replying to email",
            lambda: self.service.users()
            .messages()
            .send(userId=self.user_id, body=send_body)
            .execute(),
        )
        result = self._send_result(response)
        logger.info("Reply sent", in_reply_to=message_id, message_id=result.id, thread_id=result.thread_id)
        return result
