"""
Gmail message normalization.

Converts raw Gmail API message resources into canonical EmailMessage models.
Everything here is a pure transform: no network access, no side effects.
"""

from typing import Any, Optional

from gmail_access.models.email import NO_SUBJECT, UNKNOWN_ADDRESS, AttachmentInfo, EmailMessage
from gmail_access.utils.email_text_extractor import extract_body, iter_parts

# Headers requested for metadata-only fetches
METADATA_HEADERS = ["From", "To", "Subject", "Date"]


def get_header(headers: Optional[list[dict[str, Any]]], name: str) -> Optional[str]:
    """
    Return the value of the first header named exactly ``name``.

    Matching is case-sensitive and duplicates are not merged.
    """
    for header in headers or []:
        if header.get("name") == name:
            return header.get("value")
    return None


def normalize_message(raw: dict[str, Any], include_body: bool = False) -> EmailMessage:
    """
    Normalize one Gmail message resource.

    Args:
        raw: Message resource as returned by messages.get / threads.get / messages.modify
        include_body: Run the MIME walk and populate ``body``

    Returns:
        EmailMessage with documented defaults for any missing field
    """
    payload = raw.get("payload") or {}
    headers = payload.get("headers")

    return EmailMessage(
        id=raw.get("id") or "",
        thread_id=raw.get("threadId") or "",
        subject=get_header(headers, "Subject") or NO_SUBJECT,
        sender=get_header(headers, "From") or UNKNOWN_ADDRESS,
        to=get_header(headers, "To") or UNKNOWN_ADDRESS,
        date=get_header(headers, "Date") or "",
        snippet=raw.get("snippet") or "",
        body=extract_body(payload) if include_body else None,
        labels=tuple(raw["labelIds"]) if raw.get("labelIds") else None,
    )


def extract_attachments(payload: Optional[dict[str, Any]]) -> list[AttachmentInfo]:
    """Collect parts carrying both a filename and an attachment id, in preorder."""
    if not payload:
        return []

    attachments = []
    for part in iter_parts(payload):
        body = part.get("body") or {}
        if part.get("filename") and body.get("attachmentId"):
            attachments.append(
                AttachmentInfo(
                    filename=part["filename"],
                    mime_type=part.get("mimeType") or "application/octet-stream",
                    size=body.get("size") or 0,
                    attachment_id=body["attachmentId"],
                )
            )
    return attachments
