"""RFC 5322 message construction for drafts and sends."""

import base64
from email import policy
from email.message import EmailMessage as MimeMessage
from typing import Optional

from gmail_access.errors import InvalidArgumentError
from gmail_access.utils.email_text_extractor import html_to_text

SUPPORTED_CONTENT_TYPES = ("text/plain", "text/html")


def build_mime_message(
    to: str,
    subject: str,
    body: str,
    content_type: str = "text/plain",
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
    in_reply_to: Optional[str] = None,
    references: Optional[str] = None,
    plain_alternative: bool = False,
) -> MimeMessage:
    """
    Assemble the outgoing message.

    Headers are To, Cc, Bcc, Subject, In-Reply-To, References followed by a
    utf-8 body of ``content_type``. With ``plain_alternative`` an HTML body
    becomes multipart/alternative with a derived text/plain part first.
    Addresses are not validated here and HTML is not sanitized.

    Raises:
        InvalidArgumentError: Unsupported content type or a header value
            containing line breaks
    """
    if content_type not in SUPPORTED_CONTENT_TYPES:
        raise InvalidArgumentError(
            f"Unsupported content type {content_type!r}; expected text/plain or text/html"
        )

    message = MimeMessage(policy=policy.SMTP)
    try:
        message["To"] = to
        if cc:
            message["Cc"] = cc
        if bcc:
            message["Bcc"] = bcc
        message["Subject"] = subject
        if in_reply_to:
            message["In-Reply-To"] = in_reply_to
        if references:
            message["References"] = references
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid header value: {e}") from e

    subtype = content_type.split("/", 1)[1]
    if subtype == "html" and plain_alternative:
        message.set_content(html_to_text(body), subtype="plain", charset="utf-8")
        message.add_alternative(body, subtype="html", charset="utf-8")
    else:
        message.set_content(body, subtype=subtype, charset="utf-8")

    return message


def encode_raw_message(message: MimeMessage) -> str:
    """Encode a message as unpadded base64url, the format of Gmail's ``raw`` field."""
    raw_bytes = message.as_bytes(policy=policy.SMTP)
    return base64.urlsafe_b64encode(raw_bytes).decode("ascii").rstrip("=")
