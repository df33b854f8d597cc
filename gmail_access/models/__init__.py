"""Data models for the Gmail access layer."""

from .email import (
    AttachmentInfo,
    DraftMessageRef,
    DraftResult,
    EmailMessage,
    GmailLabel,
    LabelColor,
    LabelDelta,
    SearchResult,
    SendResult,
)
from .requests import (
    BatchModifyRequest,
    CreateDraftRequest,
    CreateLabelRequest,
    GetAttachmentRequest,
    GetEmailRequest,
    GetThreadRequest,
    ListAttachmentsRequest,
    ModifyLabelsRequest,
    ReplyRequest,
    SearchEmailsRequest,
    SendEmailRequest,
    UpdateLabelRequest,
)

__all__ = [
    "AttachmentInfo",
    "DraftMessageRef",
    "DraftResult",
    "EmailMessage",
    "GmailLabel",
    "LabelColor",
    "LabelDelta",
    "SearchResult",
    "SendResult",
    "BatchModifyRequest",
    "CreateDraftRequest",
    "CreateLabelRequest",
    "GetAttachmentRequest",
    "GetEmailRequest",
    "GetThreadRequest",
    "ListAttachmentsRequest",
    "ModifyLabelsRequest",
    "ReplyRequest",
    "SearchEmailsRequest",
    "SendEmailRequest",
    "UpdateLabelRequest",
]
