"""Tool input schemas validated before a request reaches the mail access layer."""

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from gmail_access.config.settings import MAX_BATCH_SIZE, MAX_RESULTS_LIMIT

ContentType = Literal["text/plain", "text/html"]
OutputFormat = Literal["markdown", "json"]


class _ToolRequest(BaseModel):
    """Common fields shared by all tool requests."""

    output_format: OutputFormat = Field(default="markdown", description="Output format: markdown or json")


# Read models
class SearchEmailsRequest(_ToolRequest):
    """Search emails with Gmail query syntax."""

    query: str = Field(min_length=1, description="Gmail search query, e.g. 'from:a@b.com is:unread'")
    max_results: int = Field(default=10, ge=1, le=MAX_RESULTS_LIMIT, description="Page size")
    include_body: bool = Field(default=False, description="Fetch and decode full message bodies")
    page_token: Optional[str] = Field(default=None, description="Cursor from a previous search")


class GetEmailRequest(_ToolRequest):
    """Fetch one message."""

    message_id: str = Field(min_length=1)
    include_body: bool = True


class GetThreadRequest(_ToolRequest):
    """Fetch every message in a conversation."""

    thread_id: str = Field(min_length=1)
    include_body: bool = False


class ListAttachmentsRequest(_ToolRequest):
    """List attachments of one message."""

    message_id: str = Field(min_length=1)


class GetAttachmentRequest(_ToolRequest):
    """Fetch base64url data of one attachment."""

    message_id: str = Field(min_length=1)
    attachment_id: str = Field(min_length=1)


# Label mutation models
class ModifyLabelsRequest(_ToolRequest):
    """Add and/or remove labels on one message."""

    message_id: str = Field(min_length=1)
    add_labels: list[str] = Field(default_factory=list, description="Label ids to add, e.g. ['STARRED']")
    remove_labels: list[str] = Field(default_factory=list, description="Label ids to remove, e.g. ['UNREAD']")

    @model_validator(mode="after")
    def require_delta(self) -> "ModifyLabelsRequest":
        if not self.add_labels and not self.remove_labels:
            raise ValueError("Must specify at least one of add_labels or remove_labels")
        return self


class BatchModifyRequest(_ToolRequest):
    """Apply one label delta to many messages."""

    message_ids: list[str] = Field(min_length=1, max_length=MAX_BATCH_SIZE)
    add_labels: list[str] = Field(default_factory=list)
    remove_labels: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def require_delta(self) -> "BatchModifyRequest":
        if not self.add_labels and not self.remove_labels:
            raise ValueError("Must specify at least one of add_labels or remove_labels")
        return self


# Compose models
class SendEmailRequest(_ToolRequest):
    """Compose and send a new message."""

    to: EmailStr
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)
    content_type: ContentType = "text/plain"
    cc: Optional[EmailStr] = None
    bcc: Optional[EmailStr] = None
    confirm: bool = Field(
        default=False,
        description="Checked by the tool host: False returns a preview and nothing is sent",
    )


class CreateDraftRequest(_ToolRequest):
    """Compose and store a draft."""

    to: EmailStr
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)
    content_type: ContentType = "text/plain"
    cc: Optional[EmailStr] = None
    bcc: Optional[EmailStr] = None


class ReplyRequest(_ToolRequest):
    """Reply inside the thread of an existing message."""

    message_id: str = Field(min_length=1)
    body: str = Field(min_length=1)
    content_type: ContentType = "text/plain"
    cc: Optional[EmailStr] = None
    confirm: bool = Field(default=False, description="Checked by the tool host: False returns a preview and nothing is sent")


# Label management models
LabelListVisibility = Literal["labelShow", "labelShowIfUnread", "labelHide"]
MessageListVisibility = Literal["show", "hide"]


class CreateLabelRequest(_ToolRequest):
    """Create a user label."""

    name: str = Field(min_length=1, description="Label name; use '/' for nesting")
    message_list_visibility: Optional[MessageListVisibility] = None
    label_list_visibility: Optional[LabelListVisibility] = None
    background_color: Optional[str] = Field(default=None, description="Hex colour, e.g. #ff0000; needs both colours")
    text_color: Optional[str] = Field(default=None, description="Hex colour, e.g. #ff0000; needs both colours")


class UpdateLabelRequest(_ToolRequest):
    """Change a user label; only supplied fields are updated."""

    label_id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    message_list_visibility: Optional[MessageListVisibility] = None
    label_list_visibility: Optional[LabelListVisibility] = None
    background_color: Optional[str] = Field(default=None, description="Hex colour, e.g. #ff0000; needs both colours")
    text_color: Optional[str] = Field(default=None, description="Hex colour, e.g. #ff0000; needs both colours")
