"""Canonical email models returned by the mail access layer."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

NO_SUBJECT = "(no subject)"
UNKNOWN_ADDRESS = "(unknown)"


class EmailMessage(BaseModel):
    """Flat, immutable view of one Gmail message."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    thread_id: str = Field(alias="threadId")
    subject: str = NO_SUBJECT
    sender: str = Field(default=UNKNOWN_ADDRESS, alias="from")
    to: str = UNKNOWN_ADDRESS
    date: str = ""
    snippet: str = ""
    body: Optional[str] = None  # Only set when the full message was requested
    labels: Optional[tuple[str, ...]] = None

    def to_output(self) -> dict[str, Any]:
        """Snake-case dict for tool output. Absent body/labels are omitted, never null."""
        output: dict[str, Any] = {
            "id": self.id,
            "thread_id": self.thread_id,
            "subject": self.subject,
            "from": self.sender,
            "to": self.to,
            "date": self.date,
            "snippet": self.snippet,
        }
        if self.body is not None:
            output["body"] = self.body
        if self.labels is not None:
            output["labels"] = list(self.labels)
        return output


class SearchResult(BaseModel):
    """One page of search results plus the continuation cursor."""

    model_config = ConfigDict(frozen=True)

    emails: tuple[EmailMessage, ...] = ()
    total_estimate: int = 0
    has_more: bool = False
    next_page_token: Optional[str] = None

    @model_validator(mode="after")
    def check_cursor(self) -> "SearchResult":
        if self.has_more != (self.next_page_token is not None):
            raise ValueError("has_more must be true exactly when next_page_token is set")
        return self


class LabelDelta(BaseModel):
    """Labels to add and remove in one modify call."""

    model_config = ConfigDict(frozen=True)

    add: frozenset[str] = frozenset()
    remove: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.add and not self.remove

    def to_request_body(self) -> dict[str, list[str]]:
        """Gmail modify/batchModify body; ids sorted for a stable request, empty sides omitted."""
        body: dict[str, list[str]] = {}
        if self.add:
            body["addLabelIds"] = sorted(self.add)
        if self.remove:
            body["removeLabelIds"] = sorted(self.remove)
        return body


class DraftMessageRef(BaseModel):
    """Message stored inside a draft."""

    model_config = ConfigDict(frozen=True)

    id: str
    thread_id: str


class DraftResult(BaseModel):
    """Result of creating a draft."""

    model_config = ConfigDict(frozen=True)

    id: str
    message: DraftMessageRef


class SendResult(BaseModel):
    """Result of sending a message."""

    model_config = ConfigDict(frozen=True)

    id: str
    thread_id: str
    label_ids: Optional[tuple[str, ...]] = None


class AttachmentInfo(BaseModel):
    """Attachment details found in a message payload."""

    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str = "application/octet-stream"
    size: int = 0
    attachment_id: str


class LabelColor(BaseModel):
    """Label colour pair."""

    model_config = ConfigDict(frozen=True)

    text_color: str = ""
    background_color: str = ""


class GmailLabel(BaseModel):
    """Gmail label (system or user-created)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: Literal["system", "user"] = "user"
    message_list_visibility: Optional[Literal["show", "hide"]] = None
    label_list_visibility: Optional[Literal["labelShow", "labelShowIfUnread", "labelHide"]] = None
    messages_total: Optional[int] = None
    messages_unread: Optional[int] = None
    color: Optional[LabelColor] = None
