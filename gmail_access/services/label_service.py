"""Gmail label management."""

from typing import Any, Optional

from google.oauth2.credentials import Credentials

from gmail_access.config.settings import GmailConfig, settings
from gmail_access.errors import InvalidArgumentError
from gmail_access.models.email import GmailLabel, LabelColor
from gmail_access.services.gmail_client import build_gmail_service, execute_request
from gmail_access.utils.logging import get_logger

logger = get_logger(__name__)


def parse_label(label: dict[str, Any]) -> GmailLabel:
    """Convert a Gmail label resource to GmailLabel."""
    color = label.get("color")
    return GmailLabel(
        id=label.get("id") or "",
        name=label.get("name") or "",
        type="system" if label.get("type") == "system" else "user",
        message_list_visibility=label.get("messageListVisibility"),
        label_list_visibility=label.get("labelListVisibility"),
        messages_total=label.get("messagesTotal") or None,
        messages_unread=label.get("messagesUnread") or None,
        color=LabelColor(
            text_color=color.get("textColor") or "",
            background_color=color.get("backgroundColor") or "",
        )
        if color
        else None,
    )


def _label_body(
    name: Optional[str] = None,
    message_list_visibility: Optional[str] = None,
    label_list_visibility: Optional[str] = None,
    background_color: Optional[str] = None,
    text_color: Optional[str] = None,
) -> dict[str, Any]:
    """Request body with only the supplied fields. A colour needs both halves."""
    body: dict[str, Any] = {}
    if name is not None:
        body["name"] = name
    if message_list_visibility is not None:
        body["messageListVisibility"] = message_list_visibility
    if label_list_visibility is not None:
        body["labelListVisibility"] = label_list_visibility
    if background_color and text_color:
        body["color"] = {"backgroundColor": background_color, "textColor": text_color}
    return body


class LabelService:
    """List, create, update and delete Gmail labels."""

    def __init__(self, service: Any, config: Optional[GmailConfig] = None) -> None:
        self.service = service
        self.config = config or settings.gmail
        self.user_id = self.config.user_id

    @classmethod
    def from_credentials(cls, credentials: Credentials, config: Optional[GmailConfig] = None) -> "LabelService":
        return cls(build_gmail_service(credentials), config)

    async def list_labels(self) -> list[GmailLabel]:
        """List system and user labels."""
        response = await execute_request(
            "listing labels",
            lambda: self.service.users().labels().list(userId=self.user_id).execute(),
        )
        return [parse_label(label) for label in response.get("labels") or []]

    async def get_label(self, label_id: str) -> GmailLabel:
        """Get one label including its message counts."""
        if not label_id:
            raise InvalidArgumentError("label_id must not be empty")
        response = await execute_request(
            f"getting label {label_id}",
            lambda: self.service.users().labels().get(userId=self.user_id, id=label_id).execute(),
        )
        return parse_label(response)

    async def create_label(
        self,
        name: str,
        message_list_visibility: Optional[str] = None,
        label_list_visibility: Optional[str] = None,
        background_color: Optional[str] = None,
        text_color: Optional[str] = None,
    ) -> GmailLabel:
        """Create a user label. Use '/' in the name for nesting."""
        if not name:
            raise InvalidArgumentError("Label name must not be empty")
        body = _label_body(
            name, message_list_visibility, label_list_visibility, background_color, text_color
        )
        response = await execute_request(
            "creating label",
            lambda: self.service.users().labels().create(userId=self.user_id, body=body).execute(),
        )
        label = parse_label(response)
        logger.info("Created new label", label_name=label.name, label_id=label.id)
        return label

    async def update_label(
        self,
        label_id: str,
        name: Optional[str] = None,
        message_list_visibility: Optional[str] = None,
        label_list_visibility: Optional[str] = None,
        background_color: Optional[str] = None,
        text_color: Optional[str] = None,
    ) -> GmailLabel:
        """
        Update a user label.

        Uses labels.patch so fields that are not supplied keep their values.
        """
        if not label_id:
            raise InvalidArgumentError("label_id must not be empty")
        body = _label_body(
            name, message_list_visibility, label_list_visibility, background_color, text_color
        )
        if not body:
            raise InvalidArgumentError("Must specify at least one label field to update")
        response = await execute_request(
            f"updating label {label_id}",
            lambda: self.service.users()
            .labels()
            .patch(userId=self.user_id, id=label_id, body=body)
            .execute(),
        )
        logger.info("Label updated", label_id=label_id, fields=sorted(body))
        return parse_label(response)

    async def delete_label(self, label_id: str) -> None:
        """Delete a user label. Messages keep existing, only the label goes."""
        if not label_id:
            raise InvalidArgumentError("label_id must not be empty")
        await execute_request(
            f"deleting label {label_id}",
            lambda: self.service.users().labels().delete(userId=self.user_id, id=label_id).execute(),
        )
        logger.info("Label deleted", label_id=label_id)

    async def get_or_create_label(self, label_name: str) -> str:
        """Return the id of the label with this exact name, creating it if needed."""
        for label in await self.list_labels():
            if label.name == label_name:
                return label.id

        label = await self.create_label(
            label_name,
            message_list_visibility="show",
            label_list_visibility="labelShow",
        )
        return label.id
