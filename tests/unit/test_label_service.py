"""
Unit tests for Label Service

Tests label listing, creation, patching and lookup by name
"""
import pytest

from gmail_access.errors import InvalidArgumentError, ProviderError
from gmail_access.services.label_service import parse_label
from gmail_fixtures import http_error


@pytest.mark.unit
@pytest.mark.labels
class TestParseLabel:
    """Test Gmail label resource conversion"""

    def test_system_label(self):
        label = parse_label({"id": "INBOX", "name": "INBOX", "type": "system", "messagesTotal": 12, "messagesUnread": 3})

        assert label.type == "system"
        assert label.messages_total == 12
        assert label.messages_unread == 3
        assert label.color is None

    def test_user_label_with_color(self):
        label = parse_label(
            {
                "id": "Label_1",
                "name": "Clients/Acme",
                "type": "user",
                "labelListVisibility": "labelShow",
                "messageListVisibility": "show",
                "color": {"textColor": "#ffffff", "backgroundColor": "#000000"},
            }
        )

        assert label.name == "Clients/Acme"
        assert label.type == "user"
        assert label.label_list_visibility == "labelShow"
        assert label.color.text_color == "#ffffff"
        assert label.color.background_color == "#000000"

    def test_zero_counts_are_absent(self):
        label = parse_label({"id": "Label_2", "name": "Empty", "messagesTotal": 0})

        assert label.messages_total is None


@pytest.mark.unit
@pytest.mark.labels
class TestLabelService:
    """Test suite for LabelService"""

    @pytest.mark.asyncio
    async def test_list_labels(self, label_service, mock_gmail_service):
        mock_gmail_service.users().labels().list().execute.return_value = {
            "labels": [
                {"id": "INBOX", "name": "INBOX", "type": "system"},
                {"id": "Label_1", "name": "Receipts", "type": "user"},
            ]
        }

        labels = await label_service.list_labels()

        assert [label.id for label in labels] == ["INBOX", "Label_1"]
        assert [label.type for label in labels] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_get_label(self, label_service, mock_gmail_service):
        get_mock = mock_gmail_service.users().labels().get
        get_mock().execute.return_value = {"id": "Label_1", "name": "Receipts", "messagesTotal": 4}

        label = await label_service.get_label("Label_1")

        assert label.name == "Receipts"
        assert get_mock.call_args.kwargs == {"userId": "me", "id": "Label_1"}

    @pytest.mark.asyncio
    async def test_create_label_with_color(self, label_service, mock_gmail_service):
        """
        Given: A name, visibility and both colours
        When: create_label() is called
        Then: Gmail receives only the supplied fields and the new label is returned
        """
        create_mock = mock_gmail_service.users().labels().create
        create_mock().execute.return_value = {"id": "Label_7", "name": "Urgent", "type": "user"}

        label = await label_service.create_label(
            "Urgent", label_list_visibility="labelShow", background_color="#fb4c2f", text_color="#ffffff"
        )

        assert label.id == "Label_7"
        assert create_mock.call_args.kwargs["body"] == {
            "name": "Urgent",
            "labelListVisibility": "labelShow",
            "color": {"backgroundColor": "#fb4c2f", "textColor": "#ffffff"},
        }

    @pytest.mark.asyncio
    async def test_create_label_ignores_half_a_color(self, label_service, mock_gmail_service):
        create_mock = mock_gmail_service.users().labels().create
        create_mock().execute.return_value = {"id": "Label_8", "name": "Half"}

        await label_service.create_label("Half", background_color="#fb4c2f")

        assert create_mock.call_args.kwargs["body"] == {"name": "Half"}

    @pytest.mark.asyncio
    async def test_create_label_requires_name(self, label_service):
        with pytest.raises(InvalidArgumentError):
            await label_service.create_label("")

    @pytest.mark.asyncio
    async def test_create_duplicate_label(self, label_service, mock_gmail_service):
        mock_gmail_service.users().labels().create().execute.side_effect = http_error(409, "Label name exists or conflicts")

        with pytest.raises(ProviderError) as exc_info:
            await label_service.create_label("Receipts")

        assert exc_info.value.status == 409
        assert exc_info.value.operation == "creating label"

    @pytest.mark.asyncio
    async def test_update_label_uses_patch(self, label_service, mock_gmail_service):
        patch_mock = mock_gmail_service.users().labels().patch
        patch_mock().execute.return_value = {"id": "Label_1", "name": "Renamed"}

        label = await label_service.update_label("Label_1", name="Renamed")

        assert label.name == "Renamed"
        assert patch_mock.call_args.kwargs == {"userId": "me", "id": "Label_1", "body": {"name": "Renamed"}}

    @pytest.mark.asyncio
    async def test_update_label_requires_a_field(self, label_service, mock_gmail_service):
        with pytest.raises(InvalidArgumentError):
            await label_service.update_label("Label_1")

        mock_gmail_service.users().labels().patch.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_label(self, label_service, mock_gmail_service):
        delete_mock = mock_gmail_service.users().labels().delete

        await label_service.delete_label("Label_1")

        assert delete_mock.call_args.kwargs == {"userId": "me", "id": "Label_1"}

    @pytest.mark.asyncio
    async def test_get_or_create_label_existing(self, label_service, mock_gmail_service):
        """
        Test getting existing label

        Given: Label already exists
        When: get_or_create_label() is called
        Then: Returns existing label ID without creating
        """
        mock_gmail_service.users().labels().list().execute.return_value = {
            "labels": [{"id": "Label_123", "name": "Receipts/Processed"}]
        }

        label_id = await label_service.get_or_create_label("Receipts/Processed")

        assert label_id == "Label_123"
        mock_gmail_service.users().labels().create.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_or_create_label_new(self, label_service, mock_gmail_service):
        """
        Test creating new label

        Given: Label doesn't exist
        When: get_or_create_label() is called
        Then: Creates and returns new label ID
        """
        mock_gmail_service.users().labels().list().execute.return_value = {"labels": []}
        create_mock = mock_gmail_service.users().labels().create
        create_mock().execute.return_value = {"id": "Label_456", "name": "Receipts/New"}

        label_id = await label_service.get_or_create_label("Receipts/New")

        assert label_id == "Label_456"
        assert create_mock.call_args.kwargs["body"] == {
            "name": "Receipts/New",
            "messageListVisibility": "show",
            "labelListVisibility": "labelShow",
        }
