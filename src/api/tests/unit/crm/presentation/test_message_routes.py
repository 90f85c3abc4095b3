"""Unit tests for message HTTP routes."""

from __future__ import annotations

from uuid import uuid4

from fastapi import status

from crm.domain.value_objects import SenderType
from crm.ports.exceptions import ConversationNotFoundError, MessageNotFoundError


class TestCreateMessage:
    def test_appends_message(
        self, test_client, mock_message_service, conversation, message
    ):
        mock_message_service.create_message.return_value = message

        response = test_client.post(
            "/messages",
            json={
                "conversation_id": str(conversation.id),
                "sender_type": "contact",
                "content": message.content,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == str(message.id)
        mock_message_service.create_message.assert_awaited_once_with(
            conversation_id=conversation.id,
            sender_type=SenderType.CONTACT,
            content=message.content,
            sender_id=None,
        )

    def test_invalid_sender_type_returns_400(
        self, test_client, mock_message_service, conversation
    ):
        response = test_client.post(
            "/messages",
            json={
                "conversation_id": str(conversation.id),
                "sender_type": "robot",
                "content": "beep",
            },
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "user, contact, system" in response.json()["detail"]
        mock_message_service.create_message.assert_not_called()

    def test_malformed_conversation_id_returns_400(
        self, test_client, mock_message_service
    ):
        response = test_client.post(
            "/messages",
            json={"conversation_id": "42", "sender_type": "user", "content": "hi"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_empty_content_is_rejected(self, test_client, conversation):
        response = test_client.post(
            "/messages",
            json={
                "conversation_id": str(conversation.id),
                "sender_type": "user",
                "content": "",
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_missing_conversation_returns_404(self, test_client, mock_message_service):
        mock_message_service.create_message.side_effect = ConversationNotFoundError(
            "gone"
        )

        response = test_client.post(
            "/messages",
            json={"conversation_id": str(uuid4()), "sender_type": "user", "content": "hi"},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestReadMessages:
    def test_lists_conversation_messages(
        self, test_client, mock_message_service, conversation, message
    ):
        mock_message_service.list_for_conversation.return_value = [message]

        response = test_client.get(f"/messages/conversation/{conversation.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["sender_type"] == "contact"

    def test_gets_message(self, test_client, mock_message_service, message):
        mock_message_service.get_message.return_value = message

        response = test_client.get(f"/messages/{message.id}")

        assert response.status_code == status.HTTP_200_OK

    def test_missing_message_returns_404(self, test_client, mock_message_service):
        mock_message_service.get_message.side_effect = MessageNotFoundError("gone")

        response = test_client.get(f"/messages/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteMessage:
    def test_deletes_message(self, test_client, mock_message_service, message):
        response = test_client.delete(f"/messages/{message.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_message_service.delete_message.assert_awaited_once_with(message.id)

    def test_missing_message_returns_404(self, test_client, mock_message_service):
        mock_message_service.delete_message.side_effect = MessageNotFoundError("gone")

        response = test_client.delete(f"/messages/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
