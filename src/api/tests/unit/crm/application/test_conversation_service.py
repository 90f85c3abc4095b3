"""Unit tests for ConversationService."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, Mock
from uuid import uuid4

import pytest

from crm.application.observability import CRMServiceProbe
from crm.application.services import ConversationService
from crm.domain.value_objects import ConversationStatus
from crm.ports.exceptions import ContactNotFoundError, ConversationNotFoundError
from crm.ports.repositories import (
    IContactRepository,
    IConversationRepository,
    IMessageRepository,
)


@pytest.fixture
def mock_contact_repo(contact):
    repo = Mock(spec=IContactRepository)
    repo.get_by_id = AsyncMock(return_value=contact)
    return repo


@pytest.fixture
def mock_conversation_repo(conversation):
    repo = Mock(spec=IConversationRepository)
    repo.get_by_id = AsyncMock(return_value=conversation)
    repo.list_by_contact = AsyncMock(return_value=[conversation])
    repo.set_status = AsyncMock(return_value=conversation)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_message_repo(message):
    repo = Mock(spec=IMessageRepository)
    repo.list_by_conversation = AsyncMock(return_value=[message])
    return repo


@pytest.fixture
def mock_probe():
    return MagicMock(spec=CRMServiceProbe)


@pytest.fixture
def service(
    mock_session, mock_contact_repo, mock_conversation_repo, mock_message_repo, mock_probe
):
    return ConversationService(
        session=mock_session,
        contact_repository=mock_contact_repo,
        conversation_repository=mock_conversation_repo,
        message_repository=mock_message_repo,
        probe=mock_probe,
    )


class TestListForContact:
    @pytest.mark.asyncio
    async def test_attaches_messages_to_each_conversation(
        self, service, contact, conversation, message
    ):
        result = await service.list_for_contact(contact.id)

        assert result == [conversation]
        assert result[0].messages == [message]

    @pytest.mark.asyncio
    async def test_missing_contact_raises(
        self, service, mock_contact_repo, mock_conversation_repo
    ):
        mock_contact_repo.get_by_id.return_value = None

        with pytest.raises(ContactNotFoundError):
            await service.list_for_contact(uuid4())

        mock_conversation_repo.list_by_contact.assert_not_called()


class TestGetConversation:
    @pytest.mark.asyncio
    async def test_returns_conversation_with_messages(
        self, service, mock_message_repo, conversation, message
    ):
        result = await service.get_conversation(conversation.id)

        assert result.messages == [message]
        mock_message_repo.list_by_conversation.assert_awaited_once_with(conversation.id)

    @pytest.mark.asyncio
    async def test_missing_conversation_raises(
        self, service, mock_conversation_repo, mock_probe
    ):
        mock_conversation_repo.get_by_id.return_value = None
        conversation_id = uuid4()

        with pytest.raises(ConversationNotFoundError):
            await service.get_conversation(conversation_id)

        mock_probe.conversation_not_found.assert_called_once_with(str(conversation_id))


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_sets_status(
        self, service, mock_conversation_repo, mock_probe, conversation
    ):
        await service.update_status(conversation.id, ConversationStatus.CLOSED)

        mock_conversation_repo.set_status.assert_awaited_once_with(
            conversation.id, ConversationStatus.CLOSED
        )
        mock_probe.conversation_status_changed.assert_called_once_with(
            str(conversation.id), "closed"
        )

    @pytest.mark.asyncio
    async def test_missing_conversation_raises(self, service, mock_conversation_repo):
        mock_conversation_repo.set_status.return_value = None

        with pytest.raises(ConversationNotFoundError):
            await service.update_status(uuid4(), ConversationStatus.ARCHIVED)


class TestDeleteConversation:
    @pytest.mark.asyncio
    async def test_deletes_conversation(self, service, mock_probe, conversation):
        await service.delete_conversation(conversation.id)

        mock_probe.conversation_deleted.assert_called_once_with(str(conversation.id))

    @pytest.mark.asyncio
    async def test_missing_conversation_raises(self, service, mock_conversation_repo):
        mock_conversation_repo.delete.return_value = False

        with pytest.raises(ConversationNotFoundError):
            await service.delete_conversation(uuid4())
