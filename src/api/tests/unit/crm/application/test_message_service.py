"""Unit tests for MessageService.

Appending a message must lock the conversation, insert the message and
stamp ``last_message_at`` with the message's own ``created_at`` inside
one transaction.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, Mock
from uuid import uuid4

import pytest

from crm.application.observability import CRMServiceProbe
from crm.application.services import MessageService
from crm.domain.value_objects import SenderType
from crm.ports.exceptions import ConversationNotFoundError, MessageNotFoundError
from crm.ports.repositories import IConversationRepository, IMessageRepository


@pytest.fixture
def events() -> list[str]:
    """Ordered record of transaction boundaries and repository calls."""
    return []


@pytest.fixture
def tracked_session(mock_session, events):
    ctx_manager = mock_session.begin.return_value

    async def enter():
        events.append("begin")

    async def exit_(*args):
        events.append("commit" if args[0] is None else "rollback")

    ctx_manager.__aenter__ = AsyncMock(side_effect=enter)
    ctx_manager.__aexit__ = AsyncMock(side_effect=exit_)
    return mock_session


@pytest.fixture
def mock_conversation_repo(conversation, events):
    repo = Mock(spec=IConversationRepository)

    async def get_by_id(conversation_id, for_update=False):
        events.append("lock" if for_update else "get")
        return conversation

    async def touch_last_message(conversation_id, at):
        events.append("touch")

    repo.get_by_id = AsyncMock(side_effect=get_by_id)
    repo.touch_last_message = AsyncMock(side_effect=touch_last_message)
    return repo


@pytest.fixture
def mock_message_repo(message, events):
    repo = Mock(spec=IMessageRepository)

    async def add(**kwargs):
        events.append("insert")
        return message

    repo.add = AsyncMock(side_effect=add)
    repo.get_by_id = AsyncMock(return_value=message)
    repo.list_by_conversation = AsyncMock(return_value=[message])
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_probe():
    return MagicMock(spec=CRMServiceProbe)


@pytest.fixture
def service(tracked_session, mock_conversation_repo, mock_message_repo, mock_probe):
    return MessageService(
        session=tracked_session,
        conversation_repository=mock_conversation_repo,
        message_repository=mock_message_repo,
        probe=mock_probe,
    )


class TestCreateMessage:
    @pytest.mark.asyncio
    async def test_appends_message(self, service, mock_message_repo, conversation, message):
        result = await service.create_message(
            conversation_id=conversation.id,
            sender_type=SenderType.CONTACT,
            content="Hi, I'm interested in your product.",
            sender_id="ext-42",
        )

        assert result is message
        mock_message_repo.add.assert_awaited_once_with(
            conversation_id=conversation.id,
            sender_type=SenderType.CONTACT,
            sender_id="ext-42",
            content="Hi, I'm interested in your product.",
        )

    @pytest.mark.asyncio
    async def test_stamps_last_message_at_with_message_created_at(
        self, service, mock_conversation_repo, conversation, message
    ):
        await service.create_message(
            conversation_id=conversation.id,
            sender_type=SenderType.USER,
            content="Thanks!",
        )

        mock_conversation_repo.touch_last_message.assert_awaited_once_with(
            conversation.id, message.created_at
        )

    @pytest.mark.asyncio
    async def test_lock_insert_and_stamp_share_one_transaction(
        self, service, events, conversation
    ):
        await service.create_message(
            conversation_id=conversation.id,
            sender_type=SenderType.USER,
            content="Thanks!",
        )

        assert events == ["begin", "lock", "insert", "touch", "commit"]

    @pytest.mark.asyncio
    async def test_missing_conversation_rolls_back_without_insert(
        self, service, mock_conversation_repo, mock_message_repo, mock_probe, events
    ):
        mock_conversation_repo.get_by_id.side_effect = None
        mock_conversation_repo.get_by_id.return_value = None
        conversation_id = uuid4()

        with pytest.raises(ConversationNotFoundError):
            await service.create_message(
                conversation_id=conversation_id,
                sender_type=SenderType.SYSTEM,
                content="Conversation closed",
            )

        assert events == ["begin", "rollback"]
        mock_message_repo.add.assert_not_called()
        mock_probe.conversation_not_found.assert_called_once_with(str(conversation_id))

    @pytest.mark.asyncio
    async def test_fires_probe(self, service, mock_probe, conversation, message):
        await service.create_message(
            conversation_id=conversation.id,
            sender_type=SenderType.USER,
            content="Thanks!",
        )

        mock_probe.message_created.assert_called_once_with(
            str(message.id), str(conversation.id)
        )


class TestReadMessages:
    @pytest.mark.asyncio
    async def test_lists_messages_of_conversation(self, service, conversation, message):
        assert await service.list_for_conversation(conversation.id) == [message]

    @pytest.mark.asyncio
    async def test_listing_missing_conversation_raises(
        self, service, mock_conversation_repo, mock_message_repo
    ):
        mock_conversation_repo.get_by_id.side_effect = None
        mock_conversation_repo.get_by_id.return_value = None

        with pytest.raises(ConversationNotFoundError):
            await service.list_for_conversation(uuid4())

        mock_message_repo.list_by_conversation.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_message(self, service, message):
        assert await service.get_message(message.id) is message

    @pytest.mark.asyncio
    async def test_missing_message_raises(self, service, mock_message_repo, mock_probe):
        mock_message_repo.get_by_id.return_value = None
        message_id = uuid4()

        with pytest.raises(MessageNotFoundError):
            await service.get_message(message_id)

        mock_probe.message_not_found.assert_called_once_with(str(message_id))


class TestDeleteMessage:
    @pytest.mark.asyncio
    async def test_deletes_message(self, service, mock_message_repo, mock_probe, message):
        await service.delete_message(message.id)

        mock_message_repo.delete.assert_awaited_once_with(message.id)
        mock_probe.message_deleted.assert_called_once_with(str(message.id))

    @pytest.mark.asyncio
    async def test_missing_message_raises(self, service, mock_message_repo):
        mock_message_repo.delete.return_value = False

        with pytest.raises(MessageNotFoundError):
            await service.delete_message(uuid4())
