"""SQLAlchemy ORM models for the tenant namespace tables.

Tables are unqualified; the tenant-scoped engine's search_path decides
which tenant namespace they resolve to. Table definitions mirror the
tenant migration scripts, which remain the source of truth for DDL.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from crm.domain.value_objects import ConversationStatus, SenderType
from infrastructure.database.models import CreatedAtMixin, TenantBase, TimestampMixin


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class ContactModel(TenantBase, TimestampMixin):
    """ORM model for contacts table."""

    __tablename__ = "contacts"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    phone: Mapped[str | None] = mapped_column(String(50), index=True)
    # "metadata" is reserved on declarative classes
    contact_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONB, nullable=False, default=dict
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ContactModel(id={self.id}, name={self.name})>"


class ConversationModel(TenantBase, TimestampMixin):
    """ORM model for conversations table."""

    __tablename__ = "conversations"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    contact_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[ConversationStatus] = mapped_column(
        Enum(
            ConversationStatus,
            name="conversation_status",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ConversationStatus.ACTIVE,
        index=True,
    )
    last_message_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ConversationModel(id={self.id}, status={self.status})>"


class MessageModel(TenantBase, CreatedAtMixin):
    """ORM model for messages table."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_id_created_at", "conversation_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    conversation_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_type: Mapped[SenderType] = mapped_column(
        Enum(
            SenderType,
            name="message_sender_type",
            native_enum=False,
            create_constraint=True,
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    sender_id: Mapped[str | None] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MessageModel(id={self.id}, conversation_id={self.conversation_id})>"
