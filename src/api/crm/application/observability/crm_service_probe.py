"""Protocol for CRM service observability.

Defines the interface for domain probes that capture application-level
domain events for contacts, conversations and messages inside a tenant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CRMServiceProbe(Protocol):
    """Domain probe for CRM service operations."""

    def contact_created(self, contact_id: str, conversation_id: str) -> None:
        """Record that a contact and its first conversation were created."""
        ...

    def contact_updated(self, contact_id: str, fields: list[str]) -> None:
        """Record that contact fields were changed."""
        ...

    def contact_deleted(self, contact_id: str) -> None:
        """Record that a contact was deleted."""
        ...

    def contact_not_found(self, contact_id: str) -> None:
        """Record that a contact was not found."""
        ...

    def conversation_status_changed(self, conversation_id: str, status: str) -> None:
        """Record that a conversation changed status."""
        ...

    def conversation_deleted(self, conversation_id: str) -> None:
        """Record that a conversation was deleted."""
        ...

    def conversation_not_found(self, conversation_id: str) -> None:
        """Record that a conversation was not found."""
        ...

    def message_created(self, message_id: str, conversation_id: str) -> None:
        """Record that a message was appended to a conversation."""
        ...

    def message_deleted(self, message_id: str) -> None:
        """Record that a message was deleted."""
        ...

    def message_not_found(self, message_id: str) -> None:
        """Record that a message was not found."""
        ...

    def with_context(self, context: ObservationContext) -> CRMServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCRMServiceProbe:
    """Default implementation of CRMServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultCRMServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCRMServiceProbe(logger=self._logger, context=context)

    def contact_created(self, contact_id: str, conversation_id: str) -> None:
        """Record that a contact and its first conversation were created."""
        self._logger.info(
            "contact_created",
            contact_id=contact_id,
            conversation_id=conversation_id,
            **self._get_context_kwargs(),
        )

    def contact_updated(self, contact_id: str, fields: list[str]) -> None:
        """Record that contact fields were changed."""
        self._logger.info(
            "contact_updated",
            contact_id=contact_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def contact_deleted(self, contact_id: str) -> None:
        """Record that a contact was deleted."""
        self._logger.info(
            "contact_deleted",
            contact_id=contact_id,
            **self._get_context_kwargs(),
        )

    def contact_not_found(self, contact_id: str) -> None:
        """Record that a contact was not found."""
        self._logger.debug(
            "contact_not_found",
            contact_id=contact_id,
            **self._get_context_kwargs(),
        )

    def conversation_status_changed(self, conversation_id: str, status: str) -> None:
        """Record that a conversation changed status."""
        self._logger.info(
            "conversation_status_changed",
            conversation_id=conversation_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def conversation_deleted(self, conversation_id: str) -> None:
        """Record that a conversation was deleted."""
        self._logger.info(
            "conversation_deleted",
            conversation_id=conversation_id,
            **self._get_context_kwargs(),
        )

    def conversation_not_found(self, conversation_id: str) -> None:
        """Record that a conversation was not found."""
        self._logger.debug(
            "conversation_not_found",
            conversation_id=conversation_id,
            **self._get_context_kwargs(),
        )

    def message_created(self, message_id: str, conversation_id: str) -> None:
        """Record that a message was appended to a conversation."""
        self._logger.info(
            "message_created",
            message_id=message_id,
            conversation_id=conversation_id,
            **self._get_context_kwargs(),
        )

    def message_deleted(self, message_id: str) -> None:
        """Record that a message was deleted."""
        self._logger.info(
            "message_deleted",
            message_id=message_id,
            **self._get_context_kwargs(),
        )

    def message_not_found(self, message_id: str) -> None:
        """Record that a message was not found."""
        self._logger.debug(
            "message_not_found",
            message_id=message_id,
            **self._get_context_kwargs(),
        )
