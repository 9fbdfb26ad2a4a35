"""Saved chat conversations and chat exports."""

import logging
from datetime import UTC, datetime
from typing import Any

from ..domain import ChatMessage
from ..domain.exceptions import (
    BackendError,
    BackendQueryError,
    NotFoundError,
    ValidationError,
)
from ..ports import BackendPort

logger = logging.getLogger(__name__)

CONVERSATIONS_TABLE = "chat_conversations"
MESSAGES_TABLE = "chat_messages"
EXPORTS_TABLE = "chat_exports"
EXPORT_TYPES = ("pdf", "doc")


class ConversationService:
    """Persists chat transcripts for one user."""

    def __init__(self, backend: BackendPort) -> None:
        self.backend = backend

    def save(
        self,
        user_id: str,
        messages: list[ChatMessage],
        title: str | None = None,
        conversation_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a conversation, or append new messages to an existing one.

        Messages already stored with the same role and content are skipped
        when appending.

        Returns:
            ``{"id": ..., "title": ...}`` of the saved conversation.

        Raises:
            ValidationError: Missing title for a new conversation, or no messages.
            NotFoundError: ``conversation_id`` is not owned by the user.
            BackendError: Rows could not be written.
        """
        if not conversation_id and (not title or not title.strip()):
            raise ValidationError("Title is required for new conversations")
        if not messages:
            raise ValidationError("Messages array is required and must not be empty")

        if conversation_id:
            return self._append(user_id, conversation_id, messages)
        return self._create(user_id, title.strip(), messages)

    def _append(self, user_id: str, conversation_id: str, messages: list[ChatMessage]) -> dict[str, Any]:
        conversation = self._owned_conversation(user_id, conversation_id, columns="id,title")

        self.backend.update(
            CONVERSATIONS_TABLE,
            {"updated_at": datetime.now(UTC).isoformat()},
            {"id": conversation_id},
        )

        existing = self.backend.select(
            MESSAGES_TABLE,
            columns="id,role,content",
            filters={"conversation_id": conversation_id},
            order_by="created_at",
        )
        stored = {(row.get("role"), row.get("content")) for row in existing}
        new_messages = [m for m in messages if (m.role, m.content) not in stored]

        if new_messages:
            self.backend.insert(MESSAGES_TABLE, [m.to_row(conversation_id) for m in new_messages])
        logger.info(
            "Appended %d new messages to conversation %s", len(new_messages), conversation_id
        )
        return {"id": conversation["id"], "title": conversation.get("title")}

    def _create(self, user_id: str, title: str, messages: list[ChatMessage]) -> dict[str, Any]:
        try:
            conversation = self.backend.insert(CONVERSATIONS_TABLE, {"user_id": user_id, "title": title})[0]
        except BackendQueryError as e:
            if e.is_missing_table:
                logger.warning("chat_conversations table does not exist yet")
                raise BackendQueryError(
                    "Database table not found. Please run CHAT_SCHEMA.sql in your Supabase SQL Editor.",
                    cause=e,
                    context={"code": "TABLE_NOT_FOUND"},
                ) from e
            raise

        conversation_id = str(conversation["id"])
        try:
            self.backend.insert(MESSAGES_TABLE, [m.to_row(conversation_id) for m in messages])
        except BackendError as e:
            logger.error("Error inserting messages, removing conversation %s: %s", conversation_id, e.message)
            self.backend.delete(CONVERSATIONS_TABLE, {"id": conversation_id})
            raise BackendQueryError("Failed to save messages", cause=e) from e

        logger.info("Created conversation %s with %d messages", conversation_id, len(messages))
        return {"id": conversation["id"], "title": conversation.get("title", title)}

    def list_recent(self, user_id: str, limit: int = 3) -> list[dict[str, Any]]:
        """Most recently updated conversations; empty when the table is missing."""
        try:
            return self.backend.select(
                CONVERSATIONS_TABLE,
                columns="id,title,created_at,updated_at",
                filters={"user_id": user_id},
                order_by="updated_at",
                descending=True,
                limit=limit,
            )
        except BackendQueryError as e:
            if e.is_missing_table:
                logger.warning("chat_conversations table does not exist yet")
                return []
            raise

    def load(self, user_id: str, conversation_id: str) -> dict[str, Any]:
        """Conversation header plus its messages in creation order.

        Raises:
            ValidationError: No conversation id given.
            NotFoundError: Conversation missing or owned by someone else.
        """
        if not conversation_id:
            raise ValidationError("Conversation ID is required")

        conversation = self._owned_conversation(user_id, conversation_id, columns="id,title,created_at")
        messages = self.backend.select(
            MESSAGES_TABLE,
            columns="id,role,content,sources,created_at",
            filters={"conversation_id": conversation_id},
            order_by="created_at",
        )
        return {"conversation": conversation, "messages": messages}

    def create_export(
        self,
        user_id: str,
        title: str,
        content: str,
        export_type: str,
        conversation_id: str | None = None,
    ) -> dict[str, Any]:
        """Record an exported transcript."""
        if not title or not content or export_type not in EXPORT_TYPES:
            raise ValidationError("Title, content, and valid type are required")

        rows = self.backend.insert(
            EXPORTS_TABLE,
            {
                "user_id": user_id,
                "conversation_id": conversation_id or None,
                "title": title,
                "content": content,
                "type": export_type,
            },
        )
        if not rows:
            raise BackendQueryError("Failed to create export")
        return {"id": rows[0]["id"], "message": "Export created successfully"}

    def _owned_conversation(self, user_id: str, conversation_id: str, columns: str) -> dict[str, Any]:
        try:
            rows = self.backend.select(
                CONVERSATIONS_TABLE,
                columns=columns,
                filters={"id": conversation_id, "user_id": user_id},
                limit=1,
            )
        except BackendQueryError as e:
            raise NotFoundError("Conversation not found", cause=e, context={"id": conversation_id}) from e
        if not rows:
            raise NotFoundError("Conversation not found", context={"id": conversation_id})
        return rows[0]
