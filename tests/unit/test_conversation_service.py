"""Unit tests for saved conversations and exports."""

import pytest

from study_notes.core.domain import ChatMessage
from study_notes.core.domain.exceptions import BackendQueryError, NotFoundError, ValidationError
from study_notes.core.services.conversation_service import ConversationService

pytestmark = pytest.mark.unit

MESSAGES = [
    ChatMessage("user", "What is ATP?"),
    ChatMessage("assistant", "ATP stores energy.", sources=["bio.pdf"]),
]


class TestSave:
    def test_new_conversation(self, backend, user):
        saved = ConversationService(backend).save(user.id, MESSAGES, title="Energy")

        conversation = backend.tables["chat_conversations"][0]
        assert saved == {"id": conversation["id"], "title": "Energy"}
        rows = backend.tables["chat_messages"]
        assert [(r["role"], r["content"]) for r in rows] == [(m.role, m.content) for m in MESSAGES]
        assert rows[1]["sources"] == ["bio.pdf"]
        assert rows[0]["sources"] is None

    def test_new_conversation_requires_title(self, backend, user):
        with pytest.raises(ValidationError, match="Title is required"):
            ConversationService(backend).save(user.id, MESSAGES, title="  ")

    def test_requires_messages(self, backend, user):
        with pytest.raises(ValidationError, match="Messages array"):
            ConversationService(backend).save(user.id, [], title="Energy")

    def test_message_failure_removes_new_conversation(self, backend, user):
        backend.fail_table("chat_messages")

        with pytest.raises(BackendQueryError, match="Failed to save messages"):
            ConversationService(backend).save(user.id, MESSAGES, title="Energy")

        assert backend.tables["chat_conversations"] == []

    def test_missing_table_on_create(self, backend, user):
        backend.fail_table("chat_conversations", code="42P01")

        with pytest.raises(BackendQueryError) as exc_info:
            ConversationService(backend).save(user.id, MESSAGES, title="Energy")

        assert "CHAT_SCHEMA.sql" in exc_info.value.message
        assert exc_info.value.extra_context["code"] == "TABLE_NOT_FOUND"

    def test_append_skips_existing_messages(self, backend, user):
        service = ConversationService(backend)
        conversation_id = service.save(user.id, MESSAGES, title="Energy")["id"]
        backend.tables["chat_conversations"][0]["updated_at"] = "2000-01-01T00:00:00"

        service.save(
            user.id,
            MESSAGES + [ChatMessage("user", "And ADP?")],
            conversation_id=conversation_id,
        )

        contents = [r["content"] for r in backend.tables["chat_messages"]]
        assert contents == ["What is ATP?", "ATP stores energy.", "And ADP?"]
        assert backend.tables["chat_conversations"][0]["updated_at"] > "2000-01-01T00:00:00"

    def test_append_to_someone_elses_conversation(self, backend, user):
        backend.insert("chat_conversations", {"id": "c-9", "user_id": "other", "title": "Theirs"})

        with pytest.raises(NotFoundError):
            ConversationService(backend).save(user.id, MESSAGES, conversation_id="c-9")


class TestHistoryAndLoad:
    def test_recent_first_with_limit(self, backend, user):
        for i, stamp in enumerate(["2026-01-01", "2026-03-01", "2026-02-01", "2026-04-01"]):
            backend.insert(
                "chat_conversations", {"user_id": user.id, "title": f"c{i}", "updated_at": stamp}
            )

        recent = ConversationService(backend).list_recent(user.id, limit=3)

        assert [c["title"] for c in recent] == ["c3", "c1", "c2"]

    def test_missing_table_yields_empty_history(self, backend, user):
        backend.fail_table("chat_conversations", code="42P01")

        assert ConversationService(backend).list_recent(user.id) == []

    def test_other_history_errors_propagate(self, backend, user):
        backend.fail_table("chat_conversations", code="42501")

        with pytest.raises(BackendQueryError):
            ConversationService(backend).list_recent(user.id)

    def test_load(self, backend, user):
        service = ConversationService(backend)
        conversation_id = service.save(user.id, MESSAGES, title="Energy")["id"]

        loaded = service.load(user.id, conversation_id)

        assert loaded["conversation"]["title"] == "Energy"
        assert [m["role"] for m in loaded["messages"]] == ["user", "assistant"]

    def test_load_not_owned(self, backend, user):
        backend.insert("chat_conversations", {"id": "c-9", "user_id": "other", "title": "Theirs"})

        with pytest.raises(NotFoundError):
            ConversationService(backend).load(user.id, "c-9")

    def test_load_requires_id(self, backend, user):
        with pytest.raises(ValidationError):
            ConversationService(backend).load(user.id, "")


class TestExport:
    def test_create_export(self, backend, user):
        result = ConversationService(backend).create_export(user.id, "Energy", "# Transcript", "pdf")

        row = backend.tables["chat_exports"][0]
        assert result == {"id": row["id"], "message": "Export created successfully"}
        assert row["conversation_id"] is None
        assert row["type"] == "pdf"

    @pytest.mark.parametrize(
        ("title", "content", "export_type"),
        [("", "x", "pdf"), ("t", "", "doc"), ("t", "x", "html")],
    )
    def test_invalid_export(self, backend, user, title, content, export_type):
        with pytest.raises(ValidationError):
            ConversationService(backend).create_export(user.id, title, content, export_type)
