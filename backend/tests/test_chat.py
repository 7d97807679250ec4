import json
import re
from pathlib import Path

from privacyweave.config import settings
from privacyweave.storage import StorageError


def _open(client, **body):
    r = client.post("/api/chat/conversations", json=body)
    assert r.status_code == 200
    return r.json()


def _send(client, conversation_id, content, sender="user", files=None, **fields):
    data = {"sender": sender, "content": content, **fields}
    return client.post(f"/api/chat/conversations/{conversation_id}/messages", data=data, files=files)


class TestConversations:
    def test_open_conversation_with_session_id(self, client):
        data = _open(client, sessionId="chat_abc", userName="Meera", userEmail="meera@example.com")
        assert data["sessionId"] == "chat_abc"
        assert data["category"] == "general"
        assert data["status"] == "active"
        assert data["userName"] == "Meera"

    def test_same_session_returns_same_conversation(self, client, storage):
        first = _open(client, sessionId="chat_same")
        second = _open(client, sessionId="chat_same", category="sales")
        assert first["id"] == second["id"]
        assert second["category"] == "general"
        assert len(storage.get_chat_conversations()) == 1

    def test_session_id_is_generated(self, client):
        data = _open(client)
        assert re.fullmatch(r"chat_\d+_[0-9a-z]{7}", data["sessionId"])

    def test_messages_of_unknown_conversation_is_404(self, client):
        r = client.get("/api/chat/conversations/999/messages")
        assert r.status_code == 404


class TestMessages:
    def test_user_message_gets_bot_reply(self, client):
        conversation = _open(client, sessionId="chat_reply")
        r = _send(client, conversation["id"], "Tell me about your internships")
        assert r.status_code == 201
        data = r.json()
        assert data["userMessage"]["sender"] == "user"
        assert data["userMessage"]["content"] == "Tell me about your internships"
        assert data["botResponse"]["sender"] == "bot"
        assert "internship program" in data["botResponse"]["content"]

    def test_careers_reply_lists_seeded_openings(self, client):
        conversation = _open(client, sessionId="chat_jobs")
        r = _send(client, conversation["id"], "Do you have any job openings?")
        reply = r.json()["botResponse"]["content"]
        assert "1. " in reply
        assert "(Coimbatore)" in reply

    def test_bot_message_is_stored_without_reply(self, client):
        conversation = _open(client, sessionId="chat_bot")
        r = _send(client, conversation["id"], "Hello from the widget", sender="bot")
        assert r.status_code == 201
        data = r.json()
        assert data["sender"] == "bot"
        assert "userMessage" not in data

    def test_history_is_chronological(self, client):
        conversation = _open(client, sessionId="chat_history")
        _send(client, conversation["id"], "hello")
        _send(client, conversation["id"], "what services do you offer?")

        r = client.get(f"/api/chat/conversations/{conversation['id']}/messages")
        assert r.status_code == 200
        messages = r.json()
        assert [m["sender"] for m in messages] == ["user", "bot", "user", "bot"]
        assert messages[0]["content"] == "hello"
        assert "comprehensive suite" in messages[3]["content"]
        assert [m["id"] for m in messages] == sorted(m["id"] for m in messages)

    def test_message_bumps_conversation_activity(self, client, storage):
        conversation = _open(client, sessionId="chat_bump")
        before = storage.get_chat_conversation(conversation["id"]).last_message_at
        _send(client, conversation["id"], "hello")
        assert storage.get_chat_conversation(conversation["id"]).last_message_at > before

    def test_conversation_is_never_older_than_its_messages(self, client, storage):
        conversation = _open(client, sessionId="chat_latest")
        _send(client, conversation["id"], "hello")
        _send(client, conversation["id"], "any internships?")

        latest = storage.get_chat_conversation(conversation["id"]).last_message_at
        messages = storage.get_chat_messages_by_conversation_id(conversation["id"])
        assert [m.sender for m in messages] == ["user", "bot", "user", "bot"]
        assert all(latest >= m.timestamp for m in messages)

    def test_unknown_conversation_is_404(self, client):
        r = _send(client, 12345, "hello")
        assert r.status_code == 404

    def test_invalid_sender_is_rejected(self, client):
        conversation = _open(client, sessionId="chat_sender")
        r = _send(client, conversation["id"], "hello", sender="admin")
        assert r.status_code == 422

    def test_empty_content_is_rejected(self, client):
        conversation = _open(client, sessionId="chat_empty")
        r = _send(client, conversation["id"], "")
        assert r.status_code == 422

    def test_malformed_metadata_is_rejected(self, client):
        conversation = _open(client, sessionId="chat_meta")
        r = _send(client, conversation["id"], "hi", metadata="{not json")
        assert r.status_code == 400

    def test_metadata_must_be_an_object(self, client):
        conversation = _open(client, sessionId="chat_meta_list")
        r = _send(client, conversation["id"], "hi", metadata="[1, 2]")
        assert r.status_code == 400


class TestAttachments:
    def test_attachment_is_stored(self, client, upload_dir):
        conversation = _open(client, sessionId="chat_upload")
        r = _send(
            client, conversation["id"], "Here is my CV",
            files={"attachment": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")},
        )
        assert r.status_code == 201
        message = r.json()["userMessage"]
        assert message["attachmentType"] == "application/pdf"
        stored = list(upload_dir.iterdir())
        assert len(stored) == 1
        assert stored[0].name.startswith("attachment-")
        assert stored[0].suffix == ".pdf"
        assert message["attachmentUrl"] == str(stored[0])

    def test_disallowed_extension_is_rejected_before_writing(self, client, upload_dir):
        conversation = _open(client, sessionId="chat_exe")
        r = _send(
            client, conversation["id"], "Here is my CV",
            files={"attachment": ("cv.exe", b"MZ", "application/octet-stream")},
        )
        assert r.status_code == 400
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_oversized_attachment_is_rejected(self, client, upload_dir, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 16)
        conversation = _open(client, sessionId="chat_big")
        r = _send(
            client, conversation["id"], "Here is my CV",
            files={"attachment": ("cv.pdf", b"x" * 64, "application/pdf")},
        )
        assert r.status_code == 413
        assert list(upload_dir.iterdir()) == []

    def test_upload_is_removed_when_message_cannot_be_saved(self, client, storage, upload_dir, monkeypatch):
        conversation = _open(client, sessionId="chat_fail")

        def broken(data):
            raise StorageError("disk full")

        monkeypatch.setattr(storage, "create_chat_message", broken)
        r = _send(
            client, conversation["id"], "Here is my CV",
            files={"attachment": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")},
        )
        assert r.status_code == 500
        assert r.json() == {"detail": "Internal server error"}
        assert list(upload_dir.iterdir()) == []


class TestChatApplications:
    METADATA = {
        "fullName": "Asha Rao",
        "email": "asha@example.com",
        "phone": "+91-9111111111",
        "position": "AI/ML Engineer",
        "experience": "Fresher",
    }

    def test_application_request_creates_job_application(self, client, storage, smtp_outbox, whatsapp_outbox):
        conversation = _open(client, sessionId="chat_apply")
        r = _send(
            client, conversation["id"], "Please consider my application",
            files={"attachment": ("resume.pdf", b"%PDF-1.4 asha", "application/pdf")},
            isApplicationRequest="true",
            metadata=json.dumps(self.METADATA),
        )
        assert r.status_code == 201
        message = r.json()["userMessage"]
        application_id = message["metadata"]["jobApplicationId"]
        assert message["metadata"]["fullName"] == "Asha Rao"

        application = storage.get_job_application(application_id)
        assert application.full_name == "Asha Rao"
        assert application.position == "AI/ML Engineer"
        assert application.message == "Please consider my application"
        assert application.resume_kind == "file"
        assert application.resume_path == message["attachmentUrl"]

        assert len(smtp_outbox) == 1
        attachments = list(smtp_outbox[0].iter_attachments())
        assert [a.get_filename() for a in attachments] == ["Asha_Rao_Resume.pdf"]
        # The chat path only emails staff
        assert whatsapp_outbox == []

    def test_link_to_application_is_persisted(self, client, storage):
        conversation = _open(client, sessionId="chat_persist")
        _send(
            client, conversation["id"], "Apply me",
            isApplicationRequest="true",
            metadata=json.dumps(self.METADATA),
        )
        history = client.get(f"/api/chat/conversations/{conversation['id']}/messages").json()
        assert "jobApplicationId" in history[0]["metadata"]

    def test_metadata_email_wins_over_conversation_email(self, client, storage):
        conversation = _open(client, sessionId="chat_emails", userEmail="visitor@example.com")
        _send(
            client, conversation["id"], "Apply me",
            isApplicationRequest="true",
            metadata=json.dumps(self.METADATA),
        )
        application = storage.get_job_applications()[0]
        assert application.email == self.METADATA["email"]

    def test_failed_link_keeps_application_and_resume(self, client, storage, upload_dir, monkeypatch):
        conversation = _open(client, sessionId="chat_link_fail")

        def broken(message_id, metadata):
            raise StorageError("database is locked")

        monkeypatch.setattr(storage, "update_chat_message_metadata", broken)
        r = _send(
            client, conversation["id"], "Please consider my application",
            files={"attachment": ("cv.pdf", b"%PDF-1.4 asha", "application/pdf")},
            isApplicationRequest="true",
            metadata=json.dumps(self.METADATA),
        )
        assert r.status_code == 201
        assert "jobApplicationId" not in r.json()["userMessage"]["metadata"]

        [application] = storage.get_job_applications()
        assert application.resume_kind == "file"
        assert Path(application.resume_path).is_file()
        assert Path(application.resume_path).parent == upload_dir

    def test_conversation_details_fill_missing_metadata(self, client, storage):
        conversation = _open(client, sessionId="chat_fallback", userName="Kiran", userEmail="kiran@example.com")
        _send(
            client, conversation["id"], "I want to apply",
            isApplicationRequest="true",
            metadata=json.dumps({"position": "Full Stack Developer"}),
        )
        application = storage.get_job_applications()[0]
        assert application.full_name == "Kiran"
        assert application.email == "kiran@example.com"
        assert application.phone == "Not provided"
        assert application.experience == "Not specified"
        assert application.resume_path is None

    def test_invalid_application_metadata_does_not_fail_the_message(self, client, storage, smtp_outbox):
        conversation = _open(client, sessionId="chat_bad_email")
        r = _send(
            client, conversation["id"], "I want to apply",
            isApplicationRequest="true",
            metadata=json.dumps({"email": "not-an-email"}),
        )
        assert r.status_code == 201
        assert "jobApplicationId" not in r.json()["userMessage"]["metadata"]
        assert storage.get_job_applications() == []
        assert smtp_outbox == []

    def test_flag_without_metadata_creates_nothing(self, client, storage):
        conversation = _open(client, sessionId="chat_flag_only")
        r = _send(client, conversation["id"], "apply", isApplicationRequest="true")
        assert r.status_code == 201
        assert r.json()["userMessage"]["isApplicationRequest"] is True
        assert storage.get_job_applications() == []
