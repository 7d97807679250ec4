import pytest

from privacyweave.schemas.job_application import JobApplicationCreate
from privacyweave.services.resume import ExternalLink, LocalFile

ADMIN_GETS = [
    "/api/admin/inquiries",
    "/api/admin/job-applications",
    "/api/admin/chat/conversations",
    "/api/admin/email-config",
    "/api/admin/whatsapp-config",
]


def _application(name="Ravi Shankar"):
    return JobApplicationCreate(
        full_name=name,
        email="ravi@example.com",
        phone="+91-9222222222",
        position="Cybersecurity & Encryption Specialist",
        experience="Fresher",
    )


class TestAdminAccess:
    @pytest.mark.parametrize("path", ADMIN_GETS)
    def test_anonymous_is_forbidden(self, client, path):
        r = client.get(path)
        assert r.status_code == 403
        assert r.json()["detail"] == "Forbidden"

    @pytest.mark.parametrize("path", ADMIN_GETS)
    def test_regular_user_is_forbidden(self, client, user_headers, path):
        r = client.get(path, headers=user_headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "Forbidden"

    @pytest.mark.parametrize("path", ADMIN_GETS)
    def test_admin_is_allowed(self, client, admin_headers, path):
        assert client.get(path, headers=admin_headers).status_code == 200

    def test_test_endpoints_are_forbidden_for_users(self, client, user_headers):
        r = client.post("/api/admin/test-email", json={"emailType": "inquiry"}, headers=user_headers)
        assert r.status_code == 403
        r = client.post("/api/admin/test-whatsapp", headers=user_headers)
        assert r.status_code == 403


class TestAdminLists:
    def test_inquiries_newest_first(self, client, admin_headers):
        for company in ("First Co", "Second Co"):
            client.post("/api/inquiries", json={
                "firstName": "A", "lastName": "B", "email": "a@example.com",
                "company": company, "industry": "retail", "message": "hi",
            })
        r = client.get("/api/admin/inquiries", headers=admin_headers)
        assert [i["company"] for i in r.json()] == ["Second Co", "First Co"]

    def test_job_applications_newest_first(self, client, storage, admin_headers):
        older = storage.create_job_application(_application("Older"))
        newer = storage.create_job_application(_application("Newer"))
        r = client.get("/api/admin/job-applications", headers=admin_headers)
        assert [a["id"] for a in r.json()] == [newer.id, older.id]

    def test_conversations_by_recent_activity(self, client, admin_headers):
        quiet = client.post("/api/chat/conversations", json={"sessionId": "chat_quiet"}).json()
        busy = client.post("/api/chat/conversations", json={"sessionId": "chat_busy"}).json()
        client.post(f"/api/chat/conversations/{quiet['id']}/messages", data={"sender": "user", "content": "hi"})
        r = client.get("/api/admin/chat/conversations", headers=admin_headers)
        assert [c["id"] for c in r.json()] == [quiet["id"], busy["id"]]


class TestResumeDownload:
    def test_uploaded_resume_is_downloaded(self, client, storage, admin_headers, upload_dir):
        upload_dir.mkdir(exist_ok=True)
        path = upload_dir / "attachment-abc.pdf"
        path.write_bytes(b"%PDF-1.4 ravi")
        application = storage.create_job_application(_application(), resume=LocalFile(str(path)))

        r = client.get(f"/api/admin/job-applications/{application.id}/resume", headers=admin_headers)
        assert r.status_code == 200
        assert r.content == b"%PDF-1.4 ravi"
        assert "Ravi_Shankar_Resume.pdf" in r.headers["content-disposition"]

    def test_linked_resume_redirects(self, client, storage, admin_headers):
        application = storage.create_job_application(
            _application(), resume=ExternalLink("https://drive.example.com/ravi.pdf")
        )
        r = client.get(
            f"/api/admin/job-applications/{application.id}/resume",
            headers=admin_headers,
            follow_redirects=False,
        )
        assert r.status_code == 307
        assert r.headers["location"] == "https://drive.example.com/ravi.pdf"

    def test_missing_resume_is_404(self, client, storage, admin_headers):
        application = storage.create_job_application(_application())
        r = client.get(f"/api/admin/job-applications/{application.id}/resume", headers=admin_headers)
        assert r.status_code == 404

    def test_deleted_file_is_404(self, client, storage, admin_headers, upload_dir):
        application = storage.create_job_application(
            _application(), resume=LocalFile(str(upload_dir / "gone.pdf"))
        )
        r = client.get(f"/api/admin/job-applications/{application.id}/resume", headers=admin_headers)
        assert r.status_code == 404

    def test_unknown_application_is_404(self, client, admin_headers):
        r = client.get("/api/admin/job-applications/999/resume", headers=admin_headers)
        assert r.status_code == 404


class TestNotificationAdmin:
    def test_email_config_is_redacted(self, client, admin_headers):
        r = client.get("/api/admin/email-config", headers=admin_headers)
        data = r.json()
        assert data["configured"] is True
        assert data["service"] == "gmail"
        assert data["user"] == "nor...privacyweave.com"
        assert data["recipients"] == ["careers@privacyweave.com", "sales@privacyweave.com"]
        assert data["missingVariables"] == []
        assert "app-password" not in r.text

    def test_whatsapp_config_is_redacted(self, client, admin_headers):
        r = client.get("/api/admin/whatsapp-config", headers=admin_headers)
        data = r.json()
        assert data["configured"] is True
        assert data["accountSid"] == "AC1234..."
        assert data["recipientNumber"] == "...3210"
        assert "twilio-token" not in r.text

    def test_unconfigured_email_config_lists_missing(self, client, admin_headers, unconfigured_notifiers):
        data = client.get("/api/admin/email-config", headers=admin_headers).json()
        assert data["configured"] is False
        assert data["user"] == "Not configured"
        assert data["missingVariables"] == ["EMAIL_SERVICE", "EMAIL_USER", "EMAIL_PASSWORD"]

    @pytest.mark.parametrize("email_type,subject", [
        ("inquiry", "New Demo Request: Test Company"),
        ("job-application", "New Career Application: Test Position"),
    ])
    def test_send_test_email(self, client, admin_headers, smtp_outbox, email_type, subject):
        r = client.post("/api/admin/test-email", json={"emailType": email_type}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Test email sent successfully"}
        assert smtp_outbox[0]["Subject"] == subject

    def test_invalid_test_email_type(self, client, admin_headers, smtp_outbox):
        r = client.post("/api/admin/test-email", json={"emailType": "newsletter"}, headers=admin_headers)
        assert r.status_code == 400
        assert smtp_outbox == []

    def test_test_email_failure_is_reported(self, client, admin_headers, unconfigured_notifiers):
        r = client.post("/api/admin/test-email", json={"emailType": "inquiry"}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["success"] is False
        assert "Check server logs" in r.json()["message"]

    def test_send_test_whatsapp(self, client, admin_headers, whatsapp_outbox):
        r = client.post("/api/admin/test-whatsapp", headers=admin_headers)
        assert r.json() == {"success": True, "message": "Test WhatsApp message sent successfully"}
        assert whatsapp_outbox[0]["to"] == "whatsapp:+919876543210"
        assert "Test Notification from PrivacyWeave" in whatsapp_outbox[0]["body"]
