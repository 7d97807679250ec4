import logging

from twilio.rest import Client

from privacyweave.config import settings
from privacyweave.schemas.inquiry import InquiryResponse
from privacyweave.schemas.job_application import JobApplicationResponse
from privacyweave.services.notifier import Notifier, redact
from privacyweave.services.resume import ExternalLink, resume_reference

logger = logging.getLogger(__name__)


def format_inquiry(inquiry: InquiryResponse) -> str:
    return (
        "*New Inquiry/Demo Request*\n\n"
        f"*Name:* {inquiry.first_name} {inquiry.last_name}\n"
        f"*Company:* {inquiry.company}\n"
        f"*Industry:* {inquiry.industry}\n"
        f"*Email:* {inquiry.email}\n"
        f"*Message:* {inquiry.message}"
    )


def format_job_application(application: JobApplicationResponse) -> str:
    is_internship = application.application_type == "internship"
    lines = [
        f"*New {'Internship' if is_internship else 'Job'} Application*",
        "",
        f"*Name:* {application.full_name}",
        f"*Position:* {application.position}",
        f"*Email:* {application.email}",
        f"*Phone:* {application.phone}",
        f"*Experience:* {application.experience}",
    ]
    if is_internship:
        lines += [
            f"*Education:* {application.education or 'Not provided'}",
            f"*University:* {application.university or 'Not provided'}",
            f"*Graduation Year:* {application.graduation_year or 'Not provided'}",
            f"*Availability:* {application.availability_date or 'Not provided'}",
        ]
    if application.message:
        lines += ["", "*Message:*", application.message]

    # Uploaded files go out as email attachments; only links are shared here
    resume = resume_reference(application.resume_path, application.resume_kind)
    if isinstance(resume, ExternalLink):
        lines += ["", f"*Resume Link:* {resume.url}"]
    elif resume is not None:
        lines += ["", "*Resume:* uploaded file, sent by email"]
    return "\n".join(lines)


class WhatsAppNotifier(Notifier):
    channel = "whatsapp"
    required_settings = (
        "twilio_account_sid",
        "twilio_auth_token",
        "twilio_phone_number",
        "whatsapp_recipient_number",
    )

    def __init__(self, config, client_factory=Client):
        super().__init__(config)
        self._client_factory = client_factory

    def get_config(self) -> dict:
        return {
            "configured": self.is_configured(),
            "account_sid": redact(self._config.twilio_account_sid, keep_start=6),
            "phone_number": self._config.twilio_phone_number or "Not configured",
            "recipient_number": redact(self._config.whatsapp_recipient_number, keep_end=4),
            "missing_variables": self.missing_variables(),
        }

    def _send(self, body: str) -> str:
        client = self._client_factory(self._config.twilio_account_sid, self._config.twilio_auth_token)
        message = client.messages.create(
            body=body,
            from_=f"whatsapp:{self._config.twilio_phone_number}",
            to=f"whatsapp:{self._config.whatsapp_recipient_number}",
        )
        return message.sid

    def notify_inquiry(self, inquiry: InquiryResponse) -> bool:
        return self._deliver(f"inquiry {inquiry.id}", lambda: self._send(format_inquiry(inquiry)))

    def notify_job_application(self, application: JobApplicationResponse) -> bool:
        return self._deliver(
            f"job application {application.id}",
            lambda: self._send(format_job_application(application)),
        )

    def send_test(self, kind: str = "test") -> bool:
        body = (
            f"*Test Notification from {self._config.company_name}*\n\n"
            "This is a test message to verify that WhatsApp notifications are working correctly. "
            "If you received this, the service is configured properly!"
        )
        return self._deliver("test message", lambda: self._send(body))


whatsapp_notifier = WhatsAppNotifier(settings)
