import html
import logging
import mimetypes
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from pathlib import Path

from privacyweave.config import settings
from privacyweave.schemas.inquiry import InquiryResponse
from privacyweave.schemas.job_application import JobApplicationResponse
from privacyweave.services.notifier import Notifier, sample_inquiry, sample_job_application
from privacyweave.services.resume import LocalFile, resume_reference

logger = logging.getLogger(__name__)

# service name -> (host, port, implicit TLS)
SMTP_SERVICES = {
    "gmail": ("smtp.gmail.com", 465, True),
    "outlook": ("smtp-mail.outlook.com", 587, False),
    "hotmail": ("smtp-mail.outlook.com", 587, False),
    "yahoo": ("smtp.mail.yahoo.com", 465, True),
}
DEFAULT_RECIPIENTS = ["careers@privacyweave.com", "sales@privacyweave.com"]
TEST_EMAIL_KINDS = ("inquiry", "job-application")


def _submitted_on(entity) -> str:
    return entity.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _html_paragraphs(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def _application_label(application: JobApplicationResponse) -> str:
    return "Internship" if application.application_type == "internship" else "Career"


def _application_fields(application: JobApplicationResponse) -> list[tuple[str, str]]:
    fields = [
        ("Full Name", application.full_name),
        ("Email", application.email),
        ("Phone", application.phone),
        ("Position", application.position),
        ("Experience", application.experience),
        ("Application Type", application.application_type),
    ]
    if application.application_type == "internship":
        fields += [
            ("Education", application.education or "Not provided"),
            ("University", application.university or "Not provided"),
            ("Graduation Year", application.graduation_year or "Not provided"),
            ("Availability", application.availability_date or "Not provided"),
        ]
    return fields


class EmailNotifier(Notifier):
    channel = "email"
    required_settings = ("email_service", "email_user", "email_password")

    def recipients(self) -> list[str]:
        if self._config.email_recipients:
            return [r.strip() for r in self._config.email_recipients.split(",") if r.strip()]
        return list(DEFAULT_RECIPIENTS)

    def get_config(self) -> dict:
        user = self._config.email_user
        if user:
            domain = user.split("@", 1)[1] if "@" in user else ""
            user = f"{user[:3]}...{domain}"
        return {
            "configured": self.is_configured(),
            "service": self._config.email_service or "Not configured",
            "user": user or "Not configured",
            "recipients": self.recipients(),
            "missing_variables": self.missing_variables(),
        }

    def smtp_endpoint(self) -> tuple[str, int, bool]:
        service = (self._config.email_service or "").lower()
        if service in SMTP_SERVICES:
            return SMTP_SERVICES[service]
        host = self._config.email_host or service
        port = self._config.email_port or 587
        return host, port, port == 465

    def _send(self, message: EmailMessage) -> str | None:
        host, port, implicit_tls = self.smtp_endpoint()
        timeout = self._config.smtp_timeout_seconds
        if implicit_tls:
            smtp = smtplib.SMTP_SSL(host, port, timeout=timeout)
        else:
            smtp = smtplib.SMTP(host, port, timeout=timeout)
        with smtp:
            if not implicit_tls:
                smtp.starttls()
            smtp.login(self._config.email_user, self._config.email_password)
            smtp.send_message(message)
        return message["Message-ID"]

    def _build(self, subject: str, text: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._config.email_user
        message["To"] = ", ".join(self.recipients())
        message["Message-ID"] = make_msgid(domain="privacyweave.com")
        message.set_content(text)
        message.add_alternative(html_body, subtype="html")
        return message

    def notify_inquiry(self, inquiry: InquiryResponse) -> bool:
        def send():
            fields = [
                ("First Name", inquiry.first_name),
                ("Last Name", inquiry.last_name),
                ("Email", inquiry.email),
                ("Company", inquiry.company),
                ("Industry", inquiry.industry),
            ]
            text = "\n".join(
                ["New Demo Request Received:", ""]
                + [f"{label}: {value}" for label, value in fields]
                + ["", "Message:", inquiry.message, "", f"Submitted on: {_submitted_on(inquiry)}"]
            )
            html_body = "\n".join(
                ["<h2>New Demo Request Received</h2>"]
                + [f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in fields]
                + [
                    "<h3>Message:</h3>",
                    f"<p>{_html_paragraphs(inquiry.message)}</p>",
                    f"<p><em>Submitted on: {_submitted_on(inquiry)}</em></p>",
                ]
            )
            return self._send(self._build(f"New Demo Request: {inquiry.company}", text, html_body))

        return self._deliver(f"inquiry {inquiry.id} ({inquiry.company})", send)

    def notify_job_application(self, application: JobApplicationResponse) -> bool:
        def send():
            resume = resume_reference(application.resume_path, application.resume_kind)
            fields = _application_fields(application)
            cover = application.message or "No cover letter provided"
            if isinstance(resume, LocalFile):
                resume_note = "Attached"
            elif resume is not None:
                resume_note = f"Link: {resume.url}"
            else:
                resume_note = "Not provided"

            text = "\n".join(
                [f"New {_application_label(application)} Application Received:", ""]
                + [f"{label}: {value}" for label, value in fields]
                + ["", "Message:", cover, "", f"Resume: {resume_note}",
                   "", f"Submitted on: {_submitted_on(application)}"]
            )
            html_body = "\n".join(
                [f"<h2>New {_application_label(application)} Application Received</h2>"]
                + [f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in fields]
                + [
                    "<h3>Cover Letter:</h3>",
                    f"<p>{_html_paragraphs(cover)}</p>",
                    f"<p><strong>Resume:</strong> {html.escape(resume_note)}</p>",
                    f"<p><em>Submitted on: {_submitted_on(application)}</em></p>",
                ]
            )
            subject = f"New {_application_label(application)} Application: {application.position}"
            message = self._build(subject, text, html_body)
            if isinstance(resume, LocalFile):
                self._attach_resume(message, application, Path(resume.path))
            return self._send(message)

        return self._deliver(f"job application {application.id} ({application.position})", send)

    def _attach_resume(self, message: EmailMessage, application: JobApplicationResponse, path: Path) -> None:
        if not path.is_file():
            logger.warning("Resume %s for application %s is missing; sending without it", path, application.id)
            return
        mime_type, _ = mimetypes.guess_type(path.name)
        maintype, subtype = (mime_type or "application/octet-stream").split("/", 1)
        filename = f"{'_'.join(application.full_name.split())}_Resume{path.suffix}"
        message.add_attachment(path.read_bytes(), maintype=maintype, subtype=subtype, filename=filename)

    def send_test(self, kind: str = "inquiry") -> bool:
        if kind == "inquiry":
            return self.notify_inquiry(sample_inquiry())
        if kind == "job-application":
            return self.notify_job_application(sample_job_application())
        logger.warning("Unknown test email type %r", kind)
        return False


email_notifier = EmailNotifier(settings)
