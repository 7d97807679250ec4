"""
Outbound staff notifications.

Notifications are advisory: persistence has already succeeded by the time a notifier
runs, so every public method reports the outcome as a bool and never raises.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable

from privacyweave.config import Settings
from privacyweave.models.timestamps import utcnow
from privacyweave.schemas.inquiry import InquiryResponse
from privacyweave.schemas.job_application import JobApplicationResponse

logger = logging.getLogger(__name__)


class Notifier(ABC):
    channel: str = ""
    # Settings attribute names that must all be set for the channel to be usable
    required_settings: tuple[str, ...] = ()

    def __init__(self, config: Settings):
        self._config = config

    def missing_variables(self) -> list[str]:
        return [name.upper() for name in self.required_settings if not getattr(self._config, name)]

    def is_configured(self) -> bool:
        return not self.missing_variables()

    def _deliver(self, subject: str, send: Callable[[], str | None]) -> bool:
        if not self.is_configured():
            logger.warning(
                "%s notification for %s skipped: missing %s",
                self.channel, subject, ", ".join(self.missing_variables()),
            )
            return False
        try:
            reference = send()
        except Exception:
            logger.exception("%s notification for %s failed", self.channel, subject)
            return False
        logger.info("%s notification for %s sent (%s)", self.channel, subject, reference or "no id")
        return True

    @abstractmethod
    def get_config(self) -> dict:
        """Configuration summary for the admin view. Never includes secrets."""

    @abstractmethod
    def send_test(self, kind: str = "inquiry") -> bool: ...

    @abstractmethod
    def notify_inquiry(self, inquiry: InquiryResponse) -> bool: ...

    @abstractmethod
    def notify_job_application(self, application: JobApplicationResponse) -> bool: ...


def sample_inquiry() -> InquiryResponse:
    return InquiryResponse(
        id=0,
        first_name="Test",
        last_name="User",
        email="test@example.com",
        company="Test Company",
        industry="technology",
        message="This is a test notification sent from the admin panel.",
        created_at=utcnow(),
    )


def sample_job_application() -> JobApplicationResponse:
    return JobApplicationResponse(
        id=0,
        full_name="Test Applicant",
        email="test@example.com",
        phone="+91-1234567890",
        position="Test Position",
        experience="1",
        message="This is a test job application notification sent from the admin panel.",
        resume_path=None,
        resume_kind=None,
        application_type="job",
        education=None,
        university=None,
        graduation_year=None,
        availability_date=None,
        created_at=utcnow(),
    )


def redact(value: str | None, keep_start: int = 0, keep_end: int = 0) -> str:
    if not value:
        return "Not configured"
    if len(value) <= keep_start + keep_end:
        return "..."
    return f"{value[:keep_start]}...{value[len(value) - keep_end:] if keep_end else ''}"
