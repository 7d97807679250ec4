"""
Storage interface shared by the SQL and in-memory backends.

Every read returns response schemas, so routers and services do not care which backend
is active. Lists are newest first, except chat messages which read oldest first.
"""
from abc import ABC, abstractmethod
from typing import Any

from privacyweave.schemas.chat import (
    ChatConversationCreate,
    ChatConversationResponse,
    ChatMessageCreate,
    ChatMessageResponse,
)
from privacyweave.schemas.inquiry import InquiryCreate, InquiryResponse
from privacyweave.schemas.job_application import JobApplicationCreate, JobApplicationResponse
from privacyweave.schemas.job_listing import JobListingCreate, JobListingResponse
from privacyweave.schemas.user import UserCreate, UserRecord
from privacyweave.services.resume import ResumeReference
from privacyweave.storage.seed import DEFAULT_JOB_LISTINGS


UPDATABLE_APPLICATION_FIELDS = {
    "full_name", "email", "phone", "position", "experience", "message", "resume_path",
    "resume_kind", "application_type", "education", "university", "graduation_year",
    "availability_date",
}
UPDATABLE_CONVERSATION_FIELDS = {"user_email", "user_name", "category", "status"}


class StorageError(Exception):
    """A write or read failed in the data layer (constraint violation, lost connection)."""


def check_update_fields(updates: dict[str, Any], allowed: set[str], entity: str) -> None:
    unknown = set(updates) - allowed
    if unknown:
        raise ValueError(f"Cannot update {entity} field(s): {', '.join(sorted(unknown))}")


class Storage(ABC):
    def init_schema(self) -> None:
        """Prepare the backing store. No-op unless the backend needs tables."""

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> UserRecord | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserRecord | None: ...

    @abstractmethod
    def create_user(self, data: UserCreate, password_hash: str, role: str = "user") -> UserRecord: ...

    # Inquiries
    @abstractmethod
    def create_inquiry(self, data: InquiryCreate) -> InquiryResponse: ...

    @abstractmethod
    def get_inquiries(self) -> list[InquiryResponse]: ...

    @abstractmethod
    def get_inquiry(self, inquiry_id: int) -> InquiryResponse | None: ...

    # Job applications
    @abstractmethod
    def create_job_application(
        self, data: JobApplicationCreate, resume: ResumeReference | None = None
    ) -> JobApplicationResponse: ...

    @abstractmethod
    def update_job_application(self, application_id: int, **updates: Any) -> JobApplicationResponse | None: ...

    @abstractmethod
    def get_job_applications(self) -> list[JobApplicationResponse]: ...

    @abstractmethod
    def get_job_application(self, application_id: int) -> JobApplicationResponse | None: ...

    # Job listings
    @abstractmethod
    def create_job_listing(self, data: JobListingCreate) -> JobListingResponse: ...

    @abstractmethod
    def get_job_listings(self) -> list[JobListingResponse]: ...

    @abstractmethod
    def get_active_job_listings(self) -> list[JobListingResponse]: ...

    @abstractmethod
    def get_job_listing(self, listing_id: int) -> JobListingResponse | None: ...

    # Chat
    @abstractmethod
    def create_chat_conversation(self, data: ChatConversationCreate) -> ChatConversationResponse: ...

    @abstractmethod
    def get_chat_conversation(self, conversation_id: int) -> ChatConversationResponse | None: ...

    @abstractmethod
    def get_chat_conversation_by_session_id(self, session_id: str) -> ChatConversationResponse | None: ...

    @abstractmethod
    def get_chat_conversations(self) -> list[ChatConversationResponse]: ...

    @abstractmethod
    def update_chat_conversation(self, conversation_id: int, **updates: Any) -> ChatConversationResponse | None:
        """Apply ``updates`` and bump ``last_message_at`` to now."""

    @abstractmethod
    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessageResponse:
        """Store a message and bump its conversation's ``last_message_at`` to the message time."""

    @abstractmethod
    def get_chat_messages_by_conversation_id(self, conversation_id: int) -> list[ChatMessageResponse]: ...

    @abstractmethod
    def update_chat_message_metadata(
        self, message_id: int, metadata: dict[str, Any]
    ) -> ChatMessageResponse | None:
        """Replace a message's metadata and bump its conversation's ``last_message_at``."""

    def seed_job_listings(self) -> int:
        """Insert the default listings when there are none. Returns how many were added."""
        if self.get_job_listings():
            return 0
        for listing in DEFAULT_JOB_LISTINGS:
            self.create_job_listing(listing)
        return len(DEFAULT_JOB_LISTINGS)
