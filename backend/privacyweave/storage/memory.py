from itertools import count
from typing import Any

from privacyweave.models.timestamps import utcnow
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
from privacyweave.services.resume import ResumeReference, to_columns
from privacyweave.storage.base import (
    UPDATABLE_APPLICATION_FIELDS,
    UPDATABLE_CONVERSATION_FIELDS,
    Storage,
    StorageError,
    check_update_fields,
)


def _newest_first(rows, attr: str = "created_at"):
    return sorted(rows, key=lambda r: (getattr(r, attr), r.id), reverse=True)


class MemoryStorage(Storage):
    """Process-local storage with the same ordering and uniqueness rules as the database."""

    def __init__(self):
        self._users: dict[int, UserRecord] = {}
        self._inquiries: dict[int, InquiryResponse] = {}
        self._applications: dict[int, JobApplicationResponse] = {}
        self._listings: dict[int, JobListingResponse] = {}
        self._conversations: dict[int, ChatConversationResponse] = {}
        self._messages: dict[int, ChatMessageResponse] = {}
        self._ids = {name: count(1) for name in ("user", "inquiry", "application", "listing", "conversation", "message")}

    def _next_id(self, name: str) -> int:
        return next(self._ids[name])

    # Users

    def get_user(self, user_id: int) -> UserRecord | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> UserRecord | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, data: UserCreate, password_hash: str, role: str = "user") -> UserRecord:
        for existing in self._users.values():
            if existing.username == data.username or existing.email == data.email:
                raise StorageError("Duplicate username or email")
        user = UserRecord(
            id=self._next_id("user"),
            username=data.username,
            email=data.email,
            name=data.name,
            role=role,
            password_hash=password_hash,
            created_at=utcnow(),
        )
        self._users[user.id] = user
        return user

    # Inquiries

    def create_inquiry(self, data: InquiryCreate) -> InquiryResponse:
        inquiry = InquiryResponse(id=self._next_id("inquiry"), created_at=utcnow(), **data.model_dump())
        self._inquiries[inquiry.id] = inquiry
        return inquiry

    def get_inquiries(self) -> list[InquiryResponse]:
        return _newest_first(self._inquiries.values())

    def get_inquiry(self, inquiry_id: int) -> InquiryResponse | None:
        return self._inquiries.get(inquiry_id)

    # Job applications

    def create_job_application(
        self, data: JobApplicationCreate, resume: ResumeReference | None = None
    ) -> JobApplicationResponse:
        fields = data.model_dump(exclude={"resume_path"})
        fields["resume_path"], fields["resume_kind"] = to_columns(resume)
        application = JobApplicationResponse(id=self._next_id("application"), created_at=utcnow(), **fields)
        self._applications[application.id] = application
        return application

    def update_job_application(self, application_id: int, **updates: Any) -> JobApplicationResponse | None:
        check_update_fields(updates, UPDATABLE_APPLICATION_FIELDS, "job application")
        application = self._applications.get(application_id)
        if not application:
            return None
        updated = application.model_copy(update=updates)
        self._applications[application_id] = updated
        return updated

    def get_job_applications(self) -> list[JobApplicationResponse]:
        return _newest_first(self._applications.values())

    def get_job_application(self, application_id: int) -> JobApplicationResponse | None:
        return self._applications.get(application_id)

    # Job listings

    def create_job_listing(self, data: JobListingCreate) -> JobListingResponse:
        listing = JobListingResponse(id=self._next_id("listing"), created_at=utcnow(), **data.model_dump())
        self._listings[listing.id] = listing
        return listing

    def get_job_listings(self) -> list[JobListingResponse]:
        return _newest_first(self._listings.values())

    def get_active_job_listings(self) -> list[JobListingResponse]:
        return _newest_first(listing for listing in self._listings.values() if listing.is_active)

    def get_job_listing(self, listing_id: int) -> JobListingResponse | None:
        return self._listings.get(listing_id)

    # Chat conversations

    def create_chat_conversation(self, data: ChatConversationCreate) -> ChatConversationResponse:
        if not data.session_id:
            raise StorageError("Conversation session id is required")
        if self.get_chat_conversation_by_session_id(data.session_id):
            raise StorageError(f"Duplicate session id {data.session_id!r}")
        now = utcnow()
        conversation = ChatConversationResponse(
            id=self._next_id("conversation"),
            session_id=data.session_id,
            user_email=data.user_email,
            user_name=data.user_name,
            started_at=now,
            last_message_at=now,
            category=data.category or "general",
            status="active",
        )
        self._conversations[conversation.id] = conversation
        return conversation

    def get_chat_conversation(self, conversation_id: int) -> ChatConversationResponse | None:
        return self._conversations.get(conversation_id)

    def get_chat_conversation_by_session_id(self, session_id: str) -> ChatConversationResponse | None:
        return next((c for c in self._conversations.values() if c.session_id == session_id), None)

    def get_chat_conversations(self) -> list[ChatConversationResponse]:
        return _newest_first(self._conversations.values(), attr="last_message_at")

    def update_chat_conversation(self, conversation_id: int, **updates: Any) -> ChatConversationResponse | None:
        check_update_fields(updates, UPDATABLE_CONVERSATION_FIELDS, "conversation")
        conversation = self._conversations.get(conversation_id)
        if not conversation:
            return None
        updated = conversation.model_copy(update={**updates, "last_message_at": utcnow()})
        self._conversations[conversation_id] = updated
        return updated

    # Chat messages

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessageResponse:
        if data.conversation_id not in self._conversations:
            raise StorageError(f"Conversation {data.conversation_id} does not exist")
        now = utcnow()
        message = ChatMessageResponse(id=self._next_id("message"), timestamp=now, **data.model_dump())
        self._messages[message.id] = message
        conversation = self._conversations[data.conversation_id]
        self._conversations[conversation.id] = conversation.model_copy(update={"last_message_at": now})
        return message

    def get_chat_messages_by_conversation_id(self, conversation_id: int) -> list[ChatMessageResponse]:
        rows = [m for m in self._messages.values() if m.conversation_id == conversation_id]
        return sorted(rows, key=lambda m: (m.timestamp, m.id))

    def update_chat_message_metadata(
        self, message_id: int, metadata: dict[str, Any]
    ) -> ChatMessageResponse | None:
        message = self._messages.get(message_id)
        if not message:
            return None
        updated = message.model_copy(update={"metadata": dict(metadata)})
        self._messages[message_id] = updated
        self.update_chat_conversation(message.conversation_id)
        return updated
