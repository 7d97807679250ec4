from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from privacyweave.database import init_db, make_session_factory
from privacyweave.models.chat import ChatConversation, ChatMessage
from privacyweave.models.inquiry import Inquiry
from privacyweave.models.job_application import JobApplication
from privacyweave.models.job_listing import JobListing
from privacyweave.models.timestamps import utcnow
from privacyweave.models.user import User
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


def _message_to_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender=message.sender,
        content=message.content,
        timestamp=message.timestamp,
        attachment_url=message.attachment_url,
        attachment_type=message.attachment_type,
        is_application_request=bool(message.is_application_request),
        metadata=message.message_metadata,
    )


class DatabaseStorage(Storage):
    """SQLAlchemy-backed storage. Each operation runs in its own short session."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = make_session_factory(engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            db.close()

    def _insert(self, row):
        with self._session() as db:
            db.add(row)
            db.commit()
            db.refresh(row)
            return row

    def init_schema(self) -> None:
        init_db(self._engine)

    # Users

    def get_user(self, user_id: int) -> UserRecord | None:
        with self._session() as db:
            user = db.get(User, user_id)
            return UserRecord.model_validate(user) if user else None

    def get_user_by_username(self, username: str) -> UserRecord | None:
        with self._session() as db:
            user = db.query(User).filter(User.username == username).first()
            return UserRecord.model_validate(user) if user else None

    def create_user(self, data: UserCreate, password_hash: str, role: str = "user") -> UserRecord:
        user = self._insert(User(
            username=data.username,
            email=data.email,
            name=data.name,
            password_hash=password_hash,
            role=role,
        ))
        return UserRecord.model_validate(user)

    # Inquiries

    def create_inquiry(self, data: InquiryCreate) -> InquiryResponse:
        return InquiryResponse.model_validate(self._insert(Inquiry(**data.model_dump())))

    def get_inquiries(self) -> list[InquiryResponse]:
        with self._session() as db:
            rows = db.query(Inquiry).order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).all()
            return [InquiryResponse.model_validate(r) for r in rows]

    def get_inquiry(self, inquiry_id: int) -> InquiryResponse | None:
        with self._session() as db:
            row = db.get(Inquiry, inquiry_id)
            return InquiryResponse.model_validate(row) if row else None

    # Job applications

    def create_job_application(
        self, data: JobApplicationCreate, resume: ResumeReference | None = None
    ) -> JobApplicationResponse:
        fields = data.model_dump(exclude={"resume_path"})
        fields["resume_path"], fields["resume_kind"] = to_columns(resume)
        return JobApplicationResponse.model_validate(self._insert(JobApplication(**fields)))

    def update_job_application(self, application_id: int, **updates: Any) -> JobApplicationResponse | None:
        check_update_fields(updates, UPDATABLE_APPLICATION_FIELDS, "job application")
        with self._session() as db:
            row = db.get(JobApplication, application_id)
            if not row:
                return None
            for key, value in updates.items():
                setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return JobApplicationResponse.model_validate(row)

    def get_job_applications(self) -> list[JobApplicationResponse]:
        with self._session() as db:
            rows = (
                db.query(JobApplication)
                .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
                .all()
            )
            return [JobApplicationResponse.model_validate(r) for r in rows]

    def get_job_application(self, application_id: int) -> JobApplicationResponse | None:
        with self._session() as db:
            row = db.get(JobApplication, application_id)
            return JobApplicationResponse.model_validate(row) if row else None

    # Job listings

    def create_job_listing(self, data: JobListingCreate) -> JobListingResponse:
        return JobListingResponse.model_validate(self._insert(JobListing(**data.model_dump())))

    def get_job_listings(self) -> list[JobListingResponse]:
        with self._session() as db:
            rows = db.query(JobListing).order_by(JobListing.created_at.desc(), JobListing.id.desc()).all()
            return [JobListingResponse.model_validate(r) for r in rows]

    def get_active_job_listings(self) -> list[JobListingResponse]:
        with self._session() as db:
            rows = (
                db.query(JobListing)
                .filter(JobListing.is_active.is_(True))
                .order_by(JobListing.created_at.desc(), JobListing.id.desc())
                .all()
            )
            return [JobListingResponse.model_validate(r) for r in rows]

    def get_job_listing(self, listing_id: int) -> JobListingResponse | None:
        with self._session() as db:
            row = db.get(JobListing, listing_id)
            return JobListingResponse.model_validate(row) if row else None

    # Chat conversations

    def create_chat_conversation(self, data: ChatConversationCreate) -> ChatConversationResponse:
        row = self._insert(ChatConversation(
            session_id=data.session_id,
            user_email=data.user_email,
            user_name=data.user_name,
            category=data.category or "general",
        ))
        return ChatConversationResponse.model_validate(row)

    def get_chat_conversation(self, conversation_id: int) -> ChatConversationResponse | None:
        with self._session() as db:
            row = db.get(ChatConversation, conversation_id)
            return ChatConversationResponse.model_validate(row) if row else None

    def get_chat_conversation_by_session_id(self, session_id: str) -> ChatConversationResponse | None:
        with self._session() as db:
            row = db.query(ChatConversation).filter(ChatConversation.session_id == session_id).first()
            return ChatConversationResponse.model_validate(row) if row else None

    def get_chat_conversations(self) -> list[ChatConversationResponse]:
        with self._session() as db:
            rows = (
                db.query(ChatConversation)
                .order_by(ChatConversation.last_message_at.desc(), ChatConversation.id.desc())
                .all()
            )
            return [ChatConversationResponse.model_validate(r) for r in rows]

    def update_chat_conversation(self, conversation_id: int, **updates: Any) -> ChatConversationResponse | None:
        check_update_fields(updates, UPDATABLE_CONVERSATION_FIELDS, "conversation")
        with self._session() as db:
            row = db.get(ChatConversation, conversation_id)
            if not row:
                return None
            for key, value in updates.items():
                setattr(row, key, value)
            row.last_message_at = utcnow()
            db.commit()
            db.refresh(row)
            return ChatConversationResponse.model_validate(row)

    # Chat messages

    def create_chat_message(self, data: ChatMessageCreate) -> ChatMessageResponse:
        with self._session() as db:
            conversation = db.get(ChatConversation, data.conversation_id)
            if not conversation:
                raise StorageError(f"Conversation {data.conversation_id} does not exist")
            now = utcnow()
            row = ChatMessage(
                conversation_id=data.conversation_id,
                sender=data.sender,
                content=data.content,
                timestamp=now,
                attachment_url=data.attachment_url,
                attachment_type=data.attachment_type,
                is_application_request=data.is_application_request,
                message_metadata=data.metadata,
            )
            db.add(row)
            # A conversation is never older than its newest message
            conversation.last_message_at = now
            db.commit()
            db.refresh(row)
            return _message_to_response(row)

    def get_chat_messages_by_conversation_id(self, conversation_id: int) -> list[ChatMessageResponse]:
        with self._session() as db:
            rows = (
                db.query(ChatMessage)
                .filter(ChatMessage.conversation_id == conversation_id)
                .order_by(ChatMessage.timestamp.asc(), ChatMessage.id.asc())
                .all()
            )
            return [_message_to_response(r) for r in rows]

    def update_chat_message_metadata(
        self, message_id: int, metadata: dict[str, Any]
    ) -> ChatMessageResponse | None:
        with self._session() as db:
            row = db.get(ChatMessage, message_id)
            if not row:
                return None
            row.message_metadata = dict(metadata)
            row.conversation.last_message_at = utcnow()
            db.commit()
            db.refresh(row)
            return _message_to_response(row)
