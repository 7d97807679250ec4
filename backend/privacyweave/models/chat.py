from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from privacyweave.database import Base
from privacyweave.models.timestamps import utcnow


class ChatConversation(Base):
    __tablename__ = "chat_conversations"

    id = Column(Integer, primary_key=True)
    session_id = Column(Text, nullable=False, unique=True)
    user_email = Column(Text)
    user_name = Column(Text)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_message_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    category = Column(Text, default="general")
    status = Column(Text, nullable=False, default="active")

    messages = relationship("ChatMessage", back_populates="conversation", cascade="all, delete-orphan")


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True)
    conversation_id = Column(
        Integer, ForeignKey("chat_conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    attachment_url = Column(Text)
    attachment_type = Column(Text)
    is_application_request = Column(Boolean, nullable=False, default=False)
    # "metadata" is reserved on declarative classes
    message_metadata = Column("metadata", JSON)

    conversation = relationship("ChatConversation", back_populates="messages")
