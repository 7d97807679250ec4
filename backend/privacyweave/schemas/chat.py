from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from privacyweave.schemas.common import CamelModel


class ChatConversationCreate(CamelModel):
    session_id: str | None = None
    user_email: str | None = None
    user_name: str | None = None
    category: str | None = None


class ChatConversationResponse(CamelModel):
    id: int
    session_id: str
    user_email: str | None
    user_name: str | None
    started_at: datetime
    last_message_at: datetime
    category: str | None
    status: str


class ChatMessageCreate(CamelModel):
    conversation_id: int
    sender: Literal["user", "bot"]
    content: str = Field(min_length=1)
    attachment_url: str | None = None
    attachment_type: str | None = None
    is_application_request: bool = False
    metadata: dict[str, Any] | None = None


class ChatMessageResponse(CamelModel):
    id: int
    conversation_id: int
    sender: str
    content: str
    timestamp: datetime
    attachment_url: str | None
    attachment_type: str | None
    is_application_request: bool
    metadata: dict[str, Any] | None


class ChatExchangeResponse(CamelModel):
    user_message: ChatMessageResponse
    bot_response: ChatMessageResponse
