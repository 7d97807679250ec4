import json
import logging
import secrets
import string
import time
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from privacyweave.dependencies import get_email_notifier, get_storage
from privacyweave.schemas.chat import (
    ChatConversationCreate,
    ChatConversationResponse,
    ChatExchangeResponse,
    ChatMessageCreate,
    ChatMessageResponse,
)
from privacyweave.services.chatbot_service import build_application_from_metadata, generate_bot_response
from privacyweave.services.email_service import EmailNotifier
from privacyweave.services.resume import LocalFile
from privacyweave.services.upload_service import read_upload, remove_upload, store_upload
from privacyweave.storage import Storage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

_SESSION_ALPHABET = string.digits + string.ascii_lowercase


def new_session_id() -> str:
    suffix = "".join(secrets.choice(_SESSION_ALPHABET) for _ in range(7))
    return f"chat_{int(time.time() * 1000)}_{suffix}"


@router.post("/conversations", response_model=ChatConversationResponse)
async def open_conversation(req: ChatConversationCreate, storage: Storage = Depends(get_storage)):
    """Return the conversation for ``sessionId``, creating it on first contact."""
    session_id = req.session_id or new_session_id()

    # Lookup-then-create is not atomic; a concurrent duplicate fails on the unique index
    conversation = storage.get_chat_conversation_by_session_id(session_id)
    if conversation:
        return conversation
    return storage.create_chat_conversation(req.model_copy(update={"session_id": session_id}))


@router.get("/conversations/{conversation_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(conversation_id: int, storage: Storage = Depends(get_storage)):
    if not storage.get_chat_conversation(conversation_id):
        raise HTTPException(status_code=404, detail="Conversation not found")
    return storage.get_chat_messages_by_conversation_id(conversation_id)


def _parse_metadata(raw: str | None) -> dict | None:
    if not raw:
        return None
    try:
        metadata = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="metadata must be valid JSON")
    if metadata is not None and not isinstance(metadata, dict):
        raise HTTPException(status_code=400, detail="metadata must be a JSON object")
    return metadata


async def _record_chat_application(
    message: ChatMessageResponse,
    conversation: ChatConversationResponse,
    storage: Storage,
    email: EmailNotifier,
) -> ChatMessageResponse:
    """Create a job application from an application-request message and link it back."""
    try:
        data = build_application_from_metadata(message.metadata or {}, message.content, conversation)
        resume = LocalFile(message.attachment_url) if message.attachment_url else None
        application = storage.create_job_application(data, resume=resume)
    except Exception:
        logger.exception("Could not create job application from chat message %s", message.id)
        return message

    await run_in_threadpool(email.notify_job_application, application)

    # The application already references the upload, so the file must survive from here on
    try:
        linked = storage.update_chat_message_metadata(
            message.id, {**(message.metadata or {}), "jobApplicationId": application.id}
        )
    except StorageError:
        logger.exception(
            "Could not link job application %s to chat message %s", application.id, message.id
        )
        return message
    return linked or message


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ChatExchangeResponse | ChatMessageResponse,
    status_code=201,
)
async def send_message(
    conversation_id: int,
    sender: str = Form(...),
    content: str = Form(...),
    is_application_request: str | None = Form(None, alias="isApplicationRequest"),
    metadata: str | None = Form(None),
    attachment: UploadFile | None = File(None),
    storage: Storage = Depends(get_storage),
    email: EmailNotifier = Depends(get_email_notifier),
):
    conversation = storage.get_chat_conversation(conversation_id)
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")

    try:
        message_in = ChatMessageCreate(
            conversation_id=conversation_id,
            sender=sender,
            content=content,
            is_application_request=(is_application_request or "").lower() == "true",
            metadata=_parse_metadata(metadata),
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False))

    # Size and type are checked before anything touches the disk
    upload = None
    if attachment is not None and attachment.filename:
        upload = await read_upload(attachment)

    stored_path: Path | None = None
    try:
        if upload is not None:
            stored_path = store_upload("attachment", attachment.filename, upload)
            message_in = message_in.model_copy(update={
                "attachment_url": str(stored_path),
                "attachment_type": attachment.content_type,
            })
        message = storage.create_chat_message(message_in)
        if message.is_application_request and message.metadata:
            message = await _record_chat_application(message, conversation, storage, email)
    except Exception:
        if stored_path is not None:
            remove_upload(stored_path)
        raise

    if message.sender != "user":
        return message
    try:
        reply = generate_bot_response(message.content, conversation, storage)
        bot_message = storage.create_chat_message(
            ChatMessageCreate(conversation_id=conversation_id, sender="bot", content=reply)
        )
    except Exception:
        logger.exception("Bot reply failed for conversation %s", conversation_id)
        return message
    return ChatExchangeResponse(user_message=message, bot_response=bot_message)
