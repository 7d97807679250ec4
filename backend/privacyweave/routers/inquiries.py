from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from privacyweave.dependencies import get_email_notifier, get_storage, get_whatsapp_notifier
from privacyweave.schemas.common import NotificationMeta
from privacyweave.schemas.inquiry import InquiryCreate, InquirySubmitResponse
from privacyweave.services.email_service import EmailNotifier
from privacyweave.services.whatsapp_service import WhatsAppNotifier
from privacyweave.storage import Storage

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


@router.post("", response_model=InquirySubmitResponse, status_code=201)
async def create_inquiry(
    req: InquiryCreate,
    storage: Storage = Depends(get_storage),
    email: EmailNotifier = Depends(get_email_notifier),
    whatsapp: WhatsAppNotifier = Depends(get_whatsapp_notifier),
):
    inquiry = storage.create_inquiry(req)

    # Best effort: the inquiry is saved whatever happens below
    email_sent = await run_in_threadpool(email.notify_inquiry, inquiry)
    whatsapp_sent = await run_in_threadpool(whatsapp.notify_inquiry, inquiry)

    return InquirySubmitResponse(
        **inquiry.model_dump(),
        meta=NotificationMeta(email_notification_sent=email_sent, whatsapp_notification_sent=whatsapp_sent),
    )
