from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from privacyweave.dependencies import get_email_notifier, get_storage, get_whatsapp_notifier
from privacyweave.schemas.common import NotificationMeta
from privacyweave.schemas.job_application import JobApplicationCreate, JobApplicationSubmitResponse
from privacyweave.services.email_service import EmailNotifier
from privacyweave.services.resume import ExternalLink
from privacyweave.services.whatsapp_service import WhatsAppNotifier
from privacyweave.storage import Storage

router = APIRouter(prefix="/job-applications", tags=["job-applications"])


@router.post("", response_model=JobApplicationSubmitResponse, status_code=201)
async def create_job_application(
    req: JobApplicationCreate,
    storage: Storage = Depends(get_storage),
    email: EmailNotifier = Depends(get_email_notifier),
    whatsapp: WhatsAppNotifier = Depends(get_whatsapp_notifier),
):
    # The careers-page form only ever sends a public link
    resume = ExternalLink(req.resume_path) if req.resume_path else None
    application = storage.create_job_application(req, resume=resume)

    email_sent = await run_in_threadpool(email.notify_job_application, application)
    whatsapp_sent = await run_in_threadpool(whatsapp.notify_job_application, application)

    return JobApplicationSubmitResponse(
        **application.model_dump(),
        meta=NotificationMeta(email_notification_sent=email_sent, whatsapp_notification_sent=whatsapp_sent),
    )
