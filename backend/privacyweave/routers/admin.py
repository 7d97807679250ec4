from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from privacyweave.dependencies import get_email_notifier, get_storage, get_whatsapp_notifier, require_admin
from privacyweave.schemas.admin import (
    EmailConfigResponse,
    EmailTestRequest,
    SendTestResponse,
    WhatsAppConfigResponse,
)
from privacyweave.schemas.chat import ChatConversationResponse
from privacyweave.schemas.inquiry import InquiryResponse
from privacyweave.schemas.job_application import JobApplicationResponse
from privacyweave.services.email_service import TEST_EMAIL_KINDS, EmailNotifier
from privacyweave.services.resume import ExternalLink, LocalFile, resume_reference
from privacyweave.services.whatsapp_service import WhatsAppNotifier
from privacyweave.storage import Storage

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/inquiries", response_model=list[InquiryResponse])
async def list_inquiries(storage: Storage = Depends(get_storage)):
    return storage.get_inquiries()


@router.get("/job-applications", response_model=list[JobApplicationResponse])
async def list_job_applications(storage: Storage = Depends(get_storage)):
    return storage.get_job_applications()


@router.get("/job-applications/{application_id}/resume")
async def download_resume(application_id: int, storage: Storage = Depends(get_storage)):
    application = storage.get_job_application(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Job application not found")

    resume = resume_reference(application.resume_path, application.resume_kind)
    if isinstance(resume, ExternalLink):
        return RedirectResponse(resume.url, status_code=307)
    if isinstance(resume, LocalFile):
        path = Path(resume.path)
        if path.is_file():
            filename = f"{'_'.join(application.full_name.split())}_Resume{path.suffix}"
            return FileResponse(path, filename=filename)
    raise HTTPException(status_code=404, detail="Resume not found")


@router.get("/chat/conversations", response_model=list[ChatConversationResponse])
async def list_chat_conversations(storage: Storage = Depends(get_storage)):
    return storage.get_chat_conversations()


@router.get("/email-config", response_model=EmailConfigResponse)
async def email_config(email: EmailNotifier = Depends(get_email_notifier)):
    return email.get_config()


@router.get("/whatsapp-config", response_model=WhatsAppConfigResponse)
async def whatsapp_config(whatsapp: WhatsAppNotifier = Depends(get_whatsapp_notifier)):
    return whatsapp.get_config()


@router.post("/test-email", response_model=SendTestResponse)
async def send_test_email(req: EmailTestRequest, email: EmailNotifier = Depends(get_email_notifier)):
    if req.email_type not in TEST_EMAIL_KINDS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid email type. Must be one of: {', '.join(TEST_EMAIL_KINDS)}",
        )
    success = await run_in_threadpool(email.send_test, req.email_type)
    if success:
        return SendTestResponse(success=True, message="Test email sent successfully")
    return SendTestResponse(success=False, message="Failed to send test email. Check server logs for details.")


@router.post("/test-whatsapp", response_model=SendTestResponse)
async def send_test_whatsapp(whatsapp: WhatsAppNotifier = Depends(get_whatsapp_notifier)):
    success = await run_in_threadpool(whatsapp.send_test)
    if success:
        return SendTestResponse(success=True, message="Test WhatsApp message sent successfully")
    return SendTestResponse(
        success=False, message="Failed to send test WhatsApp message. Check server logs for details."
    )
