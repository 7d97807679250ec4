import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from privacyweave.config import settings
from privacyweave.dependencies import get_storage
from privacyweave.routers import admin, auth, chat, inquiries, job_applications, job_listings
from privacyweave.services.auth_service import ensure_admin_user
from privacyweave.services.upload_service import ensure_upload_dir
from privacyweave.storage import StorageError

logger = logging.getLogger("privacyweave")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.setLevel(settings.log_level.upper())
    # Startup uses the same backend as requests, overrides included
    storage = app.dependency_overrides.get(get_storage, get_storage)()
    storage.init_schema()
    upload_dir = ensure_upload_dir()
    logger.info("Uploads are stored in %s", upload_dir.resolve())
    seeded = storage.seed_job_listings()
    if seeded:
        logger.info("Seeded %d default job listings.", seeded)
    ensure_admin_user(storage, settings)
    yield


app = FastAPI(
    title="PrivacyWeave",
    description="Lead capture, careers and chat backend for the PrivacyWeave website",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(inquiries.router, prefix=settings.api_prefix)
app.include_router(job_applications.router, prefix=settings.api_prefix)
app.include_router(job_listings.router, prefix=settings.api_prefix)
app.include_router(chat.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
