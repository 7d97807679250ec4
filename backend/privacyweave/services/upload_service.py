import logging
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile

from privacyweave.config import settings

logger = logging.getLogger(__name__)


def ensure_upload_dir(upload_dir: Path | None = None) -> Path:
    path = upload_dir or settings.upload_dir
    path.mkdir(parents=True, exist_ok=True)
    return path


async def read_upload(file: UploadFile) -> bytes:
    """Read an attachment, rejecting disallowed extensions and oversized files before anything is stored."""
    extension = Path(file.filename or "").suffix.lower()
    if extension not in settings.allowed_upload_extensions:
        raise HTTPException(status_code=400, detail="Only PDF and Word documents are allowed")

    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    return content


def store_upload(field_name: str, filename: str, content: bytes, upload_dir: Path | None = None) -> Path:
    """Write an upload under a unique name and return its path."""
    # Only allowlisted extensions reach this point
    extension = Path(filename).suffix.lower()
    stored_name = f"{field_name}-{uuid.uuid4().hex}{extension}"
    path = ensure_upload_dir(upload_dir) / stored_name
    path.write_bytes(content)
    return path


def remove_upload(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.error("Could not delete orphaned upload %s: %s", path, exc)
