"""
Resume references.

A job application's resume is either a file uploaded through the chat widget and kept
in the upload directory, or a public link pasted into the careers-page form. The two are
stored as ``(resume_path, resume_kind)`` and every consumer branches on the variant.
"""
from dataclasses import dataclass
from urllib.parse import urlparse

FILE = "file"
LINK = "link"


@dataclass(frozen=True)
class LocalFile:
    path: str
    kind = FILE


@dataclass(frozen=True)
class ExternalLink:
    url: str
    kind = LINK


ResumeReference = LocalFile | ExternalLink


def _looks_like_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def resume_reference(path: str | None, kind: str | None) -> ResumeReference | None:
    """Rebuild the variant from its stored columns. Rows without a kind are classified by shape."""
    if not path:
        return None
    if kind == FILE:
        return LocalFile(path)
    if kind == LINK:
        return ExternalLink(path)
    return ExternalLink(path) if _looks_like_url(path) else LocalFile(path)


def to_columns(resume: ResumeReference | None) -> tuple[str | None, str | None]:
    if resume is None:
        return None, None
    if isinstance(resume, LocalFile):
        return resume.path, FILE
    return resume.url, LINK
