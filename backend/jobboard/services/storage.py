"""
File Storage - applicant document uploads and their public URLs

Uploaded files live under STORAGE_ROOT/<bucket>/<path> and are served at
a URL built by convention:

    {STORAGE_PUBLIC_URL}/storage/v1/object/public/{bucket}/{path}

Cover letters are stored either as free text or as the reference
"[Uploaded: <path>]" pointing into the applications bucket.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from jobboard.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

PUBLIC_PREFIX = "/storage/v1/object/public"
ALLOWED_EXTENSIONS = {"pdf", "doc", "docx", "txt", "rtf"}

_UPLOADED_RE = re.compile(r"^\[Uploaded: (.+)\]$")


class StorageError(ValueError):
    pass


def public_url(path: str, bucket: Optional[str] = None) -> str:
    bucket = bucket or settings.applications_bucket
    base = settings.storage_public_url.rstrip("/")
    return f"{base}{PUBLIC_PREFIX}/{bucket}/{quote(path.lstrip('/'))}"


def uploaded_reference(path: str) -> str:
    return f"[Uploaded: {path}]"


def parse_uploaded_reference(value: Optional[str]) -> Optional[str]:
    """Return the storage path of an "[Uploaded: ...]" cover letter, or None for free text."""
    if not value:
        return None
    match = _UPLOADED_RE.match(value.strip())
    return match.group(1) if match else None


def cover_letter_url(value: Optional[str]) -> Optional[str]:
    path = parse_uploaded_reference(value)
    return public_url(path) if path else None


def viewer_url(url: str) -> str:
    """PDFs open directly; Word documents go through the Office online viewer."""
    extension = url.rsplit(".", 1)[-1].split("?")[0].lower() if "." in url else ""
    if extension in ("doc", "docx"):
        return f"https://view.officeapps.live.com/op/embed.aspx?src={quote(url, safe='')}"
    return url


def _write(target: Path, content: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


async def save_upload(upload: UploadFile, folder: str, bucket: Optional[str] = None) -> str:
    """
    Store an uploaded document and return its path inside the bucket.

    Raises:
        StorageError: unsupported file type or file too large
    """
    bucket = bucket or settings.applications_bucket
    extension = _extension(upload.filename or "")
    if extension not in ALLOWED_EXTENSIONS:
        raise StorageError(f"Unsupported file type: .{extension or '?'}")

    content = await upload.read()
    if len(content) > settings.max_upload_bytes:
        raise StorageError("File is too large")

    path = f"{folder}/{uuid.uuid4().hex}.{extension}"
    target = Path(settings.storage_root) / bucket / path
    await run_in_threadpool(_write, target, content)
    logger.info(f"Stored upload {bucket}/{path} ({len(content)} bytes)")
    return path


def delete_upload(path: str, bucket: Optional[str] = None) -> None:
    bucket = bucket or settings.applications_bucket
    target = Path(settings.storage_root) / bucket / path
    target.unlink(missing_ok=True)
    logger.info(f"Removed upload {bucket}/{path}")
