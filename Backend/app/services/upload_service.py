import os
import time
import shutil
import logging

from fastapi import UploadFile

from app.schemas import UploadedFile

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
}

class UnsupportedFileTypeError(Exception):
    def __init__(self, mime_type: str = None):
        self.mime_type = mime_type
        super().__init__("Only PDF, DOC, DOCX, and TXT files are allowed")

def check_mime_type(mime_type: str) -> None:
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedFileTypeError(mime_type)

def stored_name(original_name: str, timestamp_ms: int = None) -> str:
    """Collision-resistant name: upload timestamp in millis, then the original basename"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    basename = os.path.basename(original_name.replace("\\", "/"))
    return f"{timestamp_ms}-{basename}"

def store_upload(file: UploadFile, upload_dir: str) -> UploadedFile:
    """Validate the declared MIME type and persist the upload to disk"""
    mime_type = (file.content_type or "").split(";")[0].strip().lower()
    check_mime_type(mime_type)

    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, stored_name(file.filename))
    file.file.seek(0)
    with open(path, "wb") as out:
        shutil.copyfileobj(file.file, out)

    logger.info(f"Stored upload {file.filename} ({mime_type}) at {path}")
    return UploadedFile(
        stored_path=path,
        original_name=file.filename,
        declared_mime_type=mime_type,
    )
