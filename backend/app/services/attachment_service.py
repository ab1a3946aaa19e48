"""
Attachment Service

Documents (safety data sheets, supplier invoices, photos) stored on local
disk under UPLOAD_DIR, with their metadata in the attachments table.
"""
import os
import random
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.settings import settings
from app.exceptions import FileStorageError, NotFoundError, ValidationError
from app.logging_config import get_logger
from app.models.attachment import Attachment

logger = get_logger(__name__)

PUBLIC_PREFIX = "/uploads"


def _ensure_upload_dir() -> str:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    return settings.UPLOAD_DIR


def is_allowed_file(filename: str, content_type: Optional[str]) -> bool:
    """
    Accept a file when its extension is allowed, or when its MIME type
    names an allowed type (application/pdf, image/png, ...).
    """
    allowed = [ext.lower() for ext in settings.ALLOWED_UPLOAD_EXTENSIONS]
    ext = os.path.splitext(filename)[1].lower()
    if ext and ext in allowed:
        return True

    mime = (content_type or "").lower()
    return any(ext.lstrip(".") in mime for ext in allowed if ext.lstrip("."))


def stored_name_for(original_filename: str) -> str:
    """Unique on-disk name: <epoch ms>-<random>-<original basename>."""
    basename = os.path.basename(original_filename.replace("\\", "/")) or "document"
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}-{basename}"


def stored_path(attachment: Attachment) -> str:
    return os.path.join(settings.UPLOAD_DIR, attachment.stored_file_name)


def save_upload(
    db: Session,
    filename: Optional[str],
    content_type: Optional[str],
    content: bytes,
    associated_oil_id: Optional[str] = None,
    associated_oil_name: Optional[str] = None,
    uploaded_by: Optional[str] = None,
    notes: Optional[str] = None,
) -> Attachment:
    """
    Validate, write to disk and record an uploaded file.

    Raises:
        ValidationError: no file, disallowed type or too large
        FileStorageError: the file could not be written
    """
    if not filename:
        raise ValidationError("No file uploaded", field="file")

    if not is_allowed_file(filename, content_type):
        raise ValidationError(
            f"File type not allowed. Allowed: {', '.join(settings.ALLOWED_UPLOAD_EXTENSIONS)}",
            field="file",
            value=filename,
        )

    if len(content) > settings.max_upload_size_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB} MB",
            field="file",
            value=filename,
            details={"size": len(content)},
        )

    stored_file_name = stored_name_for(filename)
    local_path = os.path.join(_ensure_upload_dir(), stored_file_name)
    try:
        with open(local_path, "wb") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Could not write upload {local_path}: {e}")
        raise FileStorageError(filename=filename) from e

    attachment = Attachment(
        file_name=filename,
        stored_file_name=stored_file_name,
        file_type=content_type or "application/octet-stream",
        file_size=len(content),
        file_path=f"{PUBLIC_PREFIX}/{stored_file_name}",
        associated_oil_id=associated_oil_id or "GENERAL",
        associated_oil_name=associated_oil_name or "General Documents",
        uploaded_by=uploaded_by or "admin",
        notes=notes or "",
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)

    logger.info(
        f"Stored attachment {attachment.id}: {filename}",
        extra={"attachment_id": attachment.id, "size": attachment.file_size},
    )
    return attachment


def list_attachments(
    db: Session,
    oil_id: Optional[str] = None,
    file_type: Optional[str] = None,
) -> List[Attachment]:
    """Attachments in upload order, filtered by oil (exact) and MIME type (substring)."""
    query = db.query(Attachment)
    if oil_id:
        query = query.filter(Attachment.associated_oil_id == oil_id)
    if file_type:
        query = query.filter(Attachment.file_type.contains(file_type, autoescape=True))
    return query.order_by(Attachment.id).all()


def get_attachment(db: Session, attachment_id: str) -> Attachment:
    attachment = None
    if str(attachment_id).isdigit():
        attachment = db.query(Attachment).filter(Attachment.id == int(attachment_id)).first()
    if not attachment:
        raise NotFoundError("Attachment", attachment_id)
    return attachment


def delete_attachment(db: Session, attachment_id: str) -> None:
    """Delete the metadata row and, when still present, the file on disk."""
    attachment = get_attachment(db, attachment_id)

    path = stored_path(attachment)
    try:
        if os.path.exists(path):
            os.remove(path)
            logger.info(f"Deleted local file: {path}")
    except OSError as e:
        logger.warning(f"Could not delete local file {path}: {e}")

    db.delete(attachment)
    db.commit()
    logger.info(f"Deleted attachment {attachment_id}", extra={"attachment_id": attachment_id})
