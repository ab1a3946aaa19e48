"""
Attachment Endpoints

Upload, list, download and delete documents attached to oils (or to the
general document pool).
"""
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.exceptions import NotFoundError
from app.schemas.attachment import AttachmentResponse
from app.schemas.common import SuccessResponse
from app.services import attachment_service

router = APIRouter(prefix="/attachments", tags=["Attachments"])


@router.get("", response_model=List[AttachmentResponse])
async def list_attachments(
    oil_id: Optional[str] = Query(None, alias="oilId"),
    file_type: Optional[str] = Query(None, alias="fileType"),
    db: Session = Depends(get_db),
):
    """Filter by associated oil id (exact) and MIME type (substring)."""
    return attachment_service.list_attachments(db, oil_id=oil_id, file_type=file_type)


@router.post("/upload", response_model=AttachmentResponse)
async def upload_attachment(
    file: Optional[UploadFile] = File(None),
    associated_oil_id: Optional[str] = Form(None, alias="associatedOilId"),
    associated_oil_name: Optional[str] = Form(None, alias="associatedOilName"),
    uploaded_by: Optional[str] = Form(None, alias="uploadedBy"),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """
    Upload one file (multipart field `file`).

    Allowed: pdf, doc(x), xls(x), txt, jpg/jpeg, png, gif, csv; max 50 MB.
    """
    filename = file.filename if file else None
    content = await file.read() if file else b""
    return attachment_service.save_upload(
        db,
        filename,
        file.content_type if file else None,
        content,
        associated_oil_id=associated_oil_id,
        associated_oil_name=associated_oil_name,
        uploaded_by=uploaded_by,
        notes=notes,
    )


@router.get("/{attachment_id}/download")
async def download_attachment(attachment_id: str, db: Session = Depends(get_db)):
    attachment = attachment_service.get_attachment(db, attachment_id)
    path = attachment_service.stored_path(attachment)
    if not os.path.exists(path):
        raise NotFoundError("Attachment file", attachment.stored_file_name)
    return FileResponse(
        path=path,
        filename=attachment.file_name,
        media_type=attachment.file_type,
    )


@router.delete("/{attachment_id}", response_model=SuccessResponse)
async def delete_attachment(attachment_id: str, db: Session = Depends(get_db)):
    """Remove the metadata and the stored file."""
    attachment_service.delete_attachment(db, attachment_id)
    return SuccessResponse()
