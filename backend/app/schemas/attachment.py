"""
Attachment metadata schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import field_validator

from app.schemas.common import CamelModel


class AttachmentResponse(CamelModel):
    """Stored document metadata. `filePath` is relative to the server root."""
    id: str
    file_name: str
    stored_file_name: str
    file_type: str
    file_size: int
    file_path: str
    associated_oil_id: str
    associated_oil_name: str
    uploaded_by: str
    notes: Optional[str] = ""
    upload_date: datetime

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v):
        return str(v)
