"""
Attachment model - metadata for documents stored on disk
"""
from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime

from app.db.base import Base


class Attachment(Base):
    """
    Uploaded document (safety data sheet, invoice, photo, ...).

    The binary lives under UPLOAD_DIR as `stored_file_name`; `file_path` is
    the public relative path served from /uploads.
    """
    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_name = Column(String(255), nullable=False)
    stored_file_name = Column(String(255), nullable=False, unique=True)
    file_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_path = Column(String(500), nullable=False)

    associated_oil_id = Column(String(50), default="GENERAL", nullable=False, index=True)
    associated_oil_name = Column(String(255), default="General Documents", nullable=False)
    uploaded_by = Column(String(100), default="admin", nullable=False)
    notes = Column(Text, default="", nullable=True)

    upload_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Attachment {self.id}: {self.file_name}>"
