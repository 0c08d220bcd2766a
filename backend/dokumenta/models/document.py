"""Document model with review and sync state."""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, Boolean
from sqlalchemy.orm import relationship

from dokumenta.database import Base


class DocumentType(str, Enum):
    """Document categories chosen by the uploader."""
    RACUN = "racun"  # Invoice / receipt
    UGOVOR = "ugovor"  # Contract
    IZVOD = "izvod"  # Bank statement
    POTVRDA = "potvrda"  # Certificate / confirmation
    OSTALO = "ostalo"  # Other


class DocumentStatus(str, Enum):
    """Review status set by the tenant admin."""
    UPLOADED = "uploaded"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"
    RESHOOT_REQUESTED = "reshoot_requested"


class SyncStatus(str, Enum):
    """Progress of the external storage sync."""
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


DEFAULT_SUBTYPE = "ostalo"


class Document(Base):
    """One uploaded file plus its metadata and review/sync state."""
    
    __tablename__ = "documents"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("admin_users.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    # File info
    filename = Column(String(255), nullable=False, unique=True)  # stored name
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_path = Column(String(500), nullable=False)
    original_size = Column(Integer, nullable=False)
    compressed_size = Column(Integer, nullable=False)
    compression_ratio = Column(Integer, nullable=False, default=0)  # percent
    page_number = Column(Integer, nullable=False, default=1)
    total_pages = Column(Integer, nullable=False, default=1)
    
    # Classification
    document_type = Column(String(20), nullable=False, index=True)
    document_subtype = Column(String(100), nullable=False, default=DEFAULT_SUBTYPE)
    user_comment = Column(Text, nullable=True)
    admin_comment = Column(Text, nullable=True)
    
    # Review
    status = Column(String(20), nullable=False, default=DocumentStatus.UPLOADED.value, index=True)
    reviewed_by = Column(Integer, ForeignKey("admin_users.id"), nullable=True)
    reviewed_date = Column(DateTime, nullable=True)
    
    # Target path: suggested is fixed at creation, actual may be overridden
    suggested_year = Column(Integer, nullable=False)
    suggested_month = Column(Integer, nullable=False)
    suggested_path = Column(String(500), nullable=False)
    actual_year = Column(Integer, nullable=False)
    actual_month = Column(Integer, nullable=False)
    actual_path = Column(String(500), nullable=False)
    path_manually_set = Column(Boolean, nullable=False, default=False)
    
    # Sync
    sync_status = Column(String(10), nullable=False, default=SyncStatus.PENDING.value)
    sync_pending_review = Column(Boolean, nullable=False, default=True)
    synced_at = Column(DateTime, nullable=True)
    
    upload_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    tenant = relationship("AdminAccount", back_populates="documents", foreign_keys=[tenant_id])
    user = relationship("User", back_populates="documents")
    history = relationship(
        "StatusHistory",
        primaryjoin="Document.id == foreign(StatusHistory.document_id)",
        order_by="StatusHistory.id",
        viewonly=True,
    )

    @property
    def username(self) -> str | None:
        return self.user.username if self.user else None
