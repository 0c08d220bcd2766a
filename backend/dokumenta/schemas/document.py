"""Document schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dokumenta.models.document import DocumentStatus, DocumentType, SyncStatus


class DocumentRead(BaseModel):
    """Full document response."""
    id: int
    tenant_id: int
    user_id: int
    username: str | None = None
    filename: str
    original_name: str
    mime_type: str
    original_size: int
    compressed_size: int
    compression_ratio: int
    page_number: int
    total_pages: int
    document_type: DocumentType
    document_subtype: str
    user_comment: str | None = None
    admin_comment: str | None = None
    status: DocumentStatus
    reviewed_by: int | None = None
    reviewed_date: datetime | None = None
    suggested_year: int
    suggested_month: int
    suggested_path: str
    actual_year: int
    actual_month: int
    actual_path: str
    path_manually_set: bool
    sync_status: SyncStatus
    sync_pending_review: bool
    synced_at: datetime | None = None
    upload_date: datetime
    
    model_config = ConfigDict(from_attributes=True)


class UploadedFileInfo(BaseModel):
    """Size accounting for one processed upload."""
    filename: str
    original_size: int
    compressed_size: int
    compression_ratio: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadResponse(BaseModel):
    """Upload acknowledgement."""
    success: bool = True
    document_id: int
    file: UploadedFileInfo

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusUpdate(BaseModel):
    """Admin review decision."""
    status: DocumentStatus
    comment: str | None = None


class OneDrivePathUpdate(BaseModel):
    """Admin override of the target path."""
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    path: str = Field(min_length=1, max_length=500)


class SyncStatusUpdate(BaseModel):
    """External sync result."""
    sync_status: SyncStatus = Field(alias="syncStatus")

    model_config = ConfigDict(populate_by_name=True)


class StatusHistoryRead(BaseModel):
    """Status history entry."""
    id: int
    document_id: int
    old_status: str | None = None
    new_status: str
    changed_by: int
    comment: str | None = None
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
