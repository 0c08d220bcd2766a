"""Pydantic schemas for API request/response."""
from dokumenta.schemas.tenant import AdminRead, TenantLimits
from dokumenta.schemas.user import UserCreate, UserRead, UserUpdate, LoginRequest, LoginResponse
from dokumenta.schemas.document import (
    DocumentRead, UploadResponse, UploadedFileInfo, StatusUpdate,
    OneDrivePathUpdate, SyncStatusUpdate, StatusHistoryRead,
)
from dokumenta.schemas.notification import NotificationRead, UnreadCount
from dokumenta.schemas.stats import CountBucket, StatsRead

__all__ = [
    "AdminRead", "TenantLimits",
    "UserCreate", "UserRead", "UserUpdate", "LoginRequest", "LoginResponse",
    "DocumentRead", "UploadResponse", "UploadedFileInfo", "StatusUpdate",
    "OneDrivePathUpdate", "SyncStatusUpdate", "StatusHistoryRead",
    "NotificationRead", "UnreadCount",
    "CountBucket", "StatsRead",
]
