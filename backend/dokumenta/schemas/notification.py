"""Notification schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class NotificationRead(BaseModel):
    """Notification response."""
    id: int
    user_id: int
    document_id: int | None = None
    type: str
    title: str
    message: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class UnreadCount(BaseModel):
    unread: int
