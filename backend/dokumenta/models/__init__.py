"""Database models."""
from dokumenta.models.tenant import AdminAccount, SubscriptionPlan
from dokumenta.models.user import User, UserStatus
from dokumenta.models.document import Document, DocumentStatus, DocumentType, SyncStatus
from dokumenta.models.history import StatusHistory
from dokumenta.models.notification import Notification, NotificationType

__all__ = [
    "AdminAccount",
    "SubscriptionPlan",
    "User",
    "UserStatus",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "SyncStatus",
    "StatusHistory",
    "Notification",
    "NotificationType",
]
