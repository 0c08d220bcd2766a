"""End user notification feed, fed by lifecycle events."""
import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from dokumenta.errors import NotFoundError
from dokumenta.models.document import DocumentStatus
from dokumenta.models.notification import Notification, NotificationType
from dokumenta.services.events import (
    DocumentStatusChanged,
    DocumentSynced,
    DocumentUploaded,
    EventBus,
)

logger = logging.getLogger(__name__)

# Title and message per notification type; {name} is the original filename
TEMPLATES: dict[NotificationType, tuple[str, str]] = {
    NotificationType.DOCUMENT_UPLOADED: (
        "Dokument primljen",
        'Vaš dokument "{name}" je uspešno uploadovan i čeka pregled.',
    ),
    NotificationType.DOCUMENT_APPROVED: (
        "Dokument odobren",
        'Vaš dokument "{name}" je odobren.',
    ),
    NotificationType.DOCUMENT_REJECTED: (
        "Dokument odbačen",
        'Vaš dokument "{name}" je odbačen.',
    ),
    NotificationType.RESHOOT_REQUESTED: (
        "Potrebno ponovno slikanje",
        'Molimo ponovo slikajte dokument "{name}".',
    ),
    NotificationType.DOCUMENT_SYNCED: (
        "Dokument sinhronizovan",
        'Dokument "{name}" je sačuvan u {path}.',
    ),
}

STATUS_NOTIFICATIONS = {
    DocumentStatus.APPROVED.value: NotificationType.DOCUMENT_APPROVED,
    DocumentStatus.REJECTED.value: NotificationType.DOCUMENT_REJECTED,
    DocumentStatus.RESHOOT_REQUESTED.value: NotificationType.RESHOOT_REQUESTED,
}


def render(notification_type: NotificationType, comment: str | None = None, **values) -> tuple[str, str]:
    """Fill a template; an admin comment is appended to the message."""
    title, message = TEMPLATES[notification_type]
    message = message.format(**values)
    if comment:
        message = f"{message} Komentar: {comment}"
    return title, message


class NotificationService:
    """Creates and serves notifications for end users."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, bus: EventBus) -> None:
        bus.subscribe(DocumentUploaded, self.on_uploaded)
        bus.subscribe(DocumentStatusChanged, self.on_status_changed)
        bus.subscribe(DocumentSynced, self.on_synced)

    # ============ Event handlers ============

    def on_uploaded(self, event: DocumentUploaded) -> None:
        title, message = render(NotificationType.DOCUMENT_UPLOADED, name=event.original_name)
        self.create(event.user_id, NotificationType.DOCUMENT_UPLOADED, title, message, event.document_id)

    def on_status_changed(self, event: DocumentStatusChanged) -> None:
        notification_type = STATUS_NOTIFICATIONS.get(event.new_status)
        if notification_type is None:
            return
        title, message = render(notification_type, comment=event.comment, name=event.original_name)
        self.create(event.user_id, notification_type, title, message, event.document_id)

    def on_synced(self, event: DocumentSynced) -> None:
        title, message = render(NotificationType.DOCUMENT_SYNCED, name=event.original_name, path=event.path)
        self.create(event.user_id, NotificationType.DOCUMENT_SYNCED, title, message, event.document_id)

    # ============ Feed ============

    def create(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        document_id: int | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            document_id=document_id,
            type=notification_type.value,
            title=title,
            message=message,
        )
        self.db.add(notification)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(notification)
        logger.debug(f"Notification {notification.type} for user {user_id}")
        return notification

    def list_for_user(self, user_id: int, unread: bool | None = None, limit: int = 50) -> list[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread is True:
            query = query.filter(Notification.is_read.is_(False))
        elif unread is False:
            query = query.filter(Notification.is_read.is_(True))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    def unread_count(self, user_id: int) -> int:
        return self.db.query(func.count(Notification.id)).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        ).scalar()

    def mark_read(self, user_id: int, notification_id: int) -> Notification:
        """Acknowledge a notification; only its owner may do so."""
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: int) -> int:
        updated = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        ).update({"is_read": True, "read_at": datetime.utcnow()}, synchronize_session=False)
        self.db.commit()
        return updated
