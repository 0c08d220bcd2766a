"""Per-request service wiring for the routers."""
from fastapi import Depends
from sqlalchemy.orm import Session

from dokumenta.config import Settings, get_settings
from dokumenta.database import get_db
from dokumenta.services.accounts import AccountStore
from dokumenta.services.documents import DocumentStore
from dokumenta.services.events import EventBus
from dokumenta.services.lifecycle import LifecycleEngine
from dokumenta.services.notifications import NotificationService
from dokumenta.services.processing import FileProcessor
from dokumenta.services.storage import FileStorage
from dokumenta.services.uploads import UploadService


def get_storage(settings: Settings = Depends(get_settings)) -> FileStorage:
    return FileStorage.from_settings(settings)


def get_account_store(db: Session = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_document_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    storage: FileStorage = Depends(get_storage),
) -> DocumentStore:
    return DocumentStore(db, settings, storage)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_event_bus(notifications: NotificationService = Depends(get_notification_service)) -> EventBus:
    bus = EventBus()
    notifications.register(bus)
    return bus


def get_lifecycle(
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    bus: EventBus = Depends(get_event_bus),
) -> LifecycleEngine:
    return LifecycleEngine(db, store, bus)


def get_upload_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    storage: FileStorage = Depends(get_storage),
    accounts: AccountStore = Depends(get_account_store),
    store: DocumentStore = Depends(get_document_store),
    lifecycle: LifecycleEngine = Depends(get_lifecycle),
) -> UploadService:
    return UploadService(db, settings, FileProcessor(settings, storage), accounts, store, lifecycle)
