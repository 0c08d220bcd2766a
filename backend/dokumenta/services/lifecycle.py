"""Document review lifecycle: status transitions, history and sync state.

States: uploaded (initial) -> reviewed -> approved | rejected |
reshoot_requested. A reshoot is answered by a new upload, never by
moving the same record back to uploaded.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from dokumenta.errors import ValidationError
from dokumenta.models.document import Document, DocumentStatus, SyncStatus
from dokumenta.models.history import StatusHistory
from dokumenta.services.documents import DocumentStore
from dokumenta.services.events import DocumentStatusChanged, DocumentSynced, DocumentUploaded, EventBus

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = {
    DocumentStatus.APPROVED.value,
    DocumentStatus.REJECTED.value,
    DocumentStatus.RESHOOT_REQUESTED.value,
}


class LifecycleEngine:
    """Drives status changes and publishes events for each of them."""

    def __init__(self, db: Session, store: DocumentStore, bus: EventBus):
        self.db = db
        self.store = store
        self.bus = bus

    def record_upload(self, doc: Document) -> None:
        """Announce a freshly created document."""
        self.bus.publish(DocumentUploaded(
            document_id=doc.id,
            tenant_id=doc.tenant_id,
            user_id=doc.user_id,
            original_name=doc.original_name,
            document_type=doc.document_type,
        ))

    def set_status(
        self,
        tenant_id: int,
        document_id: int,
        new_status: DocumentStatus | str,
        admin_id: int,
        comment: str | None = None,
    ) -> Document:
        """
        Apply a review decision.
        
        The status update and its history row commit together. Setting
        the current status again is allowed and still recorded. The event
        is published only after the commit, so a failing subscriber
        cannot roll the transition back.
        """
        try:
            new_status = DocumentStatus(new_status).value
        except ValueError:
            raise ValidationError(f"Unknown status: {new_status}")

        doc = self.store.get_by_id(tenant_id, document_id)
        old_status = doc.status

        doc.status = new_status
        doc.admin_comment = comment
        doc.reviewed_by = admin_id
        doc.reviewed_date = datetime.utcnow()
        self.db.add(StatusHistory(
            document_id=doc.id,
            old_status=old_status,
            new_status=new_status,
            changed_by=admin_id,
            comment=comment,
        ))
        self.db.commit()
        self.db.refresh(doc)

        logger.info(f"Document {doc.id}: {old_status} -> {new_status} by admin {admin_id}")

        self.bus.publish(DocumentStatusChanged(
            document_id=doc.id,
            tenant_id=doc.tenant_id,
            user_id=doc.user_id,
            original_name=doc.original_name,
            document_type=doc.document_type,
            old_status=old_status,
            new_status=new_status,
            changed_by=admin_id,
            comment=comment,
        ))
        return doc

    def get_status_history(self, tenant_id: int, document_id: int) -> list[StatusHistory]:
        """Transitions of one document, oldest first."""
        doc = self.store.get_by_id(tenant_id, document_id)
        return self.db.query(StatusHistory).filter(
            StatusHistory.document_id == doc.id
        ).order_by(StatusHistory.created_at, StatusHistory.id).all()

    def set_sync_status(self, tenant_id: int, document_id: int, sync_status: SyncStatus | str) -> Document:
        """Record the outcome of the external sync step."""
        try:
            sync_status = SyncStatus(sync_status).value
        except ValueError:
            raise ValidationError(f"Unknown sync status: {sync_status}")

        doc = self.store.get_by_id(tenant_id, document_id)
        doc.sync_status = sync_status
        if sync_status == SyncStatus.SYNCED.value:
            doc.synced_at = datetime.utcnow()
            doc.sync_pending_review = False
        self.db.commit()
        self.db.refresh(doc)

        logger.info(f"Document {doc.id} sync status {sync_status}")
        if sync_status == SyncStatus.SYNCED.value:
            self.bus.publish(DocumentSynced(
                document_id=doc.id,
                tenant_id=doc.tenant_id,
                user_id=doc.user_id,
                original_name=doc.original_name,
                document_type=doc.document_type,
                path=doc.actual_path,
            ))
        return doc
