"""Upload orchestration: quota, processing, record, announcement."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dokumenta.config import Settings
from dokumenta.errors import ValidationError
from dokumenta.models.document import Document, DocumentType
from dokumenta.services.accounts import AccountStore
from dokumenta.services.documents import DocumentStore, NewDocument
from dokumenta.services.lifecycle import LifecycleEngine
from dokumenta.services.processing import FileProcessor

logger = logging.getLogger(__name__)


class UploadService:
    """Runs one upload as: quota check, file write, row insert, event."""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        processor: FileProcessor,
        accounts: AccountStore,
        store: DocumentStore,
        lifecycle: LifecycleEngine,
    ):
        self.db = db
        self.settings = settings
        self.processor = processor
        self.accounts = accounts
        self.store = store
        self.lifecycle = lifecycle

    def upload(
        self,
        tenant_id: int,
        user_id: int,
        buffer: bytes,
        original_filename: str,
        mime_type: str | None,
        document_type: str,
        document_subtype: str | None = None,
        user_comment: str | None = None,
        page_number: int = 1,
        total_pages: int = 1,
    ) -> Document:
        """
        Store the file first, then insert the row.
        
        No row is written unless the file landed. If the insert fails the
        freshly written file is removed again; if that also fails the
        orphan is only logged.
        """
        try:
            document_type = DocumentType(document_type).value
        except ValueError:
            raise ValidationError(f"Unknown document type: {document_type}")
        self.processor.validate(buffer, mime_type)
        if self.settings.enforce_storage_quota:
            self.accounts.ensure_storage_available(tenant_id, len(buffer))

        processed = self.processor.process(buffer, original_filename, document_type, mime_type)

        try:
            doc = self.store.create(
                NewDocument(
                    user_id=user_id,
                    original_name=original_filename,
                    document_type=document_type,
                    processed=processed,
                    document_subtype=document_subtype,
                    user_comment=user_comment,
                    page_number=page_number,
                    total_pages=total_pages,
                ),
                tenant_id,
            )
        except Exception as e:
            self.db.rollback()
            if isinstance(e, SQLAlchemyError):
                logger.error(f"Insert failed for {processed.stored_filename}, removing stored file")
            self.processor.storage.delete(processed.stored_filename)
            raise

        self.lifecycle.record_upload(doc)
        return doc
