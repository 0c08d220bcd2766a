"""Document record store, always scoped to one tenant."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from dokumenta.config import Settings
from dokumenta.errors import NotFoundError, ValidationError
from dokumenta.models.document import DEFAULT_SUBTYPE, Document, DocumentStatus, DocumentType
from dokumenta.models.notification import Notification
from dokumenta.models.tenant import AdminAccount
from dokumenta.models.user import User
from dokumenta.services.processing import ProcessedFile
from dokumenta.services.storage import FileStorage

logger = logging.getLogger(__name__)

# 1-indexed; index 0 unused
MONTH_NAMES = [
    "",
    "Januar", "Februar", "Mart", "April", "Maj", "Jun",
    "Jul", "Avgust", "Septembar", "Oktobar", "Novembar", "Decembar",
]


def build_suggested_path(root: str, company_name: str, year: int, document_type: str, month: int) -> str:
    """Default target path: {root}/{company}/{year}/{type}/{month name}/."""
    return f"{root.rstrip('/')}/{company_name}/{year}/{document_type}/{MONTH_NAMES[month]}/"


@dataclass
class NewDocument:
    """Everything needed to record a processed upload."""
    user_id: int
    original_name: str
    document_type: str
    processed: ProcessedFile
    document_subtype: str | None = None
    user_comment: str | None = None
    page_number: int = 1
    total_pages: int = 1


@dataclass
class DocumentFilters:
    """Admin listing filters; every field is optional."""
    document_type: str | None = None
    document_subtype: str | None = None
    status: str | None = None
    user_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    sync_status: str | None = None
    limit: int | None = None


class DocumentStore:
    """Persists documents and their derived target paths."""

    def __init__(self, db: Session, settings: Settings, storage: FileStorage | None = None):
        self.db = db
        self.settings = settings
        self.storage = storage or FileStorage.from_settings(settings)

    def _tenant_query(self, tenant_id: int):
        return self.db.query(Document).filter(Document.tenant_id == tenant_id)

    def create(self, data: NewDocument, tenant_id: int) -> Document:
        """
        Insert a document row for an already stored file.
        
        The suggested path is computed once from the upload timestamp and
        never changes afterwards; the actual path starts as a copy of it.
        """
        try:
            document_type = DocumentType(data.document_type).value
        except ValueError:
            raise ValidationError(f"Unknown document type: {data.document_type}")

        tenant = self.db.get(AdminAccount, tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        owner = self.db.query(User).filter(User.id == data.user_id, User.tenant_id == tenant_id).first()
        if owner is None:
            raise NotFoundError("User not found")

        uploaded_at = datetime.utcnow()
        suggested_path = build_suggested_path(
            self.settings.onedrive_root,
            tenant.company_name,
            uploaded_at.year,
            document_type,
            uploaded_at.month,
        )

        doc = Document(
            tenant_id=tenant_id,
            user_id=data.user_id,
            filename=data.processed.stored_filename,
            original_name=data.original_name,
            mime_type=data.processed.mime_type,
            file_path=str(data.processed.file_path),
            original_size=data.processed.original_size,
            compressed_size=data.processed.stored_size,
            compression_ratio=data.processed.compression_ratio_percent,
            page_number=data.page_number,
            total_pages=data.total_pages,
            document_type=document_type,
            document_subtype=data.document_subtype or DEFAULT_SUBTYPE,
            user_comment=data.user_comment,
            status=DocumentStatus.UPLOADED.value,
            suggested_year=uploaded_at.year,
            suggested_month=uploaded_at.month,
            suggested_path=suggested_path,
            actual_year=uploaded_at.year,
            actual_month=uploaded_at.month,
            actual_path=suggested_path,
            path_manually_set=False,
            sync_pending_review=True,
            upload_date=uploaded_at,
        )
        self.db.add(doc)
        self.db.commit()
        self.db.refresh(doc)
        logger.info(f"Document {doc.id} ({doc.filename}) created for tenant {tenant_id}")
        return doc

    def get_by_id(self, tenant_id: int, document_id: int) -> Document:
        doc = self._tenant_query(tenant_id).filter(Document.id == document_id).first()
        if not doc:
            raise NotFoundError("Document not found")
        return doc

    def get_by_filename(self, tenant_id: int, filename: str, user_id: int | None = None) -> Document:
        query = self._tenant_query(tenant_id).filter(Document.filename == filename)
        if user_id is not None:
            query = query.filter(Document.user_id == user_id)
        doc = query.first()
        if not doc:
            raise NotFoundError("File not found")
        return doc

    def get_by_user(self, tenant_id: int, user_id: int) -> list[Document]:
        return self._tenant_query(tenant_id).filter(
            Document.user_id == user_id
        ).order_by(Document.upload_date.desc(), Document.id.desc()).all()

    def get_all(self, tenant_id: int, filters: DocumentFilters | None = None) -> list[Document]:
        filters = filters or DocumentFilters()
        query = self._tenant_query(tenant_id)

        if filters.document_type:
            query = query.filter(Document.document_type == filters.document_type)
        if filters.document_subtype:
            query = query.filter(Document.document_subtype == filters.document_subtype)
        if filters.status:
            query = query.filter(Document.status == filters.status)
        if filters.user_id:
            query = query.filter(Document.user_id == filters.user_id)
        if filters.sync_status:
            query = query.filter(Document.sync_status == filters.sync_status)
        if filters.date_from:
            query = query.filter(Document.upload_date >= datetime.combine(filters.date_from, time.min))
        if filters.date_to:
            # Inclusive of the whole end day
            query = query.filter(
                Document.upload_date < datetime.combine(filters.date_to + timedelta(days=1), time.min)
            )

        query = query.order_by(Document.upload_date.desc(), Document.id.desc())
        if filters.limit:
            query = query.limit(filters.limit)
        return query.all()

    def update_onedrive_path(self, tenant_id: int, document_id: int, year: int, month: int, path: str) -> Document:
        """Admin override of the target path; clears the pending-review flag."""
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        doc = self.get_by_id(tenant_id, document_id)
        doc.actual_year = year
        doc.actual_month = month
        doc.actual_path = path
        doc.path_manually_set = True
        doc.sync_pending_review = False
        self.db.commit()
        self.db.refresh(doc)
        logger.info(f"Document {doc.id} target path set to {path}")
        return doc

    def delete(self, tenant_id: int, document_id: int) -> str:
        """
        Delete the row, then the stored file.
        
        A file already missing from disk does not stop the deletion; only
        the row decides whether the document existed.
        """
        doc = self.get_by_id(tenant_id, document_id)
        filename = doc.filename

        self.db.query(Notification).filter(
            Notification.document_id == doc.id
        ).update({"document_id": None}, synchronize_session=False)
        self.db.delete(doc)
        self.db.commit()

        self.storage.delete(filename)
        logger.info(f"Document {document_id} ({filename}) deleted from tenant {tenant_id}")
        return filename

    def get_stats(self, tenant_id: int) -> dict:
        """Counts and sizes for the admin dashboard."""
        base = self.db.query(Document).filter(Document.tenant_id == tenant_id)
        today_start = datetime.combine(datetime.utcnow().date(), time.min)

        total_documents = base.count()
        today_documents = base.filter(Document.upload_date >= today_start).count()
        total_size = self.db.query(func.coalesce(func.sum(Document.compressed_size), 0)).filter(
            Document.tenant_id == tenant_id
        ).scalar()
        active_users = self.db.query(func.count(func.distinct(Document.user_id))).filter(
            Document.tenant_id == tenant_id
        ).scalar()
        pending_review = base.filter(Document.status == DocumentStatus.UPLOADED.value).count()

        by_type = self.db.query(
            Document.document_type, func.count(Document.id), func.coalesce(func.sum(Document.compressed_size), 0)
        ).filter(Document.tenant_id == tenant_id).group_by(Document.document_type).all()

        by_status = self.db.query(
            Document.status, func.count(Document.id), func.coalesce(func.sum(Document.compressed_size), 0)
        ).filter(Document.tenant_id == tenant_id).group_by(Document.status).all()

        return {
            "total_documents": total_documents,
            "today_documents": today_documents,
            "total_size": int(total_size),
            "active_users": active_users,
            "pending_review": pending_review,
            "by_type": [{"key": t, "count": c, "total_size": int(s)} for t, c, s in by_type],
            "by_status": [{"key": st, "count": c, "total_size": int(s)} for st, c, s in by_status],
        }
