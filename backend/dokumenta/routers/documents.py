"""End user documents router: upload, own listing and file access."""
import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from dokumenta.dependencies import get_document_store, get_storage, get_upload_service
from dokumenta.errors import NotFoundError
from dokumenta.models.document import DocumentType
from dokumenta.routers.auth import get_current_principal, require_user
from dokumenta.schemas.document import DocumentRead, UploadedFileInfo, UploadResponse
from dokumenta.services.authorization import Principal
from dokumenta.services.documents import DocumentStore
from dokumenta.services.storage import FileStorage
from dokumenta.services.uploads import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile = File(...),
    document_type: DocumentType = Form(..., alias="documentType"),
    document_subtype: str | None = Form(None, alias="documentSubtype"),
    user_comment: str | None = Form(None, alias="userComment"),
    page_number: int = Form(1, alias="pageNumber", ge=1),
    total_pages: int = Form(1, alias="totalPages", ge=1),
    principal: Principal = Depends(require_user),
    uploads: UploadService = Depends(get_upload_service),
):
    """Upload one document page (image or PDF)."""
    # One byte past the limit is enough for validation to reject it
    buffer = await file.read(uploads.settings.max_upload_size_bytes + 1)
    doc = uploads.upload(
        tenant_id=principal.tenant_id,
        user_id=principal.id,
        buffer=buffer,
        original_filename=file.filename or "upload",
        mime_type=file.content_type,
        document_type=document_type.value,
        document_subtype=document_subtype or None,
        user_comment=user_comment,
        page_number=page_number,
        total_pages=max(total_pages, page_number),
    )
    return UploadResponse(
        document_id=doc.id,
        file=UploadedFileInfo(
            filename=doc.filename,
            original_size=doc.original_size,
            compressed_size=doc.compressed_size,
            compression_ratio=doc.compression_ratio,
        ),
    )


@router.get("/documents", response_model=List[DocumentRead])
async def list_my_documents(
    principal: Principal = Depends(require_user),
    store: DocumentStore = Depends(get_document_store),
):
    """Documents uploaded by the current user."""
    return store.get_by_user(principal.tenant_id, principal.id)


@router.get("/documents/{document_id}", response_model=DocumentRead)
async def get_my_document(
    document_id: int,
    principal: Principal = Depends(require_user),
    store: DocumentStore = Depends(get_document_store),
):
    """One of the current user's documents."""
    doc = store.get_by_id(principal.tenant_id, document_id)
    if doc.user_id != principal.id:
        raise NotFoundError("Document not found")
    return doc


@router.get("/files/{filename}")
async def get_file(
    filename: str,
    principal: Principal = Depends(get_current_principal),
    store: DocumentStore = Depends(get_document_store),
    storage: FileStorage = Depends(get_storage),
):
    """Raw bytes of a stored file; admins see their tenant, users their own."""
    owner_id = None if principal.is_admin else principal.id
    doc = store.get_by_filename(principal.tenant_id, filename, user_id=owner_id)
    content = storage.read(doc.filename)
    return Response(
        content=content,
        media_type=doc.mime_type,
        headers={
            "Content-Disposition": f"inline; filename*=UTF-8''{quote(doc.original_name)}",
            "Content-Length": str(len(content)),
        },
    )
