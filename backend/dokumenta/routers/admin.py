"""Admin router: tenant statistics, user management, document review."""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from dokumenta.dependencies import get_account_store, get_document_store, get_lifecycle
from dokumenta.models.document import DocumentStatus, DocumentType, SyncStatus
from dokumenta.routers.auth import require_admin
from dokumenta.schemas.document import (
    DocumentRead,
    OneDrivePathUpdate,
    StatusHistoryRead,
    StatusUpdate,
    SyncStatusUpdate,
)
from dokumenta.schemas.stats import StatsRead
from dokumenta.schemas.tenant import TenantLimits
from dokumenta.schemas.user import UserCreate, UserRead, UserUpdate
from dokumenta.services.accounts import AccountStore
from dokumenta.services.authorization import Principal
from dokumenta.services.documents import DocumentFilters, DocumentStore
from dokumenta.services.lifecycle import LifecycleEngine

router = APIRouter(prefix="/admin", tags=["admin"])


# ============ Statistics ============

@router.get("/stats", response_model=StatsRead)
async def get_stats(
    principal: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
    accounts: AccountStore = Depends(get_account_store),
):
    """Dashboard counters for the current tenant."""
    stats = store.get_stats(principal.tenant_id)
    return StatsRead(**stats, limits=accounts.check_limits(principal.tenant_id))


@router.get("/limits", response_model=TenantLimits)
async def get_limits(
    principal: Principal = Depends(require_admin),
    accounts: AccountStore = Depends(get_account_store),
):
    return accounts.check_limits(principal.tenant_id)


# ============ User Management ============

@router.get("/users", response_model=List[UserRead])
async def list_users(
    principal: Principal = Depends(require_admin),
    accounts: AccountStore = Depends(get_account_store),
):
    """List all end users in current tenant."""
    return accounts.list_users(principal.tenant_id)


@router.post("/users", response_model=UserRead)
async def create_user(
    user: UserCreate,
    principal: Principal = Depends(require_admin),
    accounts: AccountStore = Depends(get_account_store),
):
    """Create an end user, subject to the tenant's client limit."""
    return accounts.create_user(principal.tenant_id, user)


@router.put("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    update: UserUpdate,
    principal: Principal = Depends(require_admin),
    accounts: AccountStore = Depends(get_account_store),
):
    """Update an end user."""
    return accounts.update_user(principal.tenant_id, user_id, update)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    principal: Principal = Depends(require_admin),
    accounts: AccountStore = Depends(get_account_store),
):
    """Delete an end user that owns no documents."""
    accounts.delete_user(principal.tenant_id, user_id)
    return {"success": True, "message": "User deleted"}


# ============ Documents ============

@router.get("/documents", response_model=List[DocumentRead])
async def list_documents(
    document_type: DocumentType | None = Query(None, alias="type"),
    document_subtype: str | None = Query(None, alias="subtype"),
    status: DocumentStatus | None = None,
    user_id: int | None = Query(None, alias="userId"),
    date_from: date | None = Query(None, alias="dateFrom"),
    date_to: date | None = Query(None, alias="dateTo"),
    sync_status: SyncStatus | None = Query(None, alias="syncStatus"),
    limit: int | None = Query(None, ge=1, le=1000),
    principal: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
):
    """List documents for current tenant."""
    filters = DocumentFilters(
        document_type=document_type.value if document_type else None,
        document_subtype=document_subtype,
        status=status.value if status else None,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        sync_status=sync_status.value if sync_status else None,
        limit=limit,
    )
    return store.get_all(principal.tenant_id, filters)


@router.get("/documents/{document_id}", response_model=DocumentRead)
async def get_document(
    document_id: int,
    principal: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
):
    return store.get_by_id(principal.tenant_id, document_id)


@router.get("/documents/{document_id}/history", response_model=List[StatusHistoryRead])
async def get_document_history(
    document_id: int,
    principal: Principal = Depends(require_admin),
    lifecycle: LifecycleEngine = Depends(get_lifecycle),
):
    """Status transitions of a document, oldest first."""
    return lifecycle.get_status_history(principal.tenant_id, document_id)


@router.put("/documents/{document_id}/status", response_model=DocumentRead)
async def set_document_status(
    document_id: int,
    update: StatusUpdate,
    principal: Principal = Depends(require_admin),
    lifecycle: LifecycleEngine = Depends(get_lifecycle),
):
    """Record a review decision and notify the uploader."""
    return lifecycle.set_status(principal.tenant_id, document_id, update.status, principal.id, update.comment)


@router.put("/documents/{document_id}/onedrive-path", response_model=DocumentRead)
async def set_onedrive_path(
    document_id: int,
    update: OneDrivePathUpdate,
    principal: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
):
    """Confirm or override the document's target path."""
    return store.update_onedrive_path(principal.tenant_id, document_id, update.year, update.month, update.path)


@router.put("/documents/{document_id}/sync-status", response_model=DocumentRead)
async def set_sync_status(
    document_id: int,
    update: SyncStatusUpdate,
    principal: Principal = Depends(require_admin),
    lifecycle: LifecycleEngine = Depends(get_lifecycle),
):
    """Record the result of the external sync."""
    return lifecycle.set_sync_status(principal.tenant_id, document_id, update.sync_status)


@router.delete("/documents/{document_id}")
async def delete_document(
    document_id: int,
    principal: Principal = Depends(require_admin),
    store: DocumentStore = Depends(get_document_store),
):
    """Delete a document and its stored file."""
    filename = store.delete(principal.tenant_id, document_id)
    return {"success": True, "message": f"Document '{filename}' deleted successfully"}
