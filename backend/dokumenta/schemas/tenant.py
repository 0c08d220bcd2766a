"""Tenant (admin account) schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class AdminRead(BaseModel):
    """Admin account response."""
    id: int
    username: str
    email: str | None = None
    company_name: str
    subscription_plan: str
    max_clients: int
    max_storage_mb: int
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None
    
    model_config = ConfigDict(from_attributes=True)


class TenantLimits(BaseModel):
    """Current usage against subscription limits."""
    tenant_id: int
    active_clients: int
    max_clients: int
    storage_used_mb: float
    max_storage_mb: int
    can_add_client: bool
    storage_exceeded: bool
