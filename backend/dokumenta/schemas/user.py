"""User and auth schemas."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dokumenta.models.user import UserStatus


class UserBase(BaseModel):
    """Base user schema."""
    username: str = Field(min_length=1, max_length=50)
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class UserCreate(UserBase):
    """Create user request."""
    password: str = Field(min_length=1)


class UserUpdate(BaseModel):
    """Update user request; only these fields are mutable."""
    username: str | None = Field(default=None, min_length=1, max_length=50)
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    password: str | None = Field(default=None, min_length=1)
    status: UserStatus | None = None

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class UserRead(UserBase):
    """User response."""
    id: int
    tenant_id: int
    status: str
    created_at: datetime
    last_login: datetime | None = None
    
    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    """Username/password login."""
    username: str
    password: str
    tenant_id: int | None = Field(default=None, alias="tenantId")

    model_config = ConfigDict(populate_by_name=True)


class LoginResponse(BaseModel):
    """Issued token plus the account it belongs to."""
    token: str
    token_type: str = "bearer"
    user: dict
