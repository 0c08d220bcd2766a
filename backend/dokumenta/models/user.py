"""End user accounts, scoped to one tenant."""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from dokumenta.database import Base


class UserStatus(str, Enum):
    """End user account status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(Base):
    """End user who uploads documents on behalf of a tenant."""
    
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "username", name="uq_users_tenant_username"),
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("admin_users.id"), nullable=False, index=True)
    username = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    status = Column(String(10), nullable=False, default=UserStatus.ACTIVE.value)
    
    # Profile
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)
    
    # Relationships
    tenant = relationship("AdminAccount", back_populates="users")
    documents = relationship("Document", back_populates="user")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
