"""Admin account model; every admin is the root of its own tenant."""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship

from dokumenta.database import Base


class SubscriptionPlan(str, Enum):
    """Subscription tiers offered to tenants."""
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class AdminAccount(Base):
    """Tenant administrator with subscription limits."""
    
    __tablename__ = "admin_users"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    hashed_password = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=False)
    
    # Subscription
    subscription_plan = Column(String(20), nullable=False, default=SubscriptionPlan.BASIC.value)
    max_clients = Column(Integer, nullable=False, default=10)
    max_storage_mb = Column(Integer, nullable=False, default=1024)
    is_active = Column(Boolean, nullable=False, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)
    
    # Relationships
    users = relationship("User", back_populates="tenant")
    documents = relationship("Document", back_populates="tenant", foreign_keys="Document.tenant_id")

    def __repr__(self):
        return f"<AdminAccount(id={self.id}, username={self.username})>"
